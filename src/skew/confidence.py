"""
Confidence evaluation for the Skew module.

The confidence of a measured angle is the ratio of the maximum to the
minimum score seen during refinement. It is forced to zero when:

1. The minimum score is below a size-dependent floor. This happens when
   the image is nearly all black with a few white pixels: shearing gives a
   contribution from the top and bottom edges that vanishes at zero shear,
   so the minimum is not a meaningful baseline. The signal is expected to
   scale as height * width^2, hence the form of the floor.
2. The maximum score is below an absolute floor (too little text).
3. The angle is within one sweep step of either end of the sweep, where
   the true peak may lie outside the swept interval.
"""

import logging

from src.skew.types import AngleScoreSeries
from src.utils.constants import MIN_VALID_MAXSCORE, MINSCORE_THRESHOLD_CONSTANT

logger = logging.getLogger(__name__)


def min_score_threshold(
    width: int, height: int, constant: float = MINSCORE_THRESHOLD_CONSTANT
) -> float:
    """Minimum meaningful min score for a search image of this size."""
    return constant * width * width * height


def is_near_sweep_edge(
    angle: float, range_left: float, sweep_range: float, sweep_delta: float
) -> bool:
    """
    Check if an angle is within one sweep step of either sweep boundary.

    Example:
        >>> is_near_sweep_edge(4.5, -5.0, 5.0, 1.0)
        True
        >>> is_near_sweep_edge(4.0, -5.0, 5.0, 1.0)
        False
    """
    return (
        angle > range_left + 2 * sweep_range - sweep_delta
        or angle < range_left + sweep_delta
    )


def evaluate_confidence(
    series: AngleScoreSeries,
    center_angle: float,
    max_score: float,
    width: int,
    height: int,
    range_left: float,
    sweep_range: float,
    sweep_delta: float,
    min_valid_max_score: float = MIN_VALID_MAXSCORE,
    threshold_constant: float = MINSCORE_THRESHOLD_CONSTANT,
) -> float:
    """
    Compute the confidence of a refined skew angle.

    Args:
        series: Every sample evaluated during refinement.
        center_angle: Converged angle (degrees).
        max_score: Final peak score of the refinement.
        width: Width of the search image.
        height: Height of the search image.
        range_left: Lowest swept angle (degrees).
        sweep_range: Half width of the swept interval (degrees).
        sweep_delta: Sweep step (degrees).
        min_valid_max_score: Peak scores below this give zero confidence.
        threshold_constant: Coefficient of the min score floor.

    Returns:
        ``max_score / min_score``, or 0.0 when the measurement is not trusted.
    """
    min_score, min_index = series.get_min()
    min_thresh = min_score_threshold(width, height, threshold_constant)

    logger.debug(
        f"minthresh = {min_thresh:10.2f}, minscore = {min_score:10.2f} "
        f"(sample {min_index})"
    )

    if min_score > min_thresh:
        confidence = max_score / min_score
    else:
        confidence = 0.0

    if is_near_sweep_edge(center_angle, range_left, sweep_range, sweep_delta):
        logger.info(f"Angle {center_angle:.3f}° too close to sweep edge; zero confidence")
        confidence = 0.0
    elif max_score < min_valid_max_score:
        logger.info(
            f"Max score {max_score:.1f} below {min_valid_max_score:.1f}; zero confidence"
        )
        confidence = 0.0

    return confidence
