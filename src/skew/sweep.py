"""
Sweep search for the Skew module.

Examines the score at equally spaced shear angles over a symmetric interval
about a center angle. The sweep runs on a strongly reduced image, so it only
locates the peak to within about one sweep step; refinement is done
separately at higher resolution.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Tuple

import numpy as np

from src.bitmap.operations import is_zero
from src.bitmap.reduction import reduce_by_factor
from src.common.types import require_bilevel
from src.skew.scoring import score_at_angle
from src.skew.types import AngleScoreSeries, SkewEstimate, SkewStatus
from src.utils.constants import (
    DEFAULT_SWEEP_DELTA,
    DEFAULT_SWEEP_RANGE,
    DEFAULT_SWEEP_REDUCTION,
    VALID_REDUCTIONS,
)

logger = logging.getLogger(__name__)


def sweep_angle_count(sweep_range: float, sweep_delta: float) -> int:
    """Number of sweep samples: ``floor(2 * sweep_range / sweep_delta) + 1``."""
    return int(2.0 * sweep_range / sweep_delta + 1)


def sweep_scores(
    image: np.ndarray,
    sweep_center: float,
    sweep_range: float,
    sweep_delta: float,
    workers: int = 1,
    log_scores: bool = False,
) -> AngleScoreSeries:
    """
    Score the image at equally spaced angles.

    Samples ``theta_i = sweep_center - sweep_range + i * sweep_delta`` for
    ``i`` in ``[0, n)``. Each sample is independent, so with ``workers > 1``
    they are evaluated on a thread pool; the series keeps the sample order.

    Args:
        image: 1 bpp working bitmap (already reduced).
        sweep_center: Center of the swept interval (degrees).
        sweep_range: Half width of the swept interval (degrees).
        sweep_delta: Angle increment (degrees).
        workers: Worker threads for the samples.
        log_scores: Log every sample score at DEBUG level.

    Returns:
        Series of (angle, score) in increasing angle order.
    """
    nangles = sweep_angle_count(sweep_range, sweep_delta)
    range_left = sweep_center - sweep_range
    thetas = [range_left + i * sweep_delta for i in range(nangles)]

    if workers > 1 and nangles > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            scores = list(executor.map(lambda theta: score_at_angle(image, theta), thetas))
    else:
        scores = [score_at_angle(image, theta) for theta in thetas]

    series = AngleScoreSeries()
    for theta, score in zip(thetas, scores):
        if log_scores:
            logger.debug(f"sum({theta:7.2f}) = {score:7.0f}")
        series.append(theta, score)
    return series


def find_sweep_peak(series: AngleScoreSeries) -> Tuple[float, float, int]:
    """
    Locate the largest sweep sample without interpolation.

    Returns:
        Tuple of (max_angle, max_score, max_index).
    """
    max_score, max_index = series.get_max()
    return series[max_index].angle, max_score, max_index


def is_edge_index(index: int, count: int) -> bool:
    """Check if a sample index is the first or last of the sweep."""
    return index == 0 or index == count - 1


def find_skew_sweep(
    image: np.ndarray,
    reduction: int = DEFAULT_SWEEP_REDUCTION,
    sweep_range: float = DEFAULT_SWEEP_RANGE,
    sweep_delta: float = DEFAULT_SWEEP_DELTA,
    workers: int = 1,
    log_scores: bool = False,
) -> SkewEstimate:
    """
    Find the skew angle with a sweep only, refined by a quadratic fit.

    The sweep is centered on 0. The peak is located by fitting the largest
    sample and its two neighbors to a parabola, so the result has better
    resolution than the sweep step. No confidence is computed.

    Args:
        image: 1 bpp bitmap.
        reduction: Reduction factor of the sweep image (1, 2, 4 or 8).
        sweep_range: Half the full range, about 0 (degrees).
        sweep_delta: Angle increment of the sweep (degrees).
        workers: Worker threads for the samples.
        log_scores: Log every sample score at DEBUG level.

    Returns:
        SkewEstimate with the fitted angle and peak score, or status
        BLANK_IMAGE when the reduced image has no foreground pixels.

    Raises:
        ValueError: If the image is undefined or not 1 bpp, the reduction is
            invalid, or the sweep parameters are not positive.

    Example:
        >>> estimate = find_skew_sweep(page, reduction=4)
        >>> if estimate.is_valid():
        ...     print(f"Sweep angle: {estimate.angle:.2f}")
    """
    require_bilevel(image, "pixs")
    if reduction not in VALID_REDUCTIONS:
        raise ValueError(f"reduction must be in {{1,2,4,8}}, got {reduction}")
    if sweep_range <= 0 or sweep_delta <= 0:
        raise ValueError(
            f"sweep_range ({sweep_range}) and sweep_delta ({sweep_delta}) must be positive"
        )

    pix = reduce_by_factor(image, reduction)
    if is_zero(pix):
        logger.warning("Sweep image has no foreground pixels; skew not measured")
        return SkewEstimate(status=SkewStatus.BLANK_IMAGE)

    series = sweep_scores(
        pix, 0.0, sweep_range, sweep_delta, workers=workers, log_scores=log_scores
    )

    # Lagrangian interpolation of the largest point and its two neighbors
    max_score, max_angle = series.fit_max()
    logger.info(f"From sweep: angle = {max_angle:7.3f}, score = {max_score:7.3f}")

    return SkewEstimate(angle=max_angle, confidence=0.0, max_score=max_score)
