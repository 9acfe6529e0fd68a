"""
Interval-halving refinement for the Skew module.

Starting from the best sweep angle, the search keeps a five-slot window of
scores at ``center + k * delta`` for ``k`` in ``-2..2`` (slots 0..4). Each
iteration fills slots 1 and 3, moves the center to the best of slots 1..3,
and halves ``delta``. The cost is fixed: three bootstrap evaluations plus
two per iteration, and the iteration count depends only on the sweep step
and the stopping step.
"""

import logging
from typing import List

import numpy as np

from src.skew.config_loader import SearchConfig
from src.skew.scoring import score_at_angle
from src.skew.sweep import sweep_angle_count
from src.skew.types import AngleScoreSeries, RefinementResult

logger = logging.getLogger(__name__)

BOOTSTRAP_EVALUATIONS = 3
EVALUATIONS_PER_ITERATION = 2


def count_refinement_iterations(sweep_delta: float, min_delta: float) -> int:
    """
    Number of halving iterations the refinement performs.

    Equals ``ceil(log2(sweep_delta / (2 * min_delta)))`` unless that ratio is
    an exact power of two, in which case the loop runs one more time because
    it continues while ``delta >= min_delta``.

    Example:
        >>> count_refinement_iterations(1.0, 0.01)
        6
    """
    iterations = 0
    delta = 0.5 * sweep_delta
    while delta >= min_delta:
        iterations += 1
        delta = 0.5 * delta
    return iterations


def count_evaluations(config: SearchConfig) -> int:
    """
    Total number of score evaluations for one sweep + refinement.

    Statically computable before any image is touched, so callers can bound
    the work of a call.
    """
    return (
        sweep_angle_count(config.sweep_range, config.sweep_delta)
        + BOOTSTRAP_EVALUATIONS
        + EVALUATIONS_PER_ITERATION
        * count_refinement_iterations(config.sweep_delta, config.min_refinement_delta)
    )


def refine_skew_angle(
    image: np.ndarray,
    center_angle: float,
    sweep_delta: float,
    min_delta: float,
    log_scores: bool = False,
) -> RefinementResult:
    """
    Refine a coarse skew angle by interval halving.

    Args:
        image: 1 bpp search bitmap (reduction no larger than the sweep's).
        center_angle: Best sweep angle (degrees).
        sweep_delta: Sweep step; the window starts at +/- this (degrees).
        min_delta: Stop once the step falls below this (degrees).
        log_scores: Log every sample score at DEBUG level.

    Returns:
        RefinementResult with the converged angle, final peak score, every
        evaluated sample and the iteration count.

    Example:
        >>> result = refine_skew_angle(search_image, 2.0, 1.0, 0.01)
        >>> print(f"{result.angle:.3f} after {result.iterations} iterations")
    """
    series = AngleScoreSeries()

    def evaluate(angle: float) -> float:
        score = score_at_angle(image, angle)
        series.append(angle, score)
        if log_scores:
            logger.debug(f"sum({angle:7.3f}) = {score:7.0f}")
        return score

    # Set up the initial three points
    window: List[float] = [0.0] * 5
    window[2] = evaluate(center_angle)
    window[0] = evaluate(center_angle - sweep_delta)
    window[4] = evaluate(center_angle + sweep_delta)

    iterations = 0
    delta = 0.5 * sweep_delta
    while delta >= min_delta:
        window[1] = evaluate(center_angle - delta)
        window[3] = evaluate(center_angle + delta)

        # The maximum must be in the center three slots, not the end two
        max_slot = 1
        for slot in (2, 3):
            if window[slot] > window[max_slot]:
                max_slot = slot

        window[0], window[2], window[4] = (
            window[max_slot - 1],
            window[max_slot],
            window[max_slot + 1],
        )

        center_angle += delta * (max_slot - 2)
        delta = 0.5 * delta
        iterations += 1

    logger.debug(
        f"Refinement converged to {center_angle:.3f}° after {iterations} iterations "
        f"({len(series)} evaluations), score = {window[2]:.1f}"
    )

    return RefinementResult(
        angle=center_angle,
        end_score=window[2],
        series=series,
        iterations=iterations,
    )
