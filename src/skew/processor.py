"""
Main processor for the Skew module.

Orchestrates skew measurement and correction of 1 bpp page images:
1. Reduce the page for the refinement search (and further for the sweep)
2. Sweep equally spaced shear angles on the sweep image
3. Refine the best sweep angle by interval halving on the search image
4. Evaluate confidence from the refinement scores
5. Optionally rotate the full-resolution page by the measured angle

The angle returned is the negative of the skew angle of the image, i.e. the
angle required for deskew. Clockwise rotations are positive angles.
"""

import logging
import math
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from src.bitmap.operations import clone, is_zero
from src.bitmap.reduction import reduce_by_factor
from src.bitmap.rotation import rotate
from src.bitmap.types import FillPolicy
from src.common.types import require_bilevel
from src.skew.confidence import evaluate_confidence
from src.skew.config_loader import SearchConfig, SkewConfig, load_config
from src.skew.search import refine_skew_angle
from src.skew.sweep import find_sweep_peak, is_edge_index, sweep_scores
from src.skew.types import AngleScoreSeries, SkewEstimate, SkewStatus
from src.utils.constants import (
    DEFAULT_MIN_REFINEMENT_DELTA,
    DEFAULT_SEARCH_REDUCTION,
    DEFAULT_SWEEP_DELTA,
    DEFAULT_SWEEP_RANGE,
    DEFAULT_SWEEP_REDUCTION,
    DESKEW_SEARCH_REDUCTIONS,
    REDUCTION_LEVELS_FROM_SEARCH,
)
from src.utils.visualization import plot_score_series

logger = logging.getLogger(__name__)


class SkewProcessor:
    """
    Main processor for skew measurement and correction.

    Holds a validated configuration. Each call is independent: all working
    images are created and released inside the call, and the caller's image
    is never modified.

    Example:
        >>> processor = SkewProcessor()
        >>> estimate = processor.find_skew(page)
        >>> corrected, estimate = processor.find_skew_and_deskew(page)
        >>> print(estimate.get_status_message())
    """

    def __init__(
        self,
        config: Optional[SkewConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the skew processor.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses default location.
        """
        if config is not None:
            self.config = config
            logger.info("Using provided configuration")
        else:
            self.config = load_config(config_path) if config_path else load_config()
            logger.info("Loaded configuration from file")

    def find_skew_sweep_and_search_score(
        self, image: np.ndarray, search: Optional[SearchConfig] = None
    ) -> SkewEstimate:
        """
        Find the skew angle by a sweep followed by interval halving.

        Two built-in thresholds decide whether the returned confidence is
        nonzero: the minimum allowed max score and the minimum allowed min
        score (the threshold constant times height * width^2 of the search
        image). The max score is returned so callers can judge the angle
        independently of the confidence.

        Args:
            image: 1 bpp page image.
            search: Search parameters. Defaults to the processor's config.

        Returns:
            SkewEstimate. Status BLANK_IMAGE if the search image is empty;
            status MAX_AT_SWEEP_EDGE (angle 0, confidence 0, no max score)
            if the sweep peaks at either end of the interval.

        Raises:
            ValueError: If the image is undefined or not 1 bpp.
        """
        search = search or self.config.search
        debug = self.config.debug
        require_bilevel(image, "pixs")

        # Stage 1: Working images
        pixsch = reduce_by_factor(image, search.search_reduction)
        if is_zero(pixsch):
            logger.warning("Search image has no foreground pixels; skew not measured")
            return SkewEstimate(status=SkewStatus.BLANK_IMAGE)

        ratio = search.sweep_reduction // search.search_reduction
        pixsw = reduce_by_factor(pixsch, ratio, REDUCTION_LEVELS_FROM_SEARCH)

        # Stage 2: Sweep
        sweep_series = sweep_scores(
            pixsw,
            search.sweep_center,
            search.sweep_range,
            search.sweep_delta,
            workers=self.config.execution.sweep_workers,
            log_scores=debug.log_scores,
        )
        max_angle, max_score, max_index = find_sweep_peak(sweep_series)
        logger.info(f"From sweep: angle = {max_angle:7.3f}, score = {max_score:7.3f}")
        self._plot_series(
            sweep_series,
            "sweep_output",
            "Sweep. Variance of difference of ON pixels vs. angle",
            connect=True,
        )

        if is_edge_index(max_index, len(sweep_series)):
            logger.warning("max found at sweep edge")
            return SkewEstimate(status=SkewStatus.MAX_AT_SWEEP_EDGE)

        # Stage 3: Interval-halving refinement
        refinement = refine_skew_angle(
            pixsch,
            max_angle,
            search.sweep_delta,
            search.min_refinement_delta,
            log_scores=debug.log_scores,
        )

        # Stage 4: Confidence
        height, width = pixsch.shape
        confidence = evaluate_confidence(
            refinement.series,
            refinement.angle,
            refinement.end_score,
            width,
            height,
            search.range_left,
            search.sweep_range,
            search.sweep_delta,
            min_valid_max_score=self.config.decision.min_valid_max_score,
            threshold_constant=self.config.decision.min_score_threshold_constant,
        )
        logger.info(
            f"From binary search: angle = {refinement.angle:7.3f}, "
            f"score ratio = {confidence:8.2f}"
        )
        self._plot_series(
            refinement.series,
            "search_output",
            "Binary search. Variance of difference of ON pixels vs. angle",
            connect=False,
        )

        return SkewEstimate(
            angle=refinement.angle,
            confidence=confidence,
            max_score=refinement.end_score,
        )

    def find_skew(self, image: np.ndarray) -> SkewEstimate:
        """
        Find the skew angle with the configured search parameters.

        Args:
            image: 1 bpp page image.

        Returns:
            SkewEstimate; check ``is_valid()`` and the confidence.
        """
        return self.find_skew_sweep_and_search_score(image)

    def find_skew_and_deskew(
        self, image: np.ndarray, search_reduction: Optional[int] = None
    ) -> Tuple[np.ndarray, SkewEstimate]:
        """
        Measure the skew and rotate the page if the correction is warranted.

        The page is left unrotated (a copy is returned) if the measurement
        failed, the angle is below the minimum deskew angle, or the
        confidence is below the minimum allowed confidence. A failed
        rotation also falls back to the unrotated copy.

        Args:
            image: 1 bpp page image.
            search_reduction: Reduction of the refinement image (1, 2 or 4).
                Defaults to the configured value.

        Returns:
            Tuple of (corrected_image, estimate).

        Raises:
            ValueError: If the image is undefined or not 1 bpp, or the
                search reduction is invalid.
        """
        require_bilevel(image, "pixs")
        search = self.config.search
        if search_reduction is not None:
            if search_reduction not in DESKEW_SEARCH_REDUCTIONS:
                raise ValueError(
                    f"redsearch not in {{1,2,4}}, got {search_reduction}"
                )
            search = SearchConfig(
                **{**search.model_dump(), "search_reduction": search_reduction}
            )

        estimate = self.find_skew_sweep_and_search_score(image, search)
        if not estimate.is_valid():
            logger.info(f"No deskew: {estimate.get_status_message()}")
            return clone(image), estimate

        decision = self.config.decision
        if (
            abs(estimate.angle) < decision.min_deskew_angle
            or estimate.confidence < decision.min_allowed_confidence
        ):
            logger.info(
                f"No deskew: angle = {estimate.angle:.3f}°, "
                f"confidence = {estimate.confidence:.2f}"
            )
            return clone(image), estimate

        try:
            rotated = rotate(image, math.radians(estimate.angle), FillPolicy.BRING_IN_WHITE)
        except (ValueError, cv2.error) as e:
            logger.error(f"Rotation failed: {e}")
            return clone(image), estimate

        logger.info(f"Deskewed page by {estimate.angle:.3f}°")
        return rotated, estimate

    def deskew(
        self, image: np.ndarray, search_reduction: int = DEFAULT_SEARCH_REDUCTION
    ) -> np.ndarray:
        """
        Return the deskewed page, or an unrotated copy.

        Raises:
            ValueError: If the image is undefined or not 1 bpp, or
                search_reduction is not in {1, 2, 4}.
        """
        require_bilevel(image, "pixs")
        if search_reduction not in DESKEW_SEARCH_REDUCTIONS:
            raise ValueError(f"redsearch not in {{1,2,4}}, got {search_reduction}")

        corrected, _ = self.find_skew_and_deskew(image, search_reduction)
        return corrected

    def _plot_series(
        self, series: AngleScoreSeries, name: str, title: str, connect: bool
    ) -> None:
        """Write a diagnostic plot when a plot directory is configured."""
        plot_dir = self.config.debug.plot_dir
        if plot_dir is None:
            return
        path = plot_score_series(series, title, Path(plot_dir) / f"{name}.png", connect)
        logger.debug(f"Saved score plot to {path}")


def find_skew_sweep_and_search_score(
    image: np.ndarray,
    sweep_reduction: int,
    search_reduction: int,
    sweep_center: float,
    sweep_range: float,
    sweep_delta: float,
    min_refinement_delta: float,
    config: Optional[SkewConfig] = None,
) -> SkewEstimate:
    """
    Find the skew angle with all search parameters given explicitly.

    Args:
        image: 1 bpp page image.
        sweep_reduction: Sweep reduction factor (1, 2, 4 or 8).
        search_reduction: Refinement reduction factor (1, 2, 4 or 8; must
            not exceed sweep_reduction).
        sweep_center: Angle about which the sweep is performed (degrees).
        sweep_range: Half the full range, about sweep_center (degrees).
        sweep_delta: Angle increment of the sweep (degrees).
        min_refinement_delta: Minimum interval-halving step (degrees).
        config: Optional configuration for thresholds and diagnostics.

    Returns:
        SkewEstimate including the max score.

    Raises:
        ValueError: If the image or any search parameter is invalid.

    Example:
        >>> estimate = find_skew_sweep_and_search_score(page, 4, 2, 0.0, 5.0, 1.0, 0.01)
        >>> print(estimate.angle, estimate.confidence, estimate.max_score)
    """
    search = SearchConfig(
        sweep_reduction=sweep_reduction,
        search_reduction=search_reduction,
        sweep_center=sweep_center,
        sweep_range=sweep_range,
        sweep_delta=sweep_delta,
        min_refinement_delta=min_refinement_delta,
    )
    processor = SkewProcessor(config=config)
    return processor.find_skew_sweep_and_search_score(image, search)


def find_skew_sweep_and_search(
    image: np.ndarray,
    sweep_reduction: int,
    search_reduction: int,
    sweep_range: float,
    sweep_delta: float,
    min_refinement_delta: float,
    config: Optional[SkewConfig] = None,
) -> SkewEstimate:
    """Sweep and search about 0 degrees; see find_skew_sweep_and_search_score."""
    return find_skew_sweep_and_search_score(
        image,
        sweep_reduction,
        search_reduction,
        0.0,
        sweep_range,
        sweep_delta,
        min_refinement_delta,
        config=config,
    )


def find_skew(image: np.ndarray, config: Optional[SkewConfig] = None) -> SkewEstimate:
    """
    Find the skew angle with default parameters for speed and accuracy.

    Uses sweep reduction 4, search reduction 2, a sweep of +/- 5 degrees in
    1 degree steps and a minimum refinement step of 0.01 degrees.

    Args:
        image: 1 bpp page image.
        config: Optional configuration for thresholds and diagnostics.

    Returns:
        SkewEstimate with the angle required for deskew and its confidence.

    Example:
        >>> estimate = find_skew(page)
        >>> if estimate.confidence > 3.0:
        ...     print(f"Deskew by {estimate.angle:.2f} degrees")
    """
    return find_skew_sweep_and_search(
        image,
        DEFAULT_SWEEP_REDUCTION,
        DEFAULT_SEARCH_REDUCTION,
        DEFAULT_SWEEP_RANGE,
        DEFAULT_SWEEP_DELTA,
        DEFAULT_MIN_REFINEMENT_DELTA,
        config=config,
    )


def find_skew_and_deskew(
    image: np.ndarray,
    search_reduction: int = DEFAULT_SEARCH_REDUCTION,
    config: Optional[SkewConfig] = None,
) -> Tuple[np.ndarray, SkewEstimate]:
    """
    Convenience function: measure the skew and deskew if warranted.

    Returns:
        Tuple of (corrected_image, estimate). The image is an unrotated copy
        when no correction was applied.

    Example:
        >>> corrected, estimate = find_skew_and_deskew(page, search_reduction=2)
    """
    processor = SkewProcessor(config=config)
    return processor.find_skew_and_deskew(image, search_reduction)


def deskew(
    image: np.ndarray,
    search_reduction: int = DEFAULT_SEARCH_REDUCTION,
    config: Optional[SkewConfig] = None,
) -> np.ndarray:
    """
    Convenience function: return the deskewed page (or an unrotated copy).

    Example:
        >>> corrected = deskew(page)
    """
    processor = SkewProcessor(config=config)
    return processor.deskew(image, search_reduction)
