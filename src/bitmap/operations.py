"""
Basic buffer operations on 1 bpp bitmaps.

Every function returns a freshly allocated array; the input is never
modified.
"""

import logging

import numpy as np

from src.utils.constants import BACKGROUND

logger = logging.getLogger(__name__)


def clone(image: np.ndarray) -> np.ndarray:
    """Return an independent copy of the bitmap."""
    if image is None:
        raise ValueError("image not defined")
    return image.copy()


def create_template(image: np.ndarray, value: int = BACKGROUND) -> np.ndarray:
    """
    Create a buffer with the same shape and dtype, filled with one value.

    Args:
        image: Bitmap providing shape and dtype.
        value: Pixel value for every pixel. Default is background.

    Returns:
        New array of the same shape and dtype.
    """
    if image is None:
        raise ValueError("image not defined")
    return np.full(image.shape, value, dtype=image.dtype)


def is_zero(image: np.ndarray) -> bool:
    """Check whether the bitmap has no foreground pixel set."""
    if image is None:
        raise ValueError("image not defined")
    return not np.any(image)


def count_pixels_by_row(image: np.ndarray) -> np.ndarray:
    """
    Count the foreground pixels in each raster row.

    Args:
        image: 1 bpp bitmap of shape (H, W).

    Returns:
        Float64 array of length H holding the per-row counts.

    Example:
        >>> page = np.zeros((3, 4), dtype=np.uint8)
        >>> page[1, :] = 1
        >>> count_pixels_by_row(page)
        array([0., 4., 0.])
    """
    if image is None:
        raise ValueError("image not defined")

    counts = np.count_nonzero(image, axis=1).astype(np.float64)
    logger.debug(f"Row counts computed for {image.shape[1]}x{image.shape[0]} bitmap")
    return counts
