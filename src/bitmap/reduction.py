"""
Rank-based 2x reduction of 1 bpp bitmaps.

Each 2x reduction maps a 2x2 block of source pixels to one destination
pixel, which is ON when at least ``level`` of the four source pixels are ON:

- level 1: OR of the block (thickens thin text strokes)
- level 2: at least two pixels ON
- level 3: at least three pixels ON
- level 4: AND of the block (thins strokes)

Cascading reductions with low rank levels preserves the text-line structure
that the skew score depends on, while cutting the cost of each shear.
"""

import logging
from typing import Dict, Tuple

import numpy as np

from src.bitmap.operations import clone
from src.utils.constants import REDUCTION_LEVELS_FROM_FULL

logger = logging.getLogger(__name__)


def reduce_rank_binary_2(image: np.ndarray, level: int) -> np.ndarray:
    """
    Reduce a bitmap by 2x in each direction with a rank threshold.

    An odd trailing row or column is dropped.

    Args:
        image: 1 bpp bitmap of shape (H, W), with H and W at least 2.
        level: Rank threshold in {1, 2, 3, 4}.

    Returns:
        New bitmap of shape (H // 2, W // 2) with the input dtype.

    Raises:
        ValueError: If the level is invalid or the image is too small.

    Example:
        >>> block = np.array([[1, 0], [0, 0]], dtype=np.uint8)
        >>> reduce_rank_binary_2(block, 1)
        array([[1]], dtype=uint8)
        >>> reduce_rank_binary_2(block, 2)
        array([[0]], dtype=uint8)
    """
    if image is None:
        raise ValueError("image not defined")
    if level not in (1, 2, 3, 4):
        raise ValueError(f"Rank level must be in {{1, 2, 3, 4}}, got {level}")

    h, w = image.shape
    if h < 2 or w < 2:
        raise ValueError(f"Image {w}x{h} too small for 2x reduction")

    h2, w2 = h // 2, w // 2
    block_counts = (
        (image[: 2 * h2, : 2 * w2] != 0)
        .astype(np.uint8)
        .reshape(h2, 2, w2, 2)
        .sum(axis=(1, 3))
    )
    return (block_counts >= level).astype(image.dtype)


def reduce_rank_binary_cascade(
    image: np.ndarray,
    level1: int,
    level2: int = 0,
    level3: int = 0,
    level4: int = 0,
) -> np.ndarray:
    """
    Apply up to four successive rank 2x reductions.

    The cascade stops at the first level that is 0. With ``level1 == 0``
    the image is returned unreduced (as a copy).

    Args:
        image: 1 bpp bitmap.
        level1: Rank level of the first reduction (0 for none).
        level2: Rank level of the second reduction (0 to stop).
        level3: Rank level of the third reduction (0 to stop).
        level4: Rank level of the fourth reduction (0 to stop).

    Returns:
        New reduced bitmap.

    Raises:
        ValueError: If any level exceeds 4.

    Example:
        >>> reduced = reduce_rank_binary_cascade(page, 1, 1)  # 4x, OR-like
    """
    if image is None:
        raise ValueError("image not defined")

    levels = (level1, level2, level3, level4)
    if any(level > 4 for level in levels):
        raise ValueError(f"Rank levels must not exceed 4, got {levels}")

    if level1 <= 0:
        logger.debug("No reduction requested; returning copy")
        return clone(image)

    reduced = reduce_rank_binary_2(image, level1)
    for level in levels[1:]:
        if level <= 0:
            break
        reduced = reduce_rank_binary_2(reduced, level)

    logger.debug(
        f"Rank cascade {levels}: {image.shape[1]}x{image.shape[0]} -> "
        f"{reduced.shape[1]}x{reduced.shape[0]}"
    )
    return reduced


def reduce_by_factor(
    image: np.ndarray,
    factor: int,
    level_table: Dict[int, Tuple[int, ...]] = REDUCTION_LEVELS_FROM_FULL,
) -> np.ndarray:
    """
    Produce the working image for a power-of-two reduction factor.

    Args:
        image: 1 bpp bitmap.
        factor: Reduction factor, a key of ``level_table``.
        level_table: Rank levels to use for each factor.

    Returns:
        New reduced bitmap (a copy for factor 1).

    Raises:
        ValueError: If the factor has no entry in the table.
    """
    if factor not in level_table:
        raise ValueError(
            f"Reduction factor must be in {sorted(level_table)}, got {factor}"
        )

    levels = level_table[factor]
    if not levels:
        return clone(image)
    return reduce_rank_binary_cascade(image, *levels)
