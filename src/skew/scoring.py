"""
Differential square sum scoring for the Skew module.

Skew is determined by pixel profiles: the sum of foreground pixels along
each raster line. By vertically shearing the image by a trial angle, the
sums are computed along raster lines rather than along lines at that angle.
The score is the sum, over all lines, of the squared DIFFERENCE between
adjacent line sums. It peaks when the baselines and x-height lines of text
are aligned with the raster lines.

The differential signal rejects the background due to the total number of
black pixels, and it also works on multicolumn pages where text lines do not
line up across columns.
"""

import math

import numpy as np

from src.bitmap.operations import count_pixels_by_row
from src.bitmap.shear import vertical_shear_corner
from src.bitmap.types import FillPolicy


def rows_to_omit(width: int, height: int) -> int:
    """
    Number of rows skipped at the top and at the bottom of the profile.

    Shearing a (nearly) all-black image produces a spurious signal at its
    top and bottom edges. Skip enough rows for a shear of 0.025 radians,
    never more than 10% of the image, and always at least one line.

    Example:
        >>> rows_to_omit(400, 300)
        10
    """
    skip_for_shear = int(math.floor(0.05 * width + 0.5))
    skip = min(height // 10, skip_for_shear)
    return max(skip // 2, 1)


def differential_square_sum(row_sums: np.ndarray, nskip: int) -> float:
    """
    Sum of squared consecutive differences over the retained rows.

    Args:
        row_sums: Per-row foreground counts.
        nskip: Rows omitted at each end (at least 1).

    Returns:
        ``sum((row_sums[i] - row_sums[i - 1]) ** 2)`` for
        ``i in [nskip, len(row_sums) - nskip)``.
    """
    n = len(row_sums)
    if n - nskip <= nskip:
        return 0.0

    diffs = np.diff(np.asarray(row_sums, dtype=np.float64)[nskip - 1 : n - nskip])
    return float(np.dot(diffs, diffs))


def find_differential_square_sum(image: np.ndarray) -> float:
    """
    Compute the alignment score of an (already sheared) bitmap.

    Args:
        image: 1 bpp bitmap of shape (H, W).

    Returns:
        Differential square sum of the row profile over interior rows.

    Raises:
        ValueError: If image is undefined.

    Example:
        >>> page = np.zeros((100, 200), dtype=np.uint8)
        >>> page[40:44, :] = 1
        >>> find_differential_square_sum(page)  # two edges of 200
        80000.0
    """
    if image is None:
        raise ValueError("image not defined")

    h, w = image.shape
    row_sums = count_pixels_by_row(image)
    return differential_square_sum(row_sums, rows_to_omit(w, h))


def score_at_angle(image: np.ndarray, angle: float) -> float:
    """
    Shear a bitmap about its upper-left corner and score it.

    Args:
        image: 1 bpp working bitmap.
        angle: Trial shear angle in degrees.

    Returns:
        Differential square sum of the sheared bitmap.
    """
    sheared = vertical_shear_corner(image, math.radians(angle), FillPolicy.BRING_IN_WHITE)
    return find_differential_square_sum(sheared)
