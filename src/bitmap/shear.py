"""
Vertical shear of 1 bpp bitmaps.

Shearing by a small angle approximates a rotation about the shear line and
is much cheaper to compute, which is what makes the angle sweep affordable.
"""

import math

import numpy as np

from src.bitmap.operations import clone, create_template
from src.bitmap.types import FillPolicy


def vertical_shear_corner(
    image: np.ndarray,
    radang: float,
    fill: FillPolicy = FillPolicy.BRING_IN_WHITE,
) -> np.ndarray:
    """
    Vertically shear a bitmap about its upper-left corner.

    Column ``x`` is translated down by ``floor(x * tan(radang) + 0.5)``
    rows, so column 0 is fixed and a positive angle gives a clockwise
    shear. Pixels vacated at the top or bottom take the fill value.

    Args:
        image: 1 bpp bitmap of shape (H, W).
        radang: Shear angle in radians, strictly inside (-pi/2, pi/2).
        fill: Value given to pixels brought into the frame.

    Returns:
        New sheared bitmap of the same shape and dtype.

    Raises:
        ValueError: If image is undefined or the angle is out of range.

    Example:
        >>> page = np.zeros((100, 200), dtype=np.uint8)
        >>> page[50, :] = 1
        >>> sheared = vertical_shear_corner(page, np.radians(2.0))
        >>> int(np.argmax(sheared[:, 199]))  # row 50 moved down by 7
        57
    """
    if image is None:
        raise ValueError("image not defined")
    if not -math.pi / 2 < radang < math.pi / 2:
        raise ValueError(f"Shear angle {radang:.4f} rad must be within (-pi/2, pi/2)")

    if radang == 0.0:
        return clone(image)

    h, w = image.shape
    shifts = np.floor(np.arange(w) * math.tan(radang) + 0.5).astype(np.int64)

    # Destination (y, x) reads source (y - shift[x], x)
    src_rows = np.arange(h)[:, None] - shifts[None, :]
    inside = (src_rows >= 0) & (src_rows < h)
    cols = np.broadcast_to(np.arange(w)[None, :], (h, w))

    sheared = create_template(image, fill.pixel_value)
    sheared[inside] = image[src_rows[inside], cols[inside]]
    return sheared
