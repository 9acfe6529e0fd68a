"""
Full-resolution rotation of 1 bpp bitmaps.

Used once per page to apply the measured deskew angle. The sweep and the
refinement never rotate; they shear.
"""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from src.bitmap.types import FillPolicy

logger = logging.getLogger(__name__)


def rotate(
    image: np.ndarray,
    radang: float,
    fill: FillPolicy = FillPolicy.BRING_IN_WHITE,
    center: Optional[Tuple[float, float]] = None,
) -> np.ndarray:
    """
    Rotate a bitmap by an angle, keeping its original dimensions.

    Positive angles rotate clockwise, matching the sign of the angle
    returned by the skew finder. Nearest-neighbor sampling keeps the
    output bilevel.

    Args:
        image: 1 bpp bitmap of shape (H, W).
        radang: Rotation angle in radians (clockwise positive).
        fill: Value given to pixels brought into the frame.
        center: Rotation center (x, y). Defaults to the image center.

    Returns:
        New rotated bitmap with the same shape and dtype.

    Raises:
        ValueError: If image is undefined.

    Example:
        >>> deskewed = rotate(page, np.radians(1.5))
    """
    if image is None:
        raise ValueError("image not defined")

    h, w = image.shape
    if center is None:
        center = (w / 2.0, h / 2.0)

    # OpenCV treats positive angles as counter-clockwise
    M = cv2.getRotationMatrix2D(center, -math.degrees(radang), 1.0)
    rotated = cv2.warpAffine(
        image.astype(np.uint8),
        M,
        (w, h),
        flags=cv2.INTER_NEAREST,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=fill.pixel_value,
    )

    logger.debug(
        f"Rotated {w}x{h} bitmap by {math.degrees(radang):+.3f}° "
        f"about ({center[0]:.1f}, {center[1]:.1f})"
    )
    return rotated.astype(image.dtype)
