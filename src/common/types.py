"""
Common type definitions for the skew estimation pipeline.

This module provides a Pydantic-based wrapper for 1 bpp (bilevel) images,
the only image kind the skew finder accepts.

The wrapper provides:
- Type validation (2D numpy array)
- Pixel depth detection (1 bpp vs. grayscale)
"""

import numpy as np
from pydantic import BaseModel, Field, field_validator


class Bitmap(BaseModel):
    """
    Type-safe wrapper for bilevel image arrays (numpy.ndarray).

    Foreground (ink) pixels are 1 or True, background pixels are 0 or False.
    An array of dtype bool, or of any integer dtype holding only the values
    {0, 1}, has depth 1. Anything else reports depth 8.

    Attributes:
        data: The underlying numpy array. Shape: (H, W).

    Example:
        >>> page = np.zeros((600, 800), dtype=np.uint8)
        >>> page[100:104, 50:750] = 1
        >>> bitmap = Bitmap(data=page)
        >>> bitmap.depth
        1
    """

    data: np.ndarray = Field(..., description="Bilevel image as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a 2D image.

        Raises:
            ValueError: If array is not a 2D image.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if v.ndim != 2:
            raise ValueError(f"Expected 2D (single channel) image, got shape {v.shape}")

        if v.dtype != np.bool_ and not np.issubdtype(v.dtype, np.integer):
            raise ValueError(f"Expected bool or integer dtype, got {v.dtype}")

        return v

    @property
    def depth(self) -> int:
        """Get pixel depth: 1 for bilevel data, 8 otherwise."""
        if self.data.dtype == np.bool_:
            return 1
        if int(self.data.min()) >= 0 and int(self.data.max()) <= 1:
            return 1
        return 8


def require_bilevel(image: np.ndarray, name: str = "image") -> Bitmap:
    """
    Wrap and validate a caller image as a 1 bpp bitmap.

    Args:
        image: Caller-supplied array.
        name: Argument name used in error messages.

    Returns:
        Validated Bitmap wrapping the same array (no copy).

    Raises:
        ValueError: If the image is undefined, malformed, or not 1 bpp.
    """
    if image is None:
        raise ValueError(f"{name} not defined")

    bitmap = Bitmap(data=image)
    if bitmap.depth != 1:
        raise ValueError(f"{name} not 1 bpp")
    return bitmap
