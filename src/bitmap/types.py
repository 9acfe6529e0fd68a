"""
Data types for the bitmap primitives.
"""

from enum import Enum

from src.utils.constants import BACKGROUND, FOREGROUND


class FillPolicy(Enum):
    """Value given to pixels brought into the frame by a shear or rotation."""

    BRING_IN_WHITE = "white"  # Background
    BRING_IN_BLACK = "black"  # Foreground

    @property
    def pixel_value(self) -> int:
        """Bitmap pixel value written for this policy."""
        return BACKGROUND if self is FillPolicy.BRING_IN_WHITE else FOREGROUND
