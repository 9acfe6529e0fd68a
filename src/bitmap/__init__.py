"""
Bitmap primitives for 1 bpp images.

Buffer operations, vertical corner shear, rotation and rank-based 2x
reduction used by the skew finder.
"""

from src.bitmap.operations import clone, count_pixels_by_row, create_template, is_zero
from src.bitmap.reduction import (
    reduce_by_factor,
    reduce_rank_binary_2,
    reduce_rank_binary_cascade,
)
from src.bitmap.rotation import rotate
from src.bitmap.shear import vertical_shear_corner
from src.bitmap.types import FillPolicy

__all__ = [
    "FillPolicy",
    "clone",
    "count_pixels_by_row",
    "create_template",
    "is_zero",
    "reduce_by_factor",
    "reduce_rank_binary_2",
    "reduce_rank_binary_cascade",
    "rotate",
    "vertical_shear_corner",
]
