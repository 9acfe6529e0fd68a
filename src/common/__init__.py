"""
Common types and utilities shared across all modules.

This module provides the standardized bilevel image type used by the bitmap
primitives and the skew finder.
"""

from src.common.types import Bitmap, require_bilevel

__all__ = ["Bitmap", "require_bilevel"]
