"""
Shared Utilities

Common functions used across all modules.
"""

from src.utils.io import load_bitmap, load_yaml, save_bitmap

__all__ = [
    "load_bitmap",
    "load_yaml",
    "save_bitmap",
]
