"""
I/O Utilities

File input/output operations.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import cv2
import numpy as np
import yaml


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """Load YAML file."""
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_bitmap(file_path: Path, threshold: Optional[int] = None) -> np.ndarray:
    """
    Read an image file as a 1 bpp bitmap (ink = 1).

    Args:
        file_path: Path to any image format OpenCV can read.
        threshold: Gray level below which a pixel is ink. Uses Otsu's
            method when None.

    Returns:
        uint8 array of shape (H, W) holding 0 and 1.

    Raises:
        FileNotFoundError: If the file does not exist or cannot be decoded.
    """
    gray = cv2.imread(str(file_path), cv2.IMREAD_GRAYSCALE)
    if gray is None:
        raise FileNotFoundError(f"Cannot read image: {file_path}")

    if threshold is None:
        _, ink = cv2.threshold(gray, 0, 1, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
    else:
        _, ink = cv2.threshold(gray, threshold - 1, 1, cv2.THRESH_BINARY_INV)
    return ink.astype(np.uint8)


def save_bitmap(file_path: Path, image: np.ndarray) -> None:
    """Write a 1 bpp bitmap as a black-on-white image file."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    gray = np.where(image != 0, 0, 255).astype(np.uint8)
    if not cv2.imwrite(str(file_path), gray):
        raise OSError(f"Cannot write image: {file_path}")
