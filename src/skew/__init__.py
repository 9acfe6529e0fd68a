"""
Skew Detection & Correction for 1 bpp page images

Measures the small rotation of scanned text pages from the sharpness of
their text-line row profile, and optionally rotates the page upright.

Pipeline stages:
1. Reduction (rank-based 2x cascades to the sweep and search resolutions)
2. Sweep (score at equally spaced shear angles)
3. Refinement (interval halving around the best sweep angle)
4. Confidence (max/min score ratio with validity floors)
5. Deskew (rotation when angle and confidence warrant it)
"""

from src.skew.config_loader import SkewConfig, get_default_config, load_config
from src.skew.processor import (
    SkewProcessor,
    deskew,
    find_skew,
    find_skew_and_deskew,
    find_skew_sweep_and_search,
    find_skew_sweep_and_search_score,
)
from src.skew.scoring import find_differential_square_sum
from src.skew.sweep import find_skew_sweep
from src.skew.types import AngleScoreSeries, SkewEstimate, SkewStatus

__all__ = [
    "SkewProcessor",
    "deskew",
    "find_skew",
    "find_skew_and_deskew",
    "find_skew_sweep",
    "find_skew_sweep_and_search",
    "find_skew_sweep_and_search_score",
    "find_differential_square_sum",
    "load_config",
    "get_default_config",
    "SkewConfig",
    "AngleScoreSeries",
    "SkewEstimate",
    "SkewStatus",
]
