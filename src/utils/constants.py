"""
Shared Constants for the Skew Estimation Pipeline

This module contains constants used across multiple modules to ensure
consistency and avoid duplication.
"""

# ============================================================================
# Bitmap Conventions
# ============================================================================
# Pixel values of a 1 bpp bitmap (foreground = ink)
BACKGROUND = 0
FOREGROUND = 1

# ============================================================================
# Reduction Factors
# ============================================================================
VALID_REDUCTIONS = (1, 2, 4, 8)  # Sweep and search working images
DESKEW_SEARCH_REDUCTIONS = (1, 2, 4)  # Allowed for deskew() / find_skew_and_deskew()

# Rank levels for the 2x cascade when reducing the full-resolution image
REDUCTION_LEVELS_FROM_FULL = {1: (), 2: (1,), 4: (1, 1), 8: (1, 1, 2)}

# Rank levels when reducing the search image down to the sweep image
REDUCTION_LEVELS_FROM_SEARCH = {1: (), 2: (1,), 4: (1, 2), 8: (1, 2, 2)}

# ============================================================================
# Default Search Parameters (degrees)
# ============================================================================
DEFAULT_SWEEP_RANGE = 5.0
DEFAULT_SWEEP_DELTA = 1.0

# Expected accuracy is not better than the inverse image width in pixels,
# say 1/2000 radians, or about 0.03 degrees.
DEFAULT_MIN_REFINEMENT_DELTA = 0.01

DEFAULT_SWEEP_REDUCTION = 4  # 4 is good for the coarse sweep
DEFAULT_SEARCH_REDUCTION = 2

# ============================================================================
# Decision Thresholds
# ============================================================================
MIN_DESKEW_ANGLE = 0.1  # degrees
MIN_ALLOWED_CONFIDENCE = 3.0
MIN_VALID_MAXSCORE = 10000.0

# Multiplied by (width^2 * height) of the search image
MINSCORE_THRESHOLD_CONSTANT = 0.000002
