"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import math

import numpy as np
import pytest


def _text_page(deskew_angle, width=1600, height=400, period=20, thickness=6):
    """
    Render synthetic text lines as a 1 bpp page.

    Lines of ``thickness`` rows repeat every ``period`` rows and rise to the
    right so that a clockwise rotation of ``deskew_angle`` degrees levels
    them. Every fifth 40-pixel block is left blank to mimic word gaps.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    slope = math.tan(math.radians(deskew_angle))
    lines = np.mod(ys + xs * slope, period) < thickness
    words = (xs // 40) % 5 != 4
    return (lines & words).astype(np.uint8)


@pytest.fixture
def page_factory():
    """Fixture providing the synthetic page generator."""
    return _text_page


@pytest.fixture
def skewed_page():
    """Fixture providing a 1600x400 page that needs a +2 degree deskew."""
    return _text_page(2.0)


@pytest.fixture
def level_page():
    """Fixture providing a 1600x400 page with horizontal text lines."""
    return _text_page(0.0)


@pytest.fixture
def blank_page():
    """Fixture providing a 1600x400 page with no foreground pixels."""
    return np.zeros((400, 1600), dtype=np.uint8)


@pytest.fixture
def grayscale_page():
    """Fixture providing an 8 bpp image, which the skew finder rejects."""
    image = np.full((400, 1600), 255, dtype=np.uint8)
    image[100:106, :] = 0
    return image
