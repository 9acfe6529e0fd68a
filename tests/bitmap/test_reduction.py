"""
Unit tests for rank-based 2x reduction.
"""

import numpy as np
import pytest

from src.bitmap.reduction import (
    reduce_by_factor,
    reduce_rank_binary_2,
    reduce_rank_binary_cascade,
)
from src.utils.constants import REDUCTION_LEVELS_FROM_SEARCH


@pytest.fixture
def two_of_four():
    """A 2x2 block with exactly two pixels ON."""
    return np.array([[1, 0], [0, 1]], dtype=np.uint8)


class TestReduceRankBinary2:
    """Tests for a single rank reduction."""

    @pytest.mark.parametrize("level,expected", [(1, 1), (2, 1), (3, 0), (4, 0)])
    def test_rank_threshold(self, two_of_four, level, expected):
        """Test that a pixel is ON when at least `level` sources are ON."""
        assert reduce_rank_binary_2(two_of_four, level)[0, 0] == expected

    def test_odd_dimensions_dropped(self):
        """Test that an odd trailing row and column are dropped."""
        image = np.ones((5, 7), dtype=np.uint8)
        reduced = reduce_rank_binary_2(image, 4)

        assert reduced.shape == (2, 3)
        assert reduced.all()

    def test_keeps_dtype(self):
        """Test that the reduced bitmap keeps the input dtype."""
        image = np.ones((4, 4), dtype=bool)
        assert reduce_rank_binary_2(image, 1).dtype == np.bool_

    def test_block_layout(self):
        """Test that each output pixel reflects its own 2x2 block."""
        image = np.zeros((4, 4), dtype=np.uint8)
        image[0, 3] = 1  # top-right block
        image[3, 0] = 1  # bottom-left block

        reduced = reduce_rank_binary_2(image, 1)
        assert reduced.tolist() == [[0, 1], [1, 0]]

    def test_too_small_rejected(self):
        """Test that images under 2x2 are rejected."""
        with pytest.raises(ValueError, match="too small"):
            reduce_rank_binary_2(np.ones((1, 8), dtype=np.uint8), 1)

    @pytest.mark.parametrize("level", [0, 5])
    def test_invalid_level_rejected(self, two_of_four, level):
        """Test that rank levels outside 1..4 are rejected."""
        with pytest.raises(ValueError, match="Rank level"):
            reduce_rank_binary_2(two_of_four, level)


class TestReduceRankBinaryCascade:
    """Tests for cascaded reductions."""

    def test_level1_zero_returns_copy(self, skewed_page):
        """Test that no reduction returns an independent copy."""
        reduced = reduce_rank_binary_cascade(skewed_page, 0)

        assert reduced is not skewed_page
        assert np.array_equal(reduced, skewed_page)

    def test_stops_at_first_zero_level(self, skewed_page):
        """Test that a zero level ends the cascade."""
        reduced = reduce_rank_binary_cascade(skewed_page, 1, 1, 0, 2)
        assert reduced.shape == (100, 400)

    def test_matches_successive_reductions(self, skewed_page):
        """Test that the cascade equals applying each level in turn."""
        expected = reduce_rank_binary_2(reduce_rank_binary_2(skewed_page, 1), 2)
        assert np.array_equal(reduce_rank_binary_cascade(skewed_page, 1, 2), expected)

    def test_level_above_4_rejected(self, skewed_page):
        """Test that any level above 4 is rejected."""
        with pytest.raises(ValueError, match="must not exceed 4"):
            reduce_rank_binary_cascade(skewed_page, 1, 5)

    def test_none_rejected(self):
        """Test that an undefined image raises ValueError."""
        with pytest.raises(ValueError, match="not defined"):
            reduce_rank_binary_cascade(None, 1)


class TestReduceByFactor:
    """Tests for factor-based working image reduction."""

    @pytest.mark.parametrize(
        "factor,shape", [(1, (400, 1600)), (2, (200, 800)), (4, (100, 400)), (8, (50, 200))]
    )
    def test_output_shape(self, skewed_page, factor, shape):
        """Test the working image size for each factor."""
        assert reduce_by_factor(skewed_page, factor).shape == shape

    def test_factor_1_is_copy(self, skewed_page):
        """Test that factor 1 returns an independent copy."""
        reduced = reduce_by_factor(skewed_page, 1)

        assert reduced is not skewed_page
        assert np.array_equal(reduced, skewed_page)

    def test_full_image_levels(self, skewed_page):
        """Test that 8x from the full image uses levels (1, 1, 2)."""
        expected = reduce_rank_binary_cascade(skewed_page, 1, 1, 2)
        assert np.array_equal(reduce_by_factor(skewed_page, 8), expected)

    def test_search_image_levels(self, skewed_page):
        """Test that ratio 4 from a search image uses levels (1, 2)."""
        expected = reduce_rank_binary_cascade(skewed_page, 1, 2)
        reduced = reduce_by_factor(skewed_page, 4, REDUCTION_LEVELS_FROM_SEARCH)
        assert np.array_equal(reduced, expected)

    def test_invalid_factor_rejected(self, skewed_page):
        """Test that factors without a level entry are rejected."""
        with pytest.raises(ValueError, match="Reduction factor"):
            reduce_by_factor(skewed_page, 3)
