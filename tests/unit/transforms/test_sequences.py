#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for sequence splicing."""
import pytest

from refold.transforms import replace_trees


@pytest.mark.unit
class TestReplaceTrees:
    """Test replace_trees."""

    def test_replace_middle_element(self):
        assert replace_trees([1, 2, 3, 4, 5], [2], [6]) == [1, 6, 3, 4, 5]

    def test_replace_first_element(self):
        assert replace_trees([1, 2, 3, 4, 5], [1], [6]) == [6, 2, 3, 4, 5]

    def test_replace_last_element_with_two(self):
        assert replace_trees([1, 2, 3, 4, 5], [5], [6, 7]) == [1, 2, 3, 4, 6, 7]

    def test_missing_element_leaves_sequence(self):
        assert replace_trees([1, 2, 3, 4, 5], [6], [1]) == [1, 2, 3, 4, 5]

    def test_run_is_replaced(self):
        assert replace_trees([1, 2, 3, 2, 3], [2, 3], []) == [1]

    def test_empty_run_leaves_sequence(self):
        assert replace_trees((1, 2), [], [9]) == [1, 2]
