#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for text changes and diffs."""
import pytest

from refold import Change, apply_changes, compute_changes, unified_diff
from refold.ast import SourceFile


@pytest.mark.unit
class TestComputeChanges:
    """Test reduction of a rewrite to its changed region."""

    def test_unchanged_text_has_no_changes(self):
        assert compute_changes("f(a)\n", "f(a)\n") == []

    def test_insertion(self):
        (change,) = compute_changes("f(a)", "f(a, b)")
        assert (change.start, change.end, change.replacement) == (3, 3, ", b")
        assert change.original_text == ""

    def test_replacement_keeps_source_file(self):
        source = SourceFile("mod.py", "x = 1\n")
        (change,) = compute_changes(source, "x = 22\n")
        assert change.file is source
        assert (change.start, change.end, change.replacement) == (4, 5, "22")

    def test_deletion(self):
        (change,) = compute_changes("a\nb\nc\n", "a\nc\n")
        assert change.replacement == ""
        assert change.end - change.start == 2

    def test_apply_changes_reproduces_new_text(self):
        old, new = "def f(a):\n    return a\n", "def g(a, b):\n    return a\n"
        assert apply_changes(old, compute_changes(old, new)) == new

    def test_apply_several_changes(self):
        source = SourceFile("t", "abcdef")
        changes = [Change(source, 0, 1, "A"), Change(source, 4, 6, "")]
        assert apply_changes(source, changes) == "Abcd"


@pytest.mark.unit
class TestUnifiedDiff:
    """Test diff output."""

    def test_diff_uses_file_name(self):
        source = SourceFile("mod.py", "x = 1\ny = 2\n")
        lines = list(unified_diff(source, "x = 1\ny = 3\n"))
        assert lines[0].startswith("--- mod.py")
        assert lines[1].startswith("+++ mod.py")
        assert "-y = 2\n" in lines
        assert "+y = 3\n" in lines

    def test_no_diff_for_unchanged_text(self):
        assert list(unified_diff("x\n", "x\n")) == []
