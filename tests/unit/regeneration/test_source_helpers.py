#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for layout skipping over character buffers."""
import pytest

from refold.options import BRACE_DIALECT, PYTHON_DIALECT
from refold.regeneration.source_helpers import (
    LayoutScanner,
    either,
    identifier_end,
    indentation_length,
    line_start,
    no_change,
    shifted,
)

braces = LayoutScanner(BRACE_DIALECT)
python = LayoutScanner(PYTHON_DIALECT)

CONTENT = "a /* x */ , // y\n b"


@pytest.mark.unit
class TestLayoutScanner:
    """Test comment-aware skipping."""

    def test_skip_block_comment(self):
        assert braces.skip_layout(1, CONTENT) == CONTENT.index(",")

    def test_skip_line_comment_and_newline(self):
        assert braces.skip_layout(11, CONTENT) == CONTENT.index("b")

    def test_newline_stops_scan_when_requested(self):
        assert braces.skip_layout(11, CONTENT, newlines=False) == CONTENT.index("\n")

    def test_skip_backwards_over_line_comment(self):
        assert braces.skip_layout_backwards(CONTENT.index("b"), CONTENT) == CONTENT.index(",") + 1

    def test_skip_backwards_over_block_comment(self):
        assert braces.skip_layout_backwards(CONTENT.index(","), CONTENT) == 1

    def test_comment_marker_inside_string_is_not_a_comment(self):
        content = 's = "#"\nx'
        assert python.skip_layout_backwards(content.index("x"), content) == content.index("\n")

    def test_skip_layout_to(self):
        content = "f() /* c */ {"
        assert braces.skip_layout_to("{")(3, content) == len(content)
        assert braces.skip_layout_to("(")(3, content) is None

    def test_backwards_skip_layout_to(self):
        assert braces.backwards_skip_layout_to(")")(5, "f(a )") == 4
        assert braces.backwards_skip_layout_to(")")(4, "f(a )") is None

    def test_backwards_to_newline_skips_only_spaces(self):
        content = "x:\n    y"
        assert python.backwards_skip_layout_to("\n")(content.index("y"), content) == 2

    def test_forwards_to_gives_up_at_limit(self):
        assert braces.forwards_to("(", 3)(1, "f  (x)") is None
        assert braces.forwards_to("(", 10)(1, "f  (x)") == 3


@pytest.mark.unit
class TestHelpers:
    """Test identifier and indentation helpers."""

    def test_identifier_end(self):
        assert identifier_end(0, "foo.bar") == 3
        assert identifier_end(0, "+= x") == 2
        assert identifier_end(0, "`a b` c") == 5
        assert identifier_end(0, "(x)") is None

    def test_indentation(self):
        assert indentation_length(6, "x\n    y") == 4
        assert line_start(4, "ab\ncd") == 3

    def test_combinators(self):
        fail = lambda offset, content: None  # noqa: E731
        assert either(fail, no_change)(3, "") == 3
        assert shifted(no_change, -1)(3, "") == 2
        assert shifted(fail, -1)(3, "") is None
