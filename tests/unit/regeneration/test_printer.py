#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the text of synthetic leaves."""
import pytest

from refold.ast import Apply, DefDef, Flag, Ident, Literal, Modifiers, Select, ValDef
from refold.exceptions import RenderingError
from refold.options import BRACE_DIALECT, PYTHON_DIALECT
from refold.regeneration import NodePrinter


@pytest.mark.unit
class TestLiterals:
    """Test literal syntax per dialect."""

    def test_python_literals_use_repr(self):
        printer = NodePrinter(PYTHON_DIALECT)
        assert printer.literal("x") == "'x'"
        assert printer.literal(None) == "None"
        assert printer.literal(Ellipsis) == "..."

    def test_brace_literals(self):
        printer = NodePrinter(BRACE_DIALECT)
        assert printer.literal(None) == "null"
        assert printer.literal(True) == "true"
        assert printer.literal("x") == '"x"'
        assert printer.literal(3) == "3"


@pytest.mark.unit
class TestPrint:
    """Test printing of synthetic nodes."""

    def test_selects(self):
        printer = NodePrinter(PYTHON_DIALECT)
        assert printer.print(Select(Ident("a"), "b")) == ".b"
        assert printer.print(Select(Ident("a"), "+")) == " + "
        assert printer.print(Select(Ident("a"), "unary_not")) == "not "
        assert printer.print(Select(Ident("a"), "is not")) == " is not "

    def test_definitions_use_dialect_keywords(self):
        assert NodePrinter(BRACE_DIALECT).print(DefDef("f")) == "def f"
        assert NodePrinter(BRACE_DIALECT).print(ValDef("x")) == "val x"
        assert NodePrinter(PYTHON_DIALECT).print(ValDef("x")) == "x"

    def test_parameters_print_their_name(self):
        param = ValDef("x", mods=Modifiers(frozenset({Flag.PARAM})))
        assert NodePrinter(BRACE_DIALECT).print(param) == "x"

    def test_flags_skip_markers(self):
        printer = NodePrinter(BRACE_DIALECT)
        assert printer.flags((Flag.PRIVATE, Flag.SYNTHETIC, Flag.FINAL)) == "private final"

    def test_token_and_replacement(self):
        printer = NodePrinter(PYTHON_DIALECT)
        assert printer.token(Literal(1)) == "1"
        assert printer.token(Ident("a")) == "a"
        assert printer.replacement(Select(Ident("a"), "unary_not")) == "not "

    def test_unprintable_node_is_empty(self, caplog):
        assert NodePrinter(BRACE_DIALECT).print(Apply(Ident("f"))) == ""
        assert "No leaf text" in caplog.text

    def test_unprintable_node_raises_when_strict(self):
        with pytest.raises(RenderingError) as exc_info:
            NodePrinter(BRACE_DIALECT, strict=True).print(Apply(Ident("f")))
        assert isinstance(exc_info.value.node, Apply)
