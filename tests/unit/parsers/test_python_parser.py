#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the Python front end."""
import pytest

from refold.ast import Apply, Block, ClassDef, DefDef, Flag, GenericNode, Ident, If, Literal, Match, Select, ValDef
from refold.exceptions import ParsingError
from refold.parsers import parse_python, parse_python_file


def first(source: str):
    return parse_python(source).tree.body[0]


@pytest.mark.unit
class TestDefinitions:
    """Test conversion of definitions."""

    def test_assignment_is_value_definition(self):
        node = first("x = 1\n")
        assert isinstance(node, ValDef)
        assert node.name == "x"
        assert isinstance(node.rhs, Literal) and node.rhs.value == 1
        assert (node.pos.start, node.pos.end) == (0, 5)

    def test_annotated_assignment_has_type(self):
        node = first("y: int = 3\n")
        assert isinstance(node.tpt, Ident) and node.tpt.name == "int"

    def test_function_parameters_in_source_order(self):
        node = first("def f(a, /, b=2, *args, c, **kw) -> int:\n    ...\n")
        assert isinstance(node, DefDef)
        assert [p.name for p in node.params] == ["a", "b", "args", "c", "kw"]
        assert node.params[1].rhs.value == 2
        assert all(p.mods.has_flag(Flag.PARAM) for p in node.params)
        assert node.tpt.name == "int"
        assert isinstance(node.rhs, Block)

    def test_function_point_is_name(self):
        node = first("def run():\n    pass\n")
        assert node.pos.point == 4
        assert node.symbol.name == "run"

    def test_decorators_and_async(self):
        source = "@cached\nasync def g():\n    await h()\n"
        node = first(source)
        assert node.pos.start == 0
        assert [a.name for a in node.mods.annotations] == ["cached"]
        assert node.mods.has_flag(Flag.ASYNC)
        flag, pos = node.mods.positions[0]
        assert flag is Flag.ASYNC
        assert source[pos.start : pos.end] == "async"

    def test_class_parents_and_body(self):
        node = first("class A(B, metaclass=M):\n    x = 1\n")
        assert isinstance(node, ClassDef)
        assert isinstance(node.impl.parents[0], Ident)
        assert isinstance(node.impl.parents[1], GenericNode) and node.impl.parents[1].kind == "keyword"
        assert [m.name for m in node.impl.body] == ["x"]


@pytest.mark.unit
class TestExpressions:
    """Test conversion of expressions."""

    def test_call_arguments_sorted(self):
        node = first("f(a, k=1, *rest)\n")
        assert isinstance(node, Apply)
        kinds = [type(a).__name__ if not isinstance(a, GenericNode) else a.kind for a in node.args]
        assert kinds == ["Ident", "keyword", "Starred"]

    def test_attribute_point_is_member(self):
        node = first("obj.attr\n")
        assert isinstance(node, Select)
        assert node.name == "attr"
        assert node.pos.point == 4

    def test_binary_operator(self):
        source = "a  +  b\n"
        node = first(source)
        assert isinstance(node, Apply)
        assert node.fun.name == "+"
        assert node.fun.pos.point == source.index("+")

    def test_operator_after_parenthesis_and_comment(self):
        source = "(a  # left\n * 2)\n"
        node = parse_python(source).tree.body[0]
        assert node.fun.name == "*"
        assert node.fun.pos.point == source.index("*")

    def test_word_comparison(self):
        node = first("a not in b\n")
        assert node.fun.name == "not in"

    def test_unary_operator(self):
        node = first("-a\n")
        assert isinstance(node, Select)
        assert node.name == "unary_-"
        assert node.is_prefix

    def test_chained_comparison_is_generic(self):
        node = first("a < b < c\n")
        assert isinstance(node, GenericNode) and node.kind == "Compare"
        assert len(node.items) == 3

    def test_non_ascii_offsets_are_characters(self):
        source = "s = 'é'; t = 1\n"
        node = parse_python(source).tree.body[1]
        assert node.pos.start == source.index("t =")


@pytest.mark.unit
class TestStatements:
    """Test conversion of control flow."""

    def test_elif_chain(self):
        node = first("if a:\n    x\nelif b:\n    y\nelse:\n    z\n")
        assert isinstance(node, If)
        assert isinstance(node.elsep, If)
        assert isinstance(node.elsep.elsep, Block)

    def test_nested_if_in_else_stays_a_block(self):
        node = first("if a:\n    x\nelse:\n    if b:\n        y\n")
        assert isinstance(node.elsep, Block)

    def test_match(self):
        node = first("match cmd:\n    case [a, b] if a > b:\n        pass\n    case _:\n        pass\n")
        assert isinstance(node, Match)
        assert len(node.cases) == 2
        assert not node.cases[0].guard.is_empty

    def test_keyword_statements(self):
        assert first("pass\n").kind == "pass"

    def test_loops_wrap_bodies_in_blocks(self):
        node = first("for i in x:\n    continue\n")
        assert node.kind == "For"
        assert any(isinstance(item, Block) for item in node.items)


@pytest.mark.unit
class TestErrors:
    """Test error reporting."""

    def test_syntax_error_is_parsing_error(self):
        with pytest.raises(ParsingError) as exc_info:
            parse_python("def (:\n", name="broken.py")
        assert exc_info.value.file_name == "broken.py"
        assert exc_info.value.line == 1
        assert isinstance(exc_info.value.original_error, SyntaxError)

    def test_missing_file_is_parsing_error(self, tmp_path):
        with pytest.raises(ParsingError):
            parse_python_file(tmp_path / "missing.py")

    def test_parse_file(self, tmp_path):
        path = tmp_path / "mod.py"
        path.write_text("x = 1\n", encoding="utf-8")
        parsed = parse_python_file(path)
        assert parsed.source.name == str(path)
        assert parsed.tree.body[0].name == "x"
