#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for partitioning and rendering hand-built trees in the brace dialect."""
from dataclasses import replace

import pytest

from refold.ast import Apply, Block, DefDef, Ident, Literal, Module, Position, SourceFile
from refold.options import BRACE_DIALECT, PartitionOptions, RenderOptions
from refold.regeneration import (
    FragmentRepository,
    Requisite,
    ScopeFragment,
    SourceFragment,
    check_well_formed,
    fill_layout,
    partition,
    render,
)

CALL = SourceFile("call.src", "f(a, b)\n")
DEF = SourceFile("def.src", "def f() = x\n")

OPTIONS = RenderOptions(dialect=BRACE_DIALECT, indentation_step=2)


def at(source: SourceFile, start: int, end: int, point: int | None = None) -> Position:
    return Position.range(source, start, end, point)


def call_tree() -> Module:
    call = Apply(
        Ident("f", pos=at(CALL, 0, 1)),
        (Ident("a", pos=at(CALL, 2, 3)), Ident("b", pos=at(CALL, 5, 6))),
        pos=at(CALL, 0, 7),
    )
    return Module(body=(call,), pos=at(CALL, 0, 8))


def def_tree() -> Module:
    method = DefDef("f", vparamss=((),), rhs=Ident("x", pos=at(DEF, 10, 11)), pos=at(DEF, 0, 11, 4))
    return Module(body=(method,), pos=at(DEF, 0, 12))


def with_args(tree: Module, *args) -> Module:
    call = tree.body[0]
    return replace(tree, body=(replace(call, args=tuple(args)),))


def rewrite(tree: Module, edited: Module) -> str:
    return render(partition(tree, OPTIONS), edited, OPTIONS)


@pytest.mark.unit
class TestPartition:
    """Test the fragment tree of a call."""

    def test_call_fragments(self):
        root = partition(call_tree(), OPTIONS)
        leaf, args = root.children
        assert leaf.text == "f"
        assert isinstance(args, ScopeFragment)
        assert args.delimited
        assert [c.text for c in args.children] == ["a", "b"]

    def test_separator_is_required_after_all_but_last_argument(self):
        args = partition(call_tree(), OPTIONS).children[1]
        assert args.children[0].after == [Requisite(",", ", ")]
        assert args.children[1].after == []

    def test_partition_is_well_formed(self):
        check_well_formed(partition(call_tree(), OPTIONS))
        partition(def_tree(), PartitionOptions(check_invariants=True))

    def test_method_body_requisites(self):
        root = partition(def_tree(), OPTIONS)
        name, body = root.children
        assert name.text == "f"
        assert isinstance(body, ScopeFragment) and body.indented
        assert Requisite("(", "(") in body.before
        assert body.children[0].before == [Requisite("=", " = ")]

    def test_repository_pairs_fragments(self):
        root = partition(call_tree(), OPTIONS)
        repository = FragmentRepository(fill_layout(root))
        args = root.children[1]
        original = repository.find_scope(args)
        assert original is not None
        assert repository.gaps(original) == ["(", ", ", ")"]
        assert repository.exists(args.children[0])
        assert not repository.exists(SourceFragment(literal="x"))


@pytest.mark.unit
class TestRender:
    """Test rendering of edited trees."""

    def test_unchanged_tree_round_trips(self):
        tree = call_tree()
        assert rewrite(tree, tree) == CALL.content
        assert rewrite(def_tree(), def_tree()) == DEF.content

    def test_append_argument(self):
        tree = call_tree()
        a, b = tree.body[0].args
        assert rewrite(tree, with_args(tree, a, b, Ident("c"))) == "f(a, b, c)\n"

    def test_remove_first_argument(self):
        tree = call_tree()
        assert rewrite(tree, with_args(tree, tree.body[0].args[1])) == "f(b)\n"

    def test_remove_last_argument(self):
        tree = call_tree()
        assert rewrite(tree, with_args(tree, tree.body[0].args[0])) == "f(a)\n"

    def test_replace_argument_keeps_separator(self):
        tree = call_tree()
        assert rewrite(tree, with_args(tree, tree.body[0].args[0], Ident("x"))) == "f(a, x)\n"

    def test_rename_changes_only_the_token(self):
        tree = call_tree()
        call = tree.body[0]
        edited = replace(tree, body=(replace(call, fun=replace(call.fun, name="g")),))
        assert rewrite(tree, edited) == "g(a, b)\n"

    def test_rename_method(self):
        tree = def_tree()
        edited = replace(tree, body=(replace(tree.body[0], name="run"),))
        assert rewrite(tree, edited) == "def run() = x\n"

    def test_synthetic_block_body_gets_braces_and_indentation(self):
        tree = def_tree()
        body = Block(stats=(Ident("a"), Ident("b")))
        edited = replace(tree, body=(replace(tree.body[0], rhs=body),))
        assert rewrite(tree, edited) == "def f() = {\n  a\n  b\n}\n"

    def test_existing_requisite_is_not_written_twice(self):
        source = SourceFile("three.src", "f(a, b, c)\n")
        args = tuple(Ident(n, pos=at(source, i, i + 1)) for n, i in (("a", 2), ("b", 5), ("c", 8)))
        tree = Module(body=(Apply(Ident("f", pos=at(source, 0, 1)), args, pos=at(source, 0, 10)),), pos=at(source, 0, 11))
        edited = with_args(tree, args[0], Ident("x"), args[2])
        assert rewrite(tree, edited) == "f(a, x, c)\n"

    @pytest.mark.parametrize(("rhs", "expected"), [(Ident("y"), "def f() = y\n"), (Literal(1), "def f() = 1\n")])
    def test_synthetic_expression_body_gets_no_braces(self, rhs, expected):
        tree = def_tree()
        edited = replace(tree, body=(replace(tree.body[0], rhs=rhs),))
        assert rewrite(tree, edited) == expected
