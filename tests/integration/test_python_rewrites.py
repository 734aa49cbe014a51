#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end rewrites of parsed Python sources."""
from dataclasses import replace

import pytest
from hypothesis import given
from hypothesis import strategies as st

from refold import compute_changes, parse_python, partition, render, rewrite_python
from refold.ast import Apply, Block, DefDef, Ident, Literal, Module, ValDef
from refold.options import PYTHON_DIALECT, PartitionOptions, RenderOptions
from refold.transforms import succeed, top_down, transform

OPTIONS = RenderOptions(dialect=PYTHON_DIALECT, indentation_step=4)

SNIPPETS = [
    "x = 1\n",
    "def f(a, b=2):\n    return a + b  # sum\n",
    "class A(B):\n    '''Doc.'''\n    y: int = 3\n\n    def m(self) -> int:\n        return self.y\n",
    "if x:\n    pass\nelif y:\n    z = -1\nelse:\n    z = not y\n",
    "print(f'{x}', sep='')\n",
    "result = [i * 2 for i in range(10) if i % 2]\n",
    "@decorator\nasync def g():\n    await h()\n",
    "try:\n    a()\nexcept ValueError as e:\n    raise\nfinally:\n    b()\n",
    "with open(p) as fh:\n    data = fh.read()\n",
    "d = {'k': [1, 2], **other}\n",
    "\n# a comment on its own\n\n",
    "handler = lambda q, *r, **s: q\n",
    "match cmd:\n    case [a, b] if a > b:\n        pass\n    case _:\n        pass\n",
    "for i in x:\n    continue\n",
    "assert a is not None, 'message'\n",
    "s = 'é'  # non-ascii\n",
    "value = obj.attr.method(1)(2)\n",
]


def rewrite_nodes(f):
    """Top-down rewrite applying ``f`` wherever it returns a node."""
    return top_down(transform(f) | succeed)


def rename(old: str, new: str):
    def apply(node):
        if isinstance(node, (Ident, DefDef)) and node.name == old:
            return replace(node, name=new)
        return None

    return rewrite_nodes(apply)


def calls_to(name: str):
    return lambda node: isinstance(node, Apply) and isinstance(node.fun, Ident) and node.fun.name == name


@pytest.mark.integration
class TestRoundTrip:
    """Unchanged trees render to their original text."""

    @given(st.lists(st.sampled_from(SNIPPETS), min_size=1, max_size=4))
    def test_unchanged_tree_round_trips(self, parts):
        source = "".join(parts)
        tree = parse_python(source).tree
        assert render(partition(tree, OPTIONS), tree, OPTIONS) == source

    @given(st.lists(st.sampled_from(SNIPPETS), min_size=1, max_size=4))
    def test_partition_is_well_formed(self, parts):
        tree = parse_python("".join(parts)).tree
        partition(tree, PartitionOptions(dialect=PYTHON_DIALECT, indentation_step=4, check_invariants=True))

    def test_match_followed_by_statement(self):
        source = "match cmd:\n    case _:\n        pass\nx = 1\n"
        tree = parse_python(source).tree
        checked = PartitionOptions(dialect=PYTHON_DIALECT, indentation_step=4, check_invariants=True)
        partition(tree, checked)
        assert render(partition(tree, OPTIONS), tree, OPTIONS) == source

    @pytest.mark.parametrize("source", SNIPPETS)
    def test_identity_rewrite_is_exact(self, source):
        assert rewrite_python(source, top_down(succeed)) == source


@pytest.mark.integration
class TestRename:
    """Renaming changes only the renamed tokens."""

    def test_rename_function_and_uses(self):
        source = "def main():  # entry point\n    return helper(main)\n\n\nmain()\n"
        expected = "def run():  # entry point\n    return helper(run)\n\n\nrun()\n"
        assert rewrite_python(source, rename("main", "run")) == expected

    def test_rename_produces_single_change(self):
        source = "total = price * count  # keep\n"
        result = rewrite_python(source, rename("count", "quantity"))
        assert result == "total = price * quantity  # keep\n"
        (change,) = compute_changes(source, result)
        assert change.original_text == "count"
        assert change.replacement == "quantity"


@pytest.mark.integration
class TestArguments:
    """Argument lists gain and lose exactly one separator."""

    def test_append_argument(self):
        source = "result = compute(a, b)  # call\n"
        is_compute = calls_to("compute")
        append = rewrite_nodes(lambda n: replace(n, args=(*n.args, Ident("c"))) if is_compute(n) else None)
        result = rewrite_python(source, append)
        assert result == "result = compute(a, b, c)  # call\n"
        assert result.count(", ") == source.count(", ") + 1

    def test_append_argument_to_empty_call(self):
        is_run = calls_to("run")
        append = rewrite_nodes(lambda n: replace(n, args=(Literal(1),)) if is_run(n) else None)
        assert rewrite_python("run()\n", append) == "run(1)\n"

    def test_remove_keyword_argument(self):
        is_print = calls_to("print")
        drop = rewrite_nodes(lambda n: replace(n, args=n.args[:1]) if is_print(n) else None)
        assert rewrite_python("print(x, sep='')\n", drop) == "print(x)\n"

    def test_remove_first_argument(self):
        is_f = calls_to("f")
        drop = rewrite_nodes(lambda n: replace(n, args=n.args[1:]) if is_f(n) else None)
        assert rewrite_python("f(a, b)\n", drop) == "f(b)\n"

    def test_replace_middle_argument(self):
        is_f = calls_to("f")
        swap = rewrite_nodes(lambda n: replace(n, args=(n.args[0], Ident("x"), n.args[2])) if is_f(n) else None)
        assert rewrite_python("f(a, b, c)\n", swap) == "f(a, x, c)\n"


@pytest.mark.integration
class TestStatements:
    """Statements are inserted on their own line and removed with their layout."""

    def test_replace_value_keeps_comment(self):
        change = rewrite_nodes(lambda n: replace(n, rhs=Literal(2)) if isinstance(n, ValDef) else None)
        assert rewrite_python("x = 1  # one\n", change) == "x = 2  # one\n"

    def test_append_module_statement(self):
        append = transform(
            lambda n: replace(n, body=(*n.body, Apply(Ident("print"), (Ident("a"),)))) if isinstance(n, Module) else None
        )
        assert rewrite_python("a = 1\n", append) == "a = 1\nprint(a)\n"

    def test_remove_module_statement(self):
        drop = transform(
            lambda n: replace(n, body=tuple(s for s in n.body if s.name != "b")) if isinstance(n, Module) else None
        )
        assert rewrite_python("a = 1\nb = 2\nc = 3\n", drop) == "a = 1\nc = 3\n"

    def test_append_statement_to_function_body(self):
        append = rewrite_nodes(
            lambda n: replace(n, stats=(*n.stats, Apply(Ident("b")))) if isinstance(n, Block) else None
        )
        assert rewrite_python("def f():\n    a()\n", append) == "def f():\n    a()\n    b()\n"

    def test_append_statement_to_nested_method(self):
        source = "class A:\n    def f(self):\n        return 1\n"
        append = rewrite_nodes(
            lambda n: replace(n, stats=(*n.stats, Apply(Ident("log")))) if isinstance(n, Block) else None
        )
        assert rewrite_python(source, append) == source + "        log()\n"

    def test_remove_statement_from_function_body(self):
        is_a = calls_to("a")
        drop = rewrite_nodes(
            lambda n: replace(n, stats=tuple(s for s in n.stats if not is_a(s))) if isinstance(n, Block) else None
        )
        assert rewrite_python("def f():\n    a()\n    b()\n", drop) == "def f():\n    b()\n"

    def test_failed_transformation_renders_nothing(self):
        only_classes = transform(lambda n: n if isinstance(n, DefDef) else None)
        assert rewrite_python("x = 1\n", only_classes) is None
