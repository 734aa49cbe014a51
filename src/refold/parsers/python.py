#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/parsers/python.py
"""Python front end.

This module converts the tree produced by the standard library's :mod:`ast`
module into :mod:`refold.ast` nodes with character-offset positions, so that
Python sources can be partitioned and rewritten.

Mapping
-------
- function definitions become :class:`DefDef` (decorators are annotations,
  ``async`` is a modifier with a position, the body is a :class:`Block`)
- class definitions become :class:`ClassDef` with a :class:`Template` whose
  parents are the bases and keywords
- single-name assignments and annotated assignments become :class:`ValDef`
- calls become :class:`Apply`, attributes :class:`Select`, names
  :class:`Ident` and constants :class:`Literal`
- binary operations and single comparisons become applications of an
  operator :class:`Select`; unary operations are prefix selections
- ``if`` and ``match`` statements map to :class:`If` and :class:`Match`
- everything else is a :class:`GenericNode` named after the ``ast`` class

"""

from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from refold.ast.nodes import (
    EMPTY,
    Apply,
    Block,
    CaseDef,
    ClassDef,
    DefDef,
    Flag,
    GenericNode,
    Ident,
    If,
    Literal,
    Match,
    Modifiers,
    Module,
    Node,
    Position,
    Select,
    SourceFile,
    Symbol,
    Template,
    ValDef,
)
from refold.exceptions import ParsingError
from refold.options.layout import PYTHON_DIALECT
from refold.regeneration.source_helpers import LayoutScanner

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_DEF_HEADER = re.compile(r"(?:async\s+)?def\s+")
_CLASS_HEADER = re.compile(r"class\s+")

BINARY_OPERATORS: dict[type, str] = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.MatMult: "@",
    ast.Div: "/",
    ast.Mod: "%",
    ast.Pow: "**",
    ast.LShift: "<<",
    ast.RShift: ">>",
    ast.BitOr: "|",
    ast.BitXor: "^",
    ast.BitAnd: "&",
    ast.FloorDiv: "//",
}

COMPARISON_OPERATORS: dict[type, str] = {
    ast.Eq: "==",
    ast.NotEq: "!=",
    ast.Lt: "<",
    ast.LtE: "<=",
    ast.Gt: ">",
    ast.GtE: ">=",
    ast.Is: "is",
    ast.IsNot: "is not",
    ast.In: "in",
    ast.NotIn: "not in",
}

UNARY_OPERATORS: dict[type, str] = {
    ast.UAdd: "+",
    ast.USub: "-",
    ast.Not: "not",
    ast.Invert: "~",
}

# Simple statements keep their keyword as kind, so that a synthetic one prints
KEYWORD_STATEMENTS: dict[type, str] = {
    ast.Pass: "pass",
    ast.Break: "break",
    ast.Continue: "continue",
}

STATEMENT_LIST_FIELDS = frozenset({"body", "orelse", "finalbody"})

_SKIPPED_TYPES = (ast.expr_context, ast.boolop, ast.operator, ast.unaryop, ast.cmpop)


def _operator_pattern(op: str) -> re.Pattern[str]:
    if op[0].isalpha():
        return re.compile(r"\s+".join(re.escape(part) for part in op.split()) + r"\b")
    return re.compile(re.escape(op))


@dataclass(frozen=True)
class ParsedSource:
    """Result of parsing one Python source.

    Parameters
    ----------
    tree : Module
        Converted tree, positioned in ``source``
    source : SourceFile
        The parsed text

    """

    tree: Module
    source: SourceFile


class PythonTreeBuilder:
    """Convert a standard library ``ast`` tree into refold nodes.

    Parameters
    ----------
    source : SourceFile
        Text the ``ast`` tree was parsed from

    """

    def __init__(self, source: SourceFile):
        self.source = source
        self.content = source.content
        self._line_starts = [0] + [m.end() for m in _LINE_BREAK.finditer(self.content)]
        self._scanner = LayoutScanner(PYTHON_DIALECT)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def offset(self, lineno: int, col: int) -> int:
        """Character offset of a 1-based line and UTF-8 byte column."""
        line_start = self._line_starts[lineno - 1]
        line_end = self._line_starts[lineno] if lineno < len(self._line_starts) else len(self.content)
        line = self.content[line_start:line_end]
        if line.isascii():
            return line_start + col
        return line_start + len(line.encode("utf-8")[:col].decode("utf-8", errors="ignore"))

    def span(self, node: ast.AST) -> Optional[tuple[int, int]]:
        lineno = getattr(node, "lineno", None)
        end_lineno = getattr(node, "end_lineno", None)
        if lineno is None or end_lineno is None:
            return None
        return self.offset(lineno, node.col_offset), self.offset(end_lineno, node.end_col_offset)  # type: ignore[attr-defined]

    def position(self, start: int, end: int, point: Optional[int] = None) -> Position:
        return Position.range(self.source, start, end, point)

    def _derived(self, children: list[Node]) -> Optional[Position]:
        ranged = [c.pos for c in children if c.pos.is_range]
        if not ranged:
            return None
        return self.position(min(p.start for p in ranged), max(p.end for p in ranged))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def convert(self, node: Optional[ast.AST]) -> Node:
        if node is None:
            return EMPTY
        method = getattr(self, f"convert_{type(node).__name__}", self.convert_generic)
        return method(node)

    def convert_all(self, nodes: list[Any]) -> list[Node]:
        converted = [self.convert(n) for n in nodes if isinstance(n, ast.AST)]
        return [c for c in converted if not c.is_empty]

    def block(self, statements: list[ast.stmt]) -> Node:
        stats = self.convert_all(statements)
        if not stats:
            return EMPTY
        return Block(stats=tuple(stats), expr=EMPTY, pos=self._derived(stats) or Position.range(self.source, 0, 0))

    def _sorted(self, nodes: list[Node]) -> tuple[Node, ...]:
        return tuple(sorted(nodes, key=lambda n: n.pos.start if n.pos.is_range else 0))

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def convert_Module(self, node: ast.Module) -> Node:
        return Module(body=tuple(self.convert_all(node.body)), pos=self.position(0, len(self.content)))

    def _decorated(self, node: Any, start: int) -> tuple[int, tuple[Node, ...]]:
        decorators = tuple(self.convert_all(node.decorator_list))
        for decorator in decorators:
            if decorator.pos.is_range:
                at = self.content.rfind("@", 0, decorator.pos.start)
                if at >= 0:
                    start = min(start, at)
        return start, decorators

    def _symbol(self, name: str, kind: str, start: int, flags: frozenset[Flag] = frozenset()) -> Symbol:
        return Symbol(name, kind, flags, self.position(start, start + len(name)))

    def _function(self, node: Union[ast.FunctionDef, ast.AsyncFunctionDef]) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        header = _DEF_HEADER.match(self.content, start)
        point = header.end() if header else start
        outer_start, decorators = self._decorated(node, start)

        flags: set[Flag] = set()
        positions: list[tuple[Flag, Position]] = []
        if isinstance(node, ast.AsyncFunctionDef):
            flags.add(Flag.ASYNC)
            positions.append((Flag.ASYNC, self.position(start, start + len("async"))))

        params = self.parameters(node.args)
        tparams = tuple(self.convert_all(getattr(node, "type_params", [])))
        return DefDef(
            name=node.name,
            vparamss=(params,),
            tpt=self.convert(node.returns),
            rhs=self.block(node.body),
            mods=Modifiers(frozenset(flags), tuple(positions), decorators),
            tparams=tparams,
            symbol=self._symbol(node.name, "method", point),
            pos=self.position(outer_start, end, point),
        )

    convert_FunctionDef = _function
    convert_AsyncFunctionDef = _function

    def parameters(self, args: ast.arguments) -> tuple[ValDef, ...]:
        """Parameters of a signature as ``ValDef`` nodes in source order."""
        positional = [*args.posonlyargs, *args.args]
        defaults: list[Optional[ast.expr]] = [None] * (len(positional) - len(args.defaults)) + list(args.defaults)
        pairs: list[tuple[ast.arg, Optional[ast.expr]]] = list(zip(positional, defaults))
        if args.vararg is not None:
            pairs.append((args.vararg, None))
        pairs.extend(zip(args.kwonlyargs, args.kw_defaults))
        if args.kwarg is not None:
            pairs.append((args.kwarg, None))
        params = [self.parameter(arg, default) for arg, default in pairs]
        return tuple(sorted(params, key=lambda p: p.pos.start))

    def parameter(self, arg: ast.arg, default: Optional[ast.expr] = None) -> ValDef:
        start, end = self.span(arg)  # type: ignore[misc]
        rhs = self.convert(default)
        if rhs.pos.is_range:
            end = max(end, rhs.pos.end)
        return ValDef(
            name=arg.arg,
            tpt=self.convert(arg.annotation),
            rhs=rhs,
            mods=Modifiers(frozenset({Flag.PARAM})),
            symbol=self._symbol(arg.arg, "parameter", start, frozenset({Flag.PARAM})),
            pos=self.position(start, end, start),
        )

    def convert_arg(self, node: ast.arg) -> Node:
        return self.parameter(node)

    def convert_Lambda(self, node: ast.Lambda) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        return GenericNode("Lambda", (*self.parameters(node.args), self.convert(node.body)), self.position(start, end))

    def convert_ClassDef(self, node: ast.ClassDef) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        header = _CLASS_HEADER.match(self.content, start)
        point = header.end() if header else start
        outer_start, decorators = self._decorated(node, start)
        parents = self._sorted([*self.convert_all(node.bases), *self.convert_all(node.keywords)])
        body = tuple(self.convert_all(node.body))
        impl = Template(parents=parents, body=body, pos=self.position(point + len(node.name), end))
        return ClassDef(
            name=node.name,
            impl=impl,
            mods=Modifiers(annotations=decorators),
            tparams=tuple(self.convert_all(getattr(node, "type_params", []))),
            symbol=self._symbol(node.name, "class", point),
            pos=self.position(outer_start, end, point),
        )

    def convert_Assign(self, node: ast.Assign) -> Node:
        if len(node.targets) == 1 and isinstance(node.targets[0], ast.Name):
            target = node.targets[0]
            start, end = self.span(node)  # type: ignore[misc]
            t_start, _ = self.span(target)  # type: ignore[misc]
            return ValDef(
                name=target.id,
                rhs=self.convert(node.value),
                symbol=self._symbol(target.id, "value", t_start),
                pos=self.position(start, end, t_start),
            )
        return self.convert_generic(node)

    def convert_AnnAssign(self, node: ast.AnnAssign) -> Node:
        if isinstance(node.target, ast.Name) and node.simple:
            start, end = self.span(node)  # type: ignore[misc]
            return ValDef(
                name=node.target.id,
                tpt=self.convert(node.annotation),
                rhs=self.convert(node.value),
                symbol=self._symbol(node.target.id, "value", start),
                pos=self.position(start, end, start),
            )
        return self.convert_generic(node)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def convert_Expr(self, node: ast.Expr) -> Node:
        return self.convert(node.value)

    def convert_Name(self, node: ast.Name) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        return Ident(node.id, pos=self.position(start, end))

    def convert_Constant(self, node: ast.Constant) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        return Literal(node.value, pos=self.position(start, end))

    def convert_JoinedStr(self, node: ast.JoinedStr) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        return GenericNode("JoinedStr", (), self.position(start, end))

    def convert_Attribute(self, node: ast.Attribute) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        return Select(self.convert(node.value), node.attr, pos=self.position(start, end, end - len(node.attr)))

    def convert_Call(self, node: ast.Call) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        args = self._sorted([*self.convert_all(node.args), *self.convert_all(node.keywords)])
        return Apply(self.convert(node.func), args, pos=self.position(start, end))

    def convert_UnaryOp(self, node: ast.UnaryOp) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        op = UNARY_OPERATORS[type(node.op)]
        return Select(self.convert(node.operand), "unary_" + op, pos=self.position(start, end, start))

    def _find_operator(self, op: str, start: int, end: int) -> Optional[tuple[int, int]]:
        """Locate ``op`` between two operands, skipping comments and parentheses."""
        pattern = _operator_pattern(op)
        i = start
        while i < end:
            i = self._scanner.skip_layout(i, self.content)
            if i >= end:
                return None
            if self.content[i] in "()\\":
                i += 1
                continue
            match = pattern.match(self.content, i, end)
            return (match.start(), match.end()) if match else None
        return None

    def _infix(self, node: ast.AST, left: ast.expr, op: str, right: ast.expr) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        lhs, rhs = self.convert(left), self.convert(right)
        found = None
        if lhs.pos.is_range and rhs.pos.is_range:
            found = self._find_operator(op, lhs.pos.end, rhs.pos.start)
        if found is None:
            logger.debug("Operator %r not found at %d, keeping a generic node", op, start)
            return GenericNode(type(node).__name__, (lhs, rhs), self.position(start, end))
        op_start, op_end = found
        select = Select(lhs, op, pos=self.position(lhs.pos.start, op_end, op_start))
        return Apply(select, (rhs,), pos=self.position(start, end))

    def convert_BinOp(self, node: ast.BinOp) -> Node:
        return self._infix(node, node.left, BINARY_OPERATORS[type(node.op)], node.right)

    def convert_Compare(self, node: ast.Compare) -> Node:
        if len(node.ops) == 1:
            return self._infix(node, node.left, COMPARISON_OPERATORS[type(node.ops[0])], node.comparators[0])
        return self.convert_generic(node)

    # ------------------------------------------------------------------
    # Control flow
    # ------------------------------------------------------------------

    def convert_If(self, node: ast.If) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        elsep: Node = EMPTY
        if len(node.orelse) == 1 and isinstance(node.orelse[0], ast.If):
            nested = node.orelse[0]
            nested_span = self.span(nested)
            if nested_span is not None and self.content.startswith("elif", nested_span[0]):
                elsep = self.convert(nested)
        if elsep.is_empty:
            elsep = self.block(node.orelse)
        return If(self.convert(node.test), self.block(node.body), elsep, pos=self.position(start, end))

    def convert_Match(self, node: ast.Match) -> Node:
        start, end = self.span(node)  # type: ignore[misc]
        cases = tuple(self.convert_match_case(c) for c in node.cases)
        return Match(self.convert(node.subject), cases, pos=self.position(start, end))  # type: ignore[arg-type]

    def convert_match_case(self, node: ast.match_case) -> CaseDef:
        pattern, guard, body = self.convert(node.pattern), self.convert(node.guard), self.block(node.body)
        pos = self._derived([pattern, guard, body]) or Position.range(self.source, 0, 0)
        return CaseDef(pattern, body, guard, pos=pos)

    def convert_generic(self, node: ast.AST) -> Node:
        """Wrap ``node`` in a :class:`GenericNode` holding its converted children."""
        kind = KEYWORD_STATEMENTS.get(type(node), type(node).__name__)
        children: list[Node] = []
        for name, value in ast.iter_fields(node):
            if isinstance(value, _SKIPPED_TYPES):
                continue
            if isinstance(value, list):
                if name in STATEMENT_LIST_FIELDS and value and isinstance(value[0], ast.stmt):
                    children.append(self.block(value))
                else:
                    children.extend(self.convert_all(value))
            elif isinstance(value, ast.AST):
                children.append(self.convert(value))
        children = [c for c in children if not c.is_empty]
        span = self.span(node)
        if span is not None:
            pos = self.position(*span)
        else:
            derived = self._derived(children)
            if derived is None:
                return EMPTY
            pos = derived
        return GenericNode(kind, self._sorted(children), pos)


def parse_python(source: str, name: str = "<string>") -> ParsedSource:
    """Parse Python source text into a positioned refold tree.

    Parameters
    ----------
    source : str
        Python source text
    name : str, default = "<string>"
        File name recorded in the :class:`SourceFile`

    Returns
    -------
    ParsedSource

    Raises
    ------
    ParsingError
        If the text is not valid Python

    Examples
    --------
        >>> parsed = parse_python("x = 1\\n")
        >>> parsed.tree.body[0].name
        'x'

    """
    try:
        python_tree = ast.parse(source, filename=name)
    except SyntaxError as e:
        raise ParsingError(f"Invalid Python in {name}: {e.msg}", file_name=name, line=e.lineno, original_error=e) from e
    except ValueError as e:
        raise ParsingError(f"Invalid Python in {name}: {e}", file_name=name, original_error=e) from e

    source_file = SourceFile(name, source)
    tree = PythonTreeBuilder(source_file).convert(python_tree)
    logger.debug("Parsed %s", name)
    return ParsedSource(tree, source_file)  # type: ignore[arg-type]


def parse_python_file(path: Union[str, Path], encoding: str = "utf-8") -> ParsedSource:
    """Read and parse a Python file.

    Raises
    ------
    ParsingError
        If the file cannot be read or is not valid Python

    """
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ParsingError(f"Cannot read {path}: {e}", file_name=str(path), original_error=e) from e
    return parse_python(text, str(path))
