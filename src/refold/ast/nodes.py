#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/ast/nodes.py
"""Tree node classes consumed by the partitioner and the transformation algebra.

This module defines the tree model that front ends (such as the Python adapter in
:mod:`refold.parsers.python`) produce and that refactorings edit. The model is
deliberately close to a classic compiler tree: definitions carry modifiers and
a declared-entity :class:`Symbol`, expressions are applications, selections,
identifiers and literals, and anything a front end does not model is wrapped
in a :class:`GenericNode` so that its children are still visited.

Positions
---------
Every node carries a :class:`Position`. Three kinds exist:

- ``RANGE``: a half-open interval of real source text
- ``SYNTHETIC``: no source text (nodes created by a refactoring)
- ``TRANSPARENT``: a position that must be ignored for layout purposes

Nodes are frozen dataclasses. Edits are expressed by building new nodes, either
with :func:`dataclasses.replace` or with :meth:`Node.with_children`, which
rebuilds a node with each direct child mapped through a function.

"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Iterable, Optional

ChildFunction = Callable[["Node"], "Node"]


class PositionKind(Enum):
    """Kind of a source position."""

    RANGE = "range"
    SYNTHETIC = "synthetic"
    TRANSPARENT = "transparent"


@dataclass(frozen=True, eq=False)
class SourceFile:
    """Immutable, file-keyed character buffer.

    Source files compare by identity: two buffers with the same text are still
    two different files.

    Parameters
    ----------
    name : str
        File name, used in change records and diagnostics
    content : str
        Full text of the file

    """

    name: str
    content: str

    def __len__(self) -> int:
        return len(self.content)

    def slice(self, start: int, end: int) -> str:
        """Return the text in ``[start, end)``."""
        return self.content[start:end]

    def __repr__(self) -> str:
        return f"SourceFile({self.name!r}, {len(self.content)} chars)"


@dataclass(frozen=True)
class Position:
    """Source span of a node.

    Parameters
    ----------
    kind : PositionKind
        Whether the span maps to real text
    start : int, default = 0
        Offset of the first character
    end : int, default = 0
        Offset one past the last character
    point : int or None, default = None
        Offset of the node's name or operator, when it differs from ``start``
    source : SourceFile or None, default = None
        File the offsets refer to

    """

    kind: PositionKind
    start: int = 0
    end: int = 0
    point: Optional[int] = None
    source: Optional[SourceFile] = None

    @classmethod
    def range(cls, source: SourceFile, start: int, end: int, point: Optional[int] = None) -> Position:
        """Create a range position in ``source``."""
        if start > end:
            raise ValueError(f"Position start {start} is after end {end}")
        return cls(PositionKind.RANGE, start, end, point, source)

    @classmethod
    def transparent(cls, source: SourceFile, start: int, end: int) -> Position:
        """Create a transparent position, ignored by layout."""
        return cls(PositionKind.TRANSPARENT, start, end, None, source)

    @property
    def is_range(self) -> bool:
        return self.kind is PositionKind.RANGE

    @property
    def is_synthetic(self) -> bool:
        return self.kind is PositionKind.SYNTHETIC

    @property
    def is_transparent(self) -> bool:
        return self.kind is PositionKind.TRANSPARENT

    @property
    def focus(self) -> int:
        """The point if one was recorded, otherwise the start."""
        return self.start if self.point is None else self.point

    def precedes(self, other: Position) -> bool:
        """Whether this range ends before ``other`` starts."""
        return self.is_range and other.is_range and self.end <= other.start

    def same_range(self, other: Position) -> bool:
        return (
            self.is_range
            and other.is_range
            and self.source is other.source
            and self.start == other.start
            and self.end == other.end
        )

    def includes(self, other: Position) -> bool:
        return (
            self.is_range
            and other.is_range
            and self.source is other.source
            and self.start <= other.start
            and other.end <= self.end
        )

    def with_point(self, point: int) -> Position:
        return replace(self, point=point)

    @property
    def text(self) -> str:
        """Source text covered by a range position (empty otherwise)."""
        if not self.is_range or self.source is None:
            return ""
        return self.source.slice(self.start, self.end)


NO_POSITION = Position(PositionKind.SYNTHETIC)


class Flag(Enum):
    """Modifier flags.

    Token flags render as their value; marker flags (those whose value is wrapped
    in angle brackets) describe a definition but never appear in source.
    """

    PRIVATE = "private"
    PROTECTED = "protected"
    OVERRIDE = "override"
    ABSTRACT = "abstract"
    FINAL = "final"
    SEALED = "sealed"
    IMPLICIT = "implicit"
    LAZY = "lazy"
    CASE = "case"
    ASYNC = "async"
    SYNTHETIC = "<synthetic>"
    PARAM = "<param>"
    PARAM_ACCESSOR = "<paramaccessor>"
    CASE_ACCESSOR = "<caseaccessor>"

    @property
    def is_marker(self) -> bool:
        return self.value.startswith("<")

    @property
    def token(self) -> str:
        return "" if self.is_marker else self.value


@dataclass(eq=False)
class Symbol:
    """Declared-entity reference.

    Symbols compare by identity only; two declarations that happen to share a
    name or a position are different entities.

    Parameters
    ----------
    name : str
        Declared name
    kind : str, default = "term"
        Free-form kind ("class", "method", "value", ...)
    flags : frozenset of Flag, default = empty
        Flags of the declaration
    position : Position, default = NO_POSITION
        Where the entity is declared; synthetic for compiler-introduced entities
    owner : Symbol or None, default = None
        Enclosing declaration

    """

    name: str
    kind: str = "term"
    flags: frozenset[Flag] = frozenset()
    position: Position = NO_POSITION
    owner: Optional[Symbol] = None

    def has_flag(self, flag: Flag) -> bool:
        return flag in self.flags

    @property
    def is_anonymous_class(self) -> bool:
        return self.kind == "class" and self.name.startswith("$anon")

    def __repr__(self) -> str:
        return f"Symbol({self.name!r}, kind={self.kind!r})"


@dataclass(frozen=True)
class Modifiers:
    """Modifiers of a definition.

    Parameters
    ----------
    flags : frozenset of Flag, default = empty
        All flags, including marker flags
    positions : tuple of (Flag, Position), default = ()
        Source positions of the flags that were written in source
    annotations : tuple of Node, default = ()
        Annotation (decorator) trees

    """

    flags: frozenset[Flag] = frozenset()
    positions: tuple[tuple[Flag, Position], ...] = ()
    annotations: tuple[Node, ...] = ()

    def has_flag(self, flag: Flag) -> bool:
        return flag in self.flags

    @property
    def token_flags(self) -> tuple[Flag, ...]:
        """Flags that render as source tokens, in declaration order."""
        return tuple(f for f in Flag if f in self.flags and not f.is_marker)

    def without(self, flag: Flag) -> Modifiers:
        """Return modifiers with ``flag`` and its source position removed."""
        return Modifiers(
            flags=self.flags - {flag},
            positions=tuple((f, p) for f, p in self.positions if f is not flag),
            annotations=self.annotations,
        )

    def map_annotations(self, fn: ChildFunction) -> Modifiers:
        if not self.annotations:
            return self
        return replace(self, annotations=tuple(fn(a) for a in self.annotations))


NO_MODIFIERS = Modifiers()


class Node(ABC):
    """Base class for all tree nodes.

    Every node supports the visitor pattern through :meth:`accept` and exposes
    its direct children in source order through :meth:`children`. The
    transformation combinators rely on :meth:`with_children` to rebuild a node
    with mapped children.

    """

    pos: Position

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Dispatch to the matching ``visit_*`` method of ``visitor``."""

    def children(self) -> list[Node]:
        """Return the direct children, skipping empty trees."""
        return []

    def with_children(self, fn: ChildFunction) -> Node:
        """Return a copy of this node with every direct child mapped through ``fn``.

        Leaf nodes return themselves. The node keeps its own position.
        """
        return self

    def set_pos(self, pos: Position) -> Node:
        return replace(self, pos=pos)  # type: ignore[type-var]

    @property
    def is_empty(self) -> bool:
        return False


def _keep(trees: Iterable[Node]) -> list[Node]:
    return [t for t in trees if not t.is_empty]


def _map(fn: ChildFunction, tree: Node) -> Node:
    return tree if tree.is_empty else fn(tree)


def _map_all(fn: ChildFunction, trees: tuple[Node, ...]) -> tuple[Node, ...]:
    return tuple(_map(fn, t) for t in trees)


@dataclass(frozen=True)
class EmptyTree(Node):
    """Placeholder for an absent subtree (no type, no body, no else branch)."""

    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return None

    @property
    def is_empty(self) -> bool:
        return True


EMPTY = EmptyTree()


# ============================================================================
# Definitions
# ============================================================================


@dataclass(frozen=True)
class Module(Node):
    """Compilation unit: the statements of one file."""

    body: tuple[Node, ...] = ()
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_module(self)

    def children(self) -> list[Node]:
        return _keep(self.body)

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, body=_map_all(fn, self.body))


@dataclass(frozen=True)
class Template(Node):
    """Body of a class or object: parent types and member statements.

    Members flagged ``PARAM_ACCESSOR`` or ``CASE_ACCESSOR`` are the class's
    constructor parameters.
    """

    parents: tuple[Node, ...] = ()
    body: tuple[Node, ...] = ()
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_template(self)

    def children(self) -> list[Node]:
        return _keep(sorted_by_position([*self.parents, *self.body]))

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, parents=_map_all(fn, self.parents), body=_map_all(fn, self.body))


class ImplDef(Node):
    """Common base of class and object definitions."""

    mods: Modifiers
    name: str
    impl: Template
    symbol: Optional[Symbol]


@dataclass(frozen=True)
class ClassDef(ImplDef):
    """Class definition."""

    name: str
    impl: Template = field(default_factory=Template)
    mods: Modifiers = NO_MODIFIERS
    tparams: tuple[Node, ...] = ()
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_class_def(self)

    def children(self) -> list[Node]:
        return _keep([*self.mods.annotations, *self.tparams, self.impl])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(
            self,
            mods=self.mods.map_annotations(fn),
            tparams=_map_all(fn, self.tparams),
            impl=_map(fn, self.impl),
        )


@dataclass(frozen=True)
class ModuleDef(ImplDef):
    """Singleton object definition."""

    name: str
    impl: Template = field(default_factory=Template)
    mods: Modifiers = NO_MODIFIERS
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_module_def(self)

    def children(self) -> list[Node]:
        return _keep([*self.mods.annotations, self.impl])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, mods=self.mods.map_annotations(fn), impl=_map(fn, self.impl))


@dataclass(frozen=True)
class ValDef(Node):
    """Value, variable or parameter definition."""

    name: str
    tpt: Node = EMPTY
    rhs: Node = EMPTY
    mods: Modifiers = NO_MODIFIERS
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_val_def(self)

    def children(self) -> list[Node]:
        return _keep([*self.mods.annotations, self.tpt, self.rhs])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, mods=self.mods.map_annotations(fn), tpt=_map(fn, self.tpt), rhs=_map(fn, self.rhs))


@dataclass(frozen=True)
class DefDef(Node):
    """Method or function definition.

    ``vparamss`` holds one tuple of parameter definitions per parameter list.
    """

    name: str
    vparamss: tuple[tuple[ValDef, ...], ...] = ()
    tpt: Node = EMPTY
    rhs: Node = EMPTY
    mods: Modifiers = NO_MODIFIERS
    tparams: tuple[Node, ...] = ()
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_def_def(self)

    @property
    def params(self) -> list[ValDef]:
        return list(itertools.chain.from_iterable(self.vparamss))

    def children(self) -> list[Node]:
        return _keep([*self.mods.annotations, *self.tparams, *self.params, self.tpt, self.rhs])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(
            self,
            mods=self.mods.map_annotations(fn),
            tparams=_map_all(fn, self.tparams),
            vparamss=tuple(_map_all(fn, ps) for ps in self.vparamss),  # type: ignore[misc]
            tpt=_map(fn, self.tpt),
            rhs=_map(fn, self.rhs),
        )


@dataclass(frozen=True)
class TypeDef(Node):
    """Type alias or abstract type member."""

    name: str
    rhs: Node = EMPTY
    mods: Modifiers = NO_MODIFIERS
    tparams: tuple[Node, ...] = ()
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_type_def(self)

    def children(self) -> list[Node]:
        return _keep([*self.mods.annotations, *self.tparams, self.rhs])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(
            self, mods=self.mods.map_annotations(fn), tparams=_map_all(fn, self.tparams), rhs=_map(fn, self.rhs)
        )


# ============================================================================
# Expressions
# ============================================================================


@dataclass(frozen=True)
class Block(Node):
    """Sequence of statements followed by a result expression."""

    stats: tuple[Node, ...] = ()
    expr: Node = EMPTY
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_block(self)

    def children(self) -> list[Node]:
        return _keep([*self.stats, self.expr])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, stats=_map_all(fn, self.stats), expr=_map(fn, self.expr))


@dataclass(frozen=True)
class If(Node):
    """Conditional expression or statement."""

    cond: Node
    thenp: Node
    elsep: Node = EMPTY
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_if(self)

    def children(self) -> list[Node]:
        return _keep([self.cond, self.thenp, self.elsep])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, cond=_map(fn, self.cond), thenp=_map(fn, self.thenp), elsep=_map(fn, self.elsep))


@dataclass(frozen=True)
class CaseDef(Node):
    """One case of a match: pattern, optional guard and body."""

    pat: Node
    body: Node
    guard: Node = EMPTY
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_case_def(self)

    def children(self) -> list[Node]:
        return _keep([self.pat, self.guard, self.body])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, pat=_map(fn, self.pat), guard=_map(fn, self.guard), body=_map(fn, self.body))


@dataclass(frozen=True)
class Match(Node):
    """Pattern match over a selector."""

    selector: Node
    cases: tuple[CaseDef, ...] = ()
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_match(self)

    def children(self) -> list[Node]:
        return _keep([self.selector, *self.cases])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, selector=_map(fn, self.selector), cases=_map_all(fn, self.cases))  # type: ignore[arg-type]


@dataclass(frozen=True)
class Apply(Node):
    """Application of a function to arguments.

    Infix operations are applications of a :class:`Select` naming the operator,
    so ``a + b`` is ``Apply(Select(a, "+"), (b,))``.
    """

    fun: Node
    args: tuple[Node, ...] = ()
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_apply(self)

    def children(self) -> list[Node]:
        return _keep([self.fun, *self.args])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, fun=_map(fn, self.fun), args=_map_all(fn, self.args))


@dataclass(frozen=True)
class TypeApply(Node):
    """Application of a polymorphic function to type arguments."""

    fun: Node
    args: tuple[Node, ...] = ()
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_type_apply(self)

    def children(self) -> list[Node]:
        return _keep([self.fun, *self.args])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, fun=_map(fn, self.fun), args=_map_all(fn, self.args))


@dataclass(frozen=True)
class Select(Node):
    """Member selection ``qualifier.name`` or an operator on ``qualifier``.

    Prefix operators are named ``unary_<op>`` and their position starts before
    the qualifier.
    """

    qualifier: Node
    name: str
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_select(self)

    @property
    def is_prefix(self) -> bool:
        return self.name.startswith("unary_")

    @property
    def operator(self) -> str:
        """Name without the ``unary_`` marker."""
        return self.name[len("unary_") :] if self.is_prefix else self.name

    def children(self) -> list[Node]:
        return _keep([self.qualifier])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, qualifier=_map(fn, self.qualifier))


@dataclass(frozen=True)
class Ident(Node):
    """Reference to a name."""

    name: str
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_ident(self)


@dataclass(frozen=True)
class Literal(Node):
    """Constant value."""

    value: Any
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_literal(self)


@dataclass(frozen=True)
class New(Node):
    """Instance creation ``new tpt``."""

    tpt: Node
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_new(self)

    def children(self) -> list[Node]:
        return _keep([self.tpt])

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, tpt=_map(fn, self.tpt))


@dataclass(frozen=True)
class Super(Node):
    """Reference to the superclass (``super`` or ``super[Mix]``)."""

    qual: str = ""
    mix: str = ""
    symbol: Optional[Symbol] = None
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_super(self)


@dataclass(frozen=True)
class GenericNode(Node):
    """Construct a front end does not model in detail.

    The partitioner emits no fragment for a generic node itself but still
    visits its ``items``, which must be in source order.
    """

    kind: str
    items: tuple[Node, ...] = ()
    pos: Position = NO_POSITION

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_generic(self)

    def children(self) -> list[Node]:
        return _keep(self.items)

    def with_children(self, fn: ChildFunction) -> Node:
        return replace(self, items=_map_all(fn, self.items))


SymTree = (ImplDef, DefDef, ValDef, TypeDef, Select, Ident)
"""Node classes that refer to a declared entity and have a name."""


def sorted_by_position(trees: Iterable[Node]) -> list[Node]:
    """Order trees by start offset; trees without a range follow in their given order."""
    ranged = [t for t in trees if t.pos.is_range]
    others = [t for t in trees if not t.pos.is_range]
    return sorted(ranged, key=lambda t: (t.pos.start, t.pos.end)) + others


def get_node_children(node: Node) -> list[Node]:
    """Get all direct child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes (empty list for leaves)

    """
    return node.children()


def replace_node_children(node: Node, fn: ChildFunction) -> Node:
    """Create a copy of a node with each child mapped through ``fn``.

    Parameters
    ----------
    node : Node
        The node to copy
    fn : callable
        Function applied to every direct child

    Returns
    -------
    Node
        New node with replaced children

    """
    return node.with_children(fn)


def walk(node: Node) -> Iterable[Node]:
    """Yield ``node`` and all of its descendants, parents first."""
    yield node
    for child in node.children():
        yield from walk(child)
