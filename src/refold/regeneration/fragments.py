#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/fragments.py
"""Fragment model of a partitioned source file.

A fragment tree is a hierarchy of :class:`ScopeFragment` nodes whose leaves
reference literal spans of the original text (:class:`SourceFragment`),
the whitespace and comments between them (:class:`LayoutFragment`) or modifier
tokens (:class:`FlagFragment`). Fragments built for nodes without a source
position carry ``source=None`` and are printed when rendered.

Every fragment holds two lists of :class:`Requisite` objects: connective text
that must appear immediately before or after it.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from refold.ast.nodes import Flag, Node, SourceFile
from refold.exceptions import PartitionError


@dataclass(frozen=True)
class Requisite:
    """Connective text required next to a fragment.

    Parameters
    ----------
    match_text : str
        Text that satisfies the requirement when it is already present
    write_text : str
        Text inserted when it is not
    alternatives : tuple of str, default = ()
        Other texts that also satisfy the requirement (``;`` for a newline)

    """

    match_text: str
    write_text: str
    alternatives: tuple[str, ...] = ()

    def is_satisfied_by(self, text: str) -> bool:
        """Whether ``text`` already contains the match text or an alternative."""
        if self.match_text in text:
            return True
        return any(alt in text for alt in self.alternatives)


@dataclass(eq=False)
class Fragment:
    """Base class of all fragments.

    Fragments compare by identity. ``start`` and ``end`` are offsets into
    ``source``; fragments without a source were built for synthetic nodes.
    """

    start: int = 0
    end: int = 0
    source: Optional[SourceFile] = None
    before: list[Requisite] = field(default_factory=list)
    after: list[Requisite] = field(default_factory=list)

    @property
    def is_synthetic(self) -> bool:
        return self.source is None

    @property
    def key(self) -> Optional[tuple[int, int, int]]:
        """Lookup key ``(source id, start, end)``; ``None`` for synthetic fragments."""
        if self.source is None:
            return None
        return (id(self.source), self.start, self.end)

    @property
    def text(self) -> str:
        """Original text covered by the fragment."""
        if self.source is None:
            return ""
        return self.source.slice(self.start, self.end)

    def require_before(self, requisite: Requisite) -> None:
        if requisite not in self.before:
            self.before.append(requisite)

    def require_after(self, requisite: Requisite) -> None:
        if requisite not in self.after:
            self.after.append(requisite)

    def __repr__(self) -> str:
        where = "synthetic" if self.source is None else f"{self.start}:{self.end}"
        return f"{type(self).__name__}({where})"


@dataclass(eq=False, repr=False)
class SourceFragment(Fragment):
    """Leaf for the text of one node.

    Parameters
    ----------
    node : Node or None
        Node the leaf stands for; ``None`` for untagged leaves
    literal : str or None
        Fixed text of an untagged synthetic leaf

    """

    node: Optional[Node] = None
    literal: Optional[str] = None


@dataclass(eq=False, repr=False)
class LayoutFragment(Fragment):
    """Whitespace and comments between two fragments of the original text."""

    def __repr__(self) -> str:
        return f"LayoutFragment({self.text!r})"


@dataclass(eq=False, repr=False)
class FlagFragment(Fragment):
    """One modifier token, or all token flags of a synthetic definition."""

    flags: tuple[Flag, ...] = ()

    def __repr__(self) -> str:
        return f"FlagFragment({' '.join(f.value for f in self.flags)})"


@dataclass(eq=False, repr=False)
class ScopeFragment(Fragment):
    """Fragment owning an ordered sequence of child fragments.

    Parameters
    ----------
    children : list of Fragment
        Children in source order
    indentation : int
        Indentation of the lines of the scope, in columns
    node : Node or None
        Node the scope was created for
    parent : ScopeFragment or None
        Enclosing scope
    indented : bool
        Whether the scope holds a block of statements
    delimited : bool
        Whether the first and last character of the span are delimiters, such
        as the parentheses of an argument list

    """

    children: list[Fragment] = field(default_factory=list)
    indentation: int = 0
    node: Optional[Node] = None
    parent: Optional[ScopeFragment] = None
    indented: bool = False
    delimited: bool = False

    def add(self, fragment: Fragment) -> None:
        self.children.append(fragment)
        if isinstance(fragment, ScopeFragment):
            fragment.parent = self

    @property
    def last_child(self) -> Optional[Fragment]:
        return self.children[-1] if self.children else None

    def same_span(self, start: int, end: int, source: Optional[SourceFile]) -> bool:
        return self.source is source and self.start == start and self.end == end

    def copy(self) -> ScopeFragment:
        """Shallow copy without children; requisite lists are copied."""
        return ScopeFragment(
            start=self.start,
            end=self.end,
            source=self.source,
            before=list(self.before),
            after=list(self.after),
            indentation=self.indentation,
            node=self.node,
            parent=self.parent,
            indented=self.indented,
            delimited=self.delimited,
        )

    def walk(self) -> Iterator[Fragment]:
        """Yield this scope and all fragments below it, parents first."""
        yield self
        for child in self.children:
            if isinstance(child, ScopeFragment):
                yield from child.walk()
            else:
                yield child

    def leaves(self) -> Iterator[Fragment]:
        for fragment in self.walk():
            if not isinstance(fragment, ScopeFragment):
                yield fragment

    def __repr__(self) -> str:
        where = "synthetic" if self.source is None else f"{self.start}:{self.end}"
        return f"ScopeFragment({where}, {len(self.children)} children, indentation={self.indentation})"


def check_well_formed(scope: ScopeFragment) -> None:
    """Verify that sibling fragments are ordered, disjoint and contained in their scope.

    Synthetic fragments are not positioned and are ignored.

    Parameters
    ----------
    scope : ScopeFragment
        Root of the tree to check

    Raises
    ------
    PartitionError
        If a fragment starts before its predecessor ends or leaves its scope.

    """
    previous: Optional[Fragment] = None
    for child in scope.children:
        if child.source is not None:
            if child.start > child.end:
                raise PartitionError(f"{child!r} has a negative span")
            if scope.source is not None and not (scope.start <= child.start and child.end <= scope.end):
                raise PartitionError(f"{child!r} is not contained in {scope!r}")
            if previous is not None and previous.source is child.source and previous.end > child.start:
                raise PartitionError(f"{child!r} overlaps its predecessor {previous!r}")
            previous = child
        if isinstance(child, ScopeFragment):
            check_well_formed(child)


def dump(scope: ScopeFragment, depth: int = 0) -> str:
    """Render a fragment tree as an indented outline, for debugging."""
    lines = ["  " * depth + repr(scope)]
    for child in scope.children:
        if isinstance(child, ScopeFragment):
            lines.append(dump(child, depth + 1))
        else:
            text = child.text if child.source is not None else "<synthetic>"
            lines.append("  " * (depth + 1) + f"{child!r} {text!r}")
    return "\n".join(lines)
