#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/repository.py
"""Lookups over the fragments of the original text.

:class:`FragmentRepository` indexes a filled fragment tree so that the
renderer can pair each fragment of an edited tree with its original
counterpart, and find the layout that surrounded it.

Fragments are paired by ``(source file, start, end)`` and kind: a scope and a
leaf may share a span without being counterparts.

"""

from __future__ import annotations

from typing import Optional

from refold.ast.nodes import Node
from refold.regeneration.fragments import FlagFragment, Fragment, LayoutFragment, ScopeFragment
from refold.regeneration.layout import split_edges


def _kind(fragment: Fragment) -> str:
    if isinstance(fragment, ScopeFragment):
        return "scope"
    if isinstance(fragment, FlagFragment):
        return "flag"
    return "leaf"


class FragmentRepository:
    """Index of a filled fragment tree.

    Parameters
    ----------
    root : ScopeFragment
        Tree returned by :func:`~refold.regeneration.layout.fill_layout`

    Examples
    --------
        >>> repository = FragmentRepository(fill_layout(partition(tree)))
        >>> repository.exists(fragment)
        True

    """

    def __init__(self, root: ScopeFragment):
        self.root = root
        self._by_key: dict[tuple[str, int, int, int], Fragment] = {}
        self._parent: dict[int, ScopeFragment] = {}
        self._index: dict[int, int] = {}
        self._gaps: dict[int, list[str]] = {}
        self._count: dict[int, int] = {}
        self._node_scopes: dict[tuple[int, int, int], ScopeFragment] = {}
        self._index_scope(root)

    def _index_scope(self, scope: ScopeFragment) -> None:
        key = scope.key
        if key is not None:
            self._by_key.setdefault(("scope", *key), scope)
        node = scope.node
        if node is not None and node.pos.is_range and node.pos.source is not None:
            self._node_scopes.setdefault((id(node.pos.source), node.pos.start, node.pos.end), scope)

        gaps = [""]
        count = 0
        for child in scope.children:
            if isinstance(child, LayoutFragment):
                gaps[-1] += child.text
                continue
            count += 1
            gaps.append("")
            self._parent[id(child)] = scope
            self._index[id(child)] = count
            if isinstance(child, ScopeFragment):
                self._index_scope(child)
            elif child.key is not None:
                self._by_key.setdefault((_kind(child), *child.key), child)
        if count == 0:
            opening, closing = split_edges(scope)
            gaps = [opening, closing]
        self._gaps[id(scope)] = gaps
        self._count[id(scope)] = count

    # ------------------------------------------------------------------
    # Pairing
    # ------------------------------------------------------------------

    def lookup(self, fragment: Fragment) -> Optional[Fragment]:
        """Original fragment of the same kind and span as ``fragment``."""
        key = fragment.key
        if key is None:
            return None
        return self._by_key.get((_kind(fragment), *key))

    def exists(self, fragment: Fragment) -> bool:
        return self.lookup(fragment) is not None

    def find_scope(self, fragment: Fragment) -> Optional[ScopeFragment]:
        """Original scope with the span of ``fragment``."""
        key = fragment.key
        if key is None:
            return None
        found = self._by_key.get(("scope", *key))
        return found if isinstance(found, ScopeFragment) else None

    def scope_indentation(self, node: Node) -> Optional[int]:
        """Indentation of the original scope created for ``node``, if there was one."""
        pos = node.pos
        if not pos.is_range or pos.source is None:
            return None
        scope = self._node_scopes.get((id(pos.source), pos.start, pos.end))
        return None if scope is None else scope.indentation

    # ------------------------------------------------------------------
    # Siblings and layout
    # ------------------------------------------------------------------

    def parent(self, original: Fragment) -> Optional[ScopeFragment]:
        return self._parent.get(id(original))

    def index(self, original: Fragment) -> int:
        """1-based position of ``original`` among the non-layout children of its scope."""
        return self._index[id(original)]

    def child_count(self, scope: ScopeFragment) -> int:
        return self._count[id(scope)]

    def gaps(self, scope: ScopeFragment) -> list[str]:
        """Layout texts of ``scope``: before the first child, between children, after the last."""
        return self._gaps[id(scope)]

    def get_next(self, original: Fragment) -> Optional[Fragment]:
        parent = self.parent(original)
        if parent is None:
            return None
        index = self.index(original)
        siblings = [c for c in parent.children if not isinstance(c, LayoutFragment)]
        return siblings[index] if index < len(siblings) else None

    def get_previous(self, original: Fragment) -> Optional[Fragment]:
        parent = self.parent(original)
        if parent is None:
            return None
        index = self.index(original)
        siblings = [c for c in parent.children if not isinstance(c, LayoutFragment)]
        return siblings[index - 2] if index > 1 else None

    def layout_after(self, original: Fragment) -> str:
        parent = self.parent(original)
        return "" if parent is None else self.gaps(parent)[self.index(original)]

    def layout_before(self, original: Fragment) -> str:
        parent = self.parent(original)
        return "" if parent is None else self.gaps(parent)[self.index(original) - 1]

    def layout_between(self, left: Fragment, right: Fragment) -> Optional[str]:
        """Layout between two original fragments that were neighbours, else ``None``."""
        parent = self.parent(left)
        if parent is None or self.parent(right) is not parent:
            return None
        if self.index(right) != self.index(left) + 1:
            return None
        return self.gaps(parent)[self.index(left)]

    def first_sibling_gap(self, scope: ScopeFragment) -> Optional[str]:
        """Layout between the first two children of ``scope``, if it has two."""
        if self.child_count(scope) < 2:
            return None
        return self.gaps(scope)[1]
