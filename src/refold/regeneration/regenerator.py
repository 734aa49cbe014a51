#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/regenerator.py
"""Rendering of an edited tree against the fragments of the original text.

The edited tree is partitioned with the same contribution chain as the
original. Every fragment is then paired with its original counterpart:

- leaves that exist in the original emit their original text, unless the
  token they cover changed
- synthetic leaves are printed by :class:`NodePrinter`
- between two fragments that were neighbours in the original, the original
  layout is emitted unchanged
- between fragments whose neighbours were removed, the surrounding layout is
  merged by :func:`~refold.regeneration.layout.excise`
- anywhere else layout is borrowed from the original neighbourhood of either
  fragment, and requisites are written where their text is missing

Synthetic scopes holding blocks are placed on new lines and indented.

"""

from __future__ import annotations

import logging
from typing import Optional

from refold.ast.nodes import Node
from refold.constants import CONNECTIVE_CHARS, INLINE_WHITESPACE
from refold.options.layout import RenderOptions
from refold.regeneration.fragments import (
    FlagFragment,
    Fragment,
    LayoutFragment,
    Requisite,
    ScopeFragment,
    SourceFragment,
)
from refold.regeneration.layout import excise, fill_layout
from refold.regeneration.partitioner import essential_fragments
from refold.regeneration.printer import NodePrinter
from refold.regeneration.repository import FragmentRepository
from refold.regeneration.source_helpers import LayoutScanner

logger = logging.getLogger(__name__)


class Regenerator:
    """Fold an edited fragment tree into text.

    Parameters
    ----------
    repository : FragmentRepository
        Index of the filled original fragments
    options : RenderOptions
        Dialect, indentation and newline settings

    """

    def __init__(self, repository: FragmentRepository, options: RenderOptions):
        self.repository = repository
        self.options = options
        self.printer = NodePrinter(options.dialect, strict=options.strict)
        self.scanner = LayoutScanner(options.dialect)

    def render(self, fragment: Fragment) -> str:
        return self._render(fragment, 0)

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------

    def _render(self, fragment: Fragment, applied: int) -> str:
        if isinstance(fragment, ScopeFragment):
            return self._render_scope(fragment, applied)
        if isinstance(fragment, LayoutFragment):
            return fragment.text
        if isinstance(fragment, FlagFragment):
            if fragment.source is not None:
                return fragment.text
            return self.printer.flags(fragment.flags)
        if isinstance(fragment, SourceFragment):
            return self._render_leaf(fragment)
        return fragment.text

    def _render_leaf(self, leaf: SourceFragment) -> str:
        if leaf.source is None:
            if leaf.literal is not None:
                return leaf.literal
            return "" if leaf.node is None else self.printer.print(leaf.node)
        original = self.repository.lookup(leaf)
        if leaf.node is None or not isinstance(original, SourceFragment) or original.node is None:
            return leaf.text
        if self.printer.token(original.node) == self.printer.token(leaf.node):
            return leaf.text
        logger.debug("Leaf at %d:%d changed to %r", leaf.start, leaf.end, self.printer.token(leaf.node))
        return self.printer.replacement(leaf.node)

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def _counterpart(self, fragment: Fragment) -> Optional[Fragment]:
        if isinstance(fragment, ScopeFragment):
            return self.repository.find_scope(fragment)
        return self.repository.lookup(fragment)

    def _render_scope(self, scope: ScopeFragment, applied: int) -> str:
        repository = self.repository
        original = repository.find_scope(scope) if scope.source is not None else None
        synthetic_block = scope.source is None and scope.indented
        inner_applied = scope.indentation if synthetic_block else applied

        children = [c for c in scope.children if not isinstance(c, LayoutFragment)]
        texts = [self._render(c, inner_applied) for c in children]
        counterparts = [self._counterpart(c) for c in children]

        n = repository.child_count(original) if original is not None else 0
        indices: list[Optional[int]] = [0]
        for counterpart in counterparts:
            if original is not None and counterpart is not None and repository.parent(counterpart) is original:
                indices.append(repository.index(counterpart))
            else:
                indices.append(None)
        indices.append(n + 1)

        items: list[Optional[Fragment]] = [None, *children, None]
        originals: list[Optional[Fragment]] = [None, *counterparts, None]
        rendered = ["", *texts, ""]
        newline_indent = 0 if scope.source is None else max(0, scope.indentation - applied)

        parts: list[str] = []
        for k in range(len(items) - 1):
            left, right = items[k], items[k + 1]
            gap, adjacent = self._gap(
                original, indices[k], indices[k + 1], left, right, originals[k], originals[k + 1]
            )
            if not adjacent:
                after = left.after if left is not None else []
                before = right.before if right is not None else []
                gap = self._apply_requisites(rendered[k], gap, rendered[k + 1], after, before, newline_indent)
            parts.append(gap)
            if k + 1 < len(items) - 1:
                parts.append(rendered[k + 1])
        text = "".join(parts)

        if synthetic_block:
            return self._indent_block(text, scope, applied)
        return text

    def _gap(
        self,
        original: Optional[ScopeFragment],
        li: Optional[int],
        ri: Optional[int],
        left: Optional[Fragment],
        right: Optional[Fragment],
        lo: Optional[Fragment],
        ro: Optional[Fragment],
    ) -> tuple[str, bool]:
        """Layout between two items of a scope, and whether they were original neighbours.

        ``left`` is ``None`` at the start of the scope and ``right`` at its end.
        """
        repository = self.repository
        if original is None:
            if left is None or right is None:
                return "", False
        else:
            gaps = repository.gaps(original)
            if left is None and right is None and repository.child_count(original) == 0:
                return gaps[0] + gaps[-1], True
            if li is not None and ri is not None and li < ri:
                if ri == li + 1:
                    return (gaps[li] if right is not None else gaps[-1]), True
                return excise(gaps[li], gaps[ri - 1], leading_edge=li == 0), False
            if left is None:
                return gaps[0], False
            if right is None:
                return gaps[-1], False

        gap = self._borrowed_layout(original, left, right, lo, ro)
        if isinstance(right, ScopeFragment) and right.source is None and right.indented:
            stripped = gap.rstrip(" \t\r\n")
            gap = stripped if any(c in "\r\n" for c in gap[len(stripped) :]) else gap
        return gap, False

    def _borrowed_layout(
        self,
        original: Optional[ScopeFragment],
        left: Fragment,
        right: Fragment,
        lo: Optional[Fragment],
        ro: Optional[Fragment],
    ) -> str:
        repository = self.repository
        if lo is not None and repository.get_next(lo) is not None:
            return repository.layout_after(lo)
        if ro is not None and repository.get_previous(ro) is not None:
            return repository.layout_before(ro)
        if left.after or right.before:
            return ""
        if lo is not None and repository.get_previous(lo) is not None:
            return repository.layout_before(lo)
        if ro is not None and repository.get_next(ro) is not None:
            return repository.layout_after(ro)
        if original is not None:
            gap = repository.first_sibling_gap(original)
            if gap is not None:
                return gap
        return ""

    # ------------------------------------------------------------------
    # Requisites
    # ------------------------------------------------------------------

    def _trailing_run(self, text: str) -> str:
        i = len(text)
        while i > 0:
            j = self.scanner.skip_layout_backwards(i, text)
            if j > 0 and text[j - 1] in CONNECTIVE_CHARS:
                j -= 1
            if j == i:
                break
            i = j
        return text[i:]

    def _leading_run(self, text: str) -> str:
        i = 0
        while i < len(text):
            j = self.scanner.skip_layout(i, text)
            if j < len(text) and text[j] in CONNECTIVE_CHARS:
                j += 1
            if j == i:
                break
            i = j
        return text[:i]

    def _write(self, requisite: Requisite, newline_indent: int) -> str:
        text = requisite.write_text
        if text.endswith("\n") and newline_indent:
            text += " " * newline_indent
        return text

    def _apply_requisites(
        self,
        left: str,
        gap: str,
        right: str,
        after: list[Requisite],
        before: list[Requisite],
        newline_indent: int,
    ) -> str:
        """Insert missing requisite text into ``gap``.

        After-requisites go to the start of the gap and before-requisites to
        its end. A requisite is missing when neither its match text nor an
        alternative occurs in the connective text around the gap.
        """
        trailing, leading = self._trailing_run(left), self._leading_run(right)
        head = ""
        tail = ""
        for requisite in after:
            if not requisite.is_satisfied_by(trailing + head + gap + tail + leading):
                head += self._write(requisite, newline_indent)
        for requisite in before:
            if not requisite.is_satisfied_by(trailing + head + gap + tail + leading):
                tail += self._write(requisite, newline_indent)
        return head + gap + tail

    # ------------------------------------------------------------------
    # Synthetic blocks
    # ------------------------------------------------------------------

    def _indent_block(self, text: str, scope: ScopeFragment, applied: int) -> str:
        newline = self.options.newline
        prefix = " " * max(0, scope.indentation - applied)
        lines = text.strip("\r\n").split("\n")
        body = newline.join(prefix + line.rstrip("\r") if line.strip() else "" for line in lines)
        block = newline + body
        if self.options.dialect.block_close is not None:
            closing = max(0, scope.indentation - self.options.indentation_step - applied)
            block += newline + " " * closing
        return block


def render(fragment_tree: ScopeFragment, edited_root: Node, options: Optional[RenderOptions] = None) -> str:
    """Render ``edited_root`` preserving the layout of ``fragment_tree``.

    Parameters
    ----------
    fragment_tree : ScopeFragment
        Partition of the original tree, from :func:`~refold.regeneration.partitioner.partition`
    edited_root : Node
        The original tree after a transformation
    options : RenderOptions, optional
        Must use the dialect the original was partitioned with

    Returns
    -------
    str
        The regenerated source text

    Examples
    --------
        >>> fragments = partition(tree)
        >>> render(fragments, tree) == source
        True

    """
    options = options or RenderOptions()
    repository = FragmentRepository(fill_layout(fragment_tree))
    edited = essential_fragments(edited_root, repository, options)
    return Regenerator(repository, options).render(edited)
