#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/layout.py
"""Layout fill and layout excision.

:func:`fill_layout` copies a fragment tree and inserts a
:class:`LayoutFragment` for every stretch of original text that no fragment
covers: between adjacent children and at the edges of each scope.

:func:`excise` decides which layout survives when the fragments between two
layouts are removed by an edit.

"""

from __future__ import annotations

from refold.constants import INLINE_WHITESPACE, SEPARATOR_LIKE_LAYOUT
from refold.regeneration.fragments import Fragment, LayoutFragment, ScopeFragment


def fill_layout(scope: ScopeFragment) -> ScopeFragment:
    """Return a copy of ``scope`` with layout fragments between its children.

    Synthetic children are kept but do not delimit layout. An original scope
    without positioned children receives one layout fragment spanning all of
    its text.

    Parameters
    ----------
    scope : ScopeFragment
        Tree produced by :func:`~refold.regeneration.partitioner.partition`

    Returns
    -------
    ScopeFragment
        Filled copy; the input tree is not modified

    """
    filled = scope.copy()
    source = scope.source
    cursor = scope.start

    def layout(start: int, end: int) -> None:
        if source is not None and start < end:
            filled.add(LayoutFragment(start, end, source))

    for child in scope.children:
        if child.source is source and source is not None:
            layout(cursor, child.start)
            cursor = max(cursor, child.end)
        filled.add(fill_layout(child) if isinstance(child, ScopeFragment) else child)
    layout(cursor, scope.end)
    return filled


def is_separator_like(text: str) -> bool:
    """Whether ``text`` is only whitespace, optionally around one comma or semicolon."""
    return text.strip() in SEPARATOR_LIKE_LAYOUT


def excise(preceding: str, following: str, leading_edge: bool = False) -> str:
    """Layout left between two fragments after the fragments between them were removed.

    Parameters
    ----------
    preceding : str
        Layout that followed the left neighbour
    following : str
        Layout that preceded the right neighbour
    leading_edge : bool, default = False
        Whether the left neighbour is the start of the enclosing scope

    Returns
    -------
    str

    Examples
    --------
    >>> excise(", ", ", ")
    ', '
    >>> excise("(", ", ", leading_edge=True)
    '('
    >>> excise(", ", ")")
    ')'

    """
    preceding_separator = is_separator_like(preceding)
    following_separator = is_separator_like(following)
    if preceding_separator and following_separator:
        return preceding if leading_edge else following
    if following_separator:
        return preceding
    if following[:1] in tuple(INLINE_WHITESPACE) and preceding.strip() == "":
        leading = following[: len(following) - len(following.lstrip(INLINE_WHITESPACE))]
        if "\n" not in leading:
            return preceding + following.lstrip(INLINE_WHITESPACE)
    if preceding_separator:
        return following
    return preceding + following


def split_edges(scope: ScopeFragment) -> tuple[str, str]:
    """Opening and closing text of an original scope without positioned children.

    A delimited scope splits before its last character, so that ``"()"``
    yields ``("(", ")")``; any other scope keeps all text at its start.
    """
    text = scope.text
    if scope.delimited and text:
        return text[:-1], text[-1:]
    return text, ""


def content_children(scope: ScopeFragment) -> list[Fragment]:
    """Children of a filled scope that are not layout."""
    return [c for c in scope.children if not isinstance(c, LayoutFragment)]
