#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/changes.py
"""Text changes produced by a rewrite.

A rewrite yields the full regenerated text. Tools that patch files in place
or show a preview need the difference instead: :func:`compute_changes`
reduces it to the smallest replaced region and :func:`unified_diff` formats
it with :mod:`difflib`.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Iterator, Union

from refold.ast.nodes import SourceFile


@dataclass(frozen=True)
class Change:
    """Replacement of ``file.content[start:end]`` by ``replacement``."""

    file: SourceFile
    start: int
    end: int
    replacement: str

    @property
    def original_text(self) -> str:
        return self.file.slice(self.start, self.end)


def _content(original: Union[SourceFile, str]) -> tuple[SourceFile, str]:
    if isinstance(original, SourceFile):
        return original, original.content
    return SourceFile("<string>", original), original


def compute_changes(original: Union[SourceFile, str], new_text: str) -> list[Change]:
    """Reduce a regenerated text to the region that differs from the original.

    Parameters
    ----------
    original : SourceFile or str
        The text before the rewrite
    new_text : str
        The regenerated text

    Returns
    -------
    list of Change
        Empty when the texts are equal, otherwise a single change covering
        everything between the common prefix and the common suffix

    Examples
    --------
        >>> [(c.start, c.end, c.replacement) for c in compute_changes("f(a)", "f(a, b)")]
        [(3, 3, ', b')]

    """
    source, old_text = _content(original)
    if old_text == new_text:
        return []

    limit = min(len(old_text), len(new_text))
    prefix = 0
    while prefix < limit and old_text[prefix] == new_text[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old_text[-1 - suffix] == new_text[-1 - suffix]:
        suffix += 1

    return [Change(source, prefix, len(old_text) - suffix, new_text[prefix : len(new_text) - suffix])]


def apply_changes(original: Union[SourceFile, str], changes: list[Change]) -> str:
    """Apply non-overlapping changes to the original text."""
    _, text = _content(original)
    for change in sorted(changes, key=lambda c: c.start, reverse=True):
        text = text[: change.start] + change.replacement + text[change.end :]
    return text


def unified_diff(
    original: Union[SourceFile, str],
    new_text: str,
    *,
    old_label: str | None = None,
    new_label: str | None = None,
    context_lines: int = 3,
) -> Iterator[str]:
    """Yield unified diff lines between the original and the regenerated text.

    Labels default to the source file name.
    """
    source, old_text = _content(original)
    yield from difflib.unified_diff(
        old_text.splitlines(keepends=True),
        new_text.splitlines(keepends=True),
        fromfile=old_label or source.name,
        tofile=new_label or source.name,
        n=context_lines,
    )
