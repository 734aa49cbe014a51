#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/transforms/sequences.py
"""Splicing helpers for sequences of trees."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def replace_trees(trees: Sequence[T], what: Sequence[T], replacement: Sequence[T]) -> list[T]:
    """Replace every occurrence of the run ``what`` in ``trees`` with ``replacement``.

    Occurrences are matched left to right and do not overlap. An empty ``what``
    or a run that does not occur leaves the sequence unchanged.

    Parameters
    ----------
    trees : sequence
        Sequence to splice
    what : sequence
        Contiguous run to look for
    replacement : sequence
        Elements inserted in place of each occurrence

    Returns
    -------
    list
        The spliced sequence

    Examples
    --------
    >>> replace_trees([1, 2, 3, 4, 5], [2], [6])
    [1, 6, 3, 4, 5]
    >>> replace_trees([1, 2, 3, 4, 5], [5], [6, 7])
    [1, 2, 3, 4, 6, 7]

    """
    items = list(trees)
    run = list(what)
    if not run:
        return items

    result: list[T] = []
    i = 0
    while i < len(items):
        if items[i : i + len(run)] == run:
            result.extend(replacement)
            i += len(run)
        else:
            result.append(items[i])
            i += 1
    return result
