#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/transforms/__init__.py
"""Transformation combinator algebra.

The combinators in this package do not depend on the fragment machinery and can
be used on any value that offers ``with_children(fn)``, as well as on plain lists
and tuples.

Examples
--------
    >>> from refold.transforms import transform, succeed, top_down
    >>> double = transform(lambda x: x * 2 if isinstance(x, int) else None)
    >>> top_down(double | succeed)([1, [2, 3]])
    [2, [4, 6]]

"""

from refold.transforms.combinators import (
    NoMatch,
    Transformation,
    all_children,
    any_child,
    bottom_up,
    constant,
    fail,
    identity,
    not_,
    postorder,
    predicate,
    preorder,
    rebuild_children,
    succeed,
    top_down,
    transform,
)
from refold.transforms.sequences import replace_trees

__all__ = [
    "NoMatch",
    "Transformation",
    "all_children",
    "any_child",
    "bottom_up",
    "constant",
    "fail",
    "identity",
    "not_",
    "postorder",
    "predicate",
    "preorder",
    "rebuild_children",
    "replace_trees",
    "succeed",
    "top_down",
    "transform",
]
