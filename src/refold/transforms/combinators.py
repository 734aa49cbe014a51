#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/transforms/combinators.py
"""Composable, failure-aware transformations.

A :class:`Transformation` is a total function from an input value to an
optional output: success produces a value, failure produces ``None``. Failure
is expected and never raised as an exception, so speculative rewrites are
expressed with :meth:`Transformation.or_else` without any rollback machinery.

Transformations compose in two ways:

- ``t1 >> t2`` (:meth:`Transformation.and_then`): apply ``t2`` to the result
  of ``t1``, only if ``t1`` succeeded
- ``t1 | t2`` (:meth:`Transformation.or_else`): apply ``t2`` to the original
  input only if ``t1`` failed

Traversal combinators (:func:`all_children`, :func:`any_child`,
:func:`top_down`, :func:`bottom_up`) work on any value offering
``with_children(fn)``, on lists and tuples, and treat every other value as a
leaf.

Examples
--------
Rename every identifier ``x`` in a tree:

    >>> from dataclasses import replace
    >>> from refold.ast import Ident
    >>> rename = transform(lambda t: replace(t, name="y") if isinstance(t, Ident) and t.name == "x" else None)
    >>> new_tree = top_down(rename | succeed)(tree)

Arguments of the combinators may also be zero-argument callables returning a
transformation; they are resolved on every application, which makes recursive
definitions such as ``top_down`` possible.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Generic, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

X = TypeVar("X")
Y = TypeVar("Y")
Z = TypeVar("Z")


class NoMatch(Exception):
    """Raised by a partial mapping to signal that it is undefined at its input."""


class _ChildFailed(Exception):
    """Internal signal used to abandon a rebuild when one child fails."""


class Transformation(Generic[X, Y]):
    """Partial function ``X -> Optional[Y]`` with explicit failure.

    ``None`` is the failure value, so a transformation cannot produce ``None``
    as a result: ``constant(None)`` fails on every input.

    Parameters
    ----------
    fn : callable
        Total function returning the produced value, or ``None`` on failure
    name : str or None, default = None
        Label used in ``repr``

    """

    __slots__ = ("_fn", "name")

    def __init__(self, fn: Callable[[X], Optional[Y]], name: Optional[str] = None):
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "transformation")

    def __call__(self, value: X) -> Optional[Y]:
        return self._fn(value)

    def __repr__(self) -> str:
        return f"Transformation({self.name})"

    def and_then(self, other: TransformationLike[Y, Z]) -> Transformation[X, Z]:
        """Apply ``other`` to the result of this transformation if it succeeded."""

        def apply(value: X) -> Optional[Z]:
            result = self(value)
            if result is None:
                return None
            return _resolve(other)(result)

        return Transformation(apply, f"{self.name} >> {_name(other)}")

    def or_else(self, other: TransformationLike[X, Y]) -> Transformation[X, Y]:
        """Use this transformation's result, or apply ``other`` to the same input."""

        def apply(value: X) -> Optional[Y]:
            result = self(value)
            if result is not None:
                return result
            return _resolve(other)(value)

        return Transformation(apply, f"{self.name} | {_name(other)}")

    def fold_recursively(self, f: Callable[[Transformation[X, Z], Y], Optional[Z]]) -> Transformation[X, Z]:
        """Build a self-referential transformation.

        The result applies this transformation and then ``f(recurse, produced)``,
        where ``recurse`` is the result itself, so ``f`` can descend into parts
        of the produced value with the same logic. ``f`` returning ``None``
        is a failure.
        """

        def apply(value: X) -> Optional[Z]:
            produced = self(value)
            if produced is None:
                return None
            return f(recursive, produced)

        recursive: Transformation[X, Z] = Transformation(apply, f"fold({self.name})")
        return recursive

    def __rshift__(self, other: TransformationLike[Y, Z]) -> Transformation[X, Z]:
        return self.and_then(other)

    def __or__(self, other: TransformationLike[X, Y]) -> Transformation[X, Y]:
        return self.or_else(other)

    def __invert__(self) -> Transformation[X, X]:
        return not_(self)  # type: ignore[arg-type]


TransformationLike = Union[Transformation[X, Y], Callable[[], Transformation[X, Y]]]


def _resolve(t: TransformationLike[X, Y]) -> Transformation[X, Y]:
    if isinstance(t, Transformation):
        return t
    resolved = t()
    if not isinstance(resolved, Transformation):
        raise TypeError(f"Expected a Transformation or a callable returning one, got {type(resolved).__name__}")
    return resolved


def _name(t: Any) -> str:
    return t.name if isinstance(t, Transformation) else getattr(t, "__name__", "<lazy>")


def transform(f: Union[Callable[[X], Optional[Y]], Mapping[X, Y]]) -> Transformation[X, Y]:
    """Create a transformation from a partial mapping.

    The transformation succeeds exactly where ``f`` is defined. A callable is
    undefined where it returns ``None`` or raises :class:`NoMatch`; a mapping
    is defined at its keys.

    Parameters
    ----------
    f : callable or Mapping
        The partial mapping

    Returns
    -------
    Transformation

    """
    if isinstance(f, Mapping):
        mapping = f

        def lookup(value: X) -> Optional[Y]:
            try:
                return mapping.get(value)
            except TypeError:  # unhashable input
                return None

        return Transformation(lookup, "mapping")

    def apply(value: X) -> Optional[Y]:
        try:
            return f(value)
        except NoMatch:
            return None

    return Transformation(apply, getattr(f, "__name__", "transform"))


def predicate(f: Callable[[X], Optional[bool]]) -> Transformation[X, X]:
    """Succeed with the unchanged input iff ``f`` is defined there and truthy.

    ``f`` is undefined where it returns ``None`` or raises :class:`NoMatch`.
    """

    def apply(value: X) -> Optional[X]:
        try:
            result = f(value)
        except NoMatch:
            return None
        return value if result else None

    return Transformation(apply, f"predicate({getattr(f, '__name__', '?')})")


def _succeed(value: Any) -> Any:
    return value


def _fail(value: Any) -> None:
    return None


succeed: Transformation[Any, Any] = Transformation(_succeed, "succeed")
"""Always succeeds, returning the input unchanged."""

identity = succeed

fail: Transformation[Any, Any] = Transformation(_fail, "fail")
"""Always fails."""


def not_(t: TransformationLike[X, X]) -> Transformation[X, X]:
    """Succeed with the input iff ``t`` fails on it; ``t`` is applied once."""

    def apply(value: X) -> Optional[X]:
        return value if _resolve(t)(value) is None else None

    return Transformation(apply, f"not({_name(t)})")


def constant(x: Y) -> Transformation[Any, Y]:
    """Ignore the input and always produce ``x`` (``None`` means failure)."""
    return Transformation(lambda _: x, f"constant({x!r})")


def rebuild_children(value: Any, fn: Callable[[Any], Any]) -> Any:
    """Rebuild ``value`` with each direct child mapped through ``fn``.

    Objects with ``with_children`` delegate to it, lists and tuples are rebuilt
    element-wise and every other value is a leaf returned unchanged.
    """
    with_children = getattr(value, "with_children", None)
    if with_children is not None:
        return with_children(fn)
    if isinstance(value, list):
        return [fn(v) for v in value]
    if isinstance(value, tuple) and not hasattr(value, "_fields"):
        return tuple(fn(v) for v in value)
    return value


def all_children(t: TransformationLike[Any, Any]) -> Transformation[Any, Any]:
    """Apply ``t`` to every direct child and rebuild.

    Fails as a whole, producing nothing, if ``t`` fails on any child.
    """

    def apply(value: Any) -> Any:
        resolved = _resolve(t)

        def child(c: Any) -> Any:
            result = resolved(c)
            if result is None:
                raise _ChildFailed
            return result

        try:
            return rebuild_children(value, child)
        except _ChildFailed:
            return None

    return Transformation(apply, f"all({_name(t)})")


def any_child(t: TransformationLike[Any, Any]) -> Transformation[Any, Any]:
    """Apply ``t`` to every direct child, keeping children on which it fails. Never fails."""
    return all_children(lambda: _resolve(t) | succeed)


def top_down(t: TransformationLike[Any, Any]) -> Transformation[Any, Any]:
    """Apply ``t`` to a node, then recursively to the children of the result.

    Children therefore see their already transformed parent. Fails if ``t``
    fails anywhere; combine with ``| succeed`` to leave such nodes alone.
    """
    return Transformation(lambda v: (_resolve(t) >> all_children(lambda: top_down(t)))(v), f"top_down({_name(t)})")


def bottom_up(t: TransformationLike[Any, Any]) -> Transformation[Any, Any]:
    """Transform all children recursively first, then apply ``t`` to the rebuilt node."""
    return Transformation(
        lambda v: (all_children(lambda: bottom_up(t)) >> _resolve(t))(v), f"bottom_up({_name(t)})"
    )


preorder = top_down
postorder = bottom_up
