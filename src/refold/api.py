#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/api.py
"""Entry points for layout-preserving rewrites.

A rewrite partitions the original tree, applies a transformation and renders
the result against the original fragments. The three steps are also exposed
separately so that one partition can serve several renderings.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from refold.ast.nodes import Node
from refold.exceptions import ValidationError
from refold.options.layout import PYTHON_DIALECT, PartitionOptions, RenderOptions
from refold.parsers.python import parse_python
from refold.regeneration import partitioner, regenerator
from refold.regeneration.fragments import ScopeFragment
from refold.transforms.combinators import Transformation, transform
from refold.utils.timing import debug_timer

logger = logging.getLogger(__name__)

PYTHON_INDENTATION_STEP = 4


def partition(root: Node, options: Optional[PartitionOptions] = None) -> ScopeFragment:
    """Split a positioned tree into a fragment tree.

    Parameters
    ----------
    root : Node
        Root of a tree whose nodes carry positions into one source file
    options : PartitionOptions, optional
        Dialect and indentation settings

    Returns
    -------
    ScopeFragment
        Root scope covering the whole source

    Raises
    ------
    ValidationError
        If ``root`` has no position in a source file

    """
    if not root.pos.is_range or root.pos.source is None:
        raise ValidationError(
            "The root of a partitioned tree must span a source file",
            parameter_name="root",
            parameter_value=type(root).__name__,
        )
    with debug_timer(logger, "Partitioning"):
        return partitioner.partition(root, options)


def render(fragment_tree: ScopeFragment, edited_root: Node, options: Optional[RenderOptions] = None) -> str:
    """Render an edited tree against the fragments of its original.

    Parameters
    ----------
    fragment_tree : ScopeFragment
        Result of :func:`partition` on the original tree
    edited_root : Node
        The tree after editing
    options : RenderOptions, optional
        Must use the dialect of the partition

    Returns
    -------
    str
        Regenerated text; equal to the original when nothing changed

    """
    with debug_timer(logger, "Rendering"):
        return regenerator.render(fragment_tree, edited_root, options)


def rewrite(
    root: Node,
    transformation: Union[Transformation[Any, Any], Callable[[Any], Any]],
    options: Optional[RenderOptions] = None,
) -> Optional[str]:
    """Apply ``transformation`` to ``root`` and render the result.

    Parameters
    ----------
    root : Node
        Positioned original tree
    transformation : Transformation or callable
        Transformation to apply; a plain function is wrapped with
        :func:`~refold.transforms.transform`
    options : RenderOptions, optional
        Dialect, indentation and newline settings

    Returns
    -------
    str or None
        The regenerated text, or ``None`` when the transformation fails

    Examples
    --------
        >>> rename = top_down(transform(lambda n: replace(n, name="g") if isinstance(n, Ident) else None) | succeed)
        >>> rewrite(tree, rename)
        'g(1)'

    """
    options = options or RenderOptions()
    resolved = transformation if isinstance(transformation, Transformation) else transform(transformation)
    fragments = partition(root, options)
    edited = resolved(root)
    if edited is None:
        logger.debug("Transformation %r failed, nothing to render", resolved)
        return None
    return render(fragments, edited, options)


def rewrite_python(
    source: str,
    transformation: Union[Transformation[Any, Any], Callable[[Any], Any]],
    name: str = "<string>",
    options: Optional[RenderOptions] = None,
) -> Optional[str]:
    """Parse Python source, apply ``transformation`` and render the result.

    Without options the Python dialect with four-space indentation is used.

    Raises
    ------
    ParsingError
        If ``source`` is not valid Python

    """
    options = options or RenderOptions(dialect=PYTHON_DIALECT, indentation_step=PYTHON_INDENTATION_STEP)
    parsed = parse_python(source, name)
    return rewrite(parsed.tree, transformation, options)
