#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/__init__.py
"""Layout-preserving partitioning and rendering.

The pipeline has three steps:

1. :func:`partition` splits the original tree into a fragment tree
2. a transformation edits the tree
3. :func:`render` folds the edited tree into text, reusing the original text
   and layout wherever nothing changed

"""

from refold.regeneration.fragments import (
    FlagFragment,
    Fragment,
    LayoutFragment,
    Requisite,
    ScopeFragment,
    SourceFragment,
    check_well_formed,
    dump,
)
from refold.regeneration.layout import excise, fill_layout
from refold.regeneration.partitioner import Role, essential_fragments, partition
from refold.regeneration.printer import NodePrinter
from refold.regeneration.regenerator import Regenerator, render
from refold.regeneration.repository import FragmentRepository
from refold.regeneration.requisites import RequisiteResolver

__all__ = [
    "FlagFragment",
    "Fragment",
    "FragmentRepository",
    "LayoutFragment",
    "NodePrinter",
    "Regenerator",
    "Requisite",
    "RequisiteResolver",
    "Role",
    "ScopeFragment",
    "SourceFragment",
    "check_well_formed",
    "dump",
    "essential_fragments",
    "excise",
    "fill_layout",
    "partition",
    "render",
]
