#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/options/__init__.py
"""Frozen configuration objects for partitioning and rendering."""

from refold.options.base import CloneFrozenMixin
from refold.options.layout import (
    BRACE_DIALECT,
    PYTHON_DIALECT,
    LayoutDialect,
    PartitionOptions,
    RenderOptions,
)

__all__ = [
    "BRACE_DIALECT",
    "PYTHON_DIALECT",
    "CloneFrozenMixin",
    "LayoutDialect",
    "PartitionOptions",
    "RenderOptions",
]
