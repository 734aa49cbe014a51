#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/utils/__init__.py
"""Small helpers shared by the entry points."""

from refold.utils.timing import debug_timer

__all__ = ["debug_timer"]
