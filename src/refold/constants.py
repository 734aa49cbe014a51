#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/constants.py
"""Constants and default values for the refold library.

Constants are organized by category:
1. Defaults - Default option values
2. Layout - Characters treated as connective layout between fragments
"""

from __future__ import annotations

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_INDENTATION_STEP = 2
MAX_INDENTATION_STEP = 16
DEFAULT_NEWLINE = "\n"

# =============================================================================
# Layout
# =============================================================================

# Layout text consisting only of these is dropped together with a removed fragment
SEPARATOR_LIKE_LAYOUT = frozenset({"", ",", ";"})

# Punctuation that may belong to the connective run between two fragments
CONNECTIVE_CHARS = frozenset("(){}[],;:=->@")

INLINE_WHITESPACE = " \t"
