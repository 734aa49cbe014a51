"""refold - layout-preserving source rewriting.

refold regenerates source text from an edited syntax tree while keeping the
comments, blank lines and formatting of everything the edit did not touch.

The library has four parts:

- a failure-aware transformation algebra (:mod:`refold.transforms`) for
  writing tree rewrites that compose and backtrack without exceptions
- a partitioner that splits the original tree into a fragment tree of
  leaves, nested scopes and layout
- a requisite resolver that records the connective text (commas, colons,
  braces) a fragment needs next to it
- a regenerator that folds the edited tree into text, reusing original
  fragments and layout and inserting missing requisites

Key Features
------------
- Unchanged trees render byte for byte
- Renamed identifiers change only their own token
- Inserted and removed list items get or lose exactly one separator
- Synthetic block bodies are placed on new lines and indented
- Python front end built on the standard library :mod:`ast` module

Requirements
------------
- Python 3.10+

Examples
--------
Rename a function in Python source:

    >>> from dataclasses import replace
    >>> from refold import rewrite_python
    >>> from refold.ast import DefDef
    >>> from refold.transforms import succeed, top_down, transform
    >>> rename = transform(lambda n: replace(n, name="run") if isinstance(n, DefDef) else None)
    >>> rewrite_python("def main():  # entry\\n    pass\\n", top_down(rename | succeed))
    'def run():  # entry\\n    pass\\n'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/refold/__init__.py

from refold.api import partition, render, rewrite, rewrite_python
from refold.changes import Change, apply_changes, compute_changes, unified_diff
from refold.exceptions import (
    ParsingError,
    PartitionError,
    RefoldError,
    RenderingError,
    ValidationError,
)
from refold.options import BRACE_DIALECT, PYTHON_DIALECT, LayoutDialect, PartitionOptions, RenderOptions
from refold.parsers import ParsedSource, parse_python, parse_python_file


__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BRACE_DIALECT",
    "PYTHON_DIALECT",
    "Change",
    "LayoutDialect",
    "ParsedSource",
    "ParsingError",
    "PartitionError",
    "PartitionOptions",
    "RefoldError",
    "RenderOptions",
    "RenderingError",
    "ValidationError",
    "apply_changes",
    "compute_changes",
    "parse_python",
    "parse_python_file",
    "partition",
    "render",
    "rewrite",
    "rewrite_python",
    "unified_diff",
]
