#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/parsers/__init__.py
"""Front ends that produce positioned refold trees from source text."""

from refold.parsers.python import ParsedSource, PythonTreeBuilder, parse_python, parse_python_file

__all__ = ["ParsedSource", "PythonTreeBuilder", "parse_python", "parse_python_file"]
