#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the top-level entry points."""
import pytest

import refold
from refold import ValidationError, partition, rewrite
from refold.ast import Ident, Module
from refold.transforms import fail, succeed


@pytest.mark.unit
class TestEntryPoints:
    """Test partition, rewrite and rewrite_python."""

    def test_partition_requires_positioned_root(self):
        with pytest.raises(ValidationError) as exc_info:
            partition(Module(body=(Ident("x"),)))
        assert exc_info.value.parameter_name == "root"

    def test_rewrite_accepts_plain_functions(self):
        tree = refold.parse_python("x = 1\n").tree
        options = refold.RenderOptions(dialect=refold.PYTHON_DIALECT)
        assert rewrite(tree, lambda node: node, options) == "x = 1\n"

    def test_rewrite_returns_none_on_failure(self):
        tree = refold.parse_python("x = 1\n").tree
        assert rewrite(tree, fail) is None

    def test_rewrite_python_defaults(self):
        assert refold.rewrite_python("x = 1  # c\n", succeed) == "x = 1  # c\n"

    def test_version(self):
        assert refold.__version__
