#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/printer.py
"""Text of leaves that have no original source.

Leaves of synthetic nodes are printed from the node: identifiers print their
name, literals their value, definitions their keyword and name. Leaves of
positioned nodes whose token changed (a renamed identifier keeps its
position) print only the token the leaf covers.

"""

from __future__ import annotations

import json
import logging
from typing import Any

from refold.ast.nodes import (
    ClassDef,
    DefDef,
    Flag,
    GenericNode,
    Ident,
    Literal,
    ModuleDef,
    New,
    Node,
    Select,
    Super,
    TypeDef,
    ValDef,
)
from refold.ast.visitors import NodeVisitor
from refold.exceptions import RenderingError
from refold.options.layout import LayoutDialect

logger = logging.getLogger(__name__)


class NodePrinter(NodeVisitor):
    """Print the text of synthetic leaves for one dialect.

    Parameters
    ----------
    dialect : LayoutDialect
        Keywords, literal syntax and word operators
    strict : bool, default = False
        Raise :class:`RenderingError` for nodes that have no leaf text

    """

    def __init__(self, dialect: LayoutDialect, strict: bool = False):
        self.dialect = dialect
        self.strict = strict

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def literal(self, value: Any) -> str:
        if self.dialect.name == "python":
            return "..." if value is Ellipsis else repr(value)
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        return repr(value)

    def token(self, node: Node) -> str:
        """The token a positioned leaf covers; equal tokens mean an unchanged leaf."""
        if isinstance(node, Literal):
            return self.literal(node.value)
        if isinstance(node, Select):
            return node.operator
        if isinstance(node, New):
            return self.dialect.keyword("new")
        if isinstance(node, Super):
            return self.dialect.keyword("super")
        if isinstance(node, GenericNode):
            return node.kind
        return getattr(node, "name", "")

    def replacement(self, node: Node) -> str:
        """Text replacing the original text of a positioned leaf whose token changed."""
        if isinstance(node, Select) and node.is_prefix and node.operator in self.dialect.word_operators:
            return node.operator + " "
        return self.token(node)

    def flags(self, flags: tuple[Flag, ...]) -> str:
        return " ".join(f.token for f in flags if not f.is_marker)

    # ------------------------------------------------------------------
    # Synthetic leaves
    # ------------------------------------------------------------------

    def print(self, node: Node) -> str:
        """Full text of the leaf of a synthetic node."""
        text = node.accept(self)
        return "" if text is None else text

    def _keyword(self, kind: str, name: str) -> str:
        keyword = self.dialect.keyword(kind)
        return f"{keyword} {name}" if keyword else name

    def generic_visit(self, node: Node) -> str:
        message = f"No leaf text for synthetic {type(node).__name__}"
        if self.strict:
            raise RenderingError(message, node=node)
        logger.warning(message)
        return ""

    def visit_ident(self, node: Ident) -> str:
        return node.name

    def visit_literal(self, node: Literal) -> str:
        return self.literal(node.value)

    def visit_select(self, node: Select) -> str:
        operator = node.operator
        if node.is_prefix:
            return operator + " " if operator in self.dialect.word_operators else operator
        if operator in self.dialect.word_operators or not (operator[:1].isalpha() or operator[:1] == "_"):
            return f" {operator} "
        return "." + node.name

    def visit_val_def(self, node: ValDef) -> str:
        if node.mods.has_flag(Flag.PARAM):
            return node.name
        return self._keyword("val", node.name)

    def visit_def_def(self, node: DefDef) -> str:
        return self._keyword("def", node.name)

    def visit_type_def(self, node: TypeDef) -> str:
        return self._keyword("type", node.name)

    def visit_class_def(self, node: ClassDef) -> str:
        return self._keyword("class", node.name)

    def visit_module_def(self, node: ModuleDef) -> str:
        return self._keyword("object", node.name)

    def visit_new(self, node: New) -> str:
        keyword = self.dialect.keyword("new")
        return keyword + " " if keyword else ""

    def visit_super(self, node: Super) -> str:
        keyword = self.dialect.keyword("super")
        return f"{keyword}[{node.mix}]" if node.mix else keyword

    def visit_generic(self, node: GenericNode) -> str:
        return node.kind
