#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/ast/visitors.py
"""Visitor pattern implementation for tree traversal.

This module provides the visitor base class used to walk trees. Every
``visit_*`` method defaults to :meth:`NodeVisitor.generic_visit`, which visits
the node's children in source order, so subclasses only override the node
kinds they care about.

"""

from __future__ import annotations

from typing import Any, Iterable

from refold.ast.nodes import (
    Apply,
    Block,
    CaseDef,
    ClassDef,
    DefDef,
    GenericNode,
    Ident,
    If,
    Literal,
    Match,
    Module,
    ModuleDef,
    New,
    Node,
    Select,
    Super,
    Template,
    TypeApply,
    TypeDef,
    ValDef,
)


class NodeVisitor:
    """Base class for tree visitors.

    Examples
    --------
    Collect every identifier name:

        >>> class NameCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.names = []
        ...
        ...     def visit_ident(self, node):
        ...         self.names.append(node.name)
        ...
        >>> collector = NameCollector()
        >>> collector.traverse(tree)
        >>> collector.names

    """

    def traverse(self, node: Node) -> Any:
        """Visit ``node``; empty trees are ignored."""
        return node.accept(self)

    def traverse_trees(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self.traverse(node)

    def generic_visit(self, node: Node) -> Any:
        """Visit all children of ``node``."""
        self.traverse_trees(node.children())
        return None

    def visit_module(self, node: Module) -> Any:
        return self.generic_visit(node)

    def visit_class_def(self, node: ClassDef) -> Any:
        return self.generic_visit(node)

    def visit_module_def(self, node: ModuleDef) -> Any:
        return self.generic_visit(node)

    def visit_template(self, node: Template) -> Any:
        return self.generic_visit(node)

    def visit_def_def(self, node: DefDef) -> Any:
        return self.generic_visit(node)

    def visit_val_def(self, node: ValDef) -> Any:
        return self.generic_visit(node)

    def visit_type_def(self, node: TypeDef) -> Any:
        return self.generic_visit(node)

    def visit_block(self, node: Block) -> Any:
        return self.generic_visit(node)

    def visit_if(self, node: If) -> Any:
        return self.generic_visit(node)

    def visit_match(self, node: Match) -> Any:
        return self.generic_visit(node)

    def visit_case_def(self, node: CaseDef) -> Any:
        return self.generic_visit(node)

    def visit_apply(self, node: Apply) -> Any:
        return self.generic_visit(node)

    def visit_type_apply(self, node: TypeApply) -> Any:
        return self.generic_visit(node)

    def visit_select(self, node: Select) -> Any:
        return self.generic_visit(node)

    def visit_ident(self, node: Ident) -> Any:
        return self.generic_visit(node)

    def visit_literal(self, node: Literal) -> Any:
        return self.generic_visit(node)

    def visit_new(self, node: New) -> Any:
        return self.generic_visit(node)

    def visit_super(self, node: Super) -> Any:
        return self.generic_visit(node)

    def visit_generic(self, node: GenericNode) -> Any:
        return self.generic_visit(node)
