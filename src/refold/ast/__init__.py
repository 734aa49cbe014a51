#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/ast/__init__.py
"""Tree model for layout-preserving rewriting.

This package contains the node classes that front ends produce and refactorings
edit, together with source positions, declared-entity symbols and the visitor
base class.

Examples
--------
Build a call by hand:

    >>> from refold.ast import Apply, Ident, Literal
    >>> call = Apply(Ident("f"), (Literal(1), Literal(2)))
    >>> [type(c).__name__ for c in call.children()]
    ['Ident', 'Literal', 'Literal']

"""

from refold.ast.nodes import (
    EMPTY,
    NO_MODIFIERS,
    NO_POSITION,
    Apply,
    Block,
    CaseDef,
    ClassDef,
    DefDef,
    EmptyTree,
    Flag,
    GenericNode,
    Ident,
    If,
    ImplDef,
    Literal,
    Match,
    Modifiers,
    Module,
    ModuleDef,
    New,
    Node,
    Position,
    PositionKind,
    Select,
    SourceFile,
    Super,
    Symbol,
    SymTree,
    Template,
    TypeApply,
    TypeDef,
    ValDef,
    get_node_children,
    replace_node_children,
    sorted_by_position,
    walk,
)
from refold.ast.visitors import NodeVisitor

__all__ = [
    "EMPTY",
    "NO_MODIFIERS",
    "NO_POSITION",
    "Apply",
    "Block",
    "CaseDef",
    "ClassDef",
    "DefDef",
    "EmptyTree",
    "Flag",
    "GenericNode",
    "Ident",
    "If",
    "ImplDef",
    "Literal",
    "Match",
    "Modifiers",
    "Module",
    "ModuleDef",
    "New",
    "Node",
    "NodeVisitor",
    "Position",
    "PositionKind",
    "Select",
    "SourceFile",
    "Super",
    "Symbol",
    "SymTree",
    "Template",
    "TypeApply",
    "TypeDef",
    "ValDef",
    "get_node_children",
    "replace_node_children",
    "sorted_by_position",
    "walk",
]
