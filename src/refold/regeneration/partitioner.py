#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/partitioner.py
"""Partitioning of a tree into a fragment tree.

One traversal of an immutable tree produces a :class:`ScopeFragment` whose
leaves reference the source text of the tree's nodes, annotated with the
connective text that has to appear between them.

Each visit hands a ``(node, role)`` pair to a chain of contribution handlers.
The role says which part of a node is being contributed: a method definition
contributes separately as its modifiers, its name, its parameter list, its
result type and its body. The handlers run in this order, and each decides
whether to call the next one:

1. :class:`FragmentContribution` emits leaves
2. :class:`ScopeContribution` opens scopes around the rest of the chain
3. :class:`ModifiersContribution` emits modifier tokens, and stops the chain
   for definitions without modifiers
4. :class:`RequisitesContribution` records connective text
5. :class:`BasicContribution` descends into the parts of the node

Traversal state lives in a :class:`PartitionContext` owned by a single call.

"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Sequence

from refold.ast.nodes import (
    EMPTY,
    Apply,
    Block,
    CaseDef,
    ClassDef,
    DefDef,
    Flag,
    GenericNode,
    Ident,
    If,
    ImplDef,
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
from refold.ast.visitors import NodeVisitor
from refold.options.layout import PartitionOptions
from refold.regeneration.fragments import (
    FlagFragment,
    Fragment,
    Requisite,
    ScopeFragment,
    SourceFragment,
    check_well_formed,
)
from refold.regeneration.requisites import RequisiteResolver
from refold.regeneration.source_helpers import (
    Adjustment,
    LayoutScanner,
    either,
    identifier_end,
    indentation_length,
    no_change,
    shifted,
)

logger = logging.getLogger(__name__)

_PLAIN_NAME = re.compile(r"[^\W\d]\w*$")


class Role(Enum):
    """Part of a node contributed by one visit."""

    MODS = "mods"
    ITSELF = "itself"
    NAME = "name"
    TPT = "tpt"
    RHS = "rhs"
    PARAM_LIST = "param_list"
    ARGS_SEPARATOR = "args_separator"
    STMTS_SEPARATOR = "stmts_separator"
    CLASS_PARAMS = "class_params"
    CLASS_BODY = "class_body"
    BLOCK_BODY = "block_body"
    COND = "cond"
    THEN = "then"
    ELSE = "else"


class ScopeIndentation(Protocol):
    """Lookup of the indentation a node's scope had in the original partition."""

    def scope_indentation(self, node: Node) -> Optional[int]: ...


def _has_modifiers(node: Any) -> bool:
    mods = node.mods
    if node.pos.is_synthetic:
        return bool(mods.token_flags)
    return bool(mods.positions)


def _is_synthetic_symbol(node: Any) -> bool:
    symbol = getattr(node, "symbol", None)
    if symbol is not None and symbol.has_flag(Flag.SYNTHETIC):
        return True
    mods = getattr(node, "mods", None)
    return mods is not None and mods.has_flag(Flag.SYNTHETIC)


def range_or_synthetic(node: Node) -> bool:
    return node.pos.is_range or node.pos.is_synthetic


def not_empty_range_or_synthetic(node: Node) -> bool:
    return not node.is_empty and range_or_synthetic(node)


class PartitionContext:
    """Traversal state of one partition pass: the scope stack and pending requisites.

    Parameters
    ----------
    root : ScopeFragment
        Outermost scope, which stays at the bottom of the stack

    """

    def __init__(self, root: ScopeFragment):
        self.root = root
        self.scopes: list[ScopeFragment] = [root]
        self.requisites = RequisiteResolver(lambda: self.top)

    @property
    def top(self) -> ScopeFragment:
        return self.scopes[-1]

    def add(self, fragment: Fragment) -> None:
        """Add ``fragment`` to the active scope and flush pending requisites onto it."""
        self.top.add(fragment)
        self.requisites.flush(fragment)

    def push(self, scope: ScopeFragment) -> None:
        self.add(scope)
        self.scopes.append(scope)

    def pop(self) -> ScopeFragment:
        if len(self.scopes) == 1:
            raise IndexError("Cannot pop the root scope")
        return self.scopes.pop()


class Contribution(ABC):
    """Handler in the contribution chain.

    Parameters
    ----------
    visitor : PartitionVisitor
        Visitor owning the traversal state
    next : Contribution or None
        Handler called by :meth:`delegate`

    """

    def __init__(self, visitor: PartitionVisitor, next: Optional[Contribution] = None):
        self.visitor = visitor
        self.next = next

    @property
    def context(self) -> PartitionContext:
        return self.visitor.context

    @property
    def options(self) -> PartitionOptions:
        return self.visitor.options

    @abstractmethod
    def contribute(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        """Handle ``(node, role)``, calling :meth:`delegate` to continue the chain."""

    def delegate(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        if self.next is not None:
            self.next.contribute(node, role, trees)


class FragmentContribution(Contribution):
    """Emits the leaf fragments of nodes that have their own text."""

    def _leaf(self, node: Node, start: int, end: int, tagged: bool = True) -> SourceFragment:
        return SourceFragment(start, end, node.pos.source, node=node if tagged else None)

    def _name_leaf(self, node: Any) -> Fragment:
        pos = node.pos
        if pos.is_synthetic:
            return SourceFragment(node=node)
        start = pos.focus
        end = identifier_end(start, pos.source.content)
        if end is None or end > pos.end:
            end = min(start + len(node.name), pos.end)
        return self._leaf(node, start, end)

    def _itself(self, node: Node) -> Optional[Fragment]:
        pos = node.pos
        if isinstance(node, (Apply, TypeApply, ImplDef, Match, Block, If, Module, Template, CaseDef, GenericNode)):
            return None
        if isinstance(node, Ident):
            if _is_synthetic_symbol(node):
                return None
            if pos.is_synthetic:
                return SourceFragment(node=node)
            symbol = node.symbol
            if symbol is not None and symbol.position.is_synthetic:
                return self._leaf(node, pos.start, min(pos.start + len(node.name), pos.end), tagged=False)
            return self._leaf(node, pos.start, pos.end)
        if isinstance(node, Select):
            qualifier = node.qualifier
            if isinstance(qualifier, New) or node.name == "apply":
                return None
            if pos.is_synthetic:
                return SourceFragment(node=node)
            if qualifier.pos.is_range and qualifier.pos.start > pos.start:
                return self._leaf(node, pos.start, qualifier.pos.start)
            if qualifier.pos.is_range:
                return self._leaf(node, max(pos.focus, qualifier.pos.end), pos.end)
            return self._leaf(node, pos.focus, pos.end)
        if isinstance(node, New):
            if pos.is_synthetic:
                return SourceFragment(node=node)
            end = identifier_end(pos.start, pos.source.content) or pos.start
            if not node.tpt.is_empty and node.tpt.pos.is_range:
                end = min(end, node.tpt.pos.start)
            return self._leaf(node, pos.start, end)
        if isinstance(node, (DefDef, ValDef, TypeDef)):
            return self._name_leaf(node)
        if pos.is_synthetic:
            return SourceFragment(node=node)
        return self._leaf(node, pos.start, pos.end)

    def contribute(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        fragment: Optional[Fragment] = None
        if role is Role.ITSELF:
            fragment = self._itself(node)
        elif role is Role.NAME and isinstance(node, ImplDef):
            fragment = self._name_leaf(node)
        if fragment is not None:
            self.context.add(fragment)
        self.delegate(node, role, trees)


class ScopeContribution(Contribution):
    """Opens scopes for nodes whose parts are grouped by delimiters or indentation."""

    def scope(
        self,
        node: Node,
        body: Callable[[], None],
        indent: bool = False,
        adjust_start: Adjustment = no_change,
        adjust_end: Adjustment = no_change,
        delimited: bool = False,
        indent_anchor: Optional[int] = None,
    ) -> None:
        """Run ``body`` inside a scope for ``node``.

        The span is adjusted only if both adjustments succeed. No scope is
        opened when the active scope already has the same span.
        """
        context = self.context
        pos = node.pos
        dialect = self.options.dialect

        if pos.is_synthetic:
            if not indent:
                body()
                return
            parent = context.top
            new_scope = ScopeFragment(
                indentation=parent.indentation + self.options.indentation_step,
                node=node,
                indented=True,
            )
            context.push(new_scope)
            if dialect.block_open is not None:
                new_scope.require_before(Requisite(dialect.block_open, dialect.block_open))
            body()
            if dialect.block_close is not None:
                new_scope.require_after(Requisite(dialect.block_close, dialect.block_close))
            context.pop()
            return

        if not pos.is_range:
            body()
            return

        content = pos.source.content
        start, end = adjust_start(pos.start, content), adjust_end(pos.end, content)
        if start is None or end is None or start > end:
            logger.debug("Delimiter not found around %s, using its span", type(node).__name__)
            start, end = pos.start, pos.end

        if context.top.same_span(start, end, pos.source):
            body()
            return

        anchor = start if indent_anchor is None else indent_anchor
        new_scope = ScopeFragment(
            start,
            end,
            pos.source,
            indentation=self.visitor.indentation(anchor, node, context.top),
            node=node,
            indented=indent,
            delimited=delimited,
        )
        context.push(new_scope)
        body()
        context.pop()

    def _to(self, char: Optional[str]) -> Adjustment:
        if char is None:
            return lambda offset, content: None
        return self.visitor.scanner.skip_layout_to(char)

    def _back_to(self, char: Optional[str]) -> Adjustment:
        if char is None:
            return lambda offset, content: None
        return self.visitor.scanner.backwards_skip_layout_to(char)

    def _branch(self, node: If, branch: Node, role: Role, trees: Sequence[Node]) -> bool:
        if not branch.pos.is_range or not node.pos.is_range:
            return False
        content = node.pos.source.content
        if indentation_length(branch.pos.start, content) <= indentation_length(node.pos.start, content):
            return False
        dialect = self.options.dialect
        self.scope(
            branch,
            lambda: self.delegate(node, role, trees),
            indent=True,
            adjust_start=either(self._back_to(dialect.block_open), self._back_to("\n")),
            adjust_end=either(self._to(dialect.block_close), shifted(self._to("\n"), -1)),
            indent_anchor=branch.pos.start,
        )
        return True

    def contribute(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        dialect = self.options.dialect
        body = lambda: self.delegate(node, role, trees)  # noqa: E731

        if isinstance(node, ImplDef) and role is Role.ITSELF:
            starts = [p.start for _, p in node.mods.positions if p.is_range]
            widened = min([node.pos.start, *starts])
            self.scope(node, body, adjust_start=lambda offset, content: widened)
        elif (
            isinstance(node, DefDef)
            and role is Role.RHS
            and not isinstance(node.rhs, Block)
            and node.rhs.pos.is_range
        ):
            self.scope(
                node.rhs,
                body,
                indent=True,
                adjust_start=self._back_to(dialect.block_open),
                adjust_end=self._to(dialect.block_close),
            )
        elif isinstance(node, Block) and role is Role.BLOCK_BODY and not self._expr_first(node):
            anchor = node.stats[0].pos.start if node.stats and node.stats[0].pos.is_range else None
            self.scope(
                node,
                body,
                indent=True,
                adjust_start=self._back_to(dialect.block_open),
                adjust_end=self._to(dialect.block_close),
                indent_anchor=anchor,
            )
        elif isinstance(node, Match) and role is Role.ITSELF:
            self.scope(node, body)
        elif isinstance(node, If) and role is Role.COND and dialect.cond_open is not None:
            self.scope(node.cond, body, adjust_start=self._back_to(dialect.cond_open), adjust_end=self._to(dialect.cond_close))
        elif isinstance(node, If) and role is Role.THEN and self._branch(node, node.thenp, role, trees):
            pass
        elif isinstance(node, If) and role is Role.ELSE and self._branch(node, node.elsep, role, trees):
            pass
        elif isinstance(node, Template) and role is Role.CLASS_BODY and trees:
            self._class_body(node, trees, body)
        elif isinstance(node, Apply) and role is Role.PARAM_LIST:
            span = self.visitor.param_list_span(node)
            if span is None:
                body()
            else:
                self.scope(
                    node,
                    body,
                    adjust_start=lambda offset, content: span[0],
                    adjust_end=lambda offset, content: span[1],
                    delimited=True,
                )
        elif isinstance(node, GenericNode) and role is Role.ITSELF and node.pos.is_range:
            self.scope(node, body, delimited=True)
        else:
            body()

    @staticmethod
    def _expr_first(block: Block) -> bool:
        return bool(block.stats) and block.expr.pos.is_range and block.expr.pos.precedes(block.stats[0].pos)

    def _class_body(self, template: Template, trees: Sequence[Node], body: Callable[[], None]) -> None:
        members = [t for t in trees if t.pos.is_range]
        abort_on = min((t.pos.start for t in members), default=None)
        others = [
            t
            for t in [*template.body, *template.parents]
            if t.pos.is_range and not any(t is member for member in trees)
        ]
        start_from = max([template.pos.start, *(t.pos.end for t in others)]) if template.pos.is_range else 0
        block_open = self.options.dialect.block_open

        def adjust_start(offset: int, content: str) -> Optional[int]:
            if block_open is None:
                return None
            limit = len(content) if abort_on is None else abort_on
            return self.visitor.scanner.forwards_to(block_open, limit)(start_from, content)

        self.scope(template, body, indent=True, adjust_start=adjust_start, indent_anchor=abort_on)


class ModifiersContribution(Contribution):
    """Emits modifier tokens; definitions without modifiers stop the chain here."""

    def contribute(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        if role is not Role.MODS or not hasattr(node, "mods"):
            self.delegate(node, role, trees)
            return
        if not _has_modifiers(node):
            return
        if node.pos.is_synthetic:
            self.context.add(FlagFragment(flags=node.mods.token_flags))
        else:
            for flag, pos in sorted(node.mods.positions, key=lambda fp: fp[1].start):
                if pos.is_range:
                    self.context.add(FlagFragment(pos.start, pos.end, pos.source, flags=(flag,)))
        self.delegate(node, role, trees)


class RequisitesContribution(Contribution):
    """Records the connective text a role requires around its fragments."""

    def _requisite(self, pair: tuple[str, str], alternatives: tuple[str, ...] = ()) -> Requisite:
        return Requisite(pair[0], pair[1], alternatives)

    def contribute(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        dialect = self.options.dialect
        resolver = self.context.requisites

        if role is Role.PARAM_LIST and isinstance(node, DefDef):
            resolver.require_before(Requisite(dialect.param_open, dialect.param_open))
            self.delegate(node, role, trees)
            resolver.require_after(Requisite(dialect.param_close, dialect.param_close))
        elif role is Role.PARAM_LIST and isinstance(node, Apply) and self.visitor.needs_parenthesis(node):
            resolver.require_before(Requisite(dialect.param_open, dialect.param_open))
            self.delegate(node, role, trees)
            resolver.require_after(Requisite(dialect.param_close, dialect.param_close))
        elif role is Role.PARAM_LIST and isinstance(node, TypeApply) and node.pos.is_synthetic and node.args:
            resolver.require_before(Requisite(dialect.type_args_open, dialect.type_args_open))
            self.delegate(node, role, trees)
            resolver.require_after(Requisite(dialect.type_args_close, dialect.type_args_close))
        elif role is Role.TPT:
            pair = dialect.return_type_separator if isinstance(node, DefDef) else dialect.type_separator
            resolver.require_before(self._requisite(pair))
            self.delegate(node, role, trees)
        elif role is Role.RHS:
            pair = dialect.body_separator if isinstance(node, DefDef) else dialect.value_separator
            resolver.require_after(self._requisite(pair))
            self.delegate(node, role, trees)
        elif role is Role.MODS:
            resolver.require_after(self._requisite(dialect.modifiers_separator))
            self.delegate(node, role, trees)
        elif role is Role.ARGS_SEPARATOR:
            resolver.require_after(self._requisite(dialect.args_separator))
            self.delegate(node, role, trees)
        elif role is Role.STMTS_SEPARATOR:
            resolver.require_after(self._requisite(dialect.stmts_separator, dialect.statement_terminators))
            self.delegate(node, role, trees)
        elif role is Role.CLASS_BODY and trees:
            self.delegate(node, role, trees)
            if dialect.class_body_terminator is not None:
                resolver.require_after(self._requisite(dialect.class_body_terminator))
        elif role is Role.COND and dialect.cond_open is not None:
            resolver.require_before(Requisite(dialect.cond_open, dialect.cond_open))
            self.delegate(node, role, trees)
            resolver.require_after(Requisite(dialect.cond_close, dialect.cond_close))
        else:
            self.delegate(node, role, trees)


class BasicContribution(Contribution):
    """Descends into the parts of a node. Last handler of the chain."""

    def handle_list(self, trees: Sequence[Node], separator: Role) -> None:
        """Traverse ``trees``, contributing ``separator`` between consecutive ones."""
        kept = [t for t in trees if not_empty_range_or_synthetic(t)]
        for i, tree in enumerate(kept):
            self.visitor.traverse(tree)
            if i < len(kept) - 1:
                self.visitor.handle(tree, separator)

    def contribute(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        visitor = self.visitor

        if role is Role.PARAM_LIST:
            if isinstance(node, DefDef):
                for params in node.vparamss:
                    self.handle_list(params, Role.ARGS_SEPARATOR)
            elif isinstance(node, (Apply, TypeApply)):
                self.handle_list(node.args, Role.ARGS_SEPARATOR)
                if isinstance(node, Apply) and not node.args and node.pos.is_synthetic:
                    dialect = self.options.dialect
                    self.context.add(SourceFragment(literal=dialect.param_open + dialect.param_close))
        elif role is Role.CLASS_PARAMS:
            self.handle_list(trees, Role.ARGS_SEPARATOR)
        elif role is Role.CLASS_BODY:
            self.handle_list(trees, Role.STMTS_SEPARATOR)
        elif role is Role.BLOCK_BODY and isinstance(node, Block):
            if ScopeContribution._expr_first(node):
                self.handle_list([node.expr, *node.stats], Role.STMTS_SEPARATOR)
            else:
                self.handle_list([*node.stats, node.expr], Role.STMTS_SEPARATOR)
        elif role is Role.TPT:
            visitor.traverse(node.tpt)  # type: ignore[attr-defined]
        elif role is Role.RHS:
            visitor.traverse(node.rhs)  # type: ignore[attr-defined]
        elif role is Role.COND and isinstance(node, If):
            visitor.traverse(node.cond)
        elif role is Role.THEN and isinstance(node, If):
            visitor.traverse(node.thenp)
        elif role is Role.ELSE and isinstance(node, If):
            visitor.traverse(node.elsep)
        elif role is Role.ITSELF:
            self._itself(node)

    def _itself(self, node: Node) -> None:
        visitor = self.visitor
        if isinstance(node, (Apply, TypeApply)):
            visitor.traverse(node.fun)
            visitor.handle(node, Role.PARAM_LIST)
        elif isinstance(node, ImplDef):
            visitor.traverse_trees(node.mods.annotations)
            visitor.handle(node, Role.MODS)
            visitor.handle(node, Role.NAME)
            if isinstance(node, ClassDef):
                visitor.traverse_trees(node.tparams)
            visitor.traverse(node.impl)
        elif isinstance(node, Match):
            visitor.traverse(node.selector)
            visitor.traverse_trees(node.cases)
        elif isinstance(node, Module):
            self.handle_list(node.body, Role.STMTS_SEPARATOR)
        elif isinstance(node, GenericNode):
            visitor.traverse_trees(node.items)


class PartitionVisitor(NodeVisitor):
    """Tree walk driving the contribution chain.

    Parameters
    ----------
    root_scope : ScopeFragment
        Scope receiving the top-level fragments
    options : PartitionOptions
        Dialect and indentation settings
    repository : ScopeIndentation, optional
        Original fragments to take indentation from; without it indentation
        is measured relative to the enclosing scope

    """

    def __init__(
        self,
        root_scope: ScopeFragment,
        options: PartitionOptions,
        repository: Optional[ScopeIndentation] = None,
    ):
        self.context = PartitionContext(root_scope)
        self.options = options
        self.repository = repository
        self.scanner = LayoutScanner(options.dialect)
        basic = BasicContribution(self)
        requisites = RequisitesContribution(self, basic)
        modifiers = ModifiersContribution(self, requisites)
        scopes = ScopeContribution(self, modifiers)
        self.chain: Contribution = FragmentContribution(self, scopes)

    def handle(self, node: Node, role: Role, trees: Sequence[Node] = ()) -> None:
        self.chain.contribute(node, role, trees)

    # ------------------------------------------------------------------
    # Indentation and delimiter helpers
    # ------------------------------------------------------------------

    def indentation(self, start: int, node: Node, parent: ScopeFragment) -> int:
        """Indentation of a scope for ``node`` starting at ``start``."""
        if self.repository is not None:
            original = self.repository.scope_indentation(node)
            if original is not None:
                return original
        content = node.pos.source.content
        measured = indentation_length(start, content)
        if parent.source is node.pos.source and indentation_length(parent.start, content) == measured:
            return parent.indentation
        return measured

    def is_operator(self, fun: Node) -> bool:
        if not isinstance(fun, Select):
            return False
        if fun.is_prefix or fun.name in self.options.dialect.word_operators:
            return True
        return _PLAIN_NAME.match(fun.name) is None

    def param_list_span(self, node: Apply) -> Optional[tuple[int, int]]:
        """Offsets of the opening parenthesis and one past the closing one."""
        if self.is_operator(node.fun) or not node.pos.is_range:
            return None
        dialect = self.options.dialect
        content = node.pos.source.content
        close = self.scanner.backwards_skip_layout_to(dialect.param_close)(node.pos.end, content)
        if close is None:
            return None
        args = [a for a in node.args if a.pos.is_range]
        opening: Optional[int] = None
        if node.fun.pos.is_range:
            limit = args[0].pos.start if args else close + 1
            opening = self.scanner.forwards_to(dialect.param_open, limit)(node.fun.pos.end, content)
        elif args:
            opening = self.scanner.backwards_skip_layout_to(dialect.param_open)(args[0].pos.start, content)
        if opening is None or opening > close:
            return None
        return opening, close + 1

    def needs_parenthesis(self, node: Apply) -> bool:
        fun = node.fun
        if self.is_operator(fun):
            return False
        if node.pos.is_synthetic:
            return True
        if isinstance(fun, Select) and fun.qualifier.pos.is_transparent:
            return True
        return self.param_list_span(node) is None

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def traverse(self, node: Node) -> Any:
        """Visit ``node`` unless it is empty or its position must be ignored."""
        if node.is_empty or not range_or_synthetic(node):
            return None
        return node.accept(self)

    def visit_ident(self, node: Ident) -> None:
        self.handle(node, Role.ITSELF)

    def visit_literal(self, node: Literal) -> None:
        self.handle(node, Role.ITSELF)

    def visit_super(self, node: Super) -> None:
        self.handle(node, Role.ITSELF)

    def visit_class_def(self, node: ClassDef) -> None:
        if node.symbol is not None and node.symbol.is_anonymous_class:
            self.generic_visit(node)
        else:
            self.handle(node, Role.ITSELF)

    def visit_module_def(self, node: ModuleDef) -> None:
        self.handle(node, Role.ITSELF)

    def visit_val_def(self, node: ValDef) -> None:
        if not _is_synthetic_symbol(node):
            self.traverse_trees(node.mods.annotations)
            self.handle(node, Role.MODS)
            self.handle(node, Role.ITSELF)
        if not node.tpt.is_empty and range_or_synthetic(node.tpt):
            self.handle(node, Role.TPT)
        if not node.rhs.is_empty:
            self.handle(node, Role.RHS)

    def visit_def_def(self, node: DefDef) -> None:
        pos = node.pos
        if not (pos.is_synthetic or pos.focus >= pos.start):
            self.generic_visit(node)
            return
        self.traverse_trees(node.mods.annotations)
        self.handle(node, Role.MODS)
        self.handle(node, Role.ITSELF)
        self.traverse_trees(node.tparams)
        if node.vparamss:
            self.handle(node, Role.PARAM_LIST)
        if not node.tpt.is_empty and range_or_synthetic(node.tpt):
            self.handle(node, Role.TPT)
        if not node.rhs.is_empty:
            self.handle(node, Role.RHS)

    def visit_type_def(self, node: TypeDef) -> None:
        self.traverse_trees(node.mods.annotations)
        self.handle(node, Role.MODS)
        self.handle(node, Role.ITSELF)
        self.traverse_trees(node.tparams)
        self.traverse(node.rhs)

    def visit_select(self, node: Select) -> None:
        qualifier = node.qualifier
        if qualifier.pos.is_range and node.pos.is_range and qualifier.pos.start > node.pos.start:
            self.handle(node, Role.ITSELF)
            self.traverse(qualifier)
        else:
            self.traverse(qualifier)
            self.handle(node, Role.ITSELF)

    def visit_template(self, node: Template) -> None:
        class_params = [
            t
            for t in node.body
            if isinstance(t, ValDef) and (t.mods.has_flag(Flag.CASE_ACCESSOR) or t.mods.has_flag(Flag.PARAM_ACCESSOR))
        ]
        rest = [t for t in node.body if not any(t is p for p in class_params)]
        early = [t for t in rest if t.pos.is_range and any(t.pos.precedes(p.pos) for p in node.parents)]
        true_body = [t for t in rest if not any(t is e for e in early) and range_or_synthetic(t)]

        self.handle(node, Role.CLASS_PARAMS, class_params)
        self.traverse_trees(early)
        self.traverse_trees(node.parents)
        self.handle(node, Role.CLASS_BODY, true_body)

    def visit_block(self, node: Block) -> None:
        if not node.stats:
            self.generic_visit(node)
        else:
            self.handle(node, Role.BLOCK_BODY)

    def visit_new(self, node: New) -> None:
        self.handle(node, Role.ITSELF)
        self.traverse(node.tpt)

    def visit_match(self, node: Match) -> None:
        self.handle(node, Role.ITSELF)

    def visit_apply(self, node: Apply) -> None:
        self.handle(node, Role.ITSELF)

    def visit_type_apply(self, node: TypeApply) -> None:
        self.handle(node, Role.ITSELF)

    def visit_if(self, node: If) -> None:
        self.handle(node, Role.COND)
        self.handle(node, Role.THEN)
        if not node.elsep.is_empty and range_or_synthetic(node.elsep):
            self.handle(node, Role.ELSE)

    def visit_module(self, node: Module) -> None:
        self.handle(node, Role.ITSELF)

    def visit_generic(self, node: GenericNode) -> None:
        self.handle(node, Role.ITSELF)

    def run(self, root: Node) -> ScopeFragment:
        self.traverse(root)
        self.context.requisites.finish(self.context.root)
        if self.options.check_invariants:
            check_well_formed(self.context.root)
        return self.context.root


def _root_scope(root: Node) -> ScopeFragment:
    source = root.pos.source
    if source is None:
        return ScopeFragment(node=root)
    return ScopeFragment(0, len(source), source, indentation=0, node=root)


def partition(root: Node, options: Optional[PartitionOptions] = None) -> ScopeFragment:
    """Partition ``root`` into a fragment tree.

    Scope indentation is measured relative to the enclosing scope.

    Parameters
    ----------
    root : Node
        Tree to partition, usually a :class:`~refold.ast.Module`
    options : PartitionOptions, optional
        Dialect and indentation settings

    Returns
    -------
    ScopeFragment
        Root scope spanning the whole source file

    Raises
    ------
    PartitionError
        If ``options.check_invariants`` is set and the tree is not well formed

    """
    options = options or PartitionOptions()
    logger.debug("Partitioning %s", type(root).__name__)
    return PartitionVisitor(_root_scope(root), options).run(root)


def essential_fragments(
    root: Node, repository: ScopeIndentation, options: Optional[PartitionOptions] = None
) -> ScopeFragment:
    """Partition an edited tree, taking scope indentation from the original fragments.

    Parameters
    ----------
    root : Node
        Edited tree
    repository : ScopeIndentation
        Fragments of the original tree, usually a
        :class:`~refold.regeneration.repository.FragmentRepository`
    options : PartitionOptions, optional
        Dialect and indentation settings

    Returns
    -------
    ScopeFragment

    """
    options = options or PartitionOptions()
    return PartitionVisitor(_root_scope(root), options, repository).run(root)
