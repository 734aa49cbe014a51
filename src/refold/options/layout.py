#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/options/layout.py
"""Configuration for partitioning and rendering.

A :class:`LayoutDialect` names the connective tokens of a source language: the
text that must appear between fragments (parentheses around parameters, the
separator before a type, commas between arguments, block delimiters) and the
comment syntax that layout skipping has to respect. Requisite pairs are
``(match_text, write_text)``: the text that satisfies the requirement when it
is already present, and the text inserted when it is not.

Two dialects ship with the library: :data:`BRACE_DIALECT` for brace-delimited
languages and :data:`PYTHON_DIALECT` used by the Python front end.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from refold.constants import (
    DEFAULT_INDENTATION_STEP,
    DEFAULT_NEWLINE,
    MAX_INDENTATION_STEP,
)
from refold.options.base import CloneFrozenMixin

RequisitePair = tuple[str, str]


def _check_pair(name: str, pair: Optional[RequisitePair]) -> None:
    if pair is None:
        return
    if len(pair) != 2 or not pair[0] or not pair[1]:
        raise ValueError(f"{name} must be a (match_text, write_text) pair of non-empty strings, got {pair!r}")


@dataclass(frozen=True)
class LayoutDialect(CloneFrozenMixin):
    """Connective tokens and comment syntax of a source language.

    Parameters
    ----------
    name : str
        Dialect name, used in diagnostics
    param_open, param_close : str
        Parameter list delimiters
    type_args_open, type_args_close : str
        Type argument list delimiters
    type_separator : pair
        Requisite before the declared type of a value
    return_type_separator : pair
        Requisite before the result type of a method
    value_separator : pair
        Requisite between a value definition and its right-hand side
    body_separator : pair
        Requisite between a method header and its body
    args_separator : pair
        Requisite after every argument but the last
    stmts_separator : pair
        Requisite after every statement but the last
    statement_terminators : tuple of str
        Other texts that also separate statements (``;``)
    modifiers_separator : pair
        Requisite after the last modifier
    block_open, block_close : str or None
        Block delimiter characters; ``None`` for indentation-based blocks
    cond_open, cond_close : str or None
        Delimiters around an ``if`` condition, if the language requires them
    class_body_terminator : pair or None
        Requisite after a class body
    line_comment : str or None
        Line comment introducer
    block_comment : pair of str or None
        Block comment delimiters
    word_operators : frozenset of str
        Operators spelled as words, which are printed with surrounding spaces
    keywords : dict
        Keywords used when printing synthetic definitions, keyed by node kind

    """

    name: str = "braces"
    param_open: str = "("
    param_close: str = ")"
    type_args_open: str = "["
    type_args_close: str = "]"
    type_separator: RequisitePair = (":", ": ")
    return_type_separator: RequisitePair = (":", ": ")
    value_separator: RequisitePair = ("=", " = ")
    body_separator: RequisitePair = ("=", " = ")
    args_separator: RequisitePair = (",", ", ")
    stmts_separator: RequisitePair = ("\n", "\n")
    statement_terminators: tuple[str, ...] = (";",)
    modifiers_separator: RequisitePair = (" ", " ")
    block_open: Optional[str] = "{"
    block_close: Optional[str] = "}"
    cond_open: Optional[str] = "("
    cond_close: Optional[str] = ")"
    class_body_terminator: Optional[RequisitePair] = ("\n", "\n")
    line_comment: Optional[str] = "//"
    block_comment: Optional[tuple[str, str]] = ("/*", "*/")
    word_operators: frozenset[str] = frozenset()
    keywords: dict[str, str] = field(
        default_factory=lambda: {
            "def": "def",
            "val": "val",
            "class": "class",
            "object": "object",
            "type": "type",
            "new": "new",
            "super": "super",
        }
    )

    def __post_init__(self) -> None:
        """Validate the requisite pairs and delimiters.

        Raises
        ------
        ValueError
            If a requisite pair is malformed or a delimiter is not a single character.

        """
        for pair_name in (
            "type_separator",
            "return_type_separator",
            "value_separator",
            "body_separator",
            "args_separator",
            "stmts_separator",
            "modifiers_separator",
            "class_body_terminator",
        ):
            _check_pair(pair_name, getattr(self, pair_name))
        for char_name in ("block_open", "block_close", "cond_open", "cond_close"):
            value = getattr(self, char_name)
            if value is not None and len(value) != 1:
                raise ValueError(f"{char_name} must be a single character, got {value!r}")
        if (self.cond_open is None) != (self.cond_close is None):
            raise ValueError("cond_open and cond_close must both be set or both be None")

    def keyword(self, kind: str) -> str:
        return self.keywords.get(kind, kind)


BRACE_DIALECT = LayoutDialect()

PYTHON_DIALECT = LayoutDialect(
    name="python",
    return_type_separator=("->", " -> "),
    body_separator=(":", ":"),
    block_open=":",
    block_close=None,
    cond_open=None,
    cond_close=None,
    class_body_terminator=None,
    line_comment="#",
    block_comment=None,
    word_operators=frozenset({"and", "or", "not", "in", "is", "not in", "is not"}),
    keywords={"def": "def", "class": "class", "val": "", "type": "type", "new": "", "super": "super()"},
)


@dataclass(frozen=True)
class PartitionOptions(CloneFrozenMixin):
    """Options for :func:`refold.partition`.

    Parameters
    ----------
    dialect : LayoutDialect
        Connective tokens used for requisites
    indentation_step : int
        Indentation added for each synthetic nested scope
    check_invariants : bool
        Verify fragment-tree well-formedness after partitioning

    """

    dialect: LayoutDialect = field(
        default=BRACE_DIALECT,
        metadata={"help": "Connective tokens and comment syntax of the source language", "importance": "core"},
    )
    indentation_step: int = field(
        default=DEFAULT_INDENTATION_STEP,
        metadata={"help": "Indentation added for each synthetic nested scope", "type": int},
    )
    check_invariants: bool = field(
        default=False,
        metadata={"help": "Raise PartitionError when the fragment tree is not well formed", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If ``indentation_step`` is outside ``[0, MAX_INDENTATION_STEP]``.

        """
        if not 0 <= self.indentation_step <= MAX_INDENTATION_STEP:
            raise ValueError(
                f"indentation_step must be between 0 and {MAX_INDENTATION_STEP}, got {self.indentation_step}"
            )


@dataclass(frozen=True)
class RenderOptions(PartitionOptions):
    """Options for :func:`refold.render`.

    Parameters
    ----------
    newline : str
        Line break written into re-indented synthetic scopes
    strict : bool
        Raise RenderingError for synthetic nodes that cannot be printed instead
        of logging a warning and emitting nothing

    """

    newline: str = field(
        default=DEFAULT_NEWLINE,
        metadata={"help": "Line break used inside synthetic scopes"},
    )
    strict: bool = field(
        default=False,
        metadata={"help": "Raise on unprintable synthetic nodes", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and the newline sequence."""
        super().__post_init__()
        if self.newline not in ("\n", "\r\n", "\r"):
            raise ValueError(f"newline must be one of '\\n', '\\r\\n', '\\r', got {self.newline!r}")
