#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/source_helpers.py
"""Layout skipping over a character buffer.

The partitioner adjusts node spans to include delimiters that the parser
leaves outside of them (the braces of a block, the parentheses of an argument
list). The helpers in this module locate such a delimiter by skipping layout,
meaning whitespace and comments, from an offset.

Adjustment functions have the signature ``(offset, content) -> Optional[int]``
and return ``None`` when the expected delimiter is not where it should be.

"""

from __future__ import annotations

import re
from typing import Callable, Optional

from refold.constants import INLINE_WHITESPACE
from refold.options.layout import LayoutDialect

Adjustment = Callable[[int, str], Optional[int]]

_IDENTIFIER = re.compile(r"`[^`\n]*`|[^\W\d]\w*|[^\w\s()\[\]{},;.`'\"]+")


def no_change(offset: int, content: str) -> Optional[int]:
    return offset


def line_start(offset: int, content: str) -> int:
    """Offset of the first character of the line containing ``offset``."""
    return max(content.rfind("\n", 0, offset), content.rfind("\r", 0, offset)) + 1


def indentation_length(offset: int, content: str) -> int:
    """Length of the leading whitespace of the line containing ``offset``."""
    start = line_start(offset, content)
    i = start
    while i < len(content) and content[i] in INLINE_WHITESPACE:
        i += 1
    return i - start


def identifier_end(offset: int, content: str) -> Optional[int]:
    """End of the identifier or operator token starting at ``offset``, if any."""
    match = _IDENTIFIER.match(content, offset)
    if match is None:
        return None
    return match.end()


class LayoutScanner:
    """Comment-aware layout skipping for one dialect.

    Parameters
    ----------
    dialect : LayoutDialect
        Provides the line and block comment syntax

    """

    def __init__(self, dialect: LayoutDialect):
        self.dialect = dialect

    def _comment_start_in_line(self, start: int, end: int, content: str) -> Optional[int]:
        """Offset of a line comment in ``content[start:end]``, ignoring quoted text."""
        marker = self.dialect.line_comment
        if not marker:
            return None
        quote: Optional[str] = None
        i = start
        while i < end:
            c = content[i]
            if quote is not None:
                if c == "\\":
                    i += 2
                    continue
                if c == quote:
                    quote = None
            elif c in "\"'":
                quote = c
            elif content.startswith(marker, i):
                return i
            i += 1
        return None

    def skip_layout(self, offset: int, content: str, newlines: bool = True) -> int:
        """Skip whitespace and comments forward from ``offset``.

        With ``newlines=False`` a line break stops the scan; a line comment is
        skipped up to, but not including, its line break.
        """
        i = offset
        n = len(content)
        block = self.dialect.block_comment
        line = self.dialect.line_comment
        while i < n:
            c = content[i]
            if c in INLINE_WHITESPACE or (newlines and c in "\r\n\f"):
                i += 1
            elif line and content.startswith(line, i):
                while i < n and content[i] not in "\r\n":
                    i += 1
            elif block and content.startswith(block[0], i):
                close = content.find(block[1], i + len(block[0]))
                if close < 0:
                    return n
                i = close + len(block[1])
            else:
                break
        return i

    def skip_layout_backwards(self, offset: int, content: str) -> int:
        """Skip whitespace and comments backwards from ``offset``.

        Returns the offset just after the last character that is not layout.
        """
        i = offset
        block = self.dialect.block_comment
        while i > 0:
            c = content[i - 1]
            if c in INLINE_WHITESPACE or c in "\r\n\f":
                if c in "\r\n":
                    # a line comment ending here is layout too
                    start = line_start(i - 1, content)
                    comment = self._comment_start_in_line(start, i - 1, content)
                    if comment is not None:
                        i = comment
                        continue
                i -= 1
            elif block and content.endswith(block[1], 0, i):
                opening = content.rfind(block[0], 0, i - len(block[1]))
                if opening < 0:
                    return i
                i = opening
            else:
                start = line_start(i - 1, content)
                comment = self._comment_start_in_line(start, i, content)
                if comment is not None:
                    i = comment
                    continue
                break
        return i

    def skip_layout_to(self, char: str) -> Adjustment:
        """Adjustment that skips layout forward and expects ``char``.

        The result is the offset just after ``char``. A newline target only
        skips layout on the current line.
        """

        def adjust(offset: int, content: str) -> Optional[int]:
            i = self.skip_layout(offset, content, newlines=char not in "\r\n")
            if i < len(content) and content[i] == char:
                return i + 1
            return None

        return adjust

    def backwards_skip_layout_to(self, char: str) -> Adjustment:
        """Adjustment that skips layout backwards and expects ``char``.

        The result is the offset of ``char`` itself.
        """

        def adjust(offset: int, content: str) -> Optional[int]:
            if char in "\r\n":
                i = offset
                while i > 0 and content[i - 1] in INLINE_WHITESPACE:
                    i -= 1
            else:
                i = self.skip_layout_backwards(offset, content)
            if i > 0 and content[i - 1] == char:
                return i - 1
            return None

        return adjust

    def forwards_to(self, char: str, abort_on: int) -> Adjustment:
        """Adjustment that searches ``char`` forward, giving up at ``abort_on``.

        The result is the offset of ``char``.
        """

        def adjust(offset: int, content: str) -> Optional[int]:
            i = offset
            limit = min(abort_on, len(content))
            while i < limit:
                i = self.skip_layout(i, content)
                if i >= limit:
                    return None
                if content[i] == char:
                    return i
                i += 1
            return None

        return adjust


def either(first: Adjustment, second: Adjustment) -> Adjustment:
    """Adjustment trying ``first`` and then ``second``."""

    def adjust(offset: int, content: str) -> Optional[int]:
        result = first(offset, content)
        return second(offset, content) if result is None else result

    return adjust


def shifted(adjustment: Adjustment, delta: int) -> Adjustment:
    def adjust(offset: int, content: str) -> Optional[int]:
        result = adjustment(offset, content)
        return None if result is None else result + delta

    return adjust
