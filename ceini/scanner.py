"""
CEINI Scanner - Cursor primitives shared by every grammar production.

A Cursor never owns or changes the text; each step returns a new Cursor.
"""

from __future__ import annotations

from dataclasses import dataclass

from ceini.errors import ErrorKind, ParseError
from ceini.spec import EQUALS, NEWLINE, is_line_space, is_space


@dataclass(frozen=True)
class Cursor:
    """Read position in a source text."""
    text: str
    pos: int = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        """Character under the cursor, or "" at end of input."""
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def advance(self, n: int = 1) -> Cursor:
        return Cursor(self.text, min(self.pos + n, len(self.text)))

    def fail(self, kind: ErrorKind, message: str = "") -> ParseError:
        """Build a ParseError pointing at this position."""
        return ParseError(kind, message, offset=self.pos, text=self.text)


def _skip_while(cursor: Cursor, predicate) -> Cursor:
    text, pos = cursor.text, cursor.pos
    end = len(text)
    while pos < end and predicate(text[pos]):
        pos += 1
    return cursor if pos == cursor.pos else Cursor(text, pos)


def skip_line_whitespace(cursor: Cursor) -> Cursor:
    """Skip spaces and control characters, stopping at a newline."""
    return _skip_while(cursor, is_line_space)


def skip_to_next_token(cursor: Cursor) -> Cursor:
    """Skip spaces and control characters, newlines included."""
    return _skip_while(cursor, is_space)


def advance_to_next_line(cursor: Cursor) -> Cursor:
    """Move past the rest of the line and the run of newlines after it."""
    cursor = _skip_while(cursor, lambda c: c != NEWLINE)
    return _skip_while(cursor, lambda c: c == NEWLINE)


def consume_equals(cursor: Cursor) -> Cursor:
    """Consume ``ws? '=' ws?``. Raises EQUALITY_NOT_FOUND otherwise."""
    cursor = skip_line_whitespace(cursor)
    if cursor.peek() != EQUALS:
        raise cursor.fail(ErrorKind.EQUALITY_NOT_FOUND, "equality not found")
    return skip_line_whitespace(cursor.advance())
