"""
CEINI Grammar - Section, name and value productions.

Each production takes a Cursor, reads one token into a fresh TokenBuffer
and returns ``(token, cursor)``. On failure it raises ParseError and the
cursor it was given is left untouched.
"""

from __future__ import annotations

from ceini.errors import ErrorKind
from ceini.scanner import Cursor
from ceini.spec import (
    MAX_SECTION_LENGTH, MAX_NAME_LENGTH, MAX_VALUE_LENGTH,
    SECTION_OPEN, SECTION_CLOSE, EQUALS, QUOTE, BACKSLASH,
    SECTION_CHARS, NAME_CHARS, VALUE_CHARS, VALUE_TERMINATORS, ESCAPES,
)


class TokenBuffer:
    """Fixed-capacity token accumulator.

    ``capacity`` includes the terminator slot, so at most ``capacity - 1``
    characters fit. A new buffer is used for every token.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._chars: list[str] = []

    def append(self, c: str) -> bool:
        """Add a character. Returns False if the buffer is full."""
        if len(self._chars) >= self.capacity - 1:
            return False
        self._chars.append(c)
        return True

    def rstrip_spaces(self) -> None:
        while self._chars and self._chars[-1] == " ":
            self._chars.pop()

    def __len__(self) -> int:
        return len(self._chars)

    def getvalue(self) -> str:
        return "".join(self._chars)


def parse_section(cursor: Cursor) -> tuple[str, Cursor]:
    """``'[' sectionchar* ']'``. An empty header names section ``""``."""
    if cursor.peek() != SECTION_OPEN:
        raise cursor.fail(ErrorKind.MALFORMED_SECTION, "start of section not found")
    cursor = cursor.advance()

    out = TokenBuffer(MAX_SECTION_LENGTH)
    while not cursor.at_end and cursor.peek() != SECTION_CLOSE:
        c = cursor.peek()
        if c not in SECTION_CHARS:
            raise cursor.fail(ErrorKind.MALFORMED_SECTION, f"invalid character in section: {c!r}")
        if not out.append(c):
            raise cursor.fail(
                ErrorKind.SECTION_TOO_LONG,
                f"section too long (max {MAX_SECTION_LENGTH - 1} chars)",
            )
        cursor = cursor.advance()

    if cursor.peek() != SECTION_CLOSE:
        raise cursor.fail(ErrorKind.MALFORMED_SECTION, "end of section not found")

    return out.getvalue(), cursor.advance()


def parse_name(cursor: Cursor) -> tuple[str, Cursor]:
    """``namechar+`` terminated by a space or '='."""
    out = TokenBuffer(MAX_NAME_LENGTH)
    while not cursor.at_end and cursor.peek() not in (" ", EQUALS):
        c = cursor.peek()
        if c not in NAME_CHARS:
            raise cursor.fail(ErrorKind.MALFORMED_NAME, f"invalid character in name: {c!r}")
        if not out.append(c):
            raise cursor.fail(
                ErrorKind.NAME_TOO_LONG,
                f"name too long (max {MAX_NAME_LENGTH - 1} chars)",
            )
        cursor = cursor.advance()

    if not len(out):
        raise cursor.fail(ErrorKind.EMPTY_NAME, "name too short")

    return out.getvalue(), cursor


def parse_unquoted_value(cursor: Cursor) -> tuple[str, Cursor]:
    """Everything up to a newline, CR or ';'. Trailing spaces are trimmed."""
    out = TokenBuffer(MAX_VALUE_LENGTH)
    while not cursor.at_end and cursor.peek() not in VALUE_TERMINATORS:
        c = cursor.peek()
        if c not in VALUE_CHARS:
            raise cursor.fail(ErrorKind.MALFORMED_VALUE, f"invalid character in value: {c!r}")
        # Trailing spaces count until trimmed, so they can overflow too
        if not out.append(c):
            raise cursor.fail(
                ErrorKind.VALUE_TOO_LONG,
                f"value too long or too many trailing spaces (max {MAX_VALUE_LENGTH - 1} chars)",
            )
        cursor = cursor.advance()

    out.rstrip_spaces()
    return out.getvalue(), cursor


def parse_quoted_value(cursor: Cursor) -> tuple[str, Cursor]:
    """``'"' (escaped | printable | '\\t')* '"'``, kept verbatim."""
    if cursor.peek() != QUOTE:
        raise cursor.fail(ErrorKind.MALFORMED_VALUE, "starting quote not found")
    cursor = cursor.advance()

    out = TokenBuffer(MAX_VALUE_LENGTH)
    while not cursor.at_end and cursor.peek() not in VALUE_TERMINATORS and cursor.peek() != QUOTE:
        start = cursor
        c = cursor.peek()
        if c == BACKSLASH:
            escaped = cursor.advance().peek()
            if escaped not in ESCAPES:
                raise cursor.fail(
                    ErrorKind.INVALID_ESCAPE,
                    f"invalid escape sequence: \\{escaped}" if escaped else "escape at end of input",
                )
            c = ESCAPES[escaped]
            cursor = cursor.advance(2)
        else:
            if c not in VALUE_CHARS:
                raise cursor.fail(ErrorKind.MALFORMED_VALUE, f"invalid character in value: {c!r}")
            cursor = cursor.advance()

        if not out.append(c):
            raise start.fail(
                ErrorKind.VALUE_TOO_LONG,
                f"value too long (max {MAX_VALUE_LENGTH - 1} chars)",
            )

    if cursor.peek() != QUOTE:
        raise cursor.fail(ErrorKind.UNTERMINATED_QUOTE, "ending quote not found")

    return out.getvalue(), cursor.advance()


def parse_value(cursor: Cursor) -> tuple[str, Cursor]:
    if cursor.peek() == QUOTE:
        return parse_quoted_value(cursor)
    return parse_unquoted_value(cursor)
