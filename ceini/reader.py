"""
CEINI Reader - Streaming parser for INI text.

Behaviour:
  - Visits every name/value pair in document order with the section that
    was active at that point ("" before the first header)
  - Comment lines are skipped and never change the active section
  - Fail-fast: the first error stops the read, the failing pair is never
    visited, and nothing after it is looked at
  - Errors carry the kind plus the offset, line and column they happened at
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, NamedTuple

from ceini.errors import ParseError
from ceini.grammar import parse_name, parse_section, parse_value
from ceini.scanner import Cursor, advance_to_next_line, consume_equals, skip_to_next_token
from ceini.spec import COMMENT, SECTION_OPEN

_log = logging.getLogger(__name__)

Visitor = Callable[[str, str, str], object]


class Option(NamedTuple):
    """One name/value pair and the section it belongs to."""
    section: str
    name: str
    value: str


def _as_text(text: str | bytes) -> str:
    # Latin-1 maps each byte to one code point, so byte classes still apply
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("latin-1")
    return text


def iter_options(text: str | bytes) -> Iterator[Option]:
    """Yield options in document order. Raises ParseError on the first error."""
    cursor = Cursor(_as_text(text))
    section = ""

    while True:
        cursor = skip_to_next_token(cursor)
        if cursor.at_end:
            return

        try:
            c = cursor.peek()
            if c == SECTION_OPEN:
                section, cursor = parse_section(cursor)
            elif c == COMMENT:
                cursor = advance_to_next_line(cursor)
            else:
                name, cursor = parse_name(cursor)
                cursor = consume_equals(cursor)
                value, cursor = parse_value(cursor)
                yield Option(section, name, value)
        except ParseError as e:
            _log.debug("parse failed at line %d, column %d: %s", e.line, e.column, e.message)
            raise


def parse(text: str | bytes, visitor: Visitor) -> None:
    """Run ``visitor(section, name, value)`` for every pair in ``text``.

    Raises ParseError on the first malformed construct. Pairs before it
    have already been visited; the failing pair is not.
    """
    for option in iter_options(text):
        visitor(*option)


def read(text: str | bytes) -> list[Option]:
    """Parse all options. Returns nothing partial: it either succeeds or raises."""
    return list(iter_options(text))


def check(text: str | bytes) -> ParseError | None:
    """Validate ``text`` without raising. Returns the first error, or None."""
    try:
        for _ in iter_options(text):
            pass
    except ParseError as e:
        return e
    return None
