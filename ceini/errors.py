"""
CEINI Errors - Structured failures for the reader and writer.

Every failure is fail-fast and carries an ErrorKind. Callers branch on
``err.kind``; the message is for humans only.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    # Structural
    MALFORMED_SECTION = "malformed section"
    EQUALITY_NOT_FOUND = "equality not found"
    UNTERMINATED_QUOTE = "unterminated quote"

    # Content
    MALFORMED_NAME = "malformed name"
    MALFORMED_VALUE = "malformed value"
    INVALID_ESCAPE = "invalid escape"
    EMPTY_NAME = "empty name"

    # Capacity
    SECTION_TOO_LONG = "section too long"
    NAME_TOO_LONG = "name too long"
    VALUE_TOO_LONG = "value too long"
    TOO_MANY_OPTIONS = "too many options"
    BUFFER_FULL = "buffer full"


class IniError(ValueError):
    """Base class for all CEINI failures."""

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        self.kind = kind
        self.message = message or kind.value
        super().__init__(self.message)


class ParseError(IniError):
    """Raised by the reader. Knows where in the text it stopped."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        offset: int = 0,
        text: str | None = None,
    ) -> None:
        super().__init__(kind, message)
        self.offset = offset
        self.line, self.column = _locate(text, offset) if text is not None else (0, 0)

    def __str__(self) -> str:
        if self.line:
            return f"line {self.line}, column {self.column}: {self.message}"
        return f"offset {self.offset}: {self.message}"


class WriteError(IniError):
    """Raised by the writer. ``index`` is the option being written, if any."""

    def __init__(self, kind: ErrorKind, message: str = "", index: int | None = None) -> None:
        super().__init__(kind, message)
        self.index = index

    def __str__(self) -> str:
        if self.index is not None:
            return f"option {self.index}: {self.message}"
        return self.message


def _locate(text: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of an offset."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    start = text.rfind("\n", 0, offset) + 1
    return line, offset - start + 1
