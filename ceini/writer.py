"""
CEINI Writer - Rebuilds grouped INI text from an indexed option source.

The writer never sees a collection. It is given a count and an accessor
``accessor(i) -> (section, name, value)`` and recovers the grouping itself:

  1. The first unwritten index names the section for this pass
  2. Emit "[section]"
  3. Emit every unwritten option of that section, in index order
  4. Emit a blank separator line, then start the next pass

Sections come out in first-seen order and options keep their index order.
The accessor is called several times per index, so it must be pure.
"""

from __future__ import annotations

import io
import logging
from typing import Callable, Sequence

from ceini.errors import ErrorKind, WriteError
from ceini.spec import (
    MAX_SECTION_LENGTH, MAX_NAME_LENGTH, MAX_VALUE_LENGTH, MAX_WRITE_OPTIONS,
    DEFAULT_WRITE_BUFFER, SECTION_OPEN, SECTION_CLOSE, EQUALS, NEWLINE,
)

_log = logging.getLogger(__name__)

Accessor = Callable[[int], tuple[str, str, str]]


class OutputBuffer:
    """Bounded text buffer. Holds at most ``max_length - 1`` characters."""

    def __init__(self, max_length: int) -> None:
        if max_length < 1:
            raise ValueError(f"max_length must be at least 1, got {max_length}")
        self.max_length = max_length
        self._buf = io.StringIO()
        self._length = 0

    @property
    def remaining(self) -> int:
        return self.max_length - 1 - self._length

    def append(self, text: str) -> None:
        """Append ``text`` whole, or raise BUFFER_FULL and append nothing."""
        if len(text) > self.remaining:
            raise WriteError(
                ErrorKind.BUFFER_FULL,
                f"write buffer full ({self._length} of {self.max_length - 1} chars used, "
                f"{len(text)} more needed)",
            )
        self._buf.write(text)
        self._length += len(text)

    def getvalue(self) -> str:
        return self._buf.getvalue()

    def __len__(self) -> int:
        return self._length


def _fetch(accessor: Accessor, index: int) -> tuple[str, str, str]:
    section, name, value = accessor(index)
    for token, capacity, kind in (
        (section, MAX_SECTION_LENGTH, ErrorKind.SECTION_TOO_LONG),
        (name, MAX_NAME_LENGTH, ErrorKind.NAME_TOO_LONG),
        (value, MAX_VALUE_LENGTH, ErrorKind.VALUE_TOO_LONG),
    ):
        if len(token) > capacity - 1:
            raise WriteError(kind, f"{kind.value}: {token!r} (max {capacity - 1} chars)", index=index)
    return section, name, value


def write(buffer: OutputBuffer, option_count: int, accessor: Accessor) -> None:
    """Write ``option_count`` options from ``accessor`` into ``buffer``, grouped by section.

    Raises WriteError: TOO_MANY_OPTIONS before the accessor is ever called,
    BUFFER_FULL when the output does not fit, *_TOO_LONG for oversized tokens.
    """
    if option_count > MAX_WRITE_OPTIONS:
        _log.debug("refusing to write %d options", option_count)
        raise WriteError(
            ErrorKind.TOO_MANY_OPTIONS,
            f"too many write options: {option_count} (max {MAX_WRITE_OPTIONS})",
        )

    written = [False] * max(option_count, 0)

    while True:
        active = next((i for i, done in enumerate(written) if not done), None)
        if active is None:
            break

        write_section = _fetch(accessor, active)[0]
        try:
            buffer.append(f"{SECTION_OPEN}{write_section}{SECTION_CLOSE}{NEWLINE}")

            for i in range(option_count):
                if written[i]:
                    continue
                section, name, value = _fetch(accessor, i)
                if section != write_section:
                    continue
                buffer.append(f"{name}{EQUALS}{value}{NEWLINE}")
                written[i] = True

            buffer.append(NEWLINE)
        except WriteError as e:
            _log.debug("write failed in section %r: %s", write_section, e)
            raise


def dumps(options: Sequence[tuple[str, str, str]], max_length: int = DEFAULT_WRITE_BUFFER) -> str:
    """Serialize a sequence of (section, name, value) triples to INI text."""
    buffer = OutputBuffer(max_length)
    write(buffer, len(options), options.__getitem__)
    return buffer.getvalue()
