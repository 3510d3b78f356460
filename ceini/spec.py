"""
CEINI Format Specification
==========================

Layout:
    ; comment                    <- Comment line (ignored, section unchanged)
    name = value                 <- Option before any header (section "")
    [section]                    <- Section header
    name = value                 <- Option (unquoted, trailing spaces trimmed)
    name = "  value  "           <- Option (quoted, kept verbatim)
    name = value ; comment       <- Inline comment ends an unquoted value

Grammar:
    document    := (blank | comment | section | pair)*
    section     := '[' sectionchar* ']'      ; '[]' is section ""
    sectionchar := alnum | '-' | '_' | ' '
    pair        := name ws? '=' ws? value
    name        := namechar+            ; namechar = alnum | '.' | '-' | '_'
    value       := unquoted | quoted
    unquoted    := (printable | '\\t')*  up to [\\n\\r;]
    quoted      := '"' (escaped | printable | '\\t')* '"'   ; no ';' or '\\r'
    escaped     := '\\' ('"' | '\\' | 't' | 'n')
    comment     := ';' .* '\\n'

Design Decisions:
    - Character classes are byte oriented over ASCII; anything above 0x7f
      is neither printable, alphanumeric nor a control character
    - Token capacities include a terminator slot, so usable lengths are
      one less than the capacity (31 / 31 / 63)
    - Only unquoted values are trimmed; quoting keeps surrounding spaces
    - The writer never quotes values. Use escape_value() on the way in
      when a value must survive a round-trip
    - A ';' or carriage return ends a value even inside quotes, so values
      holding one cannot be written at all
    - Options in section "" are written under an empty '[]' header

Writing:
    - Options are grouped by section in first-seen order
    - At most MAX_WRITE_OPTIONS options per write
    - Output must fit in max_length - 1 characters
"""

from ceini.errors import ErrorKind, WriteError

# Token capacities (including terminator slot)
MAX_SECTION_LENGTH = 32
MAX_NAME_LENGTH = 32
MAX_VALUE_LENGTH = 64

# Options accepted by a single write pass
MAX_WRITE_OPTIONS = 256

# CLI limits
MAX_FILE_SIZE = 10 * 1024 * 1024   # 10MB max input for the CLI
DEFAULT_WRITE_BUFFER = 64 * 1024   # Output capacity for `ceini format`

# Syntax characters
SECTION_OPEN = "["
SECTION_CLOSE = "]"
COMMENT = ";"
EQUALS = "="
QUOTE = '"'
BACKSLASH = "\\"
NEWLINE = "\n"
CARRIAGE_RETURN = "\r"

EXTENSION = ".ini"

# Character classes (ASCII only)
_DIGITS = "0123456789"
_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

ALNUM_CHARS = frozenset(_DIGITS + _LETTERS)
SECTION_CHARS = ALNUM_CHARS | frozenset("-_ ")
NAME_CHARS = ALNUM_CHARS | frozenset(".-_")
PRINTABLE_CHARS = frozenset(chr(c) for c in range(0x20, 0x7F))
CONTROL_CHARS = frozenset(chr(c) for c in range(0x00, 0x20)) | {"\x7f"}
VALUE_CHARS = PRINTABLE_CHARS | {"\t"}

# Characters that end a value (unquoted or quoted)
VALUE_TERMINATORS = frozenset({NEWLINE, CARRIAGE_RETURN, COMMENT})

# Escape sequences accepted inside quoted values: escaped char -> result
ESCAPES = {
    '"': '"',
    "\\": "\\",
    "t": "\t",
    "n": "\n",
}

# Reverse table used by escape_value (order matters: backslash first)
_ESCAPE_OUT = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\t", "\\t"),
    ("\n", "\\n"),
)


def is_line_space(c: str) -> bool:
    """Space or control character other than newline."""
    return c != NEWLINE and (c == " " or c in CONTROL_CHARS)


def is_space(c: str) -> bool:
    """Space or any control character, newlines included."""
    return c == " " or c in CONTROL_CHARS


def needs_quoting(value: str) -> bool:
    """Check if a value would be altered by an unquoted read-back.

    True for values with a comment start, quote, equals sign, line break,
    or leading/trailing whitespace. Values with ';' or a carriage return
    need quoting but escape_value() rejects them.
    """
    if not value:
        return False
    if value[0] in (" ", "\t", QUOTE) or value[-1] == " ":
        return True
    return any(c in (COMMENT, QUOTE, EQUALS, NEWLINE, CARRIAGE_RETURN) for c in value)


def escape_value(value: str) -> str:
    """Quote a value so the reader returns it unchanged.

    Raises WriteError (MALFORMED_VALUE) for ';' and carriage returns:
    both end a value even inside quotes and have no escape sequence.
    """
    for c in (COMMENT, CARRIAGE_RETURN):
        if c in value:
            raise WriteError(
                ErrorKind.MALFORMED_VALUE,
                f"value cannot be quoted, it contains {c!r}",
            )
    for raw, escaped in _ESCAPE_OUT:
        value = value.replace(raw, escaped)
    return QUOTE + value + QUOTE
