"""
CEINI Converters - Convert option lists to/from JSON and CSV.

Every format goes both ways:
  - to_json / from_json
  - to_csv / from_csv

Options travel as flat (section, name, value) triples; INI text itself is
handled by ceini.reader.read and ceini.writer.dumps.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Sequence

from ceini.reader import Option
from ceini.spec import MAX_FILE_SIZE

CSV_HEADER = ["section", "name", "value"]


# =============================================================================
# JSON
# =============================================================================

def to_json(options: Sequence[Option], indent: int = 2) -> str:
    """Convert options to a JSON array of {section, name, value} objects."""
    data: list[dict[str, Any]] = [
        {"section": o.section, "name": o.name, "value": o.value}
        for o in options
    ]
    return json.dumps(data, indent=indent, ensure_ascii=False)


def from_json(json_str: str) -> list[Option]:
    """Read options from a JSON array.

    Validates the structure to prevent type confusion: every entry must
    be an object whose section, name and value are strings.
    """
    data = json.loads(json_str)

    if not isinstance(data, list):
        raise ValueError("Invalid options JSON: expected a JSON array at top level")

    options: list[Option] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid options JSON: entry {i} is not an object")
        section = entry.get("section", "")
        name = entry.get("name")
        value = entry.get("value", "")
        if not all(isinstance(v, str) for v in (section, name, value)):
            raise ValueError(f"Invalid options JSON: entry {i} needs string section, name and value")
        options.append(Option(section, name, value))

    return options


# =============================================================================
# CSV
# =============================================================================

def _escape_csv_formula(value: str) -> str:
    """Escape CSV formula injection characters (=, +, -, @, tab, CR, ;).

    Checks the first non-whitespace character so spreadsheet applications
    do not interpret cell content as formulas. A leading quote is escaped
    too, so every escaped cell starts with one and no plain cell does.
    """
    stripped = value.lstrip()
    if stripped and stripped[0] in ("=", "+", "-", "@", "\t", "\r", ";", "'"):
        return "'" + value
    return value


def to_csv(options: Sequence[Option]) -> str:
    """
    Convert options to CSV.
    Row format: section, name, value (with a header row).

    Security: Escapes formula injection characters to prevent spreadsheet attacks.
    """
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_HEADER)
    for o in options:
        writer.writerow([
            _escape_csv_formula(o.section),
            _escape_csv_formula(o.name),
            _escape_csv_formula(o.value),
        ])
    return buf.getvalue()


def _unescape_csv_formula(value: str) -> str:
    return value[1:] if value.startswith("'") else value


def from_csv(csv_str: str) -> list[Option]:
    """Read options from CSV produced by to_csv (header row required)."""
    old_limit = csv.field_size_limit()
    csv.field_size_limit(MAX_FILE_SIZE)
    try:
        reader = csv.reader(io.StringIO(csv_str))
        header = next(reader, None)
        if header != CSV_HEADER:
            raise ValueError(f"Invalid options CSV: expected header {','.join(CSV_HEADER)}")

        options: list[Option] = []
        for row in reader:
            if not row:
                continue
            if len(row) != 3:
                raise ValueError(f"Invalid options CSV: line {reader.line_num} has {len(row)} fields")
            section, name, value = (_unescape_csv_formula(v) for v in row)
            options.append(Option(section, name, value))
        return options
    finally:
        csv.field_size_limit(old_limit)


# =============================================================================
# Auto-detect and convert
# =============================================================================

CONVERTERS_TO = {
    "json": to_json,
    "csv": to_csv,
}

CONVERTERS_FROM = {
    "json": from_json,
    "csv": from_csv,
}


def convert_to(options: Sequence[Option], fmt: str) -> str:
    """Convert options to the specified format."""
    converter = CONVERTERS_TO.get(fmt.lower())
    if converter is None:
        raise ValueError(f"Unknown format: {fmt}. Supported: {list(CONVERTERS_TO.keys())}")
    return converter(options)


def convert_from(data: str, fmt: str) -> list[Option]:
    """Read options from data in the specified format."""
    converter = CONVERTERS_FROM.get(fmt.lower())
    if converter is None:
        raise ValueError(f"Unknown format: {fmt}. Supported: {list(CONVERTERS_FROM.keys())}")
    return converter(data)
