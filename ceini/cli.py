"""
CEINI CLI - Command-line interface for CEINI files.

Commands:
  ceini read     - Print every option as section<TAB>name<TAB>value
  ceini validate - Check a file against the grammar and report where it fails
  ceini format   - Re-write a file with options grouped by section
  ceini convert  - Convert to/from JSON, CSV
  ceini view     - View a file in the TUI
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from ceini.errors import IniError

LOG_LEVELS = [
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]


def _load(path: str) -> bytes:
    """Read an input file, enforcing the size limit."""
    from ceini.spec import MAX_FILE_SIZE

    input_path = Path(path)
    if not input_path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    file_size = input_path.stat().st_size
    if file_size > MAX_FILE_SIZE:
        print(
            f"Error: File size {file_size} exceeds maximum {MAX_FILE_SIZE} bytes",
            file=sys.stderr,
        )
        sys.exit(1)
    return input_path.read_bytes()


def _emit(text: str, output: str | None) -> None:
    """Write ``text`` to ``output`` or stdout."""
    if output:
        # Reject path traversal in output path
        if ".." in Path(output).parts:
            print("Error: Output path must not contain '..' (path traversal)", file=sys.stderr)
            sys.exit(1)
        Path(output).write_text(text, encoding="utf-8")
    else:
        print(text, end="")


def _default_max_length() -> int:
    from ceini.spec import DEFAULT_WRITE_BUFFER

    raw = os.environ.get("CEINI_MAX_LENGTH", "")
    if not raw:
        return DEFAULT_WRITE_BUFFER
    try:
        return int(raw)
    except ValueError:
        print(f"Error: CEINI_MAX_LENGTH must be an integer, got {raw!r}", file=sys.stderr)
        sys.exit(1)


def _quoted(options) -> list[tuple[str, str, str]]:
    """Quote every value that would not read back unchanged."""
    from ceini.errors import WriteError
    from ceini.spec import escape_value, needs_quoting

    rows = []
    for i, o in enumerate(options):
        value = o.value
        if needs_quoting(value):
            try:
                value = escape_value(value)
            except WriteError as e:
                raise WriteError(e.kind, e.message, index=i) from e
        rows.append((o.section, o.name, value))
    return rows


def cmd_read(args: argparse.Namespace) -> None:
    """Print the options of a file, optionally only one section."""
    from ceini.reader import read

    options = read(_load(args.path))
    if args.section is not None:
        options = [o for o in options if o.section == args.section]
        if not options:
            print(f"Section '{args.section}' not found.", file=sys.stderr)
            sys.exit(1)
    for o in options:
        value = repr(o.value) if args.repr else o.value
        print(f"{o.section}\t{o.name}\t{value}")


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a file."""
    from ceini.reader import check, read

    data = _load(args.path)
    err = check(data)
    if err is not None:
        print(f"FAIL: {args.path}: line {err.line}, column {err.column}: {err.kind.value}: {err.message}")
        sys.exit(1)

    options = read(data)
    sections = {o.section for o in options}
    print(f"OK: {args.path} ({len(options)} options in {len(sections)} sections)")


def cmd_format(args: argparse.Namespace) -> None:
    """Re-write a file grouped by section."""
    from ceini.reader import read
    from ceini.writer import dumps

    options = read(_load(args.path))
    max_length = args.max_length or _default_max_length()
    _emit(dumps(_quoted(options), max_length=max_length), args.output)
    if args.output:
        print(f"Formatted {args.path} -> {args.output} ({len(options)} options)")


def cmd_convert(args: argparse.Namespace) -> None:
    """Convert to/from INI."""
    from ceini.converters import convert_from, convert_to
    from ceini.reader import read
    from ceini.writer import dumps

    data = _load(args.path)
    if args.direction == "to":
        result = convert_to(read(data), args.format)
    else:
        options = convert_from(data.decode("utf-8"), args.format)
        max_length = args.max_length or _default_max_length()
        result = dumps(_quoted(options), max_length=max_length)

    _emit(result, args.output)
    if args.output:
        print(f"Converted {args.path} -> {args.output}")


def cmd_view(args: argparse.Namespace) -> None:
    """View a file in the TUI."""
    try:
        from ceini.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install \"ceini[tui]\"",
            file=sys.stderr,
        )
        sys.exit(1)
    run_viewer(args.path)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="ceini",
        description="CEINI - compact INI reader and writer.",
    )
    from ceini import __version__
    parser.add_argument("--version", action="version", version=f"ceini {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging (repeatable)")
    sub = parser.add_subparsers(dest="command")

    # read
    p_read = sub.add_parser("read", help="Print the options of an INI file")
    p_read.add_argument("path", help="Path to INI file")
    p_read.add_argument("-s", "--section", help="Only print options of this section")
    p_read.add_argument("--repr", action="store_true", help="Print values repr-quoted")

    # validate
    p_validate = sub.add_parser("validate", help="Validate an INI file")
    p_validate.add_argument("path", help="Path to INI file")

    # format
    p_format = sub.add_parser("format", help="Re-write an INI file grouped by section")
    p_format.add_argument("path", help="Path to INI file")
    p_format.add_argument("-o", "--output", help="Output file path (default: stdout)")
    p_format.add_argument("--max-length", type=int, help="Output buffer capacity (or set CEINI_MAX_LENGTH)")

    # convert
    p_convert = sub.add_parser("convert", help="Convert to/from INI")
    p_convert.add_argument("direction", choices=["to", "from"], help="Conversion direction")
    p_convert.add_argument("format", choices=["json", "csv"], help="Other format")
    p_convert.add_argument("path", help="Input file path")
    p_convert.add_argument("-o", "--output", help="Output file path (default: stdout)")
    p_convert.add_argument("--max-length", type=int, help="Output buffer capacity for 'from'")

    # view
    p_view = sub.add_parser("view", help="View an INI file (TUI)")
    p_view.add_argument("path", help="Path to INI file")

    args = parser.parse_args(argv)

    if args.verbose == 0:
        logging.disable()
    else:
        logging.basicConfig(level=LOG_LEVELS[min(args.verbose, len(LOG_LEVELS)) - 1])

    if not args.command:
        parser.print_help()
        sys.exit(0)

    commands = {
        "read": cmd_read,
        "validate": cmd_validate,
        "format": cmd_format,
        "convert": cmd_convert,
        "view": cmd_view,
    }

    try:
        commands[args.command](args)
    except IniError as e:
        print(f"Error: {args.path}: {e.kind.value}: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, OSError) as e:
        # ValueError from converters (structure) and decoding -- safe to show
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
