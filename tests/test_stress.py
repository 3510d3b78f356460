"""
CEINI Stress Tests
==================
Large documents, worst-case grouping, and every limit at once.

Run:
    python -m pytest tests/test_stress.py -v --tb=short
"""

from __future__ import annotations

import time

import pytest

from ceini.errors import ErrorKind, ParseError, WriteError
from ceini.reader import Option, read, parse
from ceini.writer import OutputBuffer, write, dumps
from ceini.spec import MAX_WRITE_OPTIONS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _timer():
    """Simple context-manager stopwatch."""
    class Timer:
        def __init__(self):
            self.elapsed = 0.0
        def __enter__(self):
            self._start = time.perf_counter()
            return self
        def __exit__(self, *_):
            self.elapsed = time.perf_counter() - self._start
    return Timer()


def _big_document(sections: int, per_section: int) -> str:
    lines = ["; generated"]
    for s in range(sections):
        lines.append(f"[section {s}]")
        for n in range(per_section):
            lines.append(f"key.{n} = value {s}-{n}   ; trailing comment")
        lines.append("")
    return "\n".join(lines)


# ===========================================================================
# Large inputs
# ===========================================================================

class TestLargeDocuments:

    def test_many_options(self):
        text = _big_document(200, 50)
        with _timer() as t:
            options = read(text)
        assert len(options) == 10_000
        assert options[0] == Option("section 0", "key.0", "value 0-0")
        assert options[-1] == Option("section 199", "key.49", "value 199-49")
        assert t.elapsed < 30

    def test_visitor_count_matches(self):
        count = 0

        def visitor(section, name, value):
            nonlocal count
            count += 1

        parse(_big_document(20, 20), visitor)
        assert count == 400

    def test_error_deep_in_document(self):
        text = _big_document(100, 10) + "\n[broken\n"
        with pytest.raises(ParseError) as excinfo:
            read(text)
        assert excinfo.value.kind is ErrorKind.MALFORMED_SECTION
        assert excinfo.value.line == text.count("\n")

    def test_long_comment_lines(self):
        text = "; " + "x" * 100_000 + "\nk = v\n"
        assert read(text) == [Option("", "k", "v")]

    def test_blank_line_runs(self):
        text = "\n" * 10_000 + "k = v" + "\r\n" * 10_000
        assert read(text) == [Option("", "k", "v")]


# ===========================================================================
# Worst-case grouping
# ===========================================================================

class TestGroupingStress:

    def test_every_option_its_own_section(self):
        options = [(f"s{i}", "k", str(i)) for i in range(MAX_WRITE_OPTIONS)]
        text = dumps(options)
        assert text.count("[") == MAX_WRITE_OPTIONS
        assert read(text) == [Option(*o) for o in options]

    def test_round_robin_sections(self):
        options = [(f"s{i % 16}", f"k{i}", "v") for i in range(MAX_WRITE_OPTIONS)]
        restored = read(dumps(options))
        assert [o.section for o in restored] == [f"s{s}" for s in range(16) for _ in range(16)]
        # Within a section, index order is kept
        assert [o.name for o in restored if o.section == "s3"] == [f"k{i}" for i in range(3, 256, 16)]

    def test_accessor_call_count_is_bounded(self):
        options = [(f"s{i % 8}", f"k{i}", "v") for i in range(64)]
        calls = 0

        def accessor(i):
            nonlocal calls
            calls += 1
            return options[i]

        write(OutputBuffer(4096), len(options), accessor)
        # One lookup per pass for the header plus one per unwritten index
        assert calls <= 8 * (1 + 64)

    def test_one_over_the_limit(self):
        options = [("s", f"k{i}", "v") for i in range(MAX_WRITE_OPTIONS + 1)]
        with pytest.raises(WriteError) as excinfo:
            dumps(options)
        assert excinfo.value.kind is ErrorKind.TOO_MANY_OPTIONS

    def test_buffer_full_midway(self):
        options = [("s", f"k{i}", "v" * 60) for i in range(100)]
        with pytest.raises(WriteError) as excinfo:
            dumps(options, max_length=1000)
        assert excinfo.value.kind is ErrorKind.BUFFER_FULL
