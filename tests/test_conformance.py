"""
CEINI Conformance Tests

Shared test vectors plus the round-trip properties of the format.
Covers: parse vectors, error kinds, grouping order, write/read round-trips,
idempotence and quoting.
"""

import json
import random
import string
from pathlib import Path

import pytest

from ceini.errors import ErrorKind, ParseError
from ceini.reader import Option, read
from ceini.writer import dumps
from ceini.spec import escape_value, needs_quoting


VECTORS_PATH = Path(__file__).parent / "conformance" / "vectors.json"

@pytest.fixture(scope="module")
def vectors():
    with open(VECTORS_PATH) as f:
        return json.load(f)


# ================================================================
# Parse Vectors
# ================================================================

class TestParseVectors:

    def test_conformance_vectors(self, vectors):
        for case in vectors["parse"]["cases"]:
            desc = case["desc"]
            expected = [Option(*o) for o in case["options"]]
            got = read(case["input"])
            assert got == expected, f"[{desc}] read({case['input']!r}) = {got!r}"

    def test_error_vectors(self, vectors):
        for case in vectors["parse_errors"]["cases"]:
            desc = case["desc"]
            with pytest.raises(ParseError) as excinfo:
                read(case["input"])
            assert excinfo.value.kind is ErrorKind[case["kind"]], (
                f"[{desc}] got {excinfo.value.kind}, expected {case['kind']}"
            )


# ================================================================
# Write Vectors
# ================================================================

class TestWriteVectors:

    def test_conformance_vectors(self, vectors):
        for case in vectors["write"]["cases"]:
            desc = case["desc"]
            options = [tuple(o) for o in case["options"]]
            assert dumps(options) == case["output"], f"[{desc}]"


# ================================================================
# Write -> Read Round-Trip
# ================================================================

def _random_options(rng: random.Random, sections: int, per_section: int) -> list[tuple[str, str, str]]:
    name_chars = string.ascii_letters + string.digits + ".-_"
    value_chars = string.ascii_letters + string.digits + " !#$%&'()*+,-./:<>?@[]^_`{|}~\t"
    options = []
    for s in range(sections):
        section = f"sec-{s} {rng.choice(string.ascii_lowercase)}"
        for n in range(per_section):
            name = f"n{n}" + "".join(rng.choice(name_chars) for _ in range(rng.randint(0, 10)))
            value = "".join(rng.choice(value_chars) for _ in range(rng.randint(0, 25)))
            if needs_quoting(value):
                value = escape_value(value)
            options.append((section, name, value))
    return options


class TestRoundTrip:

    def test_grouped_roundtrip(self):
        options = [
            ("server", "host", "localhost"),
            ("server", "port", "8080"),
            ("client", "timeout", "30"),
        ]
        assert read(dumps(options)) == [Option(*o) for o in options]

    def test_quoted_values_roundtrip(self):
        raw = ["  padded  ", 'say "hi"', "a=b", "tab\tand\nnewline", "back\\slash", "'quoted'"]
        options = [("q", f"k{i}", escape_value(v)) for i, v in enumerate(raw)]
        assert [o.value for o in read(dumps(options))] == raw

    def test_top_level_options_roundtrip(self):
        options = read("name = demo\n[server]\nhost = h\n")
        assert options[0].section == ""
        text = dumps(options)
        assert text.startswith("[]\nname=demo\n")
        assert read(text) == options
        assert dumps(read(text)) == text

    def test_random_roundtrip(self):
        rng = random.Random(1234)
        for _ in range(25):
            options = _random_options(rng, rng.randint(1, 5), rng.randint(1, 8))
            restored = read(dumps(options))
            assert len(restored) == len(options)
            for original, back in zip(options, restored):
                assert back.section == original[0]
                assert back.name == original[1]
                expected = original[2]
                if expected.startswith('"'):
                    # escape_value output: read back the unescaped form
                    assert escape_value(back.value) == expected
                else:
                    assert back.value == expected.rstrip(" ")

    def test_interleaved_roundtrip_is_a_regrouping(self):
        options = [("b", "x", "1"), ("a", "y", "2"), ("b", "z", "3"), ("a", "w", "4")]
        restored = read(dumps(options))
        assert sorted(restored) == sorted(Option(*o) for o in options)
        assert [o.section for o in restored] == ["b", "b", "a", "a"]


# ================================================================
# Idempotence
# ================================================================

class TestIdempotence:

    def test_write_read_write(self):
        options = [("B", "x", "1"), ("A", "y", "2"), ("B", "z", "3"), ("C", "q", "v")]
        first = dumps(options)
        second = dumps(read(first))
        assert first == second

    def test_grouped_input_unchanged(self):
        text = "[B]\nx=1\nz=3\n\n[A]\ny=2\n\n"
        assert dumps(read(text)) == text
