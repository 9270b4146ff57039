"""Tests for benchmark delimiter parsing."""

from __future__ import annotations

import pytest

from tinybench.errors import NoBenchmarksFoundError
from tinybench.parser import parse_source
from tinybench.runtimes import NODE


def test_parse_single_segment() -> None:
    code = "arr = [1, 2]\n# tinybench start\nfor x in arr: pass\n# tinybench stop\n"
    parsed = parse_source(code)
    assert parsed.setup == "arr = [1, 2]\n"
    assert parsed.segments == ["for x in arr: pass\n"]


def test_parse_multiple_segments_keeps_order_and_setup() -> None:
    code = (
        "a = 1\n"
        "# tinybench start\n"
        "first()\n"
        "# tinybench stop\n"
        "\n"
        "# tinybench start\n"
        "second()\n"
        "more()\n"
        "# tinybench stop\n"
        "b = 2\n"
    )
    parsed = parse_source(code)
    assert parsed.segments == ["first()\n", "second()\nmore()\n"]
    assert parsed.setup == "a = 1\n\nb = 2\n"


def test_delimiters_match_after_stripping_whitespace() -> None:
    code = "\n    # tinybench start\n    x = 1\n\t# tinybench stop  \n"
    parsed = parse_source(code)
    assert parsed.segments == ["    x = 1\n"]


def test_no_delimiters_raises() -> None:
    with pytest.raises(NoBenchmarksFoundError) as excinfo:
        parse_source("foo = 'bar'\n")
    message = str(excinfo.value)
    assert "No benchmarks found. Please define at least one benchmark:" in message
    assert "# tinybench start" in message
    assert "{{ CODE TO BENCHMARK }}" in message


def test_start_without_stop_raises() -> None:
    with pytest.raises(NoBenchmarksFoundError):
        parse_source("# tinybench start\nfoo = 'bar'\n")


def test_trailing_unclosed_segment_is_dropped() -> None:
    code = "# tinybench start\na()\n# tinybench stop\n# tinybench start\nlost()\n"
    parsed = parse_source(code)
    assert parsed.segments == ["a()\n"]
    assert "lost()" not in parsed.setup


def test_repeated_start_discards_partial_segment() -> None:
    code = "# tinybench start\ndropped()\n# tinybench start\nkept()\n# tinybench stop\n"
    parsed = parse_source(code)
    assert parsed.segments == ["kept()\n"]


def test_stop_without_start_yields_empty_segment() -> None:
    parsed = parse_source("x = 1\n# tinybench stop\n")
    assert parsed.segments == [""]
    assert parsed.setup == "x = 1\n"


def test_javascript_delimiters() -> None:
    code = "const arr = [];\n// tinybench start\nforLoop(arr);\n// tinybench stop\n"
    parsed = parse_source(code, start=NODE.start_delimiter, stop=NODE.stop_delimiter)
    assert parsed.segments == ["forLoop(arr);\n"]
    assert parsed.setup == "const arr = [];\n"


def test_python_markers_are_not_javascript_markers() -> None:
    code = "// tinybench start\nx = 1\n// tinybench stop\n"
    with pytest.raises(NoBenchmarksFoundError):
        parse_source(code)


def test_only_line_feeds_split_lines() -> None:
    code = "s = 'a b\x0cc\x85d\u2028e'\n# tinybench start\nx = s\n# tinybench stop\n"
    parsed = parse_source(code)
    assert parsed.setup == "s = 'a b\x0cc\x85d\u2028e'\n"
    compile(parsed.setup, "<setup>", "exec")
    assert parsed.segments == ["x = s\n"]


def test_crlf_line_endings() -> None:
    code = "a = 1\r\n# tinybench start\r\nb = a\r\n# tinybench stop\r\n"
    parsed = parse_source(code)
    assert parsed.setup == "a = 1\n"
    assert parsed.segments == ["b = a\n"]


def test_missing_final_newline() -> None:
    parsed = parse_source("# tinybench start\nb = 1\n# tinybench stop")
    assert parsed.segments == ["b = 1\n"]
    assert parsed.setup == ""
