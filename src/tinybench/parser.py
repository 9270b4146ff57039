"""Splits a source file into setup code and delimited benchmark segments."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import NoBenchmarksFoundError
from .runtimes import PYTHON


@dataclass(slots=True)
class ParsedSource:
    """Setup code shared by every segment plus the segments themselves."""

    setup: str
    segments: list[str] = field(default_factory=list)


def _lines(code: str) -> list[str]:
    """Splits on line feeds only, dropping a trailing carriage return and the empty tail."""

    lines = code.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _no_benchmarks_message(start: str, stop: str) -> str:
    return (
        "No benchmarks found. Please define at least one benchmark:\n"
        f"\t{start}\n"
        "\t{{ CODE TO BENCHMARK }}\n"
        f"\t{stop}"
    )


def parse_source(
    code: str,
    *,
    start: str = PYTHON.start_delimiter,
    stop: str = PYTHON.stop_delimiter,
) -> ParsedSource:
    """Scans `code` line by line for start/stop delimiter lines.

    Delimiters match after surrounding whitespace is stripped. Lines inside a
    segment are collected into that segment, every other line becomes setup
    code. A start without a matching stop is dropped.
    """

    setup: list[str] = []
    segments: list[str] = []
    current: list[str] = []
    in_benchmark = False

    for line in _lines(code):
        marker = line.strip()
        if marker == start:
            in_benchmark = True
            current = []
        elif marker == stop:
            in_benchmark = False
            segments.append("".join(current))
            current = []
        elif in_benchmark:
            current.append(line + "\n")
        else:
            setup.append(line + "\n")

    if not segments:
        raise NoBenchmarksFoundError(_no_benchmarks_message(start, stop))

    return ParsedSource(setup="".join(setup), segments=segments)


__all__ = ["ParsedSource", "parse_source"]
