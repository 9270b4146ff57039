"""Terminal output for a benchmark run."""

from __future__ import annotations

import sys
from typing import TextIO

from .runner import BenchmarkReport, BenchmarkResult

CLEAR_SCREEN = "\033[H\033[2J"
ERROR_PREFIX = " Error: "

_HEADER = " | {:<10} | {:<10} | {:<10} | {:<10} | {:<10} | {:<12} |"
_ROW = " | {:<10d} | {:<10d} | {:<10d} | {:<10d} | {:<10d} | {:<12} |"


class ConsoleDisplay:
    """Prints progress and results; implements the runner's progress observer."""

    def __init__(self, stream: TextIO | None = None, err_stream: TextIO | None = None) -> None:
        self._stream = stream
        self._err_stream = err_stream
        self.current: int | None = None

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output.
        return self._stream if self._stream is not None else sys.stdout

    @property
    def err_stream(self) -> TextIO:
        return self._err_stream if self._err_stream is not None else sys.stderr

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def welcome(self, *, clear: bool = True) -> None:
        if clear:
            self._write(CLEAR_SCREEN)
        self._write("\n Welcome to tinybench, a tiny tool for benchmarking Python and JavaScript code\n")

    def found(self, index: int, code: str) -> None:
        self.current = index
        body = code.replace("\n", "\n\t")
        self._write(f"\n Found benchmark {index}:\n\n\t```\n\t{body}\n\t```\n\n Executing benchmark {index}")

    def tick(self) -> None:
        self._write(".")

    def finished(self, result: BenchmarkResult) -> None:
        self._write(" done!\n")

    def results(self, report: BenchmarkReport) -> None:
        self._write("\n Results\n")
        self._write(_HEADER.format("Benchmark", "Iterations", "Min(ms)", "Max(ms)", "Median(ms)", "Delta") + "\n")
        self._write(" " + "-" * 81 + "\n")
        for position, result in enumerate(report.benchmarks):
            self._write(
                _ROW.format(
                    result.index,
                    result.iterations,
                    int(result.min * 1000),
                    int(result.max * 1000),
                    int(result.median * 1000),
                    report.delta_label(position),
                )
                + "\n"
            )

    def error(self, message: str) -> None:
        self.err_stream.write(ERROR_PREFIX + message + "\n")
        self.err_stream.flush()


__all__ = ["ConsoleDisplay", "CLEAR_SCREEN", "ERROR_PREFIX"]
