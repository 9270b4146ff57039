"""tinybench: benchmark delimited code segments of a source file.

This package provides:
- a delimiter parser for Python (`# tinybench start`) and JavaScript
  (`// tinybench start`) sources,
- subprocess and in-process executors,
- a duration-bounded runner with terminal, JSON and Markdown reports.
"""

from .parser import ParsedSource, parse_source
from .runner import BenchmarkReport, BenchmarkResult, run_benchmarks, write_report

__all__ = [
    "ParsedSource",
    "parse_source",
    "BenchmarkReport",
    "BenchmarkResult",
    "run_benchmarks",
    "write_report",
]
