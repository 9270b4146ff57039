"""Errors raised by the benchmark harness."""

from __future__ import annotations


class TinybenchError(RuntimeError):
    """Base class for harness failures reported to the user."""


class SourceFileError(TinybenchError):
    """The benchmark source file is missing or cannot be read."""


class ConfigError(TinybenchError):
    """A configuration value is malformed."""


class NoBenchmarksFoundError(TinybenchError):
    """The source file defines no complete benchmark segment."""


class UnsupportedRuntimeError(TinybenchError):
    """No runtime is registered for the requested name or file extension."""


class InterpreterNotFoundError(TinybenchError):
    """The interpreter for a runtime is not installed."""


class SegmentExecutionError(TinybenchError):
    """A benchmark sample failed to run to completion."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


__all__ = [
    "TinybenchError",
    "SourceFileError",
    "ConfigError",
    "NoBenchmarksFoundError",
    "UnsupportedRuntimeError",
    "InterpreterNotFoundError",
    "SegmentExecutionError",
]
