"""Executors time a single sample of one benchmark segment."""

from __future__ import annotations

import subprocess
import time
from types import CodeType
from typing import Any, Protocol

import structlog

from .errors import SegmentExecutionError
from .runtimes import Runtime


class SegmentExecutor(Protocol):
    """Minimal interface used by the sampling loop."""

    def run(self, segment: str) -> float:
        """Runs `segment` once and returns the elapsed time in seconds."""


class SubprocessExecutor:
    """Runs setup + segment in a fresh interpreter process per sample.

    The measured time covers the whole process, including interpreter start-up
    and fixture construction, so it is comparable across runtimes.
    """

    def __init__(self, runtime: Runtime, setup: str) -> None:
        self._runtime = runtime
        self._setup = setup
        runtime.resolve_executable()
        self._log = structlog.get_logger(__name__).bind(runtime=runtime.name)

    def run(self, segment: str) -> float:
        cmd = self._runtime.command(self._setup + segment)
        start = time.perf_counter()
        completed = subprocess.run(cmd, check=False)
        elapsed = time.perf_counter() - start
        if completed.returncode != 0:
            self._log.debug("sample-failed", returncode=completed.returncode)
            raise SegmentExecutionError(
                f"{self._runtime.display_name} exited with status {completed.returncode}",
                returncode=completed.returncode,
            )
        return elapsed


def _exit_status(exc: SystemExit) -> int:
    # Same mapping the interpreter applies when SystemExit ends a process.
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    return 1


class InProcessExecutor:
    """Runs Python segments inside the current interpreter.

    The setup code runs once, so the fixture is fully built before the first
    sample. Each sample executes against a shallow copy of the setup namespace:
    names bound by a segment never reach the next sample, while the fixture
    objects themselves are shared.
    """

    def __init__(self, setup: str, *, filename: str = "<tinybench>") -> None:
        self._filename = filename
        self._namespace: dict[str, Any] = {"__name__": "__main__"}
        self._compiled: dict[str, CodeType] = {}
        try:
            exec(compile(setup, f"{filename}:setup", "exec"), self._namespace)
        except SystemExit as exc:
            status = _exit_status(exc)
            if status != 0:
                raise SegmentExecutionError(f"setup code exited with status {status}", returncode=status) from exc
        except Exception as exc:
            raise SegmentExecutionError(f"setup code failed: {exc!r}") from exc

    @property
    def namespace(self) -> dict[str, Any]:
        return self._namespace

    def _compile(self, segment: str) -> CodeType:
        code = self._compiled.get(segment)
        if code is None:
            try:
                code = compile(segment, f"{self._filename}:segment", "exec")
            except SyntaxError as exc:
                raise SegmentExecutionError(f"segment does not compile: {exc}") from exc
            self._compiled[segment] = code
        return code

    def run(self, segment: str) -> float:
        code = self._compile(segment)
        scope = dict(self._namespace)
        start = time.perf_counter()
        try:
            exec(code, scope)
        except SystemExit as exc:
            status = _exit_status(exc)
            if status != 0:
                raise SegmentExecutionError(f"segment exited with status {status}", returncode=status) from exc
        except Exception as exc:
            raise SegmentExecutionError(f"segment raised {exc!r}") from exc
        return time.perf_counter() - start


__all__ = ["SegmentExecutor", "SubprocessExecutor", "InProcessExecutor"]
