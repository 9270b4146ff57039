"""Benchmark runner and report generation."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import structlog

from .errors import TinybenchError
from .executors import InProcessExecutor, SegmentExecutor, SubprocessExecutor
from .parser import ParsedSource
from .runtimes import PYTHON, Runtime
from .shared.config import BenchConfig, validate_duration


class ProgressObserver(Protocol):
    """Receives progress notifications while benchmarks run."""

    def found(self, index: int, code: str) -> None:
        """A segment is about to be benchmarked."""

    def tick(self) -> None:
        """One tick of the measurement window has elapsed."""

    def finished(self, result: "BenchmarkResult") -> None:
        """A segment has been measured."""


class _SilentObserver:
    def found(self, index: int, code: str) -> None:
        return None

    def tick(self) -> None:
        return None

    def finished(self, result: "BenchmarkResult") -> None:
        return None


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    index: int
    code: str
    iterations: int
    min: float
    max: float
    median: float

    def to_dict(self) -> dict:
        return asdict(self)


def _safe_div(num: float, den: float) -> float:
    return 0.0 if den == 0.0 else num / den


def _ms(seconds: float) -> int:
    return int(seconds * 1000)


@dataclass(frozen=True, slots=True)
class BenchmarkReport:
    created_at: str
    source: str
    runtime: str
    duration: float
    benchmarks: list[BenchmarkResult] = field(default_factory=list)

    def fastest_index(self) -> int:
        """Position of the first benchmark with the smallest median."""

        if not self.benchmarks:
            raise ValueError("report has no benchmarks")
        fastest = 0
        for i, result in enumerate(self.benchmarks):
            if result.median < self.benchmarks[fastest].median:
                fastest = i
        return fastest

    def slowdown(self, position: int) -> float:
        """Percentage by which benchmark `position` is slower than the fastest."""

        fastest = self.benchmarks[self.fastest_index()].median
        return _safe_div(self.benchmarks[position].median - fastest, fastest) * 100

    def delta_label(self, position: int) -> str:
        if position == self.fastest_index():
            return "Fastest"
        return f"{self.slowdown(position):.0f}% Slower"

    def to_dict(self) -> dict:
        payload = {
            "created_at": self.created_at,
            "source": self.source,
            "runtime": self.runtime,
            "duration": self.duration,
            "benchmarks": [],
        }
        for position, result in enumerate(self.benchmarks):
            entry = result.to_dict()
            entry["delta"] = self.delta_label(position)
            payload["benchmarks"].append(entry)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    def to_markdown(self) -> str:
        lines: list[str] = []
        lines.append("# Benchmark Report")
        lines.append("")
        lines.append(f"Generated: {self.created_at}")
        lines.append(f"Source: {self.source}")
        lines.append(f"Runtime: {self.runtime}")
        lines.append(f"Duration per benchmark: {self.duration:g}s")
        lines.append("")
        lines.append("| Benchmark | Iterations | Min(ms) | Max(ms) | Median(ms) | Delta |")
        lines.append("| --- | --- | --- | --- | --- | --- |")
        for position, result in enumerate(self.benchmarks):
            lines.append(
                f"| {result.index} | {result.iterations} | {_ms(result.min)} | {_ms(result.max)} "
                f"| {_ms(result.median)} | {self.delta_label(position)} |"
            )
        lines.append("")

        for result in self.benchmarks:
            lines.append(f"## Benchmark {result.index}")
            lines.append("")
            lines.append("```")
            lines.append(result.code.rstrip("\n"))
            lines.append("```")
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"


def summarize(index: int, code: str, samples: list[float]) -> BenchmarkResult:
    """Reduces raw sample times to min, max and (upper) median."""

    if not samples:
        raise ValueError("at least one sample is required")
    ordered = sorted(samples)
    return BenchmarkResult(
        index=index,
        code=code,
        iterations=len(ordered),
        min=ordered[0],
        max=ordered[-1],
        median=ordered[len(ordered) // 2],
    )


def run_benchmark(
    executor: SegmentExecutor,
    index: int,
    code: str,
    *,
    duration: float,
    tick: float = 1.0,
    observer: ProgressObserver | None = None,
) -> BenchmarkResult:
    """Samples `code` back-to-back for `duration` seconds.

    A worker thread takes the samples; the caller only ticks the progress
    observer and stops the worker once the window closes. The sample in flight
    at that moment is kept, so every result has at least one iteration.
    """

    seconds = validate_duration(duration)
    observer = observer or _SilentObserver()
    log = structlog.get_logger(__name__).bind(benchmark=index)
    samples: list[float] = []
    failures: list[BaseException] = []
    stop = threading.Event()

    def _worker() -> None:
        while True:
            try:
                samples.append(executor.run(code))
            except BaseException as exc:
                failures.append(exc)
                stop.set()
                return
            if stop.is_set():
                return

    worker = threading.Thread(target=_worker, name=f"tinybench-{index}", daemon=True)
    worker.start()

    step = max(float(tick), 0.001)
    deadline = time.monotonic() + seconds
    while True:
        remaining = deadline - time.monotonic()
        # A sliver left over from timer jitter does not earn another tick.
        if remaining <= step * 1e-3:
            break
        if stop.wait(min(step, remaining)):
            break
        observer.tick()

    stop.set()
    worker.join()

    if failures:
        log.error("benchmark-failed", error=str(failures[0]))
        raise failures[0]

    result = summarize(index, code, samples)
    log.debug("benchmark-sampled", iterations=result.iterations, median=result.median)
    return result


def create_executor(parsed: ParsedSource, runtime: Runtime, *, in_process: bool) -> SegmentExecutor:
    if in_process:
        if runtime is not PYTHON:
            raise TinybenchError(f"In-process execution is only available for Python, not {runtime.display_name}.")
        return InProcessExecutor(parsed.setup)
    return SubprocessExecutor(runtime, parsed.setup)


def run_benchmarks(
    parsed: ParsedSource,
    runtime: Runtime,
    *,
    config: BenchConfig,
    source: Path | str = "<memory>",
    observer: ProgressObserver | None = None,
) -> BenchmarkReport:
    """Runs every parsed segment in file order and collects the results."""

    observer = observer or _SilentObserver()
    log = structlog.get_logger(__name__)
    executor = create_executor(parsed, runtime, in_process=config.in_process)

    results: list[BenchmarkResult] = []
    for index, code in enumerate(parsed.segments, start=1):
        log.info("benchmark-found", benchmark=index, runtime=runtime.name)
        observer.found(index, code)
        result = run_benchmark(
            executor,
            index,
            code,
            duration=config.duration,
            tick=config.tick,
            observer=observer,
        )
        observer.finished(result)
        log.info("benchmark-complete", benchmark=index, iterations=result.iterations)
        results.append(result)

    created_at = datetime.now(timezone.utc).isoformat()
    return BenchmarkReport(
        created_at=created_at,
        source=str(source),
        runtime=runtime.name,
        duration=float(config.duration),
        benchmarks=results,
    )


def write_report(
    report: BenchmarkReport,
    *,
    output_dir: Path,
    stem: str = "benchmark_report",
    formats: tuple[str, ...] = ("json", "md"),
) -> list[Path]:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    if "json" in formats:
        path = output_dir / f"{stem}.json"
        path.write_text(report.to_json(), encoding="utf-8")
        written.append(path)

    if "md" in formats:
        path = output_dir / f"{stem}.md"
        path.write_text(report.to_markdown(), encoding="utf-8")
        written.append(path)

    return written


__all__ = [
    "ProgressObserver",
    "BenchmarkResult",
    "BenchmarkReport",
    "summarize",
    "run_benchmark",
    "create_executor",
    "run_benchmarks",
    "write_report",
]
