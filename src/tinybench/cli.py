"""Command line entry point: benchmark the delimited segments of a source file."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from dataclasses import asdict
from pathlib import Path
from typing import Any

import structlog

from tinybench.display import ConsoleDisplay
from tinybench.errors import ConfigError, SourceFileError, TinybenchError
from tinybench.parser import parse_source
from tinybench.runner import run_benchmarks, write_report
from tinybench.runtimes import RUNTIMES, detect_runtime, get_runtime
from tinybench.shared import BenchConfig, configure_logging, write_error_report
from tinybench.shared.config import validate_duration


def _duration(value: str) -> float:
    try:
        return validate_duration(value)
    except (ValueError, ConfigError) as exc:
        raise ArgumentTypeError(str(exc)) from None


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="tinybench",
        description="Benchmark the code between '<comment> tinybench start' and "
        "'<comment> tinybench stop' lines of a Python or JavaScript file.",
    )
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        help="Path to the file containing benchmark segments",
    )
    parser.add_argument(
        "--runtime",
        choices=sorted(RUNTIMES),
        help="Interpreter for the segments (default: inferred from the file extension)",
    )
    parser.add_argument(
        "--duration",
        type=_duration,
        help="Seconds spent sampling each benchmark (default: 10)",
    )
    parser.add_argument(
        "--in-process",
        action="store_true",
        default=None,
        help="Run Python segments inside this interpreter; setup code runs once",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Do not clear the terminal before printing",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Also write the results to this directory",
    )
    parser.add_argument(
        "--stem",
        type=str,
        default="benchmark_report",
        help="Output filename stem (default: benchmark_report)",
    )
    parser.add_argument(
        "--format",
        action="append",
        dest="formats",
        choices=["json", "md"],
        help="Report format (can be provided multiple times). Default: json+md",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed logs",
    )
    return parser


def _resolve_config(args: Namespace) -> BenchConfig:
    config = BenchConfig.from_env()
    if args.runtime is not None:
        config.runtime = args.runtime
    if args.duration is not None:
        config.duration = validate_duration(args.duration)
    if args.in_process:
        config.in_process = True
    if args.no_clear:
        config.clear_screen = False
    return config


def _read_source(path: Path | None) -> tuple[Path, str]:
    if path is None:
        raise SourceFileError("Please provide a path to a valid source file.")
    abs_path = path.expanduser().resolve()
    try:
        return abs_path, abs_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceFileError(str(exc)) from exc


def _run(args: Namespace, display: ConsoleDisplay, context: dict[str, Any]) -> int:
    logger = structlog.get_logger(__name__)
    config = _resolve_config(args)
    context["config"] = asdict(config)
    display.welcome(clear=config.clear_screen)

    source, code = _read_source(args.source)
    context["source"] = str(source)
    runtime = get_runtime(config.runtime) if config.runtime else detect_runtime(source)
    context["runtime"] = runtime.name
    parsed = parse_source(code, start=runtime.start_delimiter, stop=runtime.stop_delimiter)
    logger.info("source-parsed", source=str(source), runtime=runtime.name, benchmarks=len(parsed.segments))

    report = run_benchmarks(parsed, runtime, config=config, source=source, observer=display)
    display.results(report)

    if args.output_dir is not None:
        formats = tuple(args.formats) if args.formats else ("json", "md")
        written = write_report(report, output_dir=args.output_dir, stem=args.stem, formats=formats)
        for path in written:
            print(path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)
    logger = structlog.get_logger(__name__)
    display = ConsoleDisplay()
    context: dict[str, Any] = {"source": str(args.source) if args.source else None}

    try:
        return _run(args, display, context)
    except TinybenchError as exc:
        logger.debug("run-aborted", error=str(exc), error_type=type(exc).__name__)
        display.error(str(exc))
        return 1
    except KeyboardInterrupt:
        display.error("Interrupted.")
        return 130
    except Exception as exc:
        context["benchmark"] = display.current
        report = write_error_report(exc, where="cli.main", context=context)
        logger.exception("run-failed", error=str(exc), report=str(report.path))
        display.error(f"{exc} (details: {report.path})")
        return 1


if __name__ == "__main__":
    sys.exit(main())
