"""Crash reports for benchmark runs that fail outside the harness errors.

A report is a JSON document describing the run (resolved configuration,
runtime, source file, the benchmark being measured) and the interpreters the
harness could find, followed by the exception and its traceback.
"""

from __future__ import annotations

import json
import os
import platform
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any
from uuid import uuid4

from tinybench.errors import InterpreterNotFoundError
from tinybench.runtimes import RUNTIMES


@dataclass(frozen=True, slots=True)
class ErrorReport:
    path: Path
    created_at: datetime


def get_error_reports_dir() -> Path:
    """`TINYBENCH_ERROR_DIR` when set, otherwise `~/.tinybench/error_reports`."""

    override = (os.getenv("TINYBENCH_ERROR_DIR") or "").strip()
    base = Path(override) if override else Path.home() / ".tinybench" / "error_reports"
    base.mkdir(parents=True, exist_ok=True)
    return base


def _tinybench_version() -> str:
    try:
        return metadata.version("tinybench")
    except metadata.PackageNotFoundError:
        return "unknown"


def _interpreters() -> dict[str, str | None]:
    found: dict[str, str | None] = {}
    for name, runtime in sorted(RUNTIMES.items()):
        try:
            found[name] = runtime.resolve_executable()
        except InterpreterNotFoundError:
            found[name] = None
    return found


def build_error_payload(
    error: BaseException,
    *,
    where: str,
    context: dict[str, Any] | None = None,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    created_at = created_at or datetime.now(timezone.utc)
    return {
        "created_at": created_at.isoformat(),
        "where": where,
        "tinybench": _tinybench_version(),
        "python": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "interpreters": _interpreters(),
        "run": dict(context or {}),
        "error": {
            "type": type(error).__name__,
            "message": str(error),
            "traceback": traceback.format_exception(type(error), error, error.__traceback__),
        },
    }


def write_error_report(
    error: BaseException,
    *,
    where: str,
    context: dict[str, Any] | None = None,
) -> ErrorReport:
    """Writes a timestamped JSON crash report and returns its path."""

    created_at = datetime.now(timezone.utc)
    payload = build_error_payload(error, where=where, context=context, created_at=created_at)
    stamp = created_at.strftime("%Y%m%d_%H%M%S")
    path = get_error_reports_dir() / f"error_{stamp}_{uuid4().hex[:8]}.json"
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
    return ErrorReport(path=path, created_at=created_at)
