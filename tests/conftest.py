"""Shared fixtures for harness tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path) -> None:
    for key in ("TINYBENCH_DURATION", "TINYBENCH_RUNTIME", "TINYBENCH_IN_PROCESS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TINYBENCH_ERROR_DIR", str(tmp_path / "error_reports"))


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Writes a benchmark source file under tmp_path and returns its path."""

    def _write(name: str, contents: str) -> Path:
        path = tmp_path / name
        path.write_text(contents, encoding="utf-8")
        return path

    return _write
