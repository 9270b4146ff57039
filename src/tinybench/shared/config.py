"""Harness configuration."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from tinybench.errors import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_DURATION = 10.0
DEFAULT_TICK = 1.0


def validate_duration(value: float) -> float:
    """Returns `value` as seconds, rejecting NaN, infinity and negatives."""

    seconds = float(value)
    if not math.isfinite(seconds) or seconds < 0:
        raise ConfigError(f"duration must be a finite number of seconds >= 0, got {value!r}")
    return seconds


@dataclass(slots=True)
class BenchConfig:
    """Settings for one benchmark run."""

    duration: float = DEFAULT_DURATION
    tick: float = DEFAULT_TICK
    runtime: str | None = None
    in_process: bool = False
    clear_screen: bool = True

    @classmethod
    def default(cls) -> "BenchConfig":
        """Returns the built-in defaults."""

        return cls()

    @classmethod
    def from_env(cls) -> "BenchConfig":
        """Defaults overridden by `TINYBENCH_*` environment variables.

        - `TINYBENCH_DURATION`: seconds spent sampling each benchmark
        - `TINYBENCH_RUNTIME`: runtime name (`python`, `node`)
        - `TINYBENCH_IN_PROCESS`: run Python segments in this interpreter
        """

        config = cls.default()

        duration = (os.getenv("TINYBENCH_DURATION") or "").strip()
        if duration:
            try:
                config.duration = validate_duration(duration)
            except ValueError:
                raise ConfigError(f"TINYBENCH_DURATION must be a number, got {duration!r}") from None

        runtime = (os.getenv("TINYBENCH_RUNTIME") or "").strip()
        if runtime:
            config.runtime = runtime

        in_process = (os.getenv("TINYBENCH_IN_PROCESS") or "").strip().lower()
        if in_process:
            config.in_process = in_process in _TRUTHY

        return config
