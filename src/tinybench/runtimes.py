"""Host runtimes able to execute benchmark segments."""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

from .errors import InterpreterNotFoundError, UnsupportedRuntimeError

MARKER_START = "tinybench start"
MARKER_STOP = "tinybench stop"


@dataclass(frozen=True, slots=True)
class Runtime:
    """Describes how to run inline source code with one interpreter."""

    name: str
    display_name: str
    executable: str
    eval_flag: str
    comment_prefix: str
    extensions: tuple[str, ...]

    @property
    def start_delimiter(self) -> str:
        return f"{self.comment_prefix} {MARKER_START}"

    @property
    def stop_delimiter(self) -> str:
        return f"{self.comment_prefix} {MARKER_STOP}"

    def resolve_executable(self) -> str:
        """Returns an absolute interpreter path or raises if it is not installed."""

        candidate = Path(self.executable)
        if candidate.is_absolute():
            if candidate.exists():
                return str(candidate)
        else:
            found = shutil.which(self.executable)
            if found:
                return found
        raise InterpreterNotFoundError(
            f"{self.display_name} not found. Please install {self.display_name} and try again."
        )

    def command(self, code: str) -> list[str]:
        return [self.resolve_executable(), self.eval_flag, code]


PYTHON = Runtime(
    name="python",
    display_name="Python",
    executable=sys.executable or "python3",
    eval_flag="-c",
    comment_prefix="#",
    extensions=(".py",),
)

NODE = Runtime(
    name="node",
    display_name="Node.js",
    executable="node",
    eval_flag="-e",
    comment_prefix="//",
    extensions=(".js", ".mjs", ".cjs"),
)

RUNTIMES: dict[str, Runtime] = {rt.name: rt for rt in (PYTHON, NODE)}


def get_runtime(name: str) -> Runtime:
    try:
        return RUNTIMES[name.strip().lower()]
    except KeyError:
        supported = ", ".join(sorted(RUNTIMES))
        raise UnsupportedRuntimeError(f"Unknown runtime '{name}'. Supported runtimes: {supported}.") from None


def detect_runtime(path: Path) -> Runtime:
    """Picks the runtime registered for the file extension of `path`."""

    suffix = Path(path).suffix.lower()
    for runtime in RUNTIMES.values():
        if suffix in runtime.extensions:
            return runtime
    raise UnsupportedRuntimeError(
        f"Cannot infer a runtime for '{Path(path).name}'. Use --runtime to pick one."
    )


__all__ = [
    "MARKER_START",
    "MARKER_STOP",
    "Runtime",
    "PYTHON",
    "NODE",
    "RUNTIMES",
    "get_runtime",
    "detect_runtime",
]
