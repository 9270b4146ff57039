"""Array iteration cases and their shared fixture.

Both loops walk the whole sequence and discard each element. They differ only
in how the element is reached, which is what the benchmark measures.
"""

from __future__ import annotations

import random
from typing import Sequence

DEFAULT_FIXTURE_LENGTH = 1_000_000


def make_fixture(length: int = DEFAULT_FIXTURE_LENGTH, *, seed: int | None = None) -> list[float]:
    """Builds `length` uniform floats in [0, 1)."""

    if int(length) < 0:
        raise ValueError(f"fixture length must be >= 0, got {length}")
    rng = random.Random(seed)
    return [rng.random() for _ in range(int(length))]


def index_loop(seq: Sequence[float]) -> None:
    """Visits every element by position, 0 to len(seq) - 1."""

    for i in range(len(seq)):
        element = seq[i]  # noqa: F841


def element_loop(seq: Sequence[float]) -> None:
    """Visits every element in sequence order without an index."""

    for element in seq:  # noqa: B007
        pass


__all__ = ["DEFAULT_FIXTURE_LENGTH", "make_fixture", "index_loop", "element_loop"]
