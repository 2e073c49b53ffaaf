"""Health data model — targets, importance levels and per-target results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

# A probe takes no arguments. Coroutine functions are awaited on the loop,
# plain callables run in the checker's thread pool. Raising means failure.
Probe = Callable[[], Any]


class Importance(str, Enum):
    LOW = "low"
    HIGH = "high"


class Status(str, Enum):
    OK = "ok"
    FAIL = "fail"


@dataclass(frozen=True)
class Target:
    """A named dependency probe tagged with an importance level."""

    name: str
    importance: Importance
    probe: Probe


@dataclass(frozen=True)
class CheckResult:
    """Outcome of running one target's probe during a single pass."""

    target: Target
    status: Status
    error: str | None = None
    duration: float = 0.0  # seconds

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @property
    def duration_ms(self) -> float:
        return round(self.duration * 1000, 1)
