"""Result aggregation — overall health decision and per-target severity.

The JSON endpoint maps a two-state verdict onto its status code. The
status page uses a three-state severity where low-importance failures are
warnings. The two are computed independently.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .models import CheckResult, Importance, Status


class Severity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    FAIL = "fail"


def is_healthy(results: Iterable[CheckResult]) -> bool:
    """Unhealthy iff at least one high-importance target failed."""
    return not any(
        r.target.importance is Importance.HIGH and r.status is Status.FAIL
        for r in results
    )


def severity(result: CheckResult) -> Severity:
    if result.status is Status.OK:
        return Severity.OK
    if result.target.importance is Importance.HIGH:
        return Severity.FAIL
    return Severity.WARNING
