"""Target registry: ordered, append-only builder for health check targets.

Targets are registered once at startup and frozen into a HealthChecker:

    checker = (
        TargetRegistry()
        .register("database", Importance.HIGH, ping_db)
        .register("cache", "low", ping_cache)
        .build()
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .checker import HealthChecker
from .models import Importance, Probe, Target

logger = logging.getLogger(__name__)


class TargetRegistry:
    """Ordered collection of targets. Identity is positional, names may repeat."""

    def __init__(self) -> None:
        self._targets: list[Target] = []

    def register(
        self,
        name: str,
        importance: Importance | str,
        probe: Probe,
    ) -> TargetRegistry:
        """Append a target and return the registry for chaining."""
        if not callable(probe):
            raise TypeError(f"Probe for target {name!r} is not callable: {probe!r}")
        target = Target(name=name, importance=Importance(importance), probe=probe)
        self._targets.append(target)
        logger.debug("Registered target %r (%s)", name, target.importance.value)
        return self

    def extend(self, targets: Iterable[Target]) -> TargetRegistry:
        for t in targets:
            self.register(t.name, t.importance, t.probe)
        return self

    @property
    def targets(self) -> tuple[Target, ...]:
        return tuple(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(tuple(self._targets))

    def build(self) -> HealthChecker:
        """Freeze the current targets into a HealthChecker.

        Registrations made after this call do not affect the returned checker.
        """
        return HealthChecker(self._targets)
