"""Check orchestrator: runs every registered probe concurrently.

Each pass fans out one asyncio task per target and joins them all. Results
land in the slot matching the target's registration index, so the output
order never depends on which probe finishes first. Blocking probes are
pushed to a per-pass thread pool to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import cast

from .models import CheckResult, Probe, Status, Target

logger = logging.getLogger(__name__)


class CheckError(Exception):
    """Raised when an orchestration pass itself fails (never for a failing probe)."""


class ProbeTimeoutError(Exception):
    """A probe timed out on its own, before the pass deadline."""


class HealthChecker:
    """Frozen set of targets plus the machinery to check them on demand."""

    def __init__(self, targets: Iterable[Target] = ()) -> None:
        self._targets: tuple[Target, ...] = tuple(targets)
        self._blocking = sum(1 for t in self._targets if not _is_async(t.probe))

    @property
    def targets(self) -> tuple[Target, ...]:
        return self._targets

    def __len__(self) -> int:
        return len(self._targets)

    async def check(self, timeout: float | None = None) -> list[CheckResult]:
        """Run all probes in parallel and return one result per target.

        Blocking probes get a thread pool of their own for the pass, one
        worker each. The pool is shut down without waiting when the pass
        ends, so a probe stuck past the deadline cannot hold a worker that
        a later pass needs.

        Args:
            timeout: Shared deadline for the whole pass, in seconds. Probes
                still running when it expires are cancelled and reported as
                failures. ``None`` waits for every probe.

        Raises:
            CheckError: if joining the workers fails or a slot stays empty.
        """
        if not self._targets:
            return []

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        results: list[CheckResult | None] = [None] * len(self._targets)
        executor = (
            ThreadPoolExecutor(max_workers=self._blocking, thread_name_prefix="depstatus-check")
            if self._blocking
            else None
        )

        async def _worker(index: int, target: Target) -> None:
            results[index] = await self._run_target(target, executor, deadline, timeout)

        tasks = [
            asyncio.create_task(_worker(i, t), name=f"health-{i}-{t.name}")
            for i, t in enumerate(self._targets)
        ]

        try:
            await asyncio.gather(*tasks)
        except Exception as e:
            for task in tasks:
                task.cancel()
            raise CheckError(f"waiting for checks: {e}") from e
        finally:
            if executor is not None:
                executor.shutdown(wait=False)

        missing = [i for i, r in enumerate(results) if r is None]
        if missing:
            raise CheckError(f"no result recorded for targets at positions {missing}")

        return cast("list[CheckResult]", results)

    async def _run_target(
        self,
        target: Target,
        executor: ThreadPoolExecutor | None,
        deadline: float | None,
        timeout: float | None,
    ) -> CheckResult:
        loop = asyncio.get_running_loop()
        error: str | None = None
        t0 = time.perf_counter()
        try:
            remaining = None if deadline is None else max(deadline - loop.time(), 0.0)
            await asyncio.wait_for(self._call_probe(target.probe, executor), remaining)
        except asyncio.TimeoutError:
            error = f"deadline exceeded after {timeout:g}s"
        except asyncio.CancelledError:
            # Only a cancel aimed at this task aborts the pass
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            error = "cancelled"
        except Exception as e:
            error = str(e) or type(e).__name__
        duration = time.perf_counter() - t0

        if error is None:
            logger.debug("Check %s: ok (%.1fms)", target.name, duration * 1000)
            return CheckResult(target=target, status=Status.OK, duration=duration)

        logger.info(
            "Check %s failed (%s importance, %.1fms): %s",
            target.name, target.importance.value, duration * 1000, error,
        )
        return CheckResult(target=target, status=Status.FAIL, error=error, duration=duration)

    async def _call_probe(self, probe: Probe, executor: ThreadPoolExecutor | None) -> None:
        try:
            if _is_async(probe):
                await probe()
                return

            # Cancellation cannot interrupt a thread; the probe runs to completion
            # in the pool even when its result is discarded.
            loop = asyncio.get_running_loop()
            outcome = await loop.run_in_executor(executor, probe)
            if inspect.isawaitable(outcome):
                await outcome
        except asyncio.TimeoutError as e:
            # Keep the probe's own timeouts (sockets etc.) apart from the pass deadline
            raise ProbeTimeoutError(str(e) or type(e).__name__) from e


def _is_async(probe: Probe) -> bool:
    return inspect.iscoroutinefunction(probe) or inspect.iscoroutinefunction(
        getattr(probe, "__call__", None)
    )
