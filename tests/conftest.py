"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from depstatus.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, check_timeout=2.0, show_version=False)


@pytest.fixture
def calls() -> list[str]:
    """Records probe invocations by target name."""
    return []


@pytest.fixture
def make_probe(calls: list[str]) -> Callable[..., Any]:
    """Factory for async probes that record their invocation.

    ``make_probe("db")`` succeeds, ``make_probe("db", error="boom")`` raises,
    ``delay`` sleeps first.
    """

    def factory(name: str, error: str | None = None, delay: float = 0.0) -> Any:
        async def probe() -> None:
            calls.append(name)
            if delay:
                await asyncio.sleep(delay)
            if error is not None:
                raise RuntimeError(error)

        return probe

    return factory
