"""Stock probes — HTTP(S), TCP connect and DNS resolve.

Each factory returns a coroutine function suitable for
``TargetRegistry.register``. A probe returns ``None`` when the dependency
looks healthy and raises ProbeError with a readable message otherwise.
Timeouts here are per-probe transport limits; the checker's pass deadline
still applies on top of them.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from collections.abc import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

AsyncProbe = Callable[[], Awaitable[None]]


class ProbeError(Exception):
    """Raised by a stock probe when its dependency is unhealthy."""


def http_probe(
    url: str,
    method: str = "GET",
    expected_status: int = 200,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncProbe:
    """HTTP(S) check: the response status must equal ``expected_status``."""

    async def probe() -> None:
        try:
            async with httpx.AsyncClient(
                timeout=timeout, follow_redirects=True, transport=transport,
            ) as client:
                resp = await client.request(method, url)
        except httpx.TimeoutException as e:
            raise ProbeError(f"Connection timed out ({timeout:g}s)") from e
        except httpx.ConnectError as e:
            raise ProbeError(f"Connection error: {e}") from e
        except httpx.HTTPError as e:
            raise ProbeError(f"Error: {type(e).__name__}: {e}") from e

        if resp.status_code != expected_status:
            raise ProbeError(f"Expected {expected_status}, got {resp.status_code}")
        logger.debug("%s %s -> %d", method, url, resp.status_code)

    return probe


def tcp_probe(host: str, port: int, timeout: float = 5.0) -> AsyncProbe:
    """Raw TCP port connectivity check."""

    async def probe() -> None:
        try:
            _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout)
        except asyncio.TimeoutError as e:
            raise ProbeError(f"TCP connect to {host}:{port} timed out ({timeout:g}s)") from e
        except OSError as e:
            raise ProbeError(f"TCP connect failed: {type(e).__name__}: {e}") from e

        writer.close()
        await writer.wait_closed()

    return probe


def dns_probe(hostname: str) -> AsyncProbe:
    """DNS resolution check."""

    async def probe() -> None:
        loop = asyncio.get_running_loop()
        try:
            addrs = await loop.getaddrinfo(hostname, None)
        except socket.gaierror as e:
            raise ProbeError(f"DNS resolution failed: {e}") from e

        ips = sorted({a[4][0] for a in addrs})
        if not ips:
            raise ProbeError(f"DNS resolution returned no addresses for {hostname}")
        logger.debug("Resolved %s to %s", hostname, ", ".join(ips[:3]))

    return probe
