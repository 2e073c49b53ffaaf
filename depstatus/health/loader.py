"""Declarative target file — builds a TargetRegistry from YAML.

Example:

    targets:
      - name: api
        importance: high
        type: http
        url: https://api.example.com/health
      - name: db
        importance: high
        type: tcp
        host: db.internal
        port: 5432
      - name: cdn
        type: dns
        hostname: cdn.example.com
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from .models import Importance
from .probes import AsyncProbe, dns_probe, http_probe, tcp_probe
from .registry import TargetRegistry

logger = logging.getLogger(__name__)


class TargetFileError(Exception):
    """Raised when a target file cannot be read or contains an invalid entry."""


# ── Parsers ──────────────────────────────────────────────────────────────────


def _require(entry: dict[str, Any], key: str) -> Any:
    value = entry.get(key)
    if value in (None, ""):
        raise TargetFileError(
            f"Target {entry.get('name', '?')!r} ({entry.get('type', 'http')}) is missing '{key}'"
        )
    return value


def _http(entry: dict[str, Any]) -> AsyncProbe:
    return http_probe(
        _require(entry, "url"),
        method=entry.get("method", "GET"),
        expected_status=int(entry.get("expected_status", 200)),
        timeout=float(entry.get("timeout", 10.0)),
    )


def _tcp(entry: dict[str, Any]) -> AsyncProbe:
    return tcp_probe(
        _require(entry, "host"),
        int(_require(entry, "port")),
        timeout=float(entry.get("timeout", 5.0)),
    )


def _dns(entry: dict[str, Any]) -> AsyncProbe:
    return dns_probe(_require(entry, "hostname"))


PROBE_BUILDERS: dict[str, Callable[[dict[str, Any]], AsyncProbe]] = {
    "http": _http,
    "tcp": _tcp,
    "dns": _dns,
}


def parse_targets(raw: Any, registry: TargetRegistry | None = None) -> TargetRegistry:
    """Register every entry of an already-decoded target document."""
    registry = registry if registry is not None else TargetRegistry()
    if raw is None:
        return registry
    if not isinstance(raw, dict):
        raise TargetFileError("Target file must be a mapping with a 'targets' list")

    entries = raw.get("targets") or []
    if not isinstance(entries, list):
        raise TargetFileError("'targets' must be a list")

    for entry in entries:
        if not isinstance(entry, dict):
            raise TargetFileError(f"Malformed target entry: {entry!r}")
        kind = entry.get("type", "http")
        builder = PROBE_BUILDERS.get(kind)
        if builder is None:
            raise TargetFileError(f"Unknown target type: {kind}")
        try:
            importance = Importance(entry.get("importance", Importance.LOW.value))
        except ValueError as e:
            raise TargetFileError(f"Invalid importance for {entry.get('name', '?')!r}: {e}") from e
        registry.register(str(entry.get("name", "")), importance, builder(entry))

    return registry


def load_targets(path: Path | str) -> TargetRegistry:
    """Parse a YAML target file into a fresh registry."""
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise TargetFileError(f"Could not read target file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise TargetFileError(f"Failed to parse {path}: {e}") from e

    registry = parse_targets(raw)
    logger.info("Loaded %d targets from %s", len(registry), path)
    return registry
