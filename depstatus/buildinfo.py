"""Build metadata shown on the status page."""

from __future__ import annotations

import importlib.metadata
import logging
from dataclasses import dataclass

from depstatus.config import Settings

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


@dataclass(frozen=True)
class BuildInfo:
    version: str = UNKNOWN
    revision: str = UNKNOWN
    commit_date: str = UNKNOWN


def _package_version(dist: str = "depstatus") -> str:
    try:
        return importlib.metadata.version(dist)
    except importlib.metadata.PackageNotFoundError:
        logger.debug("Distribution %s not installed, version unknown", dist)
        return UNKNOWN


def retrieve_build_info(settings: Settings) -> BuildInfo:
    """Resolve build metadata once at startup; missing values become 'unknown'."""
    return BuildInfo(
        version=settings.build_version or _package_version(),
        revision=settings.build_revision or UNKNOWN,
        commit_date=settings.build_commit_date or UNKNOWN,
    )
