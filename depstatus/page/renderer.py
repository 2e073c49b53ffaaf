"""Status page renderer — HTML view of a fresh check pass.

The page is configured once through an immutable PageConfig and rendered
per request. Rendering is fully buffered into a string, so a template
failure never leaves a half-written document on the wire.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    Template,
    TemplateError,
    select_autoescape,
)

from depstatus.buildinfo import BuildInfo
from depstatus.health.aggregate import severity
from depstatus.health.checker import HealthChecker
from depstatus.health.models import CheckResult

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "status.html"
DEFAULT_TITLE = "Service Status"


class RenderError(Exception):
    """Raised when the page template cannot be parsed or executed."""


# ── Configuration ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Link:
    name: str
    url: str


@dataclass(frozen=True)
class PageConfig:
    """Static page configuration, applied once before serving."""

    title: str = DEFAULT_TITLE
    links: tuple[Link, ...] = ()
    show_version: bool = False
    checker: HealthChecker | None = None
    template: str | None = None  # Jinja2 source; replaces the default page

    def with_link(self, name: str, url: str) -> PageConfig:
        """Return a copy with one more navigation link appended."""
        return replace(self, links=(*self.links, Link(name, url)))


# ── Render model ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ResultView:
    """Template-facing view of one check result."""

    name: str
    importance: str
    status: str
    severity: str
    error: str | None
    duration_ms: float

    @classmethod
    def from_result(cls, result: CheckResult) -> ResultView:
        return cls(
            name=result.target.name,
            importance=result.target.importance.value,
            status=result.status.value,
            severity=severity(result).value,
            error=result.error,
            duration_ms=result.duration_ms,
        )


@dataclass
class RenderModel:
    title: str
    version: BuildInfo | None = None
    results: list[ResultView] = field(default_factory=list)
    links: tuple[Link, ...] = ()

    def context(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "version": self.version,
            "results": self.results,
            "links": self.links,
        }


# ── Renderer ─────────────────────────────────────────────────────────────────


class StatusPage:
    """Renders the status page for a PageConfig."""

    def __init__(self, config: PageConfig | None = None, build_info: BuildInfo | None = None) -> None:
        self.config = config or PageConfig()
        self._build_info = build_info or BuildInfo()
        self._env = Environment(
            loader=PackageLoader("depstatus.page"),
            autoescape=select_autoescape(default_for_string=True),
            undefined=StrictUndefined,
        )
        self._template = self._compile()

    def _compile(self) -> Template:
        try:
            if self.config.template is None:
                return self._env.get_template(DEFAULT_TEMPLATE)
            return self._env.from_string(self.config.template)
        except TemplateError as e:
            raise RenderError(f"parsing html template: {e}") from e

    @property
    def checker(self) -> HealthChecker | None:
        return self.config.checker

    async def build_model(self, timeout: float | None = None) -> RenderModel:
        """Run the attached checker (if any) and assemble the render model.

        CheckError from the checker propagates unchanged.
        """
        results: list[CheckResult] = []
        if self.config.checker is not None:
            results = await self.config.checker.check(timeout=timeout)

        return RenderModel(
            title=self.config.title,
            version=self._build_info if self.config.show_version else None,
            results=[ResultView.from_result(r) for r in results],
            links=self.config.links,
        )

    def render_model(self, model: RenderModel) -> str:
        try:
            return self._template.render(**model.context())
        except Exception as e:
            raise RenderError(f"executing template: {e}") from e

    async def render(self, timeout: float | None = None) -> str:
        return self.render_model(await self.build_model(timeout=timeout))
