"""Tests for the HTML status page."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from depstatus.api.server import create_app
from depstatus.buildinfo import BuildInfo
from depstatus.config import Settings
from depstatus.health.checker import CheckError, HealthChecker
from depstatus.health.models import Importance
from depstatus.health.registry import TargetRegistry
from depstatus.page.renderer import Link, PageConfig, RenderError, StatusPage


def _get(page: StatusPage, settings: Settings):
    return TestClient(create_app(page=page, settings=settings)).get("/status")


# ── Page handler ─────────────────────────────────────────────────────────────


class TestStatusPageHandler:
    def test_basic_page_without_checker(self, settings: Settings) -> None:
        page = StatusPage(PageConfig(title="Test Status").with_link("Home", "/"))
        resp = _get(page, settings)

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "<title>Test Status</title>" in resp.text
        assert "<h1>Test Status</h1>" in resp.text
        assert '<a href="/">Home</a>' in resp.text
        assert "status-item" not in resp.text.split("</style>")[1]

    def test_successful_check(self, settings: Settings, make_probe) -> None:
        checker = TargetRegistry().register("Database", Importance.HIGH, make_probe("db")).build()
        resp = _get(StatusPage(PageConfig(title="Test Status", checker=checker)), settings)

        assert resp.status_code == 200
        assert '<div class="status-item ok">' in resp.text
        assert "<h3>Database</h3>" in resp.text
        assert "Status: <strong>ok</strong>" in resp.text

    def test_failed_high_importance_check(self, settings: Settings, make_probe) -> None:
        checker = (
            TargetRegistry()
            .register("Database", Importance.HIGH, make_probe("db", error="connection refused"))
            .build()
        )
        resp = _get(StatusPage(PageConfig(title="Test Status", checker=checker)), settings)

        assert resp.status_code == 200
        assert '<div class="status-item fail">' in resp.text
        assert "<h3>Database</h3>" in resp.text
        assert "Status: <strong>fail</strong>" in resp.text
        assert "Error: connection refused" in resp.text

    def test_failed_low_importance_check(self, settings: Settings, make_probe) -> None:
        checker = (
            TargetRegistry()
            .register("Cache", Importance.LOW, make_probe("cache", error="cache miss"))
            .build()
        )
        resp = _get(StatusPage(PageConfig(title="Test Status", checker=checker)), settings)

        assert resp.status_code == 200
        assert '<div class="status-item warning">' in resp.text
        assert "<h3>Cache</h3>" in resp.text
        assert "Status: <strong>fail</strong>" in resp.text
        assert "Warning: cache miss" in resp.text
        assert "Error: cache miss" not in resp.text

    def test_ok_low_importance_check(self, settings: Settings, make_probe) -> None:
        checker = TargetRegistry().register("Cache", Importance.LOW, make_probe("cache")).build()
        resp = _get(StatusPage(PageConfig(checker=checker)), settings)
        assert '<div class="status-item ok">' in resp.text

    def test_multiple_checks_in_order(self, settings: Settings, make_probe) -> None:
        checker = (
            TargetRegistry()
            .register("Database", Importance.HIGH, make_probe("db", delay=0.02))
            .register("Cache", Importance.LOW, make_probe("cache", error="cache miss"))
            .build()
        )
        resp = _get(StatusPage(PageConfig(title="Test Status", checker=checker)), settings)

        body = resp.text
        assert resp.status_code == 200
        assert "<title>Test Status</title>" in body
        assert '<div class="status-item ok">' in body
        assert '<div class="status-item warning">' in body
        assert "Warning: cache miss" in body
        assert body.index("<h3>Database</h3>") < body.index("<h3>Cache</h3>")

    def test_version_info(self, settings: Settings) -> None:
        page = StatusPage(
            PageConfig(title="Test Status", show_version=True),
            build_info=BuildInfo(version="1.2.3", revision="abc123", commit_date="2024-05-01"),
        )
        resp = _get(page, settings)

        assert resp.status_code == 200
        assert '<div class="build-info">' in resp.text
        assert "1.2.3" in resp.text
        assert "abc123" in resp.text

    def test_version_hidden_by_default(self, settings: Settings) -> None:
        page = StatusPage(PageConfig(), build_info=BuildInfo(version="1.2.3"))
        resp = _get(page, settings)
        assert "build-info" not in resp.text.split("</style>")[1]
        assert "1.2.3" not in resp.text

    def test_links_keep_order(self, settings: Settings) -> None:
        config = PageConfig().with_link("OpenAPI Documentation", "/docs").with_link("Metrics", "/metrics")
        body = _get(StatusPage(config), settings).text
        assert body.index('<a href="/docs">OpenAPI Documentation</a>') < body.index(
            '<a href="/metrics">Metrics</a>'
        )

    def test_values_are_escaped(self, settings: Settings, make_probe) -> None:
        checker = (
            TargetRegistry()
            .register("<script>", Importance.LOW, make_probe("x", error="<b>bad</b>"))
            .build()
        )
        body = _get(StatusPage(PageConfig(checker=checker)), settings).text
        assert "<h3>&lt;script&gt;</h3>" in body
        assert "Warning: &lt;b&gt;bad&lt;/b&gt;" in body

    def test_empty_registry_renders(self, settings: Settings) -> None:
        resp = _get(StatusPage(PageConfig(title="Empty", checker=HealthChecker())), settings)
        assert resp.status_code == 200
        assert "<h1>Empty</h1>" in resp.text
        assert "status-item " not in resp.text.split("</style>")[1]

    def test_template_execution_error(self, settings: Settings) -> None:
        page = StatusPage(PageConfig(title="Test Status", template="{{ non_existent_field }}"))
        resp = _get(page, settings)

        assert resp.status_code == 500
        assert resp.text == "Error executing template"

    def test_orchestration_error(self, settings: Settings) -> None:
        checker = TargetRegistry().register("db", "high", AsyncMock()).build()
        page = StatusPage(PageConfig(checker=checker))
        with patch.object(HealthChecker, "check", new=AsyncMock(side_effect=CheckError("boom"))):
            resp = _get(page, settings)

        assert resp.status_code == 500
        assert resp.text == "Error running health checks: boom"


# ── Renderer ─────────────────────────────────────────────────────────────────


class TestStatusPageRenderer:
    def test_custom_template_replaces_default(self, make_probe) -> None:
        checker = (
            TargetRegistry()
            .register("a", "high", make_probe("a"))
            .register("b", "low", make_probe("b", error="down"))
            .build()
        )
        template = "{{ title }}:{% for r in results %} {{ r.name }}={{ r.severity }}{% endfor %}"
        page = StatusPage(PageConfig(title="T", checker=checker, template=template))

        assert asyncio.run(page.render()) == "T: a=ok b=warning"

    def test_template_syntax_error_at_construction(self) -> None:
        with pytest.raises(RenderError, match="parsing html template"):
            StatusPage(PageConfig(template="{% if %}"))

    def test_missing_field_raises_render_error(self) -> None:
        page = StatusPage(PageConfig(template="{{ results[0].name }}"))
        with pytest.raises(RenderError, match="executing template"):
            asyncio.run(page.render())

    def test_build_model(self, make_probe) -> None:
        checker = (
            TargetRegistry()
            .register("db", "high", make_probe("db", error="refused"))
            .build()
        )
        page = StatusPage(
            PageConfig(title="Model", checker=checker, show_version=True).with_link("Home", "/"),
            build_info=BuildInfo(version="9.9.9"),
        )
        model = asyncio.run(page.build_model())

        assert model.title == "Model"
        assert model.version == BuildInfo(version="9.9.9")
        assert model.links == (Link("Home", "/"),)
        (view,) = model.results
        assert (view.name, view.importance, view.status, view.severity, view.error) == (
            "db", "high", "fail", "fail", "refused",
        )

    def test_check_error_propagates(self) -> None:
        checker = TargetRegistry().register("db", "high", AsyncMock()).build()
        page = StatusPage(PageConfig(checker=checker))
        with patch.object(HealthChecker, "check", new=AsyncMock(side_effect=CheckError("boom"))):
            with pytest.raises(CheckError):
                asyncio.run(page.render())

    def test_with_link_returns_copy(self) -> None:
        base = PageConfig(title="Base")
        extended = base.with_link("Home", "/")
        assert base.links == ()
        assert extended.links == (Link("Home", "/"),)
        assert extended.title == "Base"

    def test_defaults(self) -> None:
        html = asyncio.run(StatusPage().render())
        assert "<title>Service Status</title>" in html
