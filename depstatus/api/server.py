"""FastAPI app factory wiring the health endpoint and the status page."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from depstatus import __version__
from depstatus.api.health_routes import health_router
from depstatus.api.page_routes import page_router
from depstatus.buildinfo import retrieve_build_info
from depstatus.config import Settings
from depstatus.config import settings as default_settings
from depstatus.health.checker import HealthChecker
from depstatus.page.renderer import PageConfig, StatusPage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log the configured targets on startup and shutdown."""
    checker: HealthChecker = app.state.health_checker
    logger.info(
        "Serving %d health targets (timeout=%ss)",
        len(checker),
        app.state.settings.check_timeout,
    )

    yield

    logger.info("Shutting down depstatus")


def create_app(
    checker: HealthChecker | None = None,
    page: StatusPage | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the app. Without an explicit page, one is derived from settings and ``checker``."""
    settings = settings or default_settings
    if checker is None:
        checker = HealthChecker()
    if page is None:
        page = StatusPage(
            PageConfig(
                title=settings.page_title,
                show_version=settings.show_version,
                checker=checker,
            ),
            build_info=retrieve_build_info(settings),
        )

    app = FastAPI(
        title="depstatus",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.health_checker = checker
    app.state.status_page = page

    app.include_router(health_router)
    app.include_router(page_router)

    return app
