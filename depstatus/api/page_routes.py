"""HTML status page endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse

from depstatus.health.checker import CheckError
from depstatus.page.renderer import RenderError, StatusPage

logger = logging.getLogger(__name__)

page_router = APIRouter()


@page_router.get("/status", response_class=HTMLResponse)
async def status_page(request: Request) -> Response:
    page: StatusPage = request.app.state.status_page
    timeout: float | None = request.app.state.settings.check_timeout

    try:
        html = await page.render(timeout=timeout)
    except CheckError as e:
        logger.exception("Status page health check failed")
        return PlainTextResponse(f"Error running health checks: {e}", status_code=500)
    except RenderError:
        logger.exception("Status page rendering failed")
        return PlainTextResponse("Error executing template", status_code=500)

    return HTMLResponse(html)
