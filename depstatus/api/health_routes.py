"""JSON health endpoint.

Endpoints:
  GET  /health           — run every probe, 500 if a high-importance target failed
  GET  /health?no_deps   — liveness only, never touches dependencies
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from depstatus.api.schemas import CheckResultOut, ErrorOut
from depstatus.health.aggregate import is_healthy
from depstatus.health.checker import CheckError, HealthChecker

logger = logging.getLogger(__name__)

health_router = APIRouter()

NO_DEPS_PARAM = "no_deps"


@health_router.get("/health")
async def health(request: Request) -> Response:
    """Aggregate health: the status code carries the verdict, the body the details."""
    if NO_DEPS_PARAM in request.query_params:
        return Response(status_code=200)

    checker: HealthChecker = request.app.state.health_checker
    timeout: float | None = request.app.state.settings.check_timeout

    # Bounded by check_timeout; a client disconnect does not cut the pass short
    try:
        results = await checker.check(timeout=timeout)
    except CheckError as e:
        logger.exception("Health check pass failed")
        return JSONResponse(status_code=500, content=ErrorOut(error=str(e)).model_dump())

    status_code = 200 if is_healthy(results) else 500
    try:
        body = [CheckResultOut.from_result(r).model_dump(exclude_none=True) for r in results]
    except (TypeError, ValueError):
        # The verdict still goes out, only the details are lost
        logger.exception("Encoding health response (status %d)", status_code)
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=body)
