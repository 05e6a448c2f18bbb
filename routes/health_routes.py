"""
Health check endpoint.

GET /health — checks relational store connectivity.
Rules:
- Database reachable → "healthy" (200)
- Database failure   → "unhealthy" (503), the app cannot function without it
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from schemas.dto.responses.common import HealthResponse
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}}
)
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        await request.app.state.database.ping()
        checks["database"] = "ok"
    except Exception as e:
        log.warning("health_check_failed", error_type=type(e).__name__)
        checks["database"] = "error"
        overall = "unhealthy"

    status_code = 503 if overall == "unhealthy" else 200
    body = HealthResponse(status=overall, checks=checks)
    return JSONResponse(status_code=status_code, content=body.model_dump())
