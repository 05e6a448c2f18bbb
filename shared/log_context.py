"""
Request logging middleware and context management.

Provides:
- Request ID generation for correlation (echoed as X-Request-ID)
- Request/response logging with timing
- Request context bound through structlog.contextvars so every log line
  emitted while handling a request carries request_id, method and path
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request

from shared.generators import generate_request_id
from shared.logging import get_logger

log = get_logger("notes.request")


def bind_user_context(user_id: str) -> None:
    """Attach the authenticated user id to the current request's log context."""
    structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_log_context() -> None:
    """Drop every contextvar bound for the current request."""
    structlog.contextvars.clear_contextvars()


def _log_request_end(method: str, path: str, status_code: int, duration_ms: int) -> None:
    if status_code >= 500:
        log_fn = log.error
    elif status_code >= 400:
        log_fn = log.warning
    else:
        log_fn = log.info

    log_fn(
        "request_completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def register_request_logging(app: FastAPI) -> None:
    """Register the request logging middleware on *app*."""

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or generate_request_id()

        clear_log_context()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            log.error(
                "unhandled_exception",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        duration_ms = int((time.perf_counter() - start) * 1000)
        _log_request_end(request.method, request.url.path, response.status_code, duration_ms)
        response.headers["X-Request-ID"] = request_id
        clear_log_context()
        return response
