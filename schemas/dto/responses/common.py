"""
Common response DTOs shared across multiple endpoints.

ErrorResponse    — standard error shape from AppError.to_dict()
HealthResponse   — GET /health
MessageResponse  — generic {message} shape used by several endpoints

error_responses() attaches ErrorResponse to router-level OpenAPI docs.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    checks: dict[str, str]


class MessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str


def error_responses(*status_codes: int) -> dict[int, dict[str, Any]]:
    """OpenAPI ``responses=`` entries documenting ErrorResponse for *status_codes*."""
    return {code: {"model": ErrorResponse} for code in status_codes}
