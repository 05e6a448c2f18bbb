"""
Response DTOs for authentication endpoints.

UserSummaryResponse — user shape embedded in signup/login responses
SignupResponse      — POST /auth/signup  (201)
AuthResponse        — POST /auth/verify-otp, /auth/login, /auth/google  (200)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from services.session_types import AuthSession, UserSummary


class UserSummaryResponse(BaseModel):
    """Public fields of a user returned after signup or sign-in."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    email_verified: bool = Field(alias="emailVerified")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @classmethod
    def from_summary(cls, summary: UserSummary) -> "UserSummaryResponse":
        return cls(
            id=summary.id,
            email=summary.email,
            name=summary.name,
            email_verified=summary.email_verified,
            created_at=summary.created_at,
        )


class SignupResponse(BaseModel):
    """Response body for POST /auth/signup (201)."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    user: UserSummaryResponse


class AuthResponse(BaseModel):
    """Session token plus user summary returned by every sign-in path."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    token: str
    user: UserSummaryResponse

    @classmethod
    def from_session(cls, message: str, session: AuthSession) -> "AuthResponse":
        return cls(
            message=message,
            token=session.token,
            user=UserSummaryResponse.from_summary(session.user),
        )
