"""
Request DTOs for authentication endpoints.

SignupRequest       — POST /auth/signup
SendOtpRequest      — POST /auth/send-otp
VerifyOtpRequest    — POST /auth/verify-otp
LoginRequest        — POST /auth/login
GoogleLoginRequest  — POST /auth/google
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request body for POST /auth/signup."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str
    name: str


class SendOtpRequest(BaseModel):
    """Request body for POST /auth/send-otp."""

    model_config = ConfigDict(populate_by_name=True)

    email: str


class VerifyOtpRequest(BaseModel):
    """Request body for POST /auth/verify-otp.

    ``otp`` is the 6-digit code mailed to the address.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    otp: str


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str


class GoogleLoginRequest(BaseModel):
    """Request body for POST /auth/google.

    The web client posts Google's ID token as ``credential``; ``externalToken``
    is accepted as well.
    """

    model_config = ConfigDict(populate_by_name=True)

    credential: str = Field(
        validation_alias=AliasChoices("credential", "externalToken")
    )
