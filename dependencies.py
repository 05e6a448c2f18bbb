"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived resources (database, HTTP clients,
email transport, Google verifier) are created in the app lifespan and read
from app.state; services are cheap wrappers built per request.
"""

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import AppSettings
from infrastructure.database import Database
from infrastructure.email.protocol import EmailProvider
from infrastructure.google_identity import GoogleIdTokenVerifier
from services.account_linking import get_link_policy
from services.auth_service import AuthService
from services.note_service import NoteService
from services.otp_service import DeliveryFailurePolicy, OtpService
from services.profile_service import ProfileService
from services.session_service import SessionVerifier
from services.session_types import AuthenticatedUser
from services.token_service import TokenService

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_email_provider(request: Request) -> EmailProvider:
    """Return the email transport chain built at startup."""
    return request.app.state.email_provider


def get_google_verifier(request: Request) -> GoogleIdTokenVerifier:
    return request.app.state.google_verifier


# ── Services ─────────────────────────────────────────────────────────────────


def get_otp_service(
    settings: AppSettings = Depends(get_settings),
    db: Database = Depends(get_database),
    email_provider: EmailProvider = Depends(get_email_provider),
    tokens: TokenService = Depends(get_token_service),
) -> OtpService:
    return OtpService(
        db,
        email_provider,
        tokens,
        on_delivery_failure=DeliveryFailurePolicy(settings.auth.otp_delivery_failure),
        ttl_seconds=settings.auth.otp_ttl_seconds,
    )


def get_auth_service(
    settings: AppSettings = Depends(get_settings),
    db: Database = Depends(get_database),
    tokens: TokenService = Depends(get_token_service),
    google_verifier: GoogleIdTokenVerifier = Depends(get_google_verifier),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(
        db,
        tokens,
        google_verifier=google_verifier,
        link_policy=get_link_policy(settings.auth.account_link_policy),
        password_hasher=password_hasher,
        min_password_length=settings.auth.min_password_length,
    )


def get_session_verifier(
    db: Database = Depends(get_database),
    tokens: TokenService = Depends(get_token_service),
) -> SessionVerifier:
    return SessionVerifier(db, tokens)


def get_note_service(db: Database = Depends(get_database)) -> NoteService:
    return NoteService(db)


def get_profile_service(db: Database = Depends(get_database)) -> ProfileService:
    return ProfileService(db)


# ── Auth ─────────────────────────────────────────────────────────────────────


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: SessionVerifier = Depends(get_session_verifier),
) -> AuthenticatedUser:
    """Resolve the bearer token; raises UnauthorizedError (401) when absent or invalid."""
    token = credentials.credentials if credentials is not None else None
    return await verifier.authenticate(token)
