"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppSettings
from errors import ConfigurationError, register_error_handlers
from infrastructure.database import Database
from infrastructure.email.brevo import BrevoProvider
from infrastructure.email.chain import EmailProviderChain
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.smtp import SmtpProvider
from infrastructure.email.templates import OtpEmailRenderer
from infrastructure.google_identity import GoogleIdTokenVerifier
from infrastructure.http_client import HttpClient
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.notes_routes import router as notes_router
from routes.user_routes import router as user_router
from services.token_service import TokenService
from shared.crypto import build_password_hasher
from shared.log_context import register_request_logging
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def build_email_provider(
    settings: AppSettings, http_client: HttpClient
) -> EmailProvider:
    """Brevo first when an API key is set, SMTP as the fallback."""
    renderer = OtpEmailRenderer(
        app_name=settings.email.email_from_name,
        expires_minutes=settings.auth.otp_ttl_seconds // 60,
    )
    providers: list[EmailProvider] = []
    if settings.email.brevo_api_key:
        providers.append(BrevoProvider(settings.email, http_client, renderer))
    if settings.email.smtp_configured:
        providers.append(SmtpProvider(settings.email, renderer))
    return EmailProviderChain(providers)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    setup_logging(
        log_level=settings.logging.log_level,
        log_format=settings.logging.log_format,
        env=settings.env,
        sentry_enabled=bool(settings.sentry.sentry_dsn),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        if not settings.jwt.is_configured:
            if settings.is_production:
                raise ConfigurationError("JWT signing key is not configured")
            log.error("jwt_signing_key_missing")

        database = Database(settings.db)
        await database.connect()
        if settings.db.db_create_schema:
            await database.create_schema()

        email_http = HttpClient(
            timeout=settings.email.email_socket_timeout_seconds,
            connect_timeout=settings.email.email_connect_timeout_seconds,
        )
        google_http = HttpClient(timeout=settings.google.google_http_timeout_seconds)

        app.state.settings = settings
        app.state.database = database
        app.state.tokens = TokenService(settings.jwt)
        app.state.password_hasher = build_password_hasher(
            settings.auth.argon2_time_cost,
            settings.auth.argon2_memory_cost,
            settings.auth.argon2_parallelism,
        )
        app.state.email_provider = build_email_provider(settings, email_http)
        app.state.google_verifier = GoogleIdTokenVerifier(settings.google, google_http)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await email_http.aclose()
        await google_http.aclose()
        await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_request_logging(app)

    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(notes_router, prefix=settings.api_prefix)
    app.include_router(user_router, prefix=settings.api_prefix)

    return app
