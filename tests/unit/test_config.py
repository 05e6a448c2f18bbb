"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    AuthSettings,
    DatabaseSettings,
    EmailSettings,
    GoogleSettings,
    JWTSettings,
)


# ---------------------------------------------------------------------------
# DatabaseSettings
# ---------------------------------------------------------------------------


class TestDatabaseSettings:
    def test_loads_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/notes")
        assert DatabaseSettings().database_url == "postgresql+asyncpg://u:p@db:5432/notes"

    def test_pool_defaults(self, monkeypatch):
        for var in ("DB_POOL_SIZE", "DB_MAX_OVERFLOW", "DB_POOL_TIMEOUT_SECONDS"):
            monkeypatch.delenv(var, raising=False)
        s = DatabaseSettings()
        assert s.db_pool_size == 20
        assert s.db_max_overflow == 0
        assert s.db_pool_timeout_seconds == 10.0

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("sqlite+aiosqlite://", True),
            ("postgresql+asyncpg://localhost/notes", False),
        ],
        ids=["sqlite", "postgres"],
    )
    def test_is_sqlite(self, url, expected):
        assert DatabaseSettings(database_url=url).is_sqlite is expected


# ---------------------------------------------------------------------------
# JWTSettings
# ---------------------------------------------------------------------------


class TestJWTSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "JWT_ISSUER",
            "JWT_AUDIENCE",
            "SESSION_TOKEN_TTL_SECONDS",
            "JWT_PRIVATE_KEY",
            "JWT_PUBLIC_KEY",
            "JWT_SECRET",
        ):
            monkeypatch.delenv(var, raising=False)
        s = JWTSettings()
        assert s.jwt_issuer == "notes-api"
        assert s.jwt_audience == "notes-api.web"
        assert s.session_token_ttl_seconds == 7 * 24 * 3600
        assert s.is_configured is False

    def test_secret_alone_is_enough(self, monkeypatch):
        monkeypatch.delenv("JWT_PRIVATE_KEY", raising=False)
        monkeypatch.delenv("JWT_PUBLIC_KEY", raising=False)
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        s = JWTSettings()
        assert s.use_rs256 is False
        assert s.is_configured is True


@pytest.mark.parametrize(
    "private_key, public_key, expected",
    [
        ("private", "public", True),
        ("private", None, False),
        (None, None, False),
    ],
    ids=["keys_present", "public_missing", "keys_absent"],
)
def test_jwt_use_rs256(monkeypatch, private_key, public_key, expected):
    for var, value in (("JWT_PRIVATE_KEY", private_key), ("JWT_PUBLIC_KEY", public_key)):
        if value:
            monkeypatch.setenv(var, value)
        else:
            monkeypatch.delenv(var, raising=False)
    assert JWTSettings().use_rs256 is expected


# ---------------------------------------------------------------------------
# AuthSettings
# ---------------------------------------------------------------------------


class TestAuthSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "MIN_PASSWORD_LENGTH",
            "OTP_TTL_SECONDS",
            "OTP_DELIVERY_FAILURE",
            "ACCOUNT_LINK_POLICY",
        ):
            monkeypatch.delenv(var, raising=False)
        s = AuthSettings()
        assert s.min_password_length == 8
        assert s.otp_ttl_seconds == 600
        assert s.otp_delivery_failure == "propagate"
        assert s.account_link_policy == "reject-on-conflict"

    def test_policies_from_env(self, monkeypatch):
        monkeypatch.setenv("OTP_DELIVERY_FAILURE", "log_and_continue")
        monkeypatch.setenv("ACCOUNT_LINK_POLICY", "link-by-email")
        s = AuthSettings()
        assert s.otp_delivery_failure == "log_and_continue"
        assert s.account_link_policy == "link-by-email"

    @pytest.mark.parametrize(
        "var, value",
        [
            ("OTP_DELIVERY_FAILURE", "ignore"),
            ("ACCOUNT_LINK_POLICY", "always-link"),
        ],
        ids=["bad_delivery_policy", "bad_link_policy"],
    )
    def test_unknown_policy_rejected(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)
        with pytest.raises(PydanticValidationError):
            AuthSettings()


# ---------------------------------------------------------------------------
# EmailSettings / GoogleSettings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "user, password, expected",
    [("mailer@example.com", "app-pass", True), ("mailer@example.com", "", False), ("", "", False)],
    ids=["both", "no_password", "neither"],
)
def test_smtp_configured(user, password, expected):
    assert EmailSettings(smtp_user=user, smtp_password=password).smtp_configured is expected


def test_google_defaults(monkeypatch):
    monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
    monkeypatch.delenv("GOOGLE_JWKS_URL", raising=False)
    s = GoogleSettings()
    assert s.google_client_id == ""
    assert s.google_jwks_url == "https://www.googleapis.com/oauth2/v3/certs"


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "env, expected",
    [("production", True), ("development", False)],
    ids=["production", "development"],
)
def test_is_production(monkeypatch, env, expected):
    monkeypatch.setenv("ENV", env)
    assert AppSettings().is_production is expected


class TestAppSettings:
    def test_sub_configs_populated(self):
        s = AppSettings()
        assert isinstance(s.db, DatabaseSettings)
        assert isinstance(s.jwt, JWTSettings)
        assert isinstance(s.google, GoogleSettings)
        assert isinstance(s.email, EmailSettings)
        assert isinstance(s.auth, AuthSettings)
        assert s.logging is not None
        assert s.sentry is not None

    def test_explicit_sub_config_kept(self):
        db = DatabaseSettings(database_url="sqlite+aiosqlite://")
        assert AppSettings(db=db).db is db

    def test_api_prefix_default(self, monkeypatch):
        monkeypatch.delenv("API_PREFIX", raising=False)
        assert AppSettings().api_prefix == "/api"
