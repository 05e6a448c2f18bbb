"""
Shared fixtures.

Tests run against an in-memory SQLite database (aiosqlite) created fresh
for every test; no PostgreSQL server is needed.
"""

from __future__ import annotations

from typing import Optional

import pytest

from config import AuthSettings, DatabaseSettings, JWTSettings
from infrastructure.database import Database
from infrastructure.google_identity import (
    FederatedIdentity,
    InvalidFederatedCredentialError,
)
from repositories.user_repository import UserRepository
from schemas.models.credentials import (
    Credentials,
    federated_credentials,
    link_federated,
    password_credentials,
)
from services.token_service import TokenService
from shared.crypto import build_password_hasher, hash_password

TEST_JWT_SECRET = "test-secret-key-0123456789-abcdefghijklmnop"
SQLITE_URL = "sqlite+aiosqlite://"


class FakeEmailProvider:
    """Records every OTP it is asked to deliver."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[tuple[str, str]] = []

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        self.sent.append((email, otp_code))
        return self.succeed

    def last_code_for(self, email: str) -> Optional[str]:
        for to, code in reversed(self.sent):
            if to == email:
                return code
        return None


class FakeGoogleVerifier:
    """Maps raw test tokens to identities; unknown tokens are rejected."""

    def __init__(self, identities: Optional[dict[str, FederatedIdentity]] = None) -> None:
        self.identities = dict(identities or {})

    async def verify(self, id_token: str) -> FederatedIdentity:
        identity = self.identities.get(id_token)
        if identity is None:
            raise InvalidFederatedCredentialError()
        return identity


@pytest.fixture
def fast_auth_settings() -> AuthSettings:
    return AuthSettings(argon2_time_cost=1, argon2_memory_cost=8, argon2_parallelism=1)


@pytest.fixture
def password_hasher(fast_auth_settings):
    return build_password_hasher(
        fast_auth_settings.argon2_time_cost,
        fast_auth_settings.argon2_memory_cost,
        fast_auth_settings.argon2_parallelism,
    )


@pytest.fixture
def jwt_settings() -> JWTSettings:
    return JWTSettings(
        jwt_secret=TEST_JWT_SECRET, jwt_private_key="", jwt_public_key=""
    )


@pytest.fixture
def token_service(jwt_settings) -> TokenService:
    return TokenService(jwt_settings)


@pytest.fixture
async def database():
    db = Database(DatabaseSettings(database_url=SQLITE_URL))
    await db.connect()
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def fake_email() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def make_user(database, password_hasher):
    """Insert a user; pass password and/or google_id to choose the credential shape."""

    async def _make(
        email: str = "ann@example.com",
        name: str = "Ann",
        password: Optional[str] = "12345678",
        google_id: Optional[str] = None,
        email_verified: bool = False,
    ):
        credentials: Credentials
        if password is not None:
            credentials = password_credentials(hash_password(password, password_hasher))
            if google_id is not None:
                credentials = link_federated(credentials, google_id)
        else:
            credentials = federated_credentials(google_id)
        async with database.transaction() as session:
            return await UserRepository(session).create(
                email=email,
                display_name=name,
                credentials=credentials,
                email_verified=email_verified,
            )

    return _make


@pytest.fixture
def fake_google() -> FakeGoogleVerifier:
    return FakeGoogleVerifier()
