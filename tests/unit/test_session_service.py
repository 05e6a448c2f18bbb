"""Unit tests for SessionVerifier.authenticate()."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import structlog

from repositories.user_repository import UserRepository
from services.session_service import SessionVerifier, UnauthorizedError
from shared.log_context import clear_log_context


@pytest.fixture
def verifier(database, token_service):
    return SessionVerifier(database, token_service)


def _forge(jwt_settings, secret=None, **claims):
    now = int(datetime.now(timezone.utc).timestamp())
    payload = {
        "iss": jwt_settings.jwt_issuer,
        "aud": jwt_settings.jwt_audience,
        "sub": str(uuid.uuid4()),
        "email": "ann@example.com",
        "iat": now,
        "exp": now + 3600,
    }
    payload.update(claims)
    return jwt.encode(payload, secret or jwt_settings.jwt_secret, algorithm="HS256")


class TestAuthenticate:
    async def test_resolves_user(self, verifier, make_user, token_service):
        user = await make_user(email="ann@example.com", name="Ann", email_verified=True)
        current = await verifier.authenticate(token_service.issue(str(user.id), user.email))
        assert current.id == str(user.id)
        assert current.email == "ann@example.com"
        assert current.name == "Ann"
        assert current.email_verified is True

    async def test_binds_user_id_to_log_context(self, verifier, make_user, token_service):
        user = await make_user()
        clear_log_context()
        await verifier.authenticate(token_service.issue(str(user.id), user.email))
        assert structlog.contextvars.get_contextvars()["user_id"] == str(user.id)
        clear_log_context()
        assert structlog.contextvars.get_contextvars() == {}

    @pytest.mark.parametrize("token", [None, ""], ids=["none", "empty"])
    async def test_missing_token(self, verifier, token):
        with pytest.raises(UnauthorizedError) as exc_info:
            await verifier.authenticate(token)
        assert exc_info.value.status_code == 401

    async def test_malformed_token(self, verifier):
        with pytest.raises(UnauthorizedError):
            await verifier.authenticate("definitely-not-a-jwt")

    async def test_bad_signature(self, verifier, make_user, jwt_settings):
        user = await make_user()
        token = _forge(jwt_settings, secret="another-secret-0123456789-abcdefghijkl", sub=str(user.id))
        with pytest.raises(UnauthorizedError):
            await verifier.authenticate(token)

    async def test_expired(self, verifier, make_user, token_service):
        user = await make_user()
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = token_service.issue(str(user.id), user.email, now=issued)
        with pytest.raises(UnauthorizedError):
            await verifier.authenticate(token)

    async def test_non_uuid_subject(self, verifier, jwt_settings):
        with pytest.raises(UnauthorizedError):
            await verifier.authenticate(_forge(jwt_settings, sub="not-a-uuid"))

    async def test_deleted_user_rejected(self, database, verifier, make_user, token_service):
        user = await make_user()
        token = token_service.issue(str(user.id), user.email)
        assert (await verifier.authenticate(token)).id == str(user.id)

        async with database.transaction() as session:
            await UserRepository(session).delete(user.id)

        with pytest.raises(UnauthorizedError):
            await verifier.authenticate(token)
