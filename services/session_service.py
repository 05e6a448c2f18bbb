"""
Session verifier — resolves a bearer token to the current user.

The token is checked statelessly (signature, expiry, issuer, audience),
then the user row is re-read so a deleted account stops authenticating
immediately even though its tokens are still structurally valid.
"""

from __future__ import annotations

import uuid
from typing import Optional

import jwt

from errors import AuthenticationError
from infrastructure.database import Database
from repositories.user_repository import UserRepository
from services.session_types import AuthenticatedUser
from services.token_service import TokenService
from shared.log_context import bind_user_context
from shared.logging import get_logger

log = get_logger(__name__)


class UnauthorizedError(AuthenticationError):
    error_code = "unauthorized"


class SessionVerifier:
    def __init__(self, db: Database, tokens: TokenService) -> None:
        self._db = db
        self._tokens = tokens

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        if not token:
            raise UnauthorizedError("Access token required")

        try:
            claims = self._tokens.decode(token)
        except jwt.ExpiredSignatureError:
            log.info("session_rejected", reason="expired")
            raise UnauthorizedError("Invalid or expired token") from None
        except jwt.InvalidTokenError as e:
            log.info("session_rejected", reason=type(e).__name__)
            raise UnauthorizedError("Invalid or expired token") from None

        try:
            user_id = uuid.UUID(claims.user_id)
        except ValueError:
            log.info("session_rejected", reason="malformed_subject")
            raise UnauthorizedError("Invalid or expired token") from None

        async with self._db.transaction() as session:
            user = await UserRepository(session).get_by_id(user_id)

        if user is None:
            log.info("session_rejected", reason="user_not_found")
            raise UnauthorizedError("Invalid or expired token")

        bind_user_context(str(user.id))
        return AuthenticatedUser(
            id=str(user.id),
            email=user.email,
            name=user.display_name,
            email_verified=user.email_verified,
        )
