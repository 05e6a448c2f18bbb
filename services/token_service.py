"""
Session token issuance and decoding (PyJWT).

Tokens carry the user id (``sub``) and email, plus issuer/audience and a
7-day expiry by default. RS256 is used when a key pair is configured,
HS256 with JWT_SECRET otherwise. Tokens are stateless: there is no
server-side revocation list, the session verifier re-checks that the user
still exists on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import jwt

from config import JWTSettings
from errors import ConfigurationError
from shared.datetime_utils import utcnow


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    email: Optional[str]
    issued_at: int
    expires_at: int


class TokenService:
    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def algorithm(self) -> str:
        return "RS256" if self._settings.use_rs256 else "HS256"

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self._settings.session_token_ttl_seconds)

    def _keys(self) -> tuple[str, str]:
        if self._settings.use_rs256:
            # Support keys provided via env with literal \n sequences
            priv = self._settings.jwt_private_key.replace("\\n", "\n")
            pub = self._settings.jwt_public_key.replace("\\n", "\n")
            return priv, pub
        secret = self._settings.jwt_secret
        if not secret:
            raise ConfigurationError(
                "JWT_SECRET must be set when RS256 keys are not provided"
            )
        return secret, secret

    def issue(self, user_id: str, email: str, now: Optional[datetime] = None) -> str:
        """Mint a signed session token for *user_id*."""
        private_key, _ = self._keys()
        issued = now or utcnow()
        claims = {
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            "sub": str(user_id),
            "email": email,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self.ttl).timestamp()),
        }
        return jwt.encode(claims, private_key, algorithm=self.algorithm)

    def decode(self, token: str) -> SessionClaims:
        """Verify signature, expiry, issuer and audience of *token*.

        Raises:
            jwt.InvalidTokenError (or a subclass such as ExpiredSignatureError)
            when the token is not acceptable.
        """
        _, public_key = self._keys()
        claims = jwt.decode(
            token,
            public_key,
            algorithms=[self.algorithm],
            audience=self._settings.jwt_audience,
            issuer=self._settings.jwt_issuer,
            options={"require": ["exp", "iat", "sub"]},
        )
        return SessionClaims(
            user_id=claims["sub"],
            email=claims.get("email"),
            issued_at=claims["iat"],
            expires_at=claims["exp"],
        )
