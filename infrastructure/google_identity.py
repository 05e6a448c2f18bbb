"""Google ID token verification (Sign in with Google).

The web client obtains a Google ID token and posts it to /auth/google.
GoogleIdTokenVerifier checks it locally with Authlib's JOSE implementation:
signature against Google's published JWKS (fetched through the shared
HttpClient and cached), issuer, audience (our OAuth client id) and expiry.

Verification failures never say which check failed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from authlib.jose import JsonWebKey, JsonWebToken, KeySet
from authlib.jose.errors import JoseError

from config import GoogleSettings
from errors import ConfigurationError, UpstreamError, ValidationError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

GOOGLE_ISSUERS = ["accounts.google.com", "https://accounts.google.com"]

_jwt = JsonWebToken(["RS256"])


class InvalidFederatedCredentialError(ValidationError):
    error_code = "invalid_federated_credential"

    def __init__(self, message: str = "invalid Google credential") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class FederatedIdentity:
    """Identity asserted by a verified Google ID token."""

    provider_user_id: str
    email: str
    name: str
    email_verified: bool


def extract_identity_from_google(claims: Dict[str, Any]) -> Optional[FederatedIdentity]:
    """Build a FederatedIdentity from verified claims, or None if any required claim is blank."""
    sub = str(claims.get("sub") or "").strip()
    email = str(claims.get("email") or "").strip()
    name = str(claims.get("name") or "").strip()
    if not (sub and email and name):
        return None
    return FederatedIdentity(
        provider_user_id=sub,
        email=email,
        name=name,
        email_verified=bool(claims.get("email_verified", False)),
    )


class GoogleIdTokenVerifier:
    def __init__(
        self,
        settings: GoogleSettings,
        http_client: HttpClient,
        clock=time.monotonic,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._clock = clock
        self._key_set: Optional[KeySet] = None
        self._fetched_at: float = 0.0

    def _claims_options(self) -> dict:
        return {
            "iss": {"essential": True, "values": GOOGLE_ISSUERS},
            "aud": {"essential": True, "value": self._settings.google_client_id},
            "sub": {"essential": True},
            "email": {"essential": True},
            "name": {"essential": True},
            "exp": {"essential": True},
        }

    async def _load_keys(self, force: bool = False) -> KeySet:
        fresh = (
            self._key_set is not None
            and self._clock() - self._fetched_at < self._settings.google_jwks_cache_seconds
        )
        if fresh and not force:
            return self._key_set

        try:
            response = await self._http.get(self._settings.google_jwks_url)
        except Exception as e:
            log.error(
                "google_jwks_fetch_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamError("identity provider unavailable") from e

        if response.status_code != 200:
            log.error("google_jwks_fetch_failed", status_code=response.status_code)
            raise UpstreamError("identity provider unavailable")

        self._key_set = JsonWebKey.import_key_set(response.json())
        self._fetched_at = self._clock()
        log.info("google_jwks_refreshed", jwks_size=len(self._key_set.keys))
        return self._key_set

    async def verify(self, id_token: str) -> FederatedIdentity:
        if not self._settings.google_client_id:
            raise ConfigurationError("Google sign-in is not configured")
        if not id_token:
            raise InvalidFederatedCredentialError()

        key_set = await self._load_keys()
        try:
            claims = self._decode(id_token, key_set)
        except ValueError:
            # Unknown kid: Google rotated its keys since the last fetch
            key_set = await self._load_keys(force=True)
            try:
                claims = self._decode(id_token, key_set)
            except ValueError as e:
                log.warning("google_token_rejected", reason="unknown_signing_key")
                raise InvalidFederatedCredentialError() from e

        identity = extract_identity_from_google(claims)
        if identity is None:
            log.warning("google_token_rejected", reason="missing_claims")
            raise InvalidFederatedCredentialError()
        return identity

    def _decode(self, id_token: str, key_set: KeySet) -> Dict[str, Any]:
        try:
            claims = _jwt.decode(
                id_token, key_set, claims_options=self._claims_options()
            )
            claims.validate()
        except JoseError as e:
            log.warning("google_token_rejected", reason=type(e).__name__)
            raise InvalidFederatedCredentialError() from e
        return dict(claims)
