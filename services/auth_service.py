"""
Auth service — password signup/login and Google sign-in.

Every successful sign-in ends in TokenService.issue(). Failures on the
password path are deliberately uniform: an unknown email, a Google-only
account and a wrong password all raise the same InvalidCredentialError.
Only an unverified email is reported separately (EmailNotVerifiedError),
and only after the password has been checked.
"""

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from sqlalchemy.exc import IntegrityError

from errors import AuthenticationError, ConflictError, ValidationError
from infrastructure.database import Database
from infrastructure.google_identity import FederatedIdentity, GoogleIdTokenVerifier
from repositories.user_repository import UserRepository
from schemas.models.credentials import federated_credentials, password_credentials
from schemas.models.user import User
from services.account_linking import AccountLinkPolicy, RejectOnConflictPolicy
from services.session_types import AuthSession, UserSummary
from services.token_service import TokenService
from shared.crypto import (
    dummy_password_hash,
    hash_password_async,
    verify_password_async,
)
from shared.logging import get_logger
from shared.validators import validate_email, validate_password

log = get_logger(__name__)


class InvalidCredentialError(AuthenticationError):
    error_code = "invalid_credentials"

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class EmailNotVerifiedError(AuthenticationError):
    error_code = "email_not_verified"

    def __init__(self) -> None:
        super().__init__("Please verify your email first")


class WeakPasswordError(ValidationError):
    error_code = "weak_password"


class AuthService:
    def __init__(
        self,
        db: Database,
        tokens: TokenService,
        google_verifier: Optional[GoogleIdTokenVerifier] = None,
        link_policy: Optional[AccountLinkPolicy] = None,
        password_hasher: Optional[PasswordHasher] = None,
        min_password_length: int = 8,
    ) -> None:
        self._db = db
        self._tokens = tokens
        self._google = google_verifier
        self._link_policy = link_policy or RejectOnConflictPolicy()
        self._hasher = password_hasher
        self._min_password_length = min_password_length

    def _session_for(self, user: User) -> AuthSession:
        summary = UserSummary.from_user(user)
        return AuthSession(
            token=self._tokens.issue(summary.id, summary.email), user=summary
        )

    # ── Password path ────────────────────────────────────────────────────────

    async def signup(self, email: str, password: str, name: str) -> UserSummary:
        """Create an unverified password account."""
        email = email.strip()
        name = name.strip()
        if not email or not password or not name:
            raise ValidationError("All fields are required")
        if not validate_email(email):
            raise ValidationError("Invalid email address", field="email")

        ok, missing = validate_password(password, self._min_password_length)
        if not ok:
            raise WeakPasswordError(
                f"Password must be at least {self._min_password_length} characters long",
                field="password",
                details=missing,
            )

        password_hash = await hash_password_async(password, self._hasher)

        try:
            async with self._db.transaction() as session:
                users = UserRepository(session)
                if await users.email_exists(email):
                    log.info("signup_failed", reason="email_taken")
                    raise ConflictError(
                        "User already exists with this email", field="email"
                    )
                user = await users.create(
                    email=email,
                    display_name=name,
                    credentials=password_credentials(password_hash),
                )
                summary = UserSummary.from_user(user)
        except IntegrityError as e:
            # Lost a race against a concurrent signup for the same email
            log.info("signup_failed", reason="email_taken_race")
            raise ConflictError(
                "User already exists with this email", field="email"
            ) from e

        log.info("user_signed_up", user_id=summary.id)
        return summary

    async def login(self, email: str, password: str) -> AuthSession:
        email = email.strip()
        if not email or not password:
            raise ValidationError("Email and password are required")

        async with self._db.transaction() as session:
            user = await UserRepository(session).get_by_email(email)

        # Every failure branch pays for one argon2 verify
        stored_hash = user.password_hash if user is not None else None
        password_ok = await verify_password_async(
            password, stored_hash or dummy_password_hash(self._hasher), self._hasher
        )

        if user is None:
            log.info("login_failed", reason="unknown_email")
            raise InvalidCredentialError()
        if stored_hash is None:
            log.info("login_failed", reason="federated_only", user_id=str(user.id))
            raise InvalidCredentialError()
        if not password_ok:
            log.info("login_failed", reason="wrong_password", user_id=str(user.id))
            raise InvalidCredentialError()
        if not user.email_verified:
            log.info("login_failed", reason="email_not_verified", user_id=str(user.id))
            raise EmailNotVerifiedError()

        log.info("login_success", user_id=str(user.id), method="password")
        return self._session_for(user)

    # ── Federated path ───────────────────────────────────────────────────────

    async def federated_login(self, id_token: str) -> AuthSession:
        if not id_token:
            raise ValidationError("Google credential is required", field="credential")
        if self._google is None:
            raise ValidationError("Google sign-in is not available")

        identity = await self._google.verify(id_token)

        try:
            async with self._db.transaction() as session:
                user = await self._resolve_federated(UserRepository(session), identity)
                result = self._session_for(user)
        except IntegrityError as e:
            log.warning("google_login_failed", reason="integrity_error")
            raise ConflictError("An account with this email already exists") from e

        log.info("login_success", user_id=result.user.id, method="google")
        return result

    async def _resolve_federated(
        self, users: UserRepository, identity: FederatedIdentity
    ) -> User:
        matches = await users.get_by_email_or_federated_id(
            identity.email, identity.provider_user_id
        )
        for user in matches:
            if user.federated_id == identity.provider_user_id:
                return user

        existing = next((u for u in matches if u.email == identity.email), None)
        if existing is not None:
            if existing.federated_id is not None:
                # Same email, different Google account
                log.warning(
                    "google_login_failed",
                    reason="federated_id_mismatch",
                    user_id=str(existing.id),
                )
                raise InvalidCredentialError()
            return await self._link_policy.resolve(users, existing, identity)

        user = await users.create(
            email=identity.email,
            display_name=identity.name,
            credentials=federated_credentials(identity.provider_user_id),
            email_verified=True,
        )
        log.info("user_created_via_google", user_id=str(user.id))
        return user
