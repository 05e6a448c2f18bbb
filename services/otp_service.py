"""
OTP issuer — email verification codes.

send_otp() replaces any earlier code for the address and mails the new one.
verify_otp() consumes a live code, flips the user's email_verified flag and
returns a session. Wrong, expired and never-requested codes all fail with
the same InvalidOrExpiredOtpError.

What a failed email delivery means is an explicit DeliveryFailurePolicy
handed to the issuer: PROPAGATE raises UpstreamError, LOG_AND_CONTINUE logs
the code so local development can proceed without a mail transport.
"""

from __future__ import annotations

import enum
from datetime import timedelta

from errors import NotFoundError, UpstreamError, ValidationError
from infrastructure.database import Database
from infrastructure.email.protocol import EmailProvider
from repositories.otp_repository import OtpRepository
from repositories.user_repository import UserRepository
from services.session_types import AuthSession, UserSummary
from services.token_service import TokenService
from shared.crypto import hash_otp
from shared.datetime_utils import utcnow
from shared.generators import generate_otp_code
from shared.logging import get_logger

log = get_logger(__name__)

OTP_EXPIRY_SECONDS = 600  # 10 minutes


class DeliveryFailurePolicy(str, enum.Enum):
    PROPAGATE = "propagate"
    LOG_AND_CONTINUE = "log_and_continue"


class InvalidOrExpiredOtpError(ValidationError):
    error_code = "invalid_or_expired_otp"

    def __init__(self) -> None:
        super().__init__("Invalid or expired OTP", field="otp")


class OtpService:
    def __init__(
        self,
        db: Database,
        email_provider: EmailProvider,
        tokens: TokenService,
        on_delivery_failure: DeliveryFailurePolicy,
        ttl_seconds: int = OTP_EXPIRY_SECONDS,
    ) -> None:
        self._db = db
        self._email = email_provider
        self._tokens = tokens
        self._on_delivery_failure = DeliveryFailurePolicy(on_delivery_failure)
        self._ttl = timedelta(seconds=ttl_seconds)

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    async def send_otp(self, email: str) -> None:
        email = email.strip()
        if not email:
            raise ValidationError("Email is required", field="email")

        code = generate_otp_code()
        expires_at = utcnow() + self._ttl

        async with self._db.transaction() as session:
            if not await UserRepository(session).email_exists(email):
                log.warning("otp_send_failed", reason="user_not_found")
                raise NotFoundError("User not found")
            await OtpRepository(session).replace(email, hash_otp(code), expires_at)

        log.info("otp_created", email=email, expires_at=expires_at.isoformat())

        if await self._email.send_otp_email(email, code):
            log.info("otp_sent", email=email)
            return

        if self._on_delivery_failure is DeliveryFailurePolicy.LOG_AND_CONTINUE:
            log.warning(
                "otp_delivery_failed_code_logged",
                email=email,
                otp_code=code,
            )
            return

        log.error("otp_delivery_failed", email=email)
        raise UpstreamError("Failed to send OTP")

    async def verify_otp(self, email: str, code: str) -> AuthSession:
        email = email.strip()
        code = code.strip()
        if not email:
            raise ValidationError("Email is required", field="email")
        if not code:
            raise ValidationError("OTP is required", field="otp")

        now = utcnow()
        async with self._db.transaction() as session:
            otps = OtpRepository(session)
            if await otps.find_live(email, hash_otp(code), now) is None:
                log.warning("otp_verification_failed", email=email)
                raise InvalidOrExpiredOtpError()

            users = UserRepository(session)
            user = await users.get_by_email(email)
            if user is None:
                log.warning("otp_verification_failed", email=email, reason="user_gone")
                raise InvalidOrExpiredOtpError()

            await users.mark_email_verified(user)
            await otps.delete_for_email(email)
            summary = UserSummary.from_user(user)

        log.info("email_verified_success", user_id=summary.id)
        token = self._tokens.issue(summary.id, summary.email)
        return AuthSession(token=token, user=summary)
