"""Unit tests for OtpService (send_otp / verify_otp)."""

from datetime import timedelta

import pytest

from errors import NotFoundError, UpstreamError, ValidationError
from repositories.otp_repository import OtpRepository
from repositories.user_repository import UserRepository
from services.otp_service import (
    DeliveryFailurePolicy,
    InvalidOrExpiredOtpError,
    OtpService,
)
from shared.crypto import hash_otp
from shared.datetime_utils import utcnow


@pytest.fixture
def make_service(database, fake_email, token_service):
    def _make(policy=DeliveryFailurePolicy.PROPAGATE, ttl_seconds=600):
        return OtpService(
            database,
            fake_email,
            token_service,
            on_delivery_failure=policy,
            ttl_seconds=ttl_seconds,
        )

    return _make


async def _live_count(database, email):
    async with database.transaction() as session:
        return await OtpRepository(session).count_live(email, utcnow())


class TestSendOtp:
    async def test_sends_six_digit_code(self, make_service, make_user, fake_email):
        await make_user(email="ann@example.com")
        await make_service().send_otp("ann@example.com")

        code = fake_email.last_code_for("ann@example.com")
        assert code is not None
        assert len(code) == 6 and code.isdigit()

    async def test_unknown_email_not_found(self, make_service, fake_email):
        with pytest.raises(NotFoundError):
            await make_service().send_otp("ghost@example.com")
        assert fake_email.sent == []

    async def test_blank_email_rejected_before_lookup(self, make_service, fake_email):
        with pytest.raises(ValidationError) as exc_info:
            await make_service().send_otp("   ")
        assert exc_info.value.error_code == "validation_error"
        assert exc_info.value.field == "email"
        assert fake_email.sent == []

    async def test_resend_invalidates_previous_code(
        self, database, make_service, make_user, fake_email
    ):
        await make_user(email="ann@example.com")
        service = make_service()
        await service.send_otp("ann@example.com")
        await service.send_otp("ann@example.com")
        assert await _live_count(database, "ann@example.com") == 1

    async def test_delivery_failure_propagates(self, make_service, make_user, fake_email):
        await make_user(email="ann@example.com")
        fake_email.succeed = False
        with pytest.raises(UpstreamError):
            await make_service(DeliveryFailurePolicy.PROPAGATE).send_otp("ann@example.com")

    async def test_delivery_failure_logged_and_continues(
        self, database, make_service, make_user, fake_email
    ):
        await make_user(email="ann@example.com")
        fake_email.succeed = False
        await make_service(DeliveryFailurePolicy.LOG_AND_CONTINUE).send_otp("ann@example.com")
        assert await _live_count(database, "ann@example.com") == 1

    def test_policy_accepts_config_strings(self, make_service):
        service = make_service(policy="log_and_continue")
        assert service._on_delivery_failure is DeliveryFailurePolicy.LOG_AND_CONTINUE

    def test_unknown_policy_rejected(self, make_service):
        with pytest.raises(ValueError):
            make_service(policy="drop")


class TestVerifyOtp:
    async def test_success_verifies_email_and_issues_token(
        self, database, make_service, make_user, fake_email, token_service
    ):
        user = await make_user(email="ann@example.com")
        service = make_service()
        await service.send_otp("ann@example.com")

        result = await service.verify_otp(
            "ann@example.com", fake_email.last_code_for("ann@example.com")
        )

        assert result.user.id == str(user.id)
        assert result.user.email_verified is True
        assert token_service.decode(result.token).user_id == str(user.id)
        async with database.transaction() as session:
            assert (await UserRepository(session).get_by_id(user.id)).email_verified is True
        assert await _live_count(database, "ann@example.com") == 0

    async def test_code_is_single_use(self, make_service, make_user, fake_email):
        await make_user(email="ann@example.com")
        service = make_service()
        await service.send_otp("ann@example.com")
        code = fake_email.last_code_for("ann@example.com")

        await service.verify_otp("ann@example.com", code)
        with pytest.raises(InvalidOrExpiredOtpError):
            await service.verify_otp("ann@example.com", code)

    async def test_wrong_code(self, make_service, make_user, fake_email):
        await make_user(email="ann@example.com")
        service = make_service()
        await service.send_otp("ann@example.com")
        code = fake_email.last_code_for("ann@example.com")
        wrong = "100000" if code != "100000" else "100001"
        with pytest.raises(InvalidOrExpiredOtpError):
            await service.verify_otp("ann@example.com", wrong)

    async def test_never_requested(self, make_service, make_user):
        await make_user(email="ann@example.com")
        with pytest.raises(InvalidOrExpiredOtpError):
            await make_service().verify_otp("ann@example.com", "123456")

    async def test_expired_code(self, database, make_service, make_user):
        await make_user(email="ann@example.com")
        async with database.transaction() as session:
            await OtpRepository(session).replace(
                "ann@example.com", hash_otp("123456"), utcnow() - timedelta(seconds=1)
            )
        with pytest.raises(InvalidOrExpiredOtpError):
            await make_service().verify_otp("ann@example.com", "123456")

    async def test_earlier_code_rejected_after_resend(
        self, make_service, make_user, fake_email
    ):
        await make_user(email="ann@example.com")
        service = make_service()
        await service.send_otp("ann@example.com")
        first = fake_email.last_code_for("ann@example.com")
        await service.send_otp("ann@example.com")
        second = fake_email.last_code_for("ann@example.com")
        if first == second:
            pytest.skip("identical codes drawn twice")
        with pytest.raises(InvalidOrExpiredOtpError):
            await service.verify_otp("ann@example.com", first)
        assert (await service.verify_otp("ann@example.com", second)).token

    @pytest.mark.parametrize(
        "email, code, field", [("  ", "123456", "email"), ("ann@example.com", " ", "otp")]
    )
    async def test_blank_input_is_validation_error(self, make_service, email, code, field):
        with pytest.raises(ValidationError) as exc_info:
            await make_service().verify_otp(email, code)
        assert exc_info.value.error_code == "validation_error"
        assert exc_info.value.field == field

    async def test_failures_share_one_message(self, make_service, make_user):
        await make_user(email="ann@example.com")
        with pytest.raises(InvalidOrExpiredOtpError) as exc_info:
            await make_service().verify_otp("ann@example.com", "000000")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid or expired OTP"
