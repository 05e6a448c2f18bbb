"""
One-time passcode table model.

Maps to the `otps` table.

`code` stores SHA-256(otp_code) — the plain OTP is never stored.
There is at most one row per email (unique index): issuing a new code
upserts over the previous one. Rows are deleted on successful verification;
expired rows are left in place and never match a lookup.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from schemas.models.base import Base, UUIDPrimaryKeyMixin
from shared.datetime_utils import utcnow


class OneTimePasscode(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "otps"

    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
