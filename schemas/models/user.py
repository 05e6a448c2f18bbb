"""
User table model.

Maps to the `users` table. Column names follow the existing schema
(`password`, `name`, `google_id`); the Python attributes use the
domain names (password_hash, display_name, federated_id).

Two creation paths produce slightly different rows:
- Password signup: password set, google_id NULL, email_verified False
- Google sign-in:  password NULL, google_id set, email_verified True

Both are created through UserRepository.create() from a Credentials value,
so a row with neither password nor google_id is never written; the
ck_users_has_credential constraint rejects one at the store as well.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, String, false
from sqlalchemy.orm import Mapped, mapped_column

from schemas.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from schemas.models.credentials import Credentials, credentials_from_columns


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "password IS NOT NULL OR google_id IS NOT NULL",
            name="ck_users_has_credential",
        ),
    )

    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        "password", String(255), nullable=True
    )
    display_name: Mapped[str] = mapped_column("name", String(255), nullable=False)
    federated_id: Mapped[Optional[str]] = mapped_column(
        "google_id", String(255), unique=True, index=True, nullable=True
    )
    email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    @property
    def credentials(self) -> Credentials:
        return credentials_from_columns(self.password_hash, self.federated_id)

    def __repr__(self) -> str:
        return (
            f"<User(id={self.id}, email={self.email!r}, "
            f"email_verified={self.email_verified})>"
        )
