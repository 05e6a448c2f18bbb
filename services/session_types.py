"""Value objects returned by the authentication services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from schemas.models.user import User
from shared.datetime_utils import ensure_utc


@dataclass(frozen=True)
class UserSummary:
    id: str
    email: str
    name: str
    email_verified: bool
    created_at: Optional[datetime]

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.display_name,
            email_verified=user.email_verified,
            created_at=ensure_utc(user.created_at),
        )


@dataclass(frozen=True)
class AuthSession:
    """A freshly issued session token and the user it belongs to."""

    token: str
    user: UserSummary


@dataclass(frozen=True)
class AuthenticatedUser:
    """The user resolved from a bearer token for the current request."""

    id: str
    email: str
    name: str
    email_verified: bool
