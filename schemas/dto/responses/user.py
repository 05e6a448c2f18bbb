"""Response DTOs for the profile endpoints (GET/PUT /user/profile)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.models.user import User
from shared.datetime_utils import ensure_utc


class ProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    google_id: Optional[str] = Field(default=None, alias="googleId")
    email_verified: bool = Field(alias="emailVerified")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_model(cls, user: User) -> "ProfileResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.display_name,
            google_id=user.federated_id,
            email_verified=user.email_verified,
            created_at=ensure_utc(user.created_at),
            updated_at=ensure_utc(user.updated_at),
        )


class ProfileUpdateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user: ProfileResponse
