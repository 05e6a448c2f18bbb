"""Request DTOs for the profile endpoint (PUT /user/profile)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UpdateProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
