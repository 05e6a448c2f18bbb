"""
Profile endpoints. Both require a bearer session token.

GET /user/profile — the caller's profile
PUT /user/profile — change the display name
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_current_user, get_profile_service
from schemas.dto.requests.user import UpdateProfileRequest
from schemas.dto.responses.common import error_responses
from schemas.dto.responses.user import ProfileResponse, ProfileUpdateResponse
from services.profile_service import ProfileService
from services.session_types import AuthenticatedUser

router = APIRouter(
    prefix="/user", tags=["user"], responses=error_responses(400, 401, 404)
)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    return ProfileResponse.from_model(await profiles.get_profile(user.id))


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    body: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    updated = await profiles.update_name(user.id, body.name)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=ProfileResponse.from_model(updated),
    )
