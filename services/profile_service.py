"""Profile reads and display-name updates for the authenticated user."""

from __future__ import annotations

import uuid

from errors import NotFoundError, ValidationError
from infrastructure.database import Database
from repositories.user_repository import UserRepository
from schemas.models.user import User
from shared.logging import get_logger
from shared.validators import DISPLAY_NAME_MIN_LENGTH, validate_display_name

log = get_logger(__name__)


class ProfileService:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_profile(self, user_id: str) -> User:
        async with self._db.transaction() as session:
            user = await UserRepository(session).get_by_id(uuid.UUID(user_id))
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_name(self, user_id: str, name: str) -> User:
        if not validate_display_name(name):
            raise ValidationError(
                f"Name must be at least {DISPLAY_NAME_MIN_LENGTH} characters long",
                field="name",
            )
        async with self._db.transaction() as session:
            user = await UserRepository(session).update_display_name(
                uuid.UUID(user_id), name.strip()
            )
        if user is None:
            raise NotFoundError("User not found")
        log.info("profile_updated", user_id=user_id)
        return user
