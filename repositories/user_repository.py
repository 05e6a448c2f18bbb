"""User repository — all reads and writes against the `users` table.

Bound to one AsyncSession; the caller owns the transaction.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schemas.models.credentials import Credentials, link_federated
from schemas.models.user import User
from shared.datetime_utils import utcnow


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_email_or_federated_id(
        self, email: str, federated_id: str
    ) -> list[User]:
        """Return every user matching either value (at most two rows)."""
        result = await self._session.execute(
            select(User).where(
                or_(User.email == email, User.federated_id == federated_id)
            )
        )
        return list(result.scalars().all())

    async def email_exists(self, email: str) -> bool:
        result = await self._session.execute(
            select(User.id).where(User.email == email)
        )
        return result.first() is not None

    async def create(
        self,
        *,
        email: str,
        display_name: str,
        credentials: Credentials,
        email_verified: bool = False,
    ) -> User:
        user = User(
            email=email,
            display_name=display_name,
            password_hash=credentials.password_hash,
            federated_id=credentials.federated_id,
            email_verified=email_verified,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def mark_email_verified(self, user: User) -> User:
        if not user.email_verified:
            user.email_verified = True
            user.updated_at = utcnow()
            await self._session.flush()
        return user

    async def link_federated_id(self, user: User, federated_id: str) -> User:
        """Attach *federated_id* to *user* and mark the email verified."""
        linked = link_federated(user.credentials, federated_id)
        user.federated_id = linked.federated_id
        user.email_verified = True
        user.updated_at = utcnow()
        await self._session.flush()
        return user

    async def update_display_name(
        self, user_id: uuid.UUID, display_name: str
    ) -> Optional[User]:
        user = await self.get_by_id(user_id)
        if user is None:
            return None
        user.display_name = display_name
        user.updated_at = utcnow()
        await self._session.flush()
        return user

    async def delete(self, user_id: uuid.UUID) -> bool:
        result = await self._session.execute(delete(User).where(User.id == user_id))
        return result.rowcount > 0
