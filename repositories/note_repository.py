"""Note repository — every query is scoped to the owning user."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from schemas.models.note import Note
from shared.datetime_utils import utcnow


class NoteRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: uuid.UUID) -> list[Note]:
        result = await self._session.execute(
            select(Note)
            .where(Note.user_id == user_id)
            .order_by(Note.updated_at.desc(), Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, note_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Note]:
        result = await self._session.execute(
            select(Note).where(Note.id == note_id, Note.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: uuid.UUID, title: str, content: str) -> Note:
        note = Note(user_id=user_id, title=title, content=content)
        self._session.add(note)
        await self._session.flush()
        return note

    async def update(
        self,
        note: Note,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        note.updated_at = utcnow()
        await self._session.flush()
        return note

    async def delete(self, note_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        result = await self._session.execute(
            delete(Note).where(Note.id == note_id, Note.user_id == user_id)
        )
        return result.rowcount > 0
