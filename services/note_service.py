"""Note CRUD for the authenticated user.

Every call is scoped to the owner: a note that exists but belongs to
someone else is reported exactly like a missing one.
"""

from __future__ import annotations

import uuid
from typing import Optional

from errors import NotFoundError, ValidationError
from infrastructure.database import Database
from repositories.note_repository import NoteRepository
from schemas.models.note import Note
from shared.logging import get_logger
from shared.validators import NOTE_TITLE_MAX_LENGTH, validate_note_title

log = get_logger(__name__)


def _parse_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError("Note not found") from None


def _check_title(title: str) -> None:
    if not validate_note_title(title):
        raise ValidationError(
            f"Title must be less than {NOTE_TITLE_MAX_LENGTH} characters",
            field="title",
        )


class NoteService:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_notes(self, user_id: str) -> list[Note]:
        async with self._db.transaction() as session:
            return await NoteRepository(session).list_for_user(uuid.UUID(user_id))

    async def get_note(self, user_id: str, note_id: str) -> Note:
        nid = _parse_id(note_id)
        async with self._db.transaction() as session:
            note = await NoteRepository(session).get(nid, uuid.UUID(user_id))
        if note is None:
            raise NotFoundError("Note not found")
        return note

    async def create_note(self, user_id: str, title: str, content: str) -> Note:
        title = (title or "").strip()
        content = (content or "").strip()
        if not title or not content:
            raise ValidationError("Title and content are required")
        _check_title(title)

        async with self._db.transaction() as session:
            note = await NoteRepository(session).create(
                uuid.UUID(user_id), title, content
            )
        log.info("note_created", note_id=str(note.id))
        return note

    async def update_note(
        self,
        user_id: str,
        note_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        if title is None and content is None:
            raise ValidationError("At least title or content must be provided")
        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("Title must not be empty", field="title")
            _check_title(title)
        if content is not None:
            content = content.strip()
            if not content:
                raise ValidationError("Content must not be empty", field="content")

        nid = _parse_id(note_id)
        async with self._db.transaction() as session:
            notes = NoteRepository(session)
            note = await notes.get(nid, uuid.UUID(user_id))
            if note is None:
                raise NotFoundError("Note not found")
            note = await notes.update(note, title=title, content=content)
        log.info("note_updated", note_id=str(note.id))
        return note

    async def delete_note(self, user_id: str, note_id: str) -> None:
        nid = _parse_id(note_id)
        async with self._db.transaction() as session:
            deleted = await NoteRepository(session).delete(nid, uuid.UUID(user_id))
        if not deleted:
            raise NotFoundError("Note not found")
        log.info("note_deleted", note_id=str(nid))
