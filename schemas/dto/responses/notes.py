"""
Response DTOs for note endpoints.

NoteResponse — a single note (GET/POST/PUT /notes)
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schemas.models.note import Note
from shared.datetime_utils import ensure_utc


class NoteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str
    user_id: str = Field(alias="userId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_model(cls, note: Note) -> "NoteResponse":
        return cls(
            id=str(note.id),
            title=note.title,
            content=note.content,
            user_id=str(note.user_id),
            created_at=ensure_utc(note.created_at),
            updated_at=ensure_utc(note.updated_at),
        )
