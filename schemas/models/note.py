"""
Note table model.

Maps to the `notes` table. Notes belong to exactly one user and are removed
with it (ON DELETE CASCADE).
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from schemas.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from shared.validators import NOTE_TITLE_MAX_LENGTH


class Note(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "notes"
    __table_args__ = (
        # Serves the per-user listing, newest first
        Index("ix_notes_user_id_updated_at", "user_id", "updated_at"),
    )

    title: Mapped[str] = mapped_column(String(NOTE_TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
