"""
Declarative base for all relational table models.

Every table uses a UUID primary key generated application-side, so rows
have an id before the INSERT is flushed. TimestampMixin adds created_at
and updated_at columns; updated_at is refreshed on every ORM update.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from shared.datetime_utils import utcnow


class Base(DeclarativeBase):
    """Base for all table models; Base.metadata drives schema creation."""


class UUIDPrimaryKeyMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
