"""
Request DTOs for note endpoints.

CreateNoteRequest  — POST /notes
UpdateNoteRequest  — PUT /notes/{id}
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CreateNoteRequest(BaseModel):
    """Request body for POST /notes."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: str


class UpdateNoteRequest(BaseModel):
    """Request body for PUT /notes/{id}. Omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None
