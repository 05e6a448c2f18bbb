"""
Note endpoints. All require a bearer session token.

GET    /notes       — the caller's notes, most recently updated first
GET    /notes/{id}  — one note
POST   /notes       — create
PUT    /notes/{id}  — update title and/or content
DELETE /notes/{id}  — delete
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dependencies import get_current_user, get_note_service
from schemas.dto.requests.notes import CreateNoteRequest, UpdateNoteRequest
from schemas.dto.responses.common import MessageResponse, error_responses
from schemas.dto.responses.notes import NoteResponse
from services.note_service import NoteService
from services.session_types import AuthenticatedUser

router = APIRouter(
    prefix="/notes", tags=["notes"], responses=error_responses(400, 401, 404)
)


@router.get("", response_model=list[NoteResponse])
async def list_notes(
    user: AuthenticatedUser = Depends(get_current_user),
    notes: NoteService = Depends(get_note_service),
) -> list[NoteResponse]:
    return [NoteResponse.from_model(n) for n in await notes.list_notes(user.id)]


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    notes: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return NoteResponse.from_model(await notes.get_note(user.id, note_id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=NoteResponse)
async def create_note(
    body: CreateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    notes: NoteService = Depends(get_note_service),
) -> NoteResponse:
    note = await notes.create_note(user.id, body.title, body.content)
    return NoteResponse.from_model(note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    body: UpdateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    notes: NoteService = Depends(get_note_service),
) -> NoteResponse:
    note = await notes.update_note(
        user.id, note_id, title=body.title, content=body.content
    )
    return NoteResponse.from_model(note)


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    notes: NoteService = Depends(get_note_service),
) -> MessageResponse:
    await notes.delete_note(user.id, note_id)
    return MessageResponse(message="Note deleted successfully")
