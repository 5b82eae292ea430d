"""
tasktracker/routes_notes.py

Note endpoints, membership-gated like tasks.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from tasktracker.auth_context import Principal, require_principal
from tasktracker.dependencies import get_note_service
from tasktracker.note_service import NoteService
from tasktracker.schemas_tasks import NoteCreateRequest, NoteResponse, NoteUpdateRequest

router = APIRouter(
    prefix="/api/notes",
    tags=["notes"],
)


@router.get("/all", response_model=List[NoteResponse])
def list_notes(
    principal: Principal = Depends(require_principal),
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return [NoteResponse.model_validate(n) for n in service.list_user_notes(principal.user_id)]


@router.post("/create", response_model=NoteResponse, status_code=201)
def create_note(
    req: NoteCreateRequest,
    principal: Principal = Depends(require_principal),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    note = service.create_note(principal.user_id, req.project_id, req.name, req.description)
    return NoteResponse.model_validate(note)


@router.get("/{note_id}", response_model=NoteResponse)
def get_note(
    note_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return NoteResponse.model_validate(service.get_note(principal.user_id, note_id))


@router.put("/{note_id}/edit", response_model=NoteResponse)
def update_note(
    req: NoteUpdateRequest,
    note_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    note = service.update_note(principal.user_id, note_id, req.name, req.description)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}", status_code=204)
def delete_note(
    note_id: UUID = Path(...),
    principal: Principal = Depends(require_principal),
    service: NoteService = Depends(get_note_service),
) -> Response:
    service.delete_note(principal.user_id, note_id)
    return Response(status_code=204)
