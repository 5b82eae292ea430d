"""
tasktracker/note_service.py

Note use cases, gated the same way as tasks.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from tasktracker.access import AccessControl
from tasktracker.config import IS_DEV
from tasktracker.db import DbConnection
from tasktracker.models import Note, validate_note_fields
from tasktracker.note_store import NoteStore
from tasktracker.project_store import ProjectStore


class NoteService:
    def __init__(self, conn: DbConnection):
        self.notes = NoteStore(conn)
        self.access = AccessControl(ProjectStore(conn))

    def create_note(self, principal: UUID, project_id: UUID, name: str, description: Optional[str] = "") -> Note:
        name, description = validate_note_fields(name, description)
        self.access.assert_member(principal, project_id)
        note = self.notes.create(project_id, principal, name, description)
        if IS_DEV:
            print(f"[NOTES] Created note_id={note.id}, project_id={project_id}, user_id={principal}")
        return note

    def list_user_notes(self, principal: UUID) -> List[Note]:
        return self.notes.list_by_user(principal)

    def list_project_notes(self, principal: UUID, project_id: UUID) -> List[Note]:
        self.access.assert_member(principal, project_id)
        return self.notes.list_by_project(project_id, principal)

    def get_note(self, principal: UUID, note_id: UUID) -> Note:
        return self.notes.get(note_id, principal)

    def update_note(self, principal: UUID, note_id: UUID, name: str, description: Optional[str] = "") -> Note:
        name, description = validate_note_fields(name, description)
        self.notes.update(note_id, principal, name, description)
        return self.notes.get(note_id, principal)

    def delete_note(self, principal: UUID, note_id: UUID) -> None:
        self.notes.delete(note_id, principal)
        if IS_DEV:
            print(f"[NOTES] Deleted note_id={note_id}, user_id={principal}")
