"""
tasktracker/note_store.py

Note persistence, membership-scoped the same way as tasks.
"""

from __future__ import annotations

import uuid
from typing import List
from uuid import UUID

from tasktracker.db import DbConnection, commit, db_errors, execute_query, now_iso, row_to_dict
from tasktracker.errors import no_access, not_found
from tasktracker.models import Note
from tasktracker.task_store import MEMBER_OF_PROJECT, MEMBER_PROJECTS

_NOTE_COLUMNS = "n.id, n.project_id, n.user_id, n.name, n.description, n.created_at"


class NoteStore:
    def __init__(self, conn: DbConnection):
        self.conn = conn

    def create(self, project_id: UUID, user_id: UUID, name: str, description: str) -> Note:
        params = {
            "id": str(uuid.uuid4()),
            "project_id": str(project_id),
            "user_id": str(user_id),
            "name": name,
            "description": description,
            "created_at": now_iso(),
        }
        with db_errors("create note"):
            result = execute_query(
                self.conn,
                f"""
                INSERT INTO notes (id, project_id, user_id, name, description, created_at)
                SELECT :id, :project_id, :user_id, :name, :description, :created_at
                WHERE {MEMBER_OF_PROJECT}
                """,
                params,
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise no_access()
        return Note(**params)

    def get(self, note_id: UUID, user_id: UUID) -> Note:
        with db_errors("get note"):
            row = execute_query(
                self.conn,
                f"""
                SELECT {_NOTE_COLUMNS} FROM notes n
                WHERE n.id = :id AND n.project_id IN ({MEMBER_PROJECTS})
                """,
                {"id": str(note_id), "user_id": str(user_id)},
            ).fetchone()
        if row is None:
            raise not_found("note not found")
        return Note(**row_to_dict(row))

    def list_by_project(self, project_id: UUID, user_id: UUID) -> List[Note]:
        with db_errors("list project notes"):
            rows = execute_query(
                self.conn,
                f"""
                SELECT {_NOTE_COLUMNS}
                FROM notes n
                JOIN project_members pm ON pm.project_id = n.project_id AND pm.user_id = :user_id
                WHERE n.project_id = :project_id
                ORDER BY n.created_at, n.id
                """,
                {"project_id": str(project_id), "user_id": str(user_id)},
            ).fetchall()
        return [Note(**row_to_dict(row)) for row in rows]

    def list_by_user(self, user_id: UUID) -> List[Note]:
        with db_errors("list user notes"):
            rows = execute_query(
                self.conn,
                f"""
                SELECT {_NOTE_COLUMNS} FROM notes n
                WHERE n.project_id IN ({MEMBER_PROJECTS})
                ORDER BY n.created_at, n.id
                """,
                {"user_id": str(user_id)},
            ).fetchall()
        return [Note(**row_to_dict(row)) for row in rows]

    def update(self, note_id: UUID, user_id: UUID, name: str, description: str) -> None:
        with db_errors("update note"):
            result = execute_query(
                self.conn,
                f"""
                UPDATE notes SET name = :name, description = :description
                WHERE id = :id AND project_id IN ({MEMBER_PROJECTS})
                """,
                {"name": name, "description": description, "id": str(note_id), "user_id": str(user_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("note not found")

    def delete(self, note_id: UUID, user_id: UUID) -> None:
        with db_errors("delete note"):
            result = execute_query(
                self.conn,
                f"DELETE FROM notes WHERE id = :id AND project_id IN ({MEMBER_PROJECTS})",
                {"id": str(note_id), "user_id": str(user_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("note not found")
