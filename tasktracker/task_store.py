"""
tasktracker/task_store.py

Task persistence. Every read and write is scoped by the caller's project
membership: the predicate and the write are one statement. On create, zero
rows inserted is NO_ACCESS; afterwards, zero rows affected means "missing
or not yours" (NOT_FOUND).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from tasktracker.db import DbConnection, commit, db_errors, execute_query, now_iso, row_to_dict, to_iso
from tasktracker.errors import no_access, not_found
from tasktracker.models import Task, TaskStatus

MEMBER_PROJECTS = "SELECT project_id FROM project_members WHERE user_id = :user_id"

# Guard for INSERT ... SELECT: the row is written only while the membership exists
MEMBER_OF_PROJECT = (
    "EXISTS (SELECT 1 FROM project_members WHERE project_id = :project_id AND user_id = :user_id)"
)

_TASK_COLUMNS = "t.id, t.project_id, t.user_id, t.title, t.description, t.importance, t.status, t.deadline, t.created_at"


class TaskStore:
    def __init__(self, conn: DbConnection):
        self.conn = conn

    def create(
        self,
        project_id: UUID,
        user_id: UUID,
        title: str,
        description: str,
        importance: int,
        deadline: Optional[datetime],
        status: TaskStatus = TaskStatus.waiting,
    ) -> Task:
        params = {
            "id": str(uuid.uuid4()),
            "project_id": str(project_id),
            "user_id": str(user_id),
            "title": title,
            "description": description,
            "importance": importance,
            "status": status.value,
            "deadline": to_iso(deadline),
            "created_at": now_iso(),
        }
        with db_errors("create task"):
            result = execute_query(
                self.conn,
                f"""
                INSERT INTO tasks (id, project_id, user_id, title, description, importance, status, deadline, created_at)
                SELECT :id, :project_id, :user_id, :title, :description, :importance, :status, :deadline, :created_at
                WHERE {MEMBER_OF_PROJECT}
                """,
                params,
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise no_access()
        return Task(**params)

    def get(self, task_id: UUID, user_id: UUID) -> Task:
        with db_errors("get task"):
            row = execute_query(
                self.conn,
                f"""
                SELECT {_TASK_COLUMNS} FROM tasks t
                WHERE t.id = :id AND t.project_id IN ({MEMBER_PROJECTS})
                """,
                {"id": str(task_id), "user_id": str(user_id)},
            ).fetchone()
        if row is None:
            raise not_found("task not found")
        return Task(**row_to_dict(row))

    def list_by_project(self, project_id: UUID, user_id: UUID) -> List[Task]:
        with db_errors("list project tasks"):
            rows = execute_query(
                self.conn,
                f"""
                SELECT {_TASK_COLUMNS}
                FROM tasks t
                JOIN project_members pm ON pm.project_id = t.project_id AND pm.user_id = :user_id
                WHERE t.project_id = :project_id
                ORDER BY t.created_at, t.id
                """,
                {"project_id": str(project_id), "user_id": str(user_id)},
            ).fetchall()
        return [Task(**row_to_dict(row)) for row in rows]

    def list_by_user(self, user_id: UUID) -> List[Task]:
        """All tasks in every project the user belongs to."""
        with db_errors("list user tasks"):
            rows = execute_query(
                self.conn,
                f"""
                SELECT {_TASK_COLUMNS} FROM tasks t
                WHERE t.project_id IN ({MEMBER_PROJECTS})
                ORDER BY t.created_at, t.id
                """,
                {"user_id": str(user_id)},
            ).fetchall()
        return [Task(**row_to_dict(row)) for row in rows]

    def update(
        self,
        task_id: UUID,
        user_id: UUID,
        title: str,
        description: str,
        importance: int,
        deadline: Optional[datetime],
    ) -> None:
        with db_errors("update task"):
            result = execute_query(
                self.conn,
                f"""
                UPDATE tasks
                SET title = :title, description = :description,
                    importance = :importance, deadline = :deadline
                WHERE id = :id AND project_id IN ({MEMBER_PROJECTS})
                """,
                {
                    "title": title,
                    "description": description,
                    "importance": importance,
                    "deadline": to_iso(deadline),
                    "id": str(task_id),
                    "user_id": str(user_id),
                },
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("task not found")

    def update_status(self, task_id: UUID, user_id: UUID, status: TaskStatus) -> None:
        with db_errors("update task status"):
            result = execute_query(
                self.conn,
                f"""
                UPDATE tasks SET status = :status
                WHERE id = :id AND project_id IN ({MEMBER_PROJECTS})
                """,
                {"status": status.value, "id": str(task_id), "user_id": str(user_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("task not found")

    def delete(self, task_id: UUID, user_id: UUID) -> None:
        with db_errors("delete task"):
            result = execute_query(
                self.conn,
                f"DELETE FROM tasks WHERE id = :id AND project_id IN ({MEMBER_PROJECTS})",
                {"id": str(task_id), "user_id": str(user_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("task not found")
