"""
tasktracker/project_store.py

Project membership store: projects and the project_members relation.

Owner-only writes carry an `owner_id` predicate. Member removal never
deletes a row with role `owner`.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List
from uuid import UUID

from tasktracker.config import IS_DEV
from tasktracker.db import (
    DbConnection,
    commit,
    db_errors,
    execute_query,
    is_unique_violation,
    now_iso,
    rollback,
    row_to_dict,
)
from tasktracker.errors import DomainError, ErrorKind, not_found
from tasktracker.models import Project, ProjectMember, ProjectRole

_PROJECT_COLUMNS = "p.id, p.name, p.description, p.owner_id, p.created_at"


class ProjectStore:
    def __init__(self, conn: DbConnection):
        self.conn = conn

    # ---------------------------------------------------------
    # Projects
    # ---------------------------------------------------------
    def create_project(self, name: str, description: str, owner_id: UUID) -> Project:
        """
        Insert the project and its owner membership row in one transaction.

        Either both rows are committed or neither is.
        """
        created_at = now_iso()
        project_params = {
            "id": str(uuid.uuid4()),
            "name": name,
            "description": description,
            "owner_id": str(owner_id),
            "created_at": created_at,
        }

        with db_errors("create project"):
            try:
                execute_query(
                    self.conn,
                    """
                    INSERT INTO projects (id, name, description, owner_id, created_at)
                    VALUES (:id, :name, :description, :owner_id, :created_at)
                    """,
                    project_params,
                )
                self._insert_member(project_params["id"], str(owner_id), ProjectRole.owner, created_at)
                commit(self.conn)
            except Exception:
                rollback(self.conn)
                raise

        if IS_DEV:
            print(f"[PROJECTS] Created project_id={project_params['id']}, owner_id={owner_id}")

        return Project(**project_params)

    def get_project(self, project_id: UUID) -> Project:
        with db_errors("get project"):
            row = execute_query(
                self.conn,
                f"SELECT {_PROJECT_COLUMNS} FROM projects p WHERE p.id = :id",
                {"id": str(project_id)},
            ).fetchone()
        if row is None:
            raise not_found("project not found")
        return Project(**row_to_dict(row))

    def list_user_projects(self, user_id: UUID) -> List[Project]:
        with db_errors("list user projects"):
            rows = execute_query(
                self.conn,
                f"""
                SELECT {_PROJECT_COLUMNS}
                FROM projects p
                JOIN project_members pm ON pm.project_id = p.id
                WHERE pm.user_id = :user_id
                ORDER BY p.created_at, p.id
                """,
                {"user_id": str(user_id)},
            ).fetchall()
        return [Project(**row_to_dict(row)) for row in rows]

    def update_project(self, project_id: UUID, owner_id: UUID, name: str, description: str) -> None:
        with db_errors("update project"):
            result = execute_query(
                self.conn,
                """
                UPDATE projects SET name = :name, description = :description
                WHERE id = :id AND owner_id = :owner_id
                """,
                {
                    "name": name,
                    "description": description,
                    "id": str(project_id),
                    "owner_id": str(owner_id),
                },
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("project not found")

    def delete_project(self, project_id: UUID, owner_id: UUID) -> None:
        with db_errors("delete project"):
            result = execute_query(
                self.conn,
                "DELETE FROM projects WHERE id = :id AND owner_id = :owner_id",
                {"id": str(project_id), "owner_id": str(owner_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("project not found")

    # ---------------------------------------------------------
    # Membership
    # ---------------------------------------------------------
    def check_project_access(self, project_id: UUID, user_id: UUID) -> bool:
        with db_errors("check project access"):
            row = execute_query(
                self.conn,
                """
                SELECT 1 FROM project_members
                WHERE project_id = :project_id AND user_id = :user_id
                """,
                {"project_id": str(project_id), "user_id": str(user_id)},
            ).fetchone()
        return row is not None

    def _insert_member(self, project_id: str, user_id: str, role: ProjectRole, joined_at: str) -> Dict[str, Any]:
        params = {
            "id": str(uuid.uuid4()),
            "project_id": project_id,
            "user_id": user_id,
            "role": role.value,
            "joined_at": joined_at,
        }
        execute_query(
            self.conn,
            """
            INSERT INTO project_members (id, project_id, user_id, role, joined_at)
            VALUES (:id, :project_id, :user_id, :role, :joined_at)
            """,
            params,
        )
        return params

    def add_member(self, project_id: UUID, user_id: UUID, role: ProjectRole = ProjectRole.member) -> ProjectMember:
        """
        Raises:
            DomainError(CONFLICT): the user is already a member of the project
        """
        with db_errors("add project member"):
            try:
                params = self._insert_member(str(project_id), str(user_id), role, now_iso())
                commit(self.conn)
            except Exception as exc:
                rollback(self.conn)
                if is_unique_violation(exc):
                    raise DomainError(ErrorKind.CONFLICT, "user is already a project member") from exc
                raise
        return ProjectMember(**params)

    def remove_member(self, project_id: UUID, user_id: UUID) -> None:
        """Delete a non-owner membership row; zero rows affected is NOT_FOUND."""
        with db_errors("remove project member"):
            result = execute_query(
                self.conn,
                """
                DELETE FROM project_members
                WHERE project_id = :project_id AND user_id = :user_id AND role != 'owner'
                """,
                {"project_id": str(project_id), "user_id": str(user_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("project member not found")

    def list_members(self, project_id: UUID) -> List[ProjectMember]:
        with db_errors("list project members"):
            rows = execute_query(
                self.conn,
                """
                SELECT pm.id, pm.project_id, pm.user_id, pm.role, pm.joined_at,
                       u.username, u.email
                FROM project_members pm
                JOIN users u ON u.id = pm.user_id
                WHERE pm.project_id = :project_id
                ORDER BY pm.joined_at, pm.id
                """,
                {"project_id": str(project_id)},
            ).fetchall()
        return [ProjectMember(**row_to_dict(row)) for row in rows]
