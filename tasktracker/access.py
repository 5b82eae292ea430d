"""
tasktracker/access.py

Project access control: the single place that answers

1. does the principal have any standing in the project? (membership)
2. does the principal own the project? (ownership)

Pure decision logic over the membership store; no FastAPI imports.
Denials are always logged, grants only in dev.
"""

from __future__ import annotations

from uuid import UUID

from tasktracker.config import IS_DEV
from tasktracker.errors import no_access, not_owner
from tasktracker.project_store import ProjectStore


class AccessControl:
    def __init__(self, projects: ProjectStore):
        self.projects = projects

    def has_access(self, principal: UUID, project_id: UUID) -> bool:
        """
        True iff a membership row exists for (project_id, principal), whatever
        its role. A missing row is False, not an error.
        """
        return self.projects.check_project_access(project_id, principal)

    def is_owner(self, principal: UUID, project_id: UUID) -> bool:
        """
        Compare the project's owner with the principal.

        Raises:
            DomainError(NOT_FOUND): the project does not exist
        """
        project = self.projects.get_project(project_id)
        return project.owner_id == principal

    def assert_member(self, principal: UUID, project_id: UUID) -> None:
        if not self.has_access(principal, project_id):
            print(f"[AUTHZ] Membership denied: user_id={principal}, project_id={project_id}")
            raise no_access()
        if IS_DEV:
            print(f"[AUTHZ] Membership granted: user_id={principal}, project_id={project_id}")

    def assert_owner(self, principal: UUID, project_id: UUID) -> None:
        if not self.is_owner(principal, project_id):
            print(f"[AUTHZ] Ownership denied: user_id={principal}, project_id={project_id}")
            raise not_owner()
        if IS_DEV:
            print(f"[AUTHZ] Ownership granted: user_id={principal}, project_id={project_id}")
