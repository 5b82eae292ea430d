"""
tasktracker/project_service.py

Project use cases. Every operation takes the authenticated principal first,
asks AccessControl for a decision, and only then touches the store.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from tasktracker.access import AccessControl
from tasktracker.config import IS_DEV
from tasktracker.db import DbConnection
from tasktracker.errors import DomainError, ErrorKind, invalid_input, not_found
from tasktracker.models import Project, ProjectMember, ProjectRole, validate_description, validate_project_name
from tasktracker.project_store import ProjectStore
from tasktracker.user_store import UserStore


class ProjectService:
    def __init__(self, conn: DbConnection):
        self.projects = ProjectStore(conn)
        self.users = UserStore(conn)
        self.access = AccessControl(self.projects)

    def create_project(self, principal: UUID, name: str, description: Optional[str] = "") -> Project:
        """Create a project owned by the principal (owner membership included)."""
        name = validate_project_name(name)
        description = validate_description(description)
        return self.projects.create_project(name, description, principal)

    def list_user_projects(self, principal: UUID) -> List[Project]:
        return self.projects.list_user_projects(principal)

    def get_project(self, principal: UUID, project_id: UUID) -> Project:
        self.access.assert_member(principal, project_id)
        return self.projects.get_project(project_id)

    def update_project(
        self,
        principal: UUID,
        project_id: UUID,
        name: str,
        description: Optional[str] = "",
    ) -> Project:
        name = validate_project_name(name)
        description = validate_description(description)
        self.access.assert_owner(principal, project_id)
        self.projects.update_project(project_id, principal, name, description)
        return self.projects.get_project(project_id)

    def delete_project(self, principal: UUID, project_id: UUID) -> None:
        self.access.assert_owner(principal, project_id)
        self.projects.delete_project(project_id, principal)
        print(f"[PROJECTS] Deleted project_id={project_id}, owner_id={principal}")

    def add_member(self, principal: UUID, project_id: UUID, user_id: UUID) -> ProjectMember:
        """
        Add user_id to the project with role `member`.

        Raises:
            DomainError(NOT_FOUND): project or user does not exist
            DomainError(NOT_OWNER): principal does not own the project
            DomainError(INVALID_INPUT): user_id is the principal
            DomainError(CONFLICT): user is already a member
        """
        self.access.assert_owner(principal, project_id)
        if user_id == principal:
            raise invalid_input("cannot add yourself to a project")
        if not self.users.exists(user_id):
            raise not_found("user not found")

        member = self.projects.add_member(project_id, user_id, ProjectRole.member)
        if IS_DEV:
            print(f"[PROJECTS] Added member user_id={user_id} to project_id={project_id}")
        return member

    def list_members(self, principal: UUID, project_id: UUID) -> List[ProjectMember]:
        self.access.assert_member(principal, project_id)
        return self.projects.list_members(project_id)

    def remove_member(self, principal: UUID, project_id: UUID, user_id: UUID) -> None:
        """
        Owner removes a non-owner member.

        Raises:
            DomainError(NOT_OWNER): principal does not own the project
            DomainError(OWNER_CANNOT_LEAVE): user_id is the project owner
            DomainError(NOT_FOUND): project missing or user_id not a member
        """
        self.access.assert_owner(principal, project_id)
        # Past assert_owner the principal is the owner
        if user_id == principal:
            raise DomainError(ErrorKind.OWNER_CANNOT_LEAVE)

        self.projects.remove_member(project_id, user_id)
        if IS_DEV:
            print(f"[PROJECTS] Removed member user_id={user_id} from project_id={project_id}")

    def leave_project(self, principal: UUID, project_id: UUID) -> None:
        """
        Remove the principal's own membership.

        Raises:
            DomainError(NO_ACCESS): principal is not a member
            DomainError(OWNER_CANNOT_LEAVE): principal owns the project
        """
        self.access.assert_member(principal, project_id)
        if self.access.is_owner(principal, project_id):
            print(f"[AUTHZ] Owner attempted to leave: user_id={principal}, project_id={project_id}")
            raise DomainError(ErrorKind.OWNER_CANNOT_LEAVE)

        self.projects.remove_member(project_id, principal)
        if IS_DEV:
            print(f"[PROJECTS] User left: user_id={principal}, project_id={project_id}")
