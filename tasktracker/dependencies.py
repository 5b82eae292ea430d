"""
tasktracker/dependencies.py

Reusable FastAPI dependencies that bind use-case services to the
per-request database connection.

Usage in routes:
    @router.get("/api/projects")
    def list_projects(
        principal: Principal = Depends(require_principal),
        service: ProjectService = Depends(get_project_service),
    ):
        ...

FastAPI caches get_db within a request, so the principal lookup and the
service share one connection.
"""

from __future__ import annotations

from fastapi import Depends

from tasktracker.auth_context import get_db
from tasktracker.auth_service import AuthService
from tasktracker.db import DbConnection
from tasktracker.note_service import NoteService
from tasktracker.project_service import ProjectService
from tasktracker.task_service import TaskService
from tasktracker.user_service import UserService


def get_auth_service(conn: DbConnection = Depends(get_db)) -> AuthService:
    return AuthService(conn)


def get_user_service(conn: DbConnection = Depends(get_db)) -> UserService:
    return UserService(conn)


def get_project_service(conn: DbConnection = Depends(get_db)) -> ProjectService:
    return ProjectService(conn)


def get_task_service(conn: DbConnection = Depends(get_db)) -> TaskService:
    return TaskService(conn)


def get_note_service(conn: DbConnection = Depends(get_db)) -> NoteService:
    return NoteService(conn)
