"""
tasktracker/models.py

Domain records and field validation.

The validate_* helpers are the single place field bounds are enforced;
they raise INVALID_INPUT and return normalized values.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from tasktracker.errors import invalid_input

# Field bounds (the only place they are enforced)
PROJECT_NAME_MIN = 2
PROJECT_NAME_MAX = 100
TASK_TITLE_MAX = 200
DESCRIPTION_MAX = 5000
IMPORTANCE_MIN = 1
IMPORTANCE_MAX = 3
NOTE_NAME_MIN = 2
NOTE_NAME_MAX = 100
LOGIN_MIN = 3
LOGIN_MAX = 50
USERNAME_MIN = 2
USERNAME_MAX = 100
EMAIL_MAX = 255
PASSWORD_MIN = 8
PASSWORD_MAX = 72

LOGIN_RE = re.compile(r"^[a-zA-Z0-9_]+$")
EMAIL_RE = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,}$")


# Enums
class ProjectRole(str, Enum):
    owner = "owner"
    member = "member"


class TaskStatus(str, Enum):
    waiting = "waiting"
    in_progress = "in_progress"
    completed = "completed"


# Models
class User(BaseModel):
    id: UUID
    login: str
    username: str
    email: str
    password_hash: str = Field(repr=False)
    created_at: datetime


class Project(BaseModel):
    id: UUID
    name: str
    description: str = ""
    owner_id: UUID
    created_at: datetime


class ProjectMember(BaseModel):
    id: UUID
    project_id: UUID
    user_id: UUID
    role: ProjectRole
    joined_at: datetime
    # Joined from users for member listings
    username: Optional[str] = None
    email: Optional[str] = None


class Task(BaseModel):
    id: UUID
    project_id: UUID
    user_id: UUID
    title: str
    description: str = ""
    importance: int = IMPORTANCE_MIN
    status: TaskStatus = TaskStatus.waiting
    deadline: Optional[datetime] = None
    created_at: datetime


class Note(BaseModel):
    id: UUID
    project_id: UUID
    user_id: UUID
    name: str
    description: str = ""
    created_at: datetime


# ---------------------------------------------------------
# Field validation
# ---------------------------------------------------------
def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_project_name(name: str) -> str:
    """Return the trimmed project name or raise INVALID_INPUT."""
    name = (name or "").strip()
    if not name:
        raise invalid_input("name is required")
    if len(name) < PROJECT_NAME_MIN or len(name) > PROJECT_NAME_MAX:
        raise invalid_input(f"name must be between {PROJECT_NAME_MIN} and {PROJECT_NAME_MAX} characters")
    return name


def validate_description(description: Optional[str]) -> str:
    description = description or ""
    if len(description) > DESCRIPTION_MAX:
        raise invalid_input(f"description must be at most {DESCRIPTION_MAX} characters")
    return description


def validate_task_fields(
    title: str,
    description: Optional[str],
    importance: int,
    deadline: Optional[datetime],
    now: Optional[datetime] = None,
) -> tuple[str, str, int, Optional[datetime]]:
    """
    Validate task fields for create and full update.

    Returns the normalised (title, description, importance, deadline);
    deadline is converted to UTC.
    """
    title = (title or "").strip()
    if not title:
        raise invalid_input("title is required")
    if len(title) > TASK_TITLE_MAX:
        raise invalid_input(f"title must be at most {TASK_TITLE_MAX} characters")

    description = validate_description(description)

    if isinstance(importance, bool) or not isinstance(importance, int):
        raise invalid_input("importance must be an integer")
    if importance < IMPORTANCE_MIN or importance > IMPORTANCE_MAX:
        raise invalid_input(f"importance must be between {IMPORTANCE_MIN} and {IMPORTANCE_MAX}")

    if deadline is not None:
        deadline = _as_utc(deadline)
        current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        if deadline <= current:
            raise invalid_input("deadline must be in the future")

    return title, description, importance, deadline


def validate_task_status(status: str) -> TaskStatus:
    try:
        return TaskStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise invalid_input(f"status must be one of: {allowed}") from None


def validate_note_fields(name: str, description: Optional[str]) -> tuple[str, str]:
    name = (name or "").strip()
    if not name:
        raise invalid_input("name is required")
    if len(name) < NOTE_NAME_MIN or len(name) > NOTE_NAME_MAX:
        raise invalid_input(f"name must be between {NOTE_NAME_MIN} and {NOTE_NAME_MAX} characters")
    return name, validate_description(description)


def validate_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise invalid_input("username is required")
    if len(username) < USERNAME_MIN or len(username) > USERNAME_MAX:
        raise invalid_input(f"username must be between {USERNAME_MIN} and {USERNAME_MAX} characters")
    return username


def validate_registration(login: str, username: str, email: str, password: str) -> tuple[str, str, str]:
    """
    Validate registration fields.

    Returns (login, username, normalised email). The password is checked
    but never returned or trimmed.
    """
    login = (login or "").strip()
    if not login:
        raise invalid_input("login is required")
    if len(login) < LOGIN_MIN or len(login) > LOGIN_MAX:
        raise invalid_input(f"login must be between {LOGIN_MIN} and {LOGIN_MAX} characters")
    if not LOGIN_RE.match(login):
        raise invalid_input("login can only contain letters, numbers and underscores")

    username = validate_username(username)

    email = (email or "").strip().lower()
    if not email:
        raise invalid_input("email is required")
    if len(email) > EMAIL_MAX:
        raise invalid_input("email is too long")
    if not EMAIL_RE.match(email):
        raise invalid_input("invalid email format")

    if not password or not password.strip():
        raise invalid_input("password is required")
    if len(password) < PASSWORD_MIN:
        raise invalid_input(f"password must be at least {PASSWORD_MIN} characters long")
    if len(password) > PASSWORD_MAX:
        raise invalid_input("password is too long")

    return login, username, email
