"""
tasktracker/schemas_tasks.py

Pydantic schemas for tasks and notes.

Importance and deadline bounds are not repeated here; they are enforced by
tasktracker.models.validate_task_fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tasktracker.models import IMPORTANCE_MIN, TaskStatus


# ========================================================================
# TASK SCHEMAS
# ========================================================================

class TaskCreateRequest(BaseModel):
    project_id: UUID
    title: str
    description: Optional[str] = ""
    importance: int = Field(IMPORTANCE_MIN, strict=True, description="1 (low) to 3 (high)")
    deadline: Optional[datetime] = Field(None, description="Must be in the future")


class TaskUpdateRequest(BaseModel):
    title: str
    description: Optional[str] = ""
    importance: int = Field(IMPORTANCE_MIN, strict=True)
    deadline: Optional[datetime] = None


class TaskStatusUpdateRequest(BaseModel):
    status: str = Field(..., description="waiting, in_progress or completed")


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    user_id: UUID
    title: str
    description: str
    importance: int
    deadline: Optional[datetime] = None
    status: TaskStatus
    created_at: datetime


# ========================================================================
# NOTE SCHEMAS
# ========================================================================

class NoteCreateRequest(BaseModel):
    project_id: UUID
    name: str
    description: Optional[str] = ""


class NoteUpdateRequest(BaseModel):
    name: str
    description: Optional[str] = ""


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    user_id: UUID
    name: str
    description: str
    created_at: datetime
