"""
tasktracker/schemas_projects.py

Pydantic schemas for projects and membership.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tasktracker.models import ProjectRole


class ProjectCreateRequest(BaseModel):
    name: str = Field(..., description="Project name, 2-100 chars")
    description: Optional[str] = Field("", description="Free text")


class ProjectUpdateRequest(BaseModel):
    name: str = Field(..., description="Project name, 2-100 chars")
    description: Optional[str] = Field("", description="Free text")


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    owner_id: UUID
    created_at: datetime


class AddMemberRequest(BaseModel):
    user_id: UUID


class ProjectMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    user_id: UUID
    username: Optional[str] = None
    email: Optional[str] = None
    role: ProjectRole
    joined_at: datetime
