"""
tasktracker/schemas_auth.py

Pydantic schemas for auth and user endpoints.
Field rules live in tasktracker.models; these schemas only fix the shapes.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    login: str = Field(..., description="3-50 chars, letters, digits and underscores")
    username: str = Field(..., description="Display name, 2-100 chars")
    email: str = Field(..., description="Email address (stored lowercase)")
    password: str = Field(..., description="8-72 chars")


class LoginRequest(BaseModel):
    emailorlogin: str = Field(..., description="Email or login")
    password: str


class TokenResponse(BaseModel):
    token: str


class UserResponse(BaseModel):
    """Public user view. Never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    login: str
    username: str
    email: str
    created_at: datetime


class UpdateUsernameRequest(BaseModel):
    username: str
