"""
tasktracker/routes_users.py

User profile endpoints. All require authentication.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from tasktracker.auth_context import Principal, require_principal
from tasktracker.dependencies import get_user_service
from tasktracker.schemas_auth import UpdateUsernameRequest, UserResponse
from tasktracker.user_service import UserService

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
)


@router.get("/me", response_model=UserResponse)
def get_me(
    principal: Principal = Depends(require_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.model_validate(service.get_me(principal.user_id))


@router.get("/by-email", response_model=UserResponse)
def get_by_email(
    email: str = Query(..., max_length=255),
    principal: Principal = Depends(require_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.model_validate(service.get_by_email(email))


@router.get("/by-login", response_model=UserResponse)
def get_by_login(
    login: str = Query(..., max_length=50),
    principal: Principal = Depends(require_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.model_validate(service.get_by_login(login))


@router.patch("/username", response_model=UserResponse)
def update_username(
    req: UpdateUsernameRequest,
    principal: Principal = Depends(require_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.model_validate(service.update_username(principal.user_id, req.username))
