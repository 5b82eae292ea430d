"""
tasktracker/routes_auth.py

Registration, login and logout. A successful register or login returns the
token in the body and also sets it as an HTTP-only session cookie.
"""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Response

from tasktracker.auth_context import Principal, require_principal
from tasktracker.auth_service import AuthService
from tasktracker.config import IS_DEV, TOKEN_COOKIE_NAME, TOKEN_LIFESPAN
from tasktracker.dependencies import get_auth_service
from tasktracker.schemas_auth import LoginRequest, RegisterRequest, TokenResponse

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=int(TOKEN_LIFESPAN.total_seconds()),
        httponly=True,
        secure=not IS_DEV,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    req: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Create an account plus its default project and start a session.

    Raises:
        400: invalid login, username, email or password
        409: login or email already registered
    """
    _, token = service.register(req.login, req.username, req.email, req.password)
    set_token_cookie(response, token)
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
def login(
    req: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    _, token = service.authenticate(req.emailorlogin, req.password)
    set_token_cookie(response, token)
    return TokenResponse(token=token)


@router.post("/logout")
def logout(
    response: Response,
    principal: Principal = Depends(require_principal),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, str]:
    """Revoke the presented token and clear the session cookie."""
    service.logout(principal.token)
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}
