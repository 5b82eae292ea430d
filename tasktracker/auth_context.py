"""
tasktracker/auth_context.py

Shared authentication primitives for FastAPI dependency injection.

Contains:
- get_db: per-request database connection
- create_access_token / decode_token: JWT issuance and verification
- Principal: the authenticated caller, resolved once per request
- require_principal: FastAPI dependency for auth enforcement

This module MUST NOT import tasktracker.main to avoid circular dependencies.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Generator, Optional, Tuple
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from tasktracker.config import ALGORITHM, IS_DEV, SECRET_KEY, TOKEN_COOKIE_NAME, TOKEN_LIFESPAN
from tasktracker.db import DbConnection, get_db_connection
from tasktracker.errors import DomainError, ErrorKind
from tasktracker.token_store import TokenStore
from tasktracker.user_store import UserStore

# Bearer header is optional: the session cookie is accepted as well
security = HTTPBearer(auto_error=False)


# ---------------------------------------------------------
# DB Helper
# ---------------------------------------------------------
def get_db() -> Generator[DbConnection, None, None]:
    """
    One connection per request. Closed (and uncommitted work rolled back)
    when the request finishes.
    """
    with get_db_connection() as conn:
        yield conn


# ---------------------------------------------------------
# JWT
# ---------------------------------------------------------
def create_access_token(user_id: UUID) -> Tuple[str, datetime]:
    """Issue a signed token for user_id. Returns (token, expires_at)."""
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + TOKEN_LIFESPAN
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM), expires_at


def decode_token(token: str) -> dict:
    """
    Verify token signature and expiry and return the payload.

    Raises:
        DomainError(INVALID_TOKEN): expired, malformed or missing subject
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise DomainError(ErrorKind.INVALID_TOKEN, "Token expired") from None
    except jwt.InvalidTokenError:
        raise DomainError(ErrorKind.INVALID_TOKEN, "Invalid token") from None

    try:
        UUID(str(payload.get("sub")))
    except ValueError:
        raise DomainError(ErrorKind.INVALID_TOKEN, "Invalid token payload") from None

    return payload


def token_expiry(payload: dict) -> datetime:
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)


# ---------------------------------------------------------
# Principal
# ---------------------------------------------------------
class Principal(BaseModel):
    """
    The authenticated caller. user_id comes from a verified, non-revoked
    token and is the only identity use cases trust.
    """
    user_id: UUID
    token: str = Field(repr=False)


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def require_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    conn: DbConnection = Depends(get_db),
) -> Principal:
    """
    Auth dependency for protected routes.

    Usage:
        @router.get("/protected")
        def protected_route(principal: Principal = Depends(require_principal)):
            ...

    Raises:
        DomainError(INVALID_TOKEN): token missing, invalid, expired, revoked,
            or its user no longer exists
    """
    token = extract_token(request, credentials)
    if not token:
        raise DomainError(ErrorKind.INVALID_TOKEN, "Not authenticated")

    payload = decode_token(token)
    user_id = UUID(payload["sub"])

    if TokenStore(conn).is_revoked(user_id, token):
        print(f"[AUTH] Revoked token presented: user_id={user_id}")
        raise DomainError(ErrorKind.INVALID_TOKEN, "Token revoked")

    if not UserStore(conn).exists(user_id):
        print(f"[AUTH] User not found: user_id={user_id}")
        raise DomainError(ErrorKind.INVALID_TOKEN, "User not found")

    if IS_DEV:
        print(f"[AUTH] Authenticated: user_id={user_id}")

    return Principal(user_id=user_id, token=token)
