"""
tasktracker/errors.py

Closed error taxonomy shared by stores, the access-control core and use cases.

Every failure that crosses a layer boundary is a DomainError carrying an
ErrorKind. Use cases pass these through untouched; the transport layer maps
each kind to exactly one HTTP status via STATUS_BY_KIND.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class ErrorKind(str, Enum):
    """Discriminant for DomainError."""

    NO_ACCESS = "no_access"
    NOT_OWNER = "not_owner"
    OWNER_CANNOT_LEAVE = "owner_cannot_leave"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    INFRASTRUCTURE = "infrastructure"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NO_ACCESS: 403,
    ErrorKind.NOT_OWNER: 403,
    ErrorKind.OWNER_CANNOT_LEAVE: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.INFRASTRUCTURE: 500,
}

DEFAULT_DETAIL: Dict[ErrorKind, str] = {
    ErrorKind.NO_ACCESS: "no access to project",
    ErrorKind.NOT_OWNER: "user is not project owner",
    ErrorKind.OWNER_CANNOT_LEAVE: "project owner cannot leave project",
    ErrorKind.NOT_FOUND: "not found",
    ErrorKind.INVALID_INPUT: "invalid request",
    ErrorKind.CONFLICT: "already exists",
    ErrorKind.INVALID_CREDENTIALS: "invalid credentials",
    ErrorKind.INVALID_TOKEN: "invalid token",
    ErrorKind.INFRASTRUCTURE: "Database error",
}


class DomainError(Exception):
    """A failure with a fixed kind; detail is safe to show to the client."""

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail or DEFAULT_DETAIL[kind]
        super().__init__(f"{kind.value}: {self.detail}")

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


def no_access(detail: str | None = None) -> DomainError:
    return DomainError(ErrorKind.NO_ACCESS, detail)


def not_owner(detail: str | None = None) -> DomainError:
    return DomainError(ErrorKind.NOT_OWNER, detail)


def not_found(detail: str | None = None) -> DomainError:
    return DomainError(ErrorKind.NOT_FOUND, detail)


def invalid_input(detail: str) -> DomainError:
    return DomainError(ErrorKind.INVALID_INPUT, detail)
