"""
tasktracker/user_store.py

Credential store: user records resolved by id, email or login.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional
from uuid import UUID

from tasktracker.db import (
    DbConnection,
    commit,
    db_errors,
    execute_query,
    is_unique_violation,
    now_iso,
    rollback,
    row_to_dict,
)
from tasktracker.errors import DomainError, ErrorKind, not_found
from tasktracker.models import User

_USER_COLUMNS = "id, login, username, email, password_hash, created_at"


class UserStore:
    def __init__(self, conn: DbConnection):
        self.conn = conn

    def create(self, login: str, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Raises:
            DomainError(CONFLICT): login or email already taken
        """
        params = {
            "id": str(uuid.uuid4()),
            "login": login,
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "created_at": now_iso(),
        }
        with db_errors("create user"):
            try:
                execute_query(
                    self.conn,
                    """
                    INSERT INTO users (id, login, username, email, password_hash, created_at)
                    VALUES (:id, :login, :username, :email, :password_hash, :created_at)
                    """,
                    params,
                )
                commit(self.conn)
            except Exception as exc:
                rollback(self.conn)
                if is_unique_violation(exc):
                    raise DomainError(ErrorKind.CONFLICT, "user with this login or email already exists") from exc
                raise

        return User(**params)

    def _fetch_one(self, where: str, params: dict[str, Any], label: str) -> Optional[User]:
        with db_errors(label):
            row = execute_query(
                self.conn,
                f"SELECT {_USER_COLUMNS} FROM users WHERE {where}",
                params,
            ).fetchone()
        if row is None:
            return None
        return User(**row_to_dict(row))

    def get_by_id(self, user_id: UUID) -> User:
        user = self._fetch_one("id = :id", {"id": str(user_id)}, "get user by id")
        if user is None:
            raise not_found("user not found")
        return user

    def get_by_email(self, email: str) -> User:
        user = self._fetch_one("email = :email", {"email": email.strip().lower()}, "get user by email")
        if user is None:
            raise not_found("user not found")
        return user

    def get_by_login(self, login: str) -> User:
        user = self._fetch_one("login = :login", {"login": login.strip()}, "get user by login")
        if user is None:
            raise not_found("user not found")
        return user

    def find_by_email_or_login(self, identifier: str) -> Optional[User]:
        """Lookup used by login; returns None instead of raising."""
        identifier = identifier.strip()
        return self._fetch_one(
            "email = :email OR login = :login",
            {"email": identifier.lower(), "login": identifier},
            "get user by email or login",
        )

    def exists(self, user_id: UUID) -> bool:
        with db_errors("check user exists"):
            row = execute_query(
                self.conn,
                "SELECT 1 FROM users WHERE id = :id",
                {"id": str(user_id)},
            ).fetchone()
        return row is not None

    def update_username(self, user_id: UUID, username: str) -> None:
        with db_errors("update username"):
            result = execute_query(
                self.conn,
                "UPDATE users SET username = :username WHERE id = :id",
                {"username": username, "id": str(user_id)},
            )
            commit(self.conn)
        if result.rowcount == 0:
            raise not_found("user not found")
