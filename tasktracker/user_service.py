"""
tasktracker/user_service.py

User profile lookups and the one mutable user field (username).
"""

from __future__ import annotations

from uuid import UUID

from tasktracker.config import IS_DEV
from tasktracker.db import DbConnection
from tasktracker.errors import invalid_input
from tasktracker.models import User, validate_username
from tasktracker.user_store import UserStore


class UserService:
    def __init__(self, conn: DbConnection):
        self.users = UserStore(conn)

    def get_me(self, principal: UUID) -> User:
        return self.users.get_by_id(principal)

    def get_by_email(self, email: str) -> User:
        if not (email or "").strip():
            raise invalid_input("email is required")
        return self.users.get_by_email(email)

    def get_by_login(self, login: str) -> User:
        if not (login or "").strip():
            raise invalid_input("login is required")
        return self.users.get_by_login(login)

    def update_username(self, principal: UUID, username: str) -> User:
        username = validate_username(username)
        self.users.update_username(principal, username)
        if IS_DEV:
            print(f"[USERS] Updated username: user_id={principal}")
        return self.users.get_by_id(principal)
