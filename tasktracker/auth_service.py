"""
tasktracker/auth_service.py

Registration, login and logout.

Passwords are stored as salted PBKDF2-HMAC-SHA256:
    pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Tuple
from uuid import UUID

from tasktracker.auth_context import create_access_token, decode_token, token_expiry
from tasktracker.config import DEFAULT_PROJECT_NAME, IS_DEV
from tasktracker.db import DbConnection
from tasktracker.errors import DomainError, ErrorKind
from tasktracker.models import User, validate_registration
from tasktracker.project_store import ProjectStore
from tasktracker.token_store import TokenStore
from tasktracker.user_store import UserStore

PBKDF2_ITERATIONS = 100_000


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = password_hash.split("$")
        if algorithm != "pbkdf2_sha256":
            return False
        digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


class AuthService:
    def __init__(self, conn: DbConnection):
        self.users = UserStore(conn)
        self.projects = ProjectStore(conn)
        self.tokens = TokenStore(conn)

    def register(self, login: str, username: str, email: str, password: str) -> Tuple[User, str]:
        """
        Create the account, its default project, and a session token.

        Raises:
            DomainError(INVALID_INPUT): a field fails validation
            DomainError(CONFLICT): login or email already registered
        """
        login, username, email = validate_registration(login, username, email, password)
        user = self.users.create(login, username, email, hash_password(password))
        print(f"[AUTH] Registered user_id={user.id}, login={user.login!r}")

        try:
            self.projects.create_project(DEFAULT_PROJECT_NAME, "", user.id)
        except DomainError as exc:
            # Registration still succeeds; the user can create projects later
            print(f"[AUTH] Default project creation failed: user_id={user.id}, error={exc.kind.value}")

        token, _ = create_access_token(user.id)
        return user, token

    def authenticate(self, email_or_login: str, password: str) -> Tuple[User, str]:
        """
        Raises:
            DomainError(INVALID_CREDENTIALS): unknown user or wrong password
        """
        if not (email_or_login or "").strip() or not password:
            raise DomainError(ErrorKind.INVALID_CREDENTIALS)

        user = self.users.find_by_email_or_login(email_or_login)
        if user is None:
            print("[AUTH] Login failed: user not found")
            raise DomainError(ErrorKind.INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            print(f"[AUTH] Login failed: bad password for user_id={user.id}")
            raise DomainError(ErrorKind.INVALID_CREDENTIALS)

        token, _ = create_access_token(user.id)
        if IS_DEV:
            print(f"[AUTH] Login succeeded: user_id={user.id}")
        return user, token

    def logout(self, token: str) -> None:
        """
        Revoke token until its own expiry.

        Raises:
            DomainError(INVALID_TOKEN): token is invalid or already expired
        """
        payload = decode_token(token)
        user_id = UUID(payload["sub"])
        self.tokens.revoke(user_id, token, token_expiry(payload))
        print(f"[AUTH] Logged out: user_id={user_id}")
