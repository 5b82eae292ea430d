"""
Shared pytest fixtures: every test gets its own SQLite file.
"""

import pytest

from tasktracker.auth_context import create_access_token
from tasktracker.db import get_db_connection, init_db
from tasktracker.user_store import UserStore


@pytest.fixture(autouse=True)
def isolated_db(tmp_path, monkeypatch):
    """Point the app at a fresh SQLite file and create the schema."""
    monkeypatch.setattr("tasktracker.db.DATABASE_PATH", str(tmp_path / "tasktracker_test.db"))
    init_db()
    yield


@pytest.fixture
def conn():
    with get_db_connection() as conn:
        yield conn


@pytest.fixture
def make_user(conn):
    """Insert a user directly (no password hashing, no default project)."""
    def _make(login: str):
        return UserStore(conn).create(login, login.title(), f"{login}@example.com", "unused-hash")
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user_id):
        token, _ = create_access_token(user_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers
