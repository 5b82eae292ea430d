# tasktracker/db.py
# Database abstraction layer supporting PostgreSQL (production) and SQLite (dev)
#
# Queries are written once with :name placeholders, which both sqlite3 and
# SQLAlchemy's text() accept. UUIDs and timestamps are stored as TEXT so the
# same DDL runs on both backends.

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path as FsPath
from typing import Any, Dict, Generator, Iterator, Optional, Union
from urllib.parse import urlparse

from sqlalchemy import create_engine, pool, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError as SAIntegrityError
from sqlalchemy.exc import SQLAlchemyError

from tasktracker.config import DATABASE_PATH, DATABASE_URL, IS_DEV, IS_POSTGRES
from tasktracker.errors import DomainError, ErrorKind

DbConnection = Union[sqlite3.Connection, Connection]

# Global engine (SQLAlchemy) or None for SQLite
_engine: Optional[Engine] = None


def init_engine() -> None:
    """Initialize SQLAlchemy engine for PostgreSQL if DATABASE_URL is set."""
    global _engine

    if not IS_POSTGRES:
        _engine = None
        print("[DB] Using SQLite (local dev mode)")
        return

    parsed = urlparse(DATABASE_URL)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid DATABASE_URL: {DATABASE_URL[:20]}...")

    # SQLAlchemy only understands the postgresql:// scheme
    url = DATABASE_URL
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]

    _engine = create_engine(
        url,
        poolclass=pool.QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=False,
    )

    print(f"[DB] Using PostgreSQL ({parsed.hostname})")


def sqlite_path() -> str:
    """Absolute path of the SQLite file (relative paths resolve next to this package)."""
    return str(FsPath(__file__).resolve().parent / DATABASE_PATH)


@contextmanager
def get_db_connection() -> Generator[DbConnection, None, None]:
    """
    Context manager for database connections.
    Returns sqlite3.Connection for SQLite or sqlalchemy.Connection for Postgres.
    Uncommitted work is rolled back when the block exits.
    """
    if IS_POSTGRES:
        if _engine is None:
            init_engine()

        with _engine.connect() as conn:
            yield conn
    else:
        conn = sqlite3.connect(sqlite_path(), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.rollback()
            conn.close()


def execute_query(
    conn: DbConnection,
    query: str,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Execute a query with named parameters.

    Returns:
        Cursor (SQLite) or CursorResult (PostgreSQL); both expose
        fetchone(), fetchall() and rowcount.
    """
    if IS_POSTGRES:
        return conn.execute(text(query), params or {})
    return conn.execute(query, params or {})


def commit(conn: DbConnection) -> None:
    conn.commit()


def rollback(conn: DbConnection) -> None:
    conn.rollback()


def row_to_dict(row: Any) -> Dict[str, Any]:
    """
    Convert a sqlite3.Row or SQLAlchemy Row to a plain dict ({} for None).
    """
    if row is None:
        return {}
    mapping = getattr(row, "_mapping", None)
    if mapping is not None:
        return dict(mapping)
    return dict(row)


def now_iso() -> str:
    """Current UTC time, fixed-width ISO format so stored values sort correctly."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def is_unique_violation(exc: Exception) -> bool:
    """True if exc is a UNIQUE/primary-key violation from either driver."""
    if isinstance(exc, sqlite3.IntegrityError):
        return "UNIQUE" in str(exc).upper()
    if isinstance(exc, SAIntegrityError):
        pgcode = getattr(exc.orig, "pgcode", None)
        return pgcode == "23505" or "unique" in str(exc.orig).lower()
    return False


@contextmanager
def db_errors(label: str) -> Iterator[None]:
    """
    Convert driver errors raised inside the block into INFRASTRUCTURE failures.

    DomainErrors raised inside the block pass through unchanged.
    """
    try:
        yield
    except (sqlite3.Error, SQLAlchemyError) as exc:
        print(f"[DB] {label} failed: {type(exc).__name__}: {exc}")
        raise DomainError(ErrorKind.INFRASTRUCTURE) from exc


# ---------------------------------------------------------
# Schema
# ---------------------------------------------------------
SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        login TEXT NOT NULL UNIQUE,
        username TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        owner_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS project_members (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        role TEXT NOT NULL CHECK (role IN ('owner', 'member')),
        joined_at TEXT NOT NULL,
        UNIQUE (project_id, user_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        importance INTEGER NOT NULL DEFAULT 1,
        status TEXT NOT NULL DEFAULT 'waiting'
            CHECK (status IN ('waiting', 'in_progress', 'completed')),
        deadline TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS notes (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS revoked_tokens (
        user_id TEXT NOT NULL,
        token_hash TEXT NOT NULL,
        expires_at TEXT NOT NULL,
        PRIMARY KEY (user_id, token_hash)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_projects_owner ON projects(owner_id)",
    "CREATE INDEX IF NOT EXISTS idx_project_members_project ON project_members(project_id)",
    "CREATE INDEX IF NOT EXISTS idx_project_members_user ON project_members(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",
    "CREATE INDEX IF NOT EXISTS idx_notes_project ON notes(project_id)",
    "CREATE INDEX IF NOT EXISTS idx_revoked_tokens_expires ON revoked_tokens(expires_at)",
]


def init_db() -> None:
    """Create tables and indexes (idempotent)."""
    with get_db_connection() as conn:
        for statement in SCHEMA:
            execute_query(conn, statement)
        commit(conn)

    if IS_DEV:
        print(f"[MIGRATION] Ensured {len(SCHEMA)} schema objects")


# Initialize engine on module import if Postgres mode
if IS_POSTGRES and _engine is None:
    init_engine()
