"""
tasktracker/token_store.py

Revoked-token set keyed by user. Tokens are stored as SHA-256 digests and
each entry expires with the token it revokes.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from uuid import UUID

from tasktracker.config import IS_DEV
from tasktracker.db import DbConnection, commit, db_errors, execute_query, now_iso, to_iso


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class TokenStore:
    def __init__(self, conn: DbConnection):
        self.conn = conn

    def revoke(self, user_id: UUID, token: str, expires_at: datetime) -> None:
        """Add a token to the revoked set (idempotent) and drop expired entries."""
        with db_errors("revoke token"):
            execute_query(
                self.conn,
                """
                INSERT INTO revoked_tokens (user_id, token_hash, expires_at)
                VALUES (:user_id, :token_hash, :expires_at)
                ON CONFLICT (user_id, token_hash) DO NOTHING
                """,
                {
                    "user_id": str(user_id),
                    "token_hash": hash_token(token),
                    "expires_at": to_iso(expires_at),
                },
            )
            commit(self.conn)
        self.sweep()

    def is_revoked(self, user_id: UUID, token: str) -> bool:
        with db_errors("check revoked token"):
            row = execute_query(
                self.conn,
                """
                SELECT 1 FROM revoked_tokens
                WHERE user_id = :user_id AND token_hash = :token_hash AND expires_at > :now
                """,
                {"user_id": str(user_id), "token_hash": hash_token(token), "now": now_iso()},
            ).fetchone()
        return row is not None

    def sweep(self) -> int:
        """Delete expired entries; returns how many were removed."""
        with db_errors("sweep revoked tokens"):
            result = execute_query(
                self.conn,
                "DELETE FROM revoked_tokens WHERE expires_at <= :now",
                {"now": now_iso()},
            )
            commit(self.conn)
        if IS_DEV and result.rowcount:
            print(f"[AUTH] Swept {result.rowcount} expired revoked tokens")
        return result.rowcount
