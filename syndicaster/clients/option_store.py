"""Key/value option storage holding credentials and the cached token."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Optional, Protocol

AUTH_TOKEN_KEY = "syn_auth"
ACCOUNT_KEY = "syn_account"
APP_KEY = "syn_app"


class OptionStore(Protocol):
    """Read/write-by-key store. Implementations give no concurrency guarantees."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class SQLiteOptionStore:
    """Options persisted as JSON documents in a single SQLite table."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS options (
                    name TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> Optional[Any]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM options WHERE name = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        if not key:
            raise ValueError("Option key must be a non-empty string")

        value_json = json.dumps(value)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO options (name, value)
                VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET value = excluded.value
                """,
                (key, value_json),
            )

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM options WHERE name = ?", (key,))


__all__ = [
    "ACCOUNT_KEY",
    "APP_KEY",
    "AUTH_TOKEN_KEY",
    "OptionStore",
    "SQLiteOptionStore",
]
