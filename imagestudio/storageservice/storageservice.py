import sqlite3
import threading
from functools import lru_cache
from typing import Optional

from ..config import get_settings

SCHEMA_VERSION = 1


DDL = """
-- 1) Per-client preferences (theme, ...)
CREATE TABLE IF NOT EXISTS preferences (
  client_id       TEXT NOT NULL,
  key             TEXT NOT NULL,
  value           TEXT NOT NULL,
  created_at      TEXT NOT NULL DEFAULT (datetime('now')),
  updated_at      TEXT NOT NULL DEFAULT (datetime('now')),
  PRIMARY KEY (client_id, key)
);
CREATE TRIGGER IF NOT EXISTS preferences_update_ts
AFTER UPDATE OF value ON preferences
BEGIN
  UPDATE preferences SET updated_at = datetime('now')
  WHERE client_id = NEW.client_id AND key = NEW.key;
END;

-- Indexes
CREATE INDEX IF NOT EXISTS idx_prefs_client ON preferences(client_id);
"""


class PreferenceStore:
    """Key-value store for UI preferences, scoped by client id.

    Each thread gets its own connection, opened on first use.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._local = threading.local()
        with self._open() as conn:
            if conn.execute("PRAGMA user_version;").fetchone()[0] < SCHEMA_VERSION:
                conn.executescript(DDL)
                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION};")
        conn.close()

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA journal_mode = WAL;")
        conn.execute("PRAGMA synchronous = NORMAL;")
        return conn

    @property
    def connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, "connection", None)
        if conn is None:
            conn = self._local.connection = self._open()
        return conn

    def close(self) -> None:
        """Close this thread's connection, if one was opened."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None

    # ---------- preferences ----------
    def get(self, client_id: str, key: str, default: Optional[str] = None) -> Optional[str]:
        row = self.connection.execute(
            "SELECT value FROM preferences WHERE client_id = ? AND key = ?",
            (client_id, key)
        ).fetchone()
        return row[0] if row else default

    def set(self, client_id: str, key: str, value: str) -> None:
        with self.connection as conn:
            conn.execute(
                """
                INSERT INTO preferences (client_id, key, value) VALUES (?, ?, ?)
                ON CONFLICT(client_id, key) DO UPDATE SET value = excluded.value
                """,
                (client_id, key, value)
            )

    def delete(self, client_id: str, key: str) -> None:
        with self.connection as conn:
            conn.execute(
                "DELETE FROM preferences WHERE client_id = ? AND key = ?",
                (client_id, key)
            )


@lru_cache
def get_preference_store() -> PreferenceStore:
    return PreferenceStore(get_settings().preferences_db_path)
