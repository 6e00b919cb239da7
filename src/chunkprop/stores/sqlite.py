"""SQLite-backed host store."""

from __future__ import annotations

import sqlite3
from typing import Any

from chunkprop.config import MAX_CHUNK_SIZE
from chunkprop.errors import StorageBackendError
from chunkprop.stores.base import check_entry
from chunkprop.values import SerializedValue, decode_primitive, encode_primitive, entry_byte_count


class SQLiteStore:
    """Host store persisting one row per key in a local SQLite file."""

    backend = "sqlite"

    def __init__(self, db_path: str, max_value_bytes: int = MAX_CHUNK_SIZE) -> None:
        self.db_path = db_path
        self.max_value_bytes = max_value_bytes
        self._conn = sqlite3.connect(db_path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS properties (
                key TEXT PRIMARY KEY,
                kind TEXT NOT NULL,
                value_json TEXT NOT NULL
            );
        """)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def read(self, key: str) -> SerializedValue:
        row = self._conn.execute(
            "SELECT kind, value_json FROM properties WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        return decode_primitive(row[0], row[1])

    def write(self, key: str, value: SerializedValue = None) -> None:
        if value is None:
            self._conn.execute("DELETE FROM properties WHERE key = ?", (key,))
            self._conn.commit()
            return
        check_entry(key, value, self.max_value_bytes)
        kind, value_json = encode_primitive(value)
        try:
            self._conn.execute(
                "INSERT INTO properties (key, kind, value_json) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET "
                "kind = excluded.kind, value_json = excluded.value_json",
                (key, kind, value_json),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageBackendError("write", str(e)) from e

    def list_keys(self) -> list[str]:
        # rowid order keeps first-insertion order for keys that are overwritten in place
        rows = self._conn.execute("SELECT key FROM properties ORDER BY rowid").fetchall()
        return [row[0] for row in rows]

    def total_byte_count(self) -> int:
        total = 0
        for key, kind, value_json in self._conn.execute(
            "SELECT key, kind, value_json FROM properties"
        ):
            total += entry_byte_count(key, decode_primitive(kind, value_json))
        return total

    def clear_all(self) -> None:
        self._conn.execute("DELETE FROM properties")
        self._conn.commit()

    def storage_info(self) -> dict[str, Any]:
        return {
            "backend": self.backend,
            "db_path": self.db_path,
            "max_value_bytes": self.max_value_bytes,
        }
