import sqlite3

from trivia_quiz.quiz.adapters.db_manager import DatabaseManager
from trivia_quiz.quiz.domain.errors import StorageError
from trivia_quiz.quiz.domain.ports import IKeyValueStore
from trivia_quiz.shared.telemetry import Telemetry


class SQLiteKeyValueStore(IKeyValueStore):
    def __init__(self, db_manager: DatabaseManager) -> None:
        self.telemetry = Telemetry("SQLiteKeyValueStore")
        self.db_manager = db_manager

    def _get_connection(self) -> sqlite3.Connection:
        return self.db_manager.get_connection()

    def get(self, key: str) -> str | None:
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            # Reads degrade to "absent"; callers then start fresh.
            self.telemetry.log_error("kv get failed", e, key=key)
            return None
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) "
                "VALUES (?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value = excluded.value, updated_at = excluded.updated_at",
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not write '{key}': {e}") from e

    def remove(self, key: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not remove '{key}': {e}") from e

