from typing import Optional
from database.db_manager import DatabaseManager


class SecretDAO:
    """Opaque key/value store for secrets, kept apart from ordinary settings.

    Callers store derived values (e.g. password hashes), never plaintext.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def save(self, key: str, value: bytes):
        conn = self._db.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO secrets(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    def load(self, key: str) -> Optional[bytes]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT value FROM secrets WHERE key = ?", (key,)
        ).fetchone()
        return bytes(row["value"]) if row else None

    def delete(self, key: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM secrets WHERE key = ?", (key,))
        conn.commit()
