import logging
import os
import sqlite3

from utils.app_config import CONFIG_DIR
from utils.constants import DB_FILE, DEFAULT_EXPENSE_CATEGORIES, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """A read or write against the local record store failed."""


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()
        logger.debug("Database ready at %s", self.db_path)

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                id             TEXT PRIMARY KEY,
                kind           TEXT NOT NULL CHECK(kind IN ('expense','income')),
                amount         REAL NOT NULL CHECK(amount > 0),
                category_name  TEXT NOT NULL,
                occurred_at    TEXT NOT NULL,
                notes          TEXT,
                created_at     TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at     TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_kind_date
                ON transactions(kind, occurred_at);

            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL COLLATE NOCASE,
                kind       TEXT NOT NULL CHECK(kind IN ('expense','income')),
                emoji      TEXT NOT NULL DEFAULT '',
                color_hex  TEXT,
                UNIQUE(name, kind)
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS secrets (
                key   TEXT PRIMARY KEY,
                value BLOB NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS.items():
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        # Categories are seeded exactly once; later deletions stay deleted
        seeded = conn.execute(
            "SELECT value FROM app_settings WHERE key = 'categories_seeded'"
        ).fetchone()
        if seeded is None:
            for name, emoji, color_hex in DEFAULT_EXPENSE_CATEGORIES:
                conn.execute(
                    """INSERT OR IGNORE INTO categories(name, kind, emoji, color_hex)
                       VALUES (?, 'expense', ?, ?)""",
                    (name, emoji, color_hex),
                )
            conn.execute(
                "INSERT INTO app_settings(key, value) VALUES ('categories_seeded', '1')"
            )
            logger.info("Seeded %d default expense categories", len(DEFAULT_EXPENSE_CATEGORIES))

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    def set_settings(self, values: dict[str, str]):
        """Write several keys in one transaction; nothing is stored if any write fails."""
        conn = self.get_connection()
        with conn:
            conn.executemany(
                "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
                list(values.items()),
            )

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the app database.

        db_folder: if provided, the DB file is stored there instead of ~/.expense_tracker.
        """
        folder = db_folder or str(CONFIG_DIR)
        os.makedirs(folder, exist_ok=True)
        db = DatabaseManager(os.path.join(folder, DB_FILE))
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
