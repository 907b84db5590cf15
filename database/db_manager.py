import logging
import os
import sqlite3

from utils.constants import DB_FILE

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
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
            CREATE TABLE IF NOT EXISTS recurring_templates (
                id            TEXT PRIMARY KEY,
                name          TEXT NOT NULL DEFAULT '',
                type          TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount        TEXT NOT NULL,
                category_id   TEXT NOT NULL,
                description   TEXT NOT NULL DEFAULT '',
                account_id    TEXT,
                schedule_type TEXT NOT NULL
                              CHECK(schedule_type IN ('weekly','biweekly','monthly','custom')),
                start_date    TEXT NOT NULL,
                day_of_month  INTEGER CHECK(day_of_month BETWEEN 1 AND 31),
                custom_days   INTEGER CHECK(custom_days >= 1),
                end_date      TEXT,
                is_active     INTEGER NOT NULL DEFAULT 1,
                created_at    TEXT NOT NULL DEFAULT (datetime('now'))
            );

            -- recurring_parent_id is a non-owning reference: deleting a
            -- template leaves its materialized transactions alone.
            CREATE TABLE IF NOT EXISTS transactions (
                id                  TEXT PRIMARY KEY,
                type                TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount              TEXT NOT NULL,
                category_id         TEXT NOT NULL,
                description         TEXT NOT NULL DEFAULT '',
                account_id          TEXT,
                date                TEXT NOT NULL,
                verified            INTEGER NOT NULL DEFAULT 0,
                recurring_parent_id TEXT,
                was_auto_generated  INTEGER NOT NULL DEFAULT 0,
                created_at          TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at          TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);
            CREATE UNIQUE INDEX IF NOT EXISTS idx_transactions_occurrence
                ON transactions(recurring_parent_id, date);

            -- Occurrences the user deleted; the materializer must not recreate them.
            CREATE TABLE IF NOT EXISTS deleted_occurrences (
                recurring_parent_id TEXT NOT NULL,
                date                TEXT NOT NULL,
                deleted_at          TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (recurring_parent_id, date)
            );

            CREATE TABLE IF NOT EXISTS month_settings (
                month            TEXT PRIMARY KEY,
                starting_balance TEXT NOT NULL DEFAULT '0',
                is_closed        INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "system"),
            ("currency_symbol", "$"),
            ("date_format", "MM/DD/YYYY"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

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

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the budget DB.

        db_folder: if provided, the DB file lives in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
