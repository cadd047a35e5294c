"""SQLite connection management for the WolfCafe items store."""
from __future__ import annotations

import logging
import os
import sqlite3
import threading
from datetime import datetime
from typing import Optional

from wolfcafe.exceptions import DatabaseConnectionError, DatabaseMigrationError
from wolfcafe.persistence import migrations as persistence_migrations
from wolfcafe.persistence.items_repository import ItemsRepository


class DatabaseManager:
    """
    Own the SQLite connection used by the items repository.

    The connection is shared between the UI thread and save workers, so every
    statement runs under ``lock``.
    """

    def __init__(self, db_path: str, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.logger.info("Initializing DatabaseManager for %s", db_path)
        self.db_path = db_path
        self.lock = threading.RLock()
        self.conn: Optional[sqlite3.Connection] = None
        self.cursor: Optional[sqlite3.Cursor] = None
        self._items_repo: Optional[ItemsRepository] = None

        directory = os.path.dirname(db_path)
        if directory and db_path != ":memory:":
            os.makedirs(directory, exist_ok=True)

        try:
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self.cursor = self.conn.cursor()
        except sqlite3.Error as exc:
            self.logger.critical("Failed to open database %s: %s", db_path, exc, exc_info=True)
            raise DatabaseConnectionError(f"Could not open database at {db_path}: {exc}") from exc

        try:
            self.setup_database()
        except sqlite3.Error as exc:
            self.close()
            raise DatabaseMigrationError(f"Database setup failed: {exc}") from exc

    @property
    def items_repo(self) -> ItemsRepository:
        """Lazy-load the ItemsRepository instance."""
        if self._items_repo is None:
            self._items_repo = ItemsRepository(self)
        return self._items_repo

    def setup_database(self) -> None:
        with self.lock:
            persistence_migrations.run_schema_setup(self)

    def close(self) -> None:
        with self.lock:
            if self.conn is None:
                return
            try:
                self.conn.commit()
                self.conn.close()
                self.logger.info("Database connection closed")
            except sqlite3.Error as exc:
                self.logger.error("Error closing database: %s", exc, exc_info=True)
            finally:
                self.conn = None
                self.cursor = None

    # ------------------------------------------------------------------
    # Schema version helpers used by migrations
    # ------------------------------------------------------------------

    def _table_exists(self, table_name: str) -> bool:
        self.cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table_name,)
        )
        return self.cursor.fetchone() is not None

    def _check_schema_version(self) -> int:
        if not self._table_exists("schema_version"):
            self.cursor.execute(
                """
                CREATE TABLE schema_version (
                    id INTEGER PRIMARY KEY,
                    version INTEGER NOT NULL,
                    applied_date TEXT NOT NULL
                )
                """
            )
            self.cursor.execute(
                "INSERT INTO schema_version (version, applied_date) VALUES (?, ?)",
                (0, datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
            )
            self.conn.commit()
            return 0
        self.cursor.execute("SELECT MAX(version) FROM schema_version")
        row = self.cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def _update_schema_version(self, new_version: int) -> bool:
        self.cursor.execute(
            "INSERT INTO schema_version (version, applied_date) VALUES (?, ?)",
            (new_version, datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
        )
        self.conn.commit()
        self.logger.info("Schema version updated to %s", new_version)
        return True
