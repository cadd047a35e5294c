"""Database schema setup and migration helpers."""
from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from wolfcafe.persistence.database_manager import DatabaseManager

SCHEMA_VERSION = 1


def run_schema_setup(db: "DatabaseManager") -> None:
    """Ensure database schema exists, applying migrations as needed."""
    conn = getattr(db, "conn", None)
    cursor = getattr(db, "cursor", None)
    logger = getattr(db, "logger", logging.getLogger(__name__))

    if not conn or not cursor:
        logger.warning("Database setup skipped: No active connection.")
        return

    logger.info("Starting database setup check...")
    try:
        current_version = db._check_schema_version()
        logger.info("Current database schema version: %s", current_version)

        conn.execute("BEGIN TRANSACTION")
        _ensure_core_tables(db)
        conn.commit()

        if current_version < SCHEMA_VERSION:
            db._update_schema_version(SCHEMA_VERSION)
        logger.info("Database schema setup/update complete.")
    except sqlite3.Error as exc:  # pragma: no cover - bubbled up to caller
        logger.critical("FATAL Database setup error: %s", exc, exc_info=True)
        conn.rollback()
        raise


def _ensure_core_tables(db: "DatabaseManager") -> None:
    db.cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT DEFAULT '',
            price REAL NOT NULL DEFAULT 0,
            amount INTEGER NOT NULL DEFAULT 0 CHECK (amount >= 0)
        )
        """
    )
