"""Item repository handling CRUD operations for the items table."""
from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Any, Optional


class ItemsRepository:
    """Encapsulate item-related database operations."""

    def __init__(self, db_manager: Any) -> None:
        self._db = db_manager
        self._logger = getattr(db_manager, "logger", logging.getLogger(__name__))
        self._lock = getattr(db_manager, "lock", None) or threading.RLock()
        # Per-thread so concurrent updates report their own failure.
        self._state = threading.local()

    @property
    def _conn(self):
        return getattr(self._db, "conn", None)

    def last_error(self) -> Optional[str]:
        return getattr(self._state, "last_error", None)

    def _set_error(self, message: Optional[str]) -> None:
        self._state.last_error = message

    def get_all_items(self) -> list:
        conn = self._conn
        if not conn:
            self._set_error("No active database connection.")
            return []
        with self._lock:
            try:
                rows = conn.execute("SELECT * FROM items ORDER BY id").fetchall()
                self._set_error(None)
                return rows
            except sqlite3.Error as exc:
                self._logger.error("DB Error get_all_items: %s", exc, exc_info=True)
                self._set_error(str(exc))
                return []

    def get_item(self, item_id: int):
        conn = self._conn
        if not conn:
            return None
        with self._lock:
            try:
                return conn.execute("SELECT * FROM items WHERE id = ?", (item_id,)).fetchone()
            except sqlite3.Error as exc:
                self._logger.error("DB Error get_item: %s", exc, exc_info=True)
                self._set_error(str(exc))
                return None

    def add_item(self, name: str, description: str, price: float, amount: int) -> Optional[int]:
        conn = self._conn
        if not conn:
            self._set_error("No active database connection.")
            return None
        with self._lock:
            try:
                cursor = conn.execute(
                    "INSERT INTO items (name, description, price, amount) VALUES (?, ?, ?, ?)",
                    (name, description, price, amount),
                )
                conn.commit()
                self._set_error(None)
                return cursor.lastrowid
            except sqlite3.Error as exc:
                self._logger.error("DB Error adding item: %s", exc, exc_info=True)
                self._set_error(str(exc))
                conn.rollback()
                return None

    def update_item(
        self, item_id: int, name: str, description: str, price: float, amount: int
    ) -> bool:
        conn = self._conn
        if not conn:
            self._set_error("No active database connection.")
            return False
        with self._lock:
            try:
                cursor = conn.execute(
                    "UPDATE items SET name = ?, description = ?, price = ?, amount = ? WHERE id = ?",
                    (name, description, price, amount, item_id),
                )
                conn.commit()
                if cursor.rowcount == 0:
                    self._set_error(f"Item {item_id} does not exist.")
                    return False
                self._set_error(None)
                return True
            except sqlite3.Error as exc:
                self._logger.error("DB Error updating item: %s", exc, exc_info=True)
                self._set_error(str(exc))
                conn.rollback()
                return False
