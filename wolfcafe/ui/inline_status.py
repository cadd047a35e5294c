"""Inline status and alert labels for the items grid."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt5.QtCore import QTimer
from PyQt5.QtWidgets import QLabel

LEVEL_COLORS = {
    "info": "#2b6cb0",
    "warning": "#8a6d3b",
    "error": "#a61b1b",
}


class InlineStatusController:
    """Show a transient message on a QLabel and clear it after ``timeout`` ms."""

    def __init__(
        self,
        *,
        parent,
        label_getter: Callable[[], Optional[QLabel]],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._label_getter = label_getter
        self._logger = logger or logging.getLogger(__name__)
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.clear)

    @property
    def text(self) -> str:
        label = self._label_getter()
        return label.text() if label is not None else ""

    def show(self, message: str, *, timeout: int = 3000, level: str = "info") -> None:
        level = (level or "info").lower()
        self._logger.debug("Status (%s): %s", level, message)
        label = self._label_getter()
        if label is None:
            return

        color = LEVEL_COLORS.get(level, LEVEL_COLORS["info"])
        label.setStyleSheet(f"color: {color}; padding-left: 8px;")
        label.setText(message or "")

        self._timer.stop()
        if isinstance(timeout, int) and timeout > 0:
            self._timer.start(timeout)

    def clear(self) -> None:
        self._timer.stop()
        label = self._label_getter()
        if label is not None:
            label.setText("")


def set_alert(label: QLabel, message: Optional[str], *, level: str = "error") -> None:
    """Show ``message`` in a persistent alert label, or hide it for None."""
    if not message:
        label.clear()
        label.setVisible(False)
        return
    color = LEVEL_COLORS.get(level, LEVEL_COLORS["error"])
    label.setStyleSheet(
        f"color: {color}; border: 1px solid {color}; border-radius: 4px; padding: 6px;"
    )
    label.setText(message)
    label.setVisible(True)
