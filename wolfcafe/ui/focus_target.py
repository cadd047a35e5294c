"""Capabilities the items grid core needs from whatever renders it."""
from __future__ import annotations

from typing import Protocol


class FocusTarget(Protocol):
    """Moves keyboard focus to a rendered cell."""

    def focus(self, row: int, col: int) -> None:
        """Give keyboard focus to the cell at ``(row, col)``."""

    def scroll_into_view(self, row: int, col: int) -> None:
        """Scroll so the cell at ``(row, col)`` is visible."""


class EditorHost(Protocol):
    """Shows and hides the in-place text editor."""

    def open_editor(self, row: int, col: int, buffer: str) -> None:
        """Show an editor over ``(row, col)`` pre-filled with ``buffer``."""

    def close_editor(self, row: int, col: int) -> None:
        """Remove the editor shown over ``(row, col)``."""


class NullFocusTarget:
    def focus(self, row: int, col: int) -> None:
        pass

    def scroll_into_view(self, row: int, col: int) -> None:
        pass


class NullEditorHost:
    def open_editor(self, row: int, col: int, buffer: str) -> None:
        pass

    def close_editor(self, row: int, col: int) -> None:
        pass
