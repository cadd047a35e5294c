"""Keyboard navigation across the items grid."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from wolfcafe.domain.item_models import CellPosition
from wolfcafe.ui.focus_target import FocusTarget, NullFocusTarget
from wolfcafe.ui.view_models.cell_editor import CellEditor


class GridKey(Enum):
    """Keys the grid reacts to; everything else maps to ``OTHER``."""

    UP = "ArrowUp"
    DOWN = "ArrowDown"
    LEFT = "ArrowLeft"
    RIGHT = "ArrowRight"
    HOME = "Home"
    END = "End"
    TAB = "Tab"
    ENTER = "Enter"
    F2 = "F2"
    ESCAPE = "Escape"
    OTHER = "Other"


@dataclass(frozen=True)
class KeyPress:
    """A key-down event reduced to what navigation cares about."""

    key: GridKey
    shift: bool = False
    ctrl: bool = False
    meta: bool = False

    @property
    def command(self) -> bool:
        return self.ctrl or self.meta


class GridShape(Protocol):
    @property
    def row_count(self) -> int:
        ...

    @property
    def column_count(self) -> int:
        ...


_ARROW_DELTAS = {
    GridKey.UP: (-1, 0),
    GridKey.DOWN: (1, 0),
    GridKey.LEFT: (0, -1),
    GridKey.RIGHT: (0, 1),
}

# Keys that snap focus into the grid when nothing is focused yet.
_ENTRY_KEYS = frozenset(
    {
        GridKey.UP,
        GridKey.DOWN,
        GridKey.LEFT,
        GridKey.RIGHT,
        GridKey.HOME,
        GridKey.END,
        GridKey.ENTER,
        GridKey.F2,
        GridKey.TAB,
    }
)


class GridNavigationController:
    """Translate key presses into focus moves and edit transitions.

    ``handle_key`` returns True when the event was consumed and False when the
    host should let it propagate (plain arrows while editing, Tab at the grid
    edges, unrelated keys).
    """

    def __init__(
        self,
        grid: GridShape,
        editor: CellEditor,
        *,
        focus_target: Optional[FocusTarget] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._grid = grid
        self._editor = editor
        self._focus_target = focus_target or NullFocusTarget()
        self._logger = logger or logging.getLogger(__name__)
        self._focused: Optional[CellPosition] = None

    def attach(self, focus_target: FocusTarget) -> None:
        self._focus_target = focus_target

    @property
    def focused_cell(self) -> Optional[CellPosition]:
        return self._focused

    # ------------------------------------------------------------------ #
    # Focus
    # ------------------------------------------------------------------ #
    def focus_cell(self, row: int, col: int) -> Optional[CellPosition]:
        """Focus the cell nearest to ``(row, col)`` inside the grid bounds."""
        rows = self._grid.row_count
        if rows == 0:
            return None
        target = CellPosition(
            row=max(0, min(row, rows - 1)),
            col=max(0, min(col, self._grid.column_count - 1)),
        )
        self._focus_target.focus(target.row, target.col)
        self._focus_target.scroll_into_view(target.row, target.col)
        self._focused = target
        return target

    def restore_focus(self) -> Optional[CellPosition]:
        """Re-apply focus after the grid was rebuilt (row count may have shrunk)."""
        if self._focused is None:
            return None
        return self.focus_cell(self._focused.row, self._focused.col)

    def clear_focus(self) -> None:
        self._focused = None

    def click_cell(self, row: int, col: int) -> None:
        """Pointer activation: focus the cell and open it for editing."""
        target = self.focus_cell(row, col)
        if target is not None:
            self._editor.activate(target.row, target.col)

    # ------------------------------------------------------------------ #
    # Keys
    # ------------------------------------------------------------------ #
    def handle_key(self, event: KeyPress) -> bool:
        key = event.key
        editing = self._editor.is_editing

        if self._focused is None:
            if key is GridKey.ESCAPE and editing:
                return self._editor.cancel()
            if key not in _ENTRY_KEYS or self._grid.row_count == 0:
                return False
            if event.shift:
                self.focus_cell(self._grid.row_count - 1, self._grid.column_count - 1)
            else:
                self.focus_cell(0, 0)
            return True

        navigating = not editing or (event.command and editing)

        if key in _ARROW_DELTAS:
            if not navigating:
                return False
            if editing:
                self._editor.commit(refocus=False)
            d_row, d_col = _ARROW_DELTAS[key]
            target = self._focused.moved(d_row, d_col)
            self.focus_cell(target.row, target.col)
            return True

        if key in (GridKey.HOME, GridKey.END):
            if not navigating:
                return False
            if editing:
                self._editor.commit(refocus=False)
            col = 0 if key is GridKey.HOME else self._grid.column_count - 1
            self.focus_cell(self._focused.row, col)
            return True

        if key is GridKey.TAB:
            return self._tab(backwards=event.shift)

        if key in (GridKey.ENTER, GridKey.F2):
            if not editing:
                self._editor.activate(self._focused.row, self._focused.col)
                return True
            if key is GridKey.ENTER:
                self._editor.commit(refocus=True)
                return True
            return False

        if key is GridKey.ESCAPE:
            return self._editor.cancel()

        return False

    def _tab(self, *, backwards: bool) -> bool:
        if self._grid.row_count == 0:
            return False
        max_row = self._grid.row_count - 1
        max_col = self._grid.column_count - 1
        current = self._focused
        at_start = current.row == 0 and current.col == 0
        at_end = current.row == max_row and current.col == max_col

        if self._editor.is_editing:
            self._editor.commit(refocus=False)

        if (backwards and at_start) or (not backwards and at_end):
            self._logger.debug("Tab leaves the grid from %s", current)
            return False

        row = current.row
        col = current.col + (-1 if backwards else 1)
        if col > max_col:
            if row < max_row:
                row, col = row + 1, 0
            else:
                col = max_col
        elif col < 0:
            if row > 0:
                row, col = row - 1, max_col
            else:
                col = 0
        self.focus_cell(row, col)
        return True
