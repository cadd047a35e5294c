"""Single-cell edit state machine for the items grid."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Protocol

from wolfcafe.services.item_validation import edit_buffer_for
from wolfcafe.ui.focus_target import (
    EditorHost,
    FocusTarget,
    NullEditorHost,
    NullFocusTarget,
)


class EditableGrid(Protocol):
    """Subset of the grid model the editor mutates."""

    def is_placeholder_row(self, row: int) -> bool:
        ...

    def begin_new_row(self, row: int) -> None:
        ...

    def commit_cell(self, row: int, col: int, raw_value: Optional[str]):
        ...

    def cell(self, row: int, col: int):
        ...


@dataclass(frozen=True)
class EditingState:
    """The cell currently open for text entry and its live buffer."""

    row: int
    col: int
    buffer: str = ""


class CellEditor:
    """Track which cell (if any) is being edited.

    The grid is either *viewing* (``editing is None``) or *editing* exactly one
    cell. Commits always go through the grid model so validation and dirty
    flags are recomputed even when the buffer is unchanged.
    """

    def __init__(
        self,
        grid: EditableGrid,
        *,
        focus_target: Optional[FocusTarget] = None,
        editor_host: Optional[EditorHost] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._grid = grid
        self._focus_target = focus_target or NullFocusTarget()
        self._editor_host = editor_host or NullEditorHost()
        self._logger = logger or logging.getLogger(__name__)
        self._editing: Optional[EditingState] = None

    def attach(
        self,
        *,
        focus_target: Optional[FocusTarget] = None,
        editor_host: Optional[EditorHost] = None,
    ) -> None:
        """Bind host capabilities once the rendering widget exists."""
        if focus_target is not None:
            self._focus_target = focus_target
        if editor_host is not None:
            self._editor_host = editor_host

    @property
    def editing(self) -> Optional[EditingState]:
        return self._editing

    @property
    def is_editing(self) -> bool:
        return self._editing is not None

    def is_editing_cell(self, row: int, col: int) -> bool:
        state = self._editing
        return state is not None and state.row == row and state.col == col

    def activate(self, row: int, col: int) -> EditingState:
        """Open ``(row, col)`` for editing, materializing the placeholder row if needed."""
        if self._editing is not None:
            if self.is_editing_cell(row, col):
                return self._editing
            self.commit(refocus=False)

        if self._grid.is_placeholder_row(row):
            self._grid.begin_new_row(row)
            buffer = ""
            self._logger.debug("New item row started at %s", row)
        else:
            buffer = edit_buffer_for(self._grid.cell(row, col).value, col)

        self._editing = EditingState(row=row, col=col, buffer=buffer)
        self._editor_host.open_editor(row, col, buffer)
        return self._editing

    def update_buffer(self, text: str) -> None:
        if self._editing is None:
            return
        self._editing = replace(self._editing, buffer=text if text is not None else "")

    def commit(self, *, refocus: bool = True):
        """Write the buffer into the grid and return to viewing.

        Returns the committed cell state, or None when nothing was open.
        """
        state = self._editing
        if state is None:
            return None
        self._editing = None
        cell = self._grid.commit_cell(state.row, state.col, state.buffer)
        self._editor_host.close_editor(state.row, state.col)
        if refocus:
            self._focus_target.focus(state.row, state.col)
        return cell

    def cancel(self) -> bool:
        """Throw the buffer away without touching the grid."""
        state = self._editing
        if state is None:
            return False
        self._editing = None
        self._editor_host.close_editor(state.row, state.col)
        self._focus_target.focus(state.row, state.col)
        return True
