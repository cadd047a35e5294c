"""QAbstractTableModel implementation for the items grid."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional, Sequence

from PyQt5.QtCore import QAbstractTableModel, QModelIndex, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QFont

from wolfcafe.domain.item_models import HEADERS, Item
from wolfcafe.services.item_validation import format_cell_value_for_display
from wolfcafe.ui.view_models.items_grid_view_model import (
    CellState,
    ItemsGridViewModel,
    RowState,
)

INVALID_BACKGROUND = QColor("#f8d7da")
DIRTY_BACKGROUND = QColor("#d6e9f8")
PLACEHOLDER_FOREGROUND = QColor("#8a8a8a")


class ItemsTableModel(QAbstractTableModel):
    """Table model for the items grid.

    Wraps an ``ItemsGridViewModel`` and exposes the same mutation API, so the
    presenter and the cell editor can use either one. Every mutation made
    through this class is announced with the matching Qt model signal.
    """

    # Emitted after any mutation that may change the grid's aggregate flags
    grid_changed = pyqtSignal()

    def __init__(self, grid: Optional[ItemsGridViewModel] = None, parent=None):
        super().__init__(parent)
        self._grid = grid if grid is not None else ItemsGridViewModel()

    @property
    def grid(self) -> ItemsGridViewModel:
        return self._grid

    # ------------------------------------------------------------------ #
    # Qt model interface
    # ------------------------------------------------------------------ #
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._grid.row_count

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._grid.column_count

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        """Return data for the given index and role."""
        if not index.isValid() or not (0 <= index.row() < self._grid.row_count):
            return None

        row, col = index.row(), index.column()
        cell = self._grid.cell(row, col)
        placeholder = self._grid.is_placeholder_row(row)

        if role == Qt.DisplayRole:
            if placeholder:
                return cell.value
            return format_cell_value_for_display(cell.value, col)
        if role == Qt.EditRole:
            return "" if placeholder else cell.value
        if role == Qt.FontRole and placeholder:
            font = QFont()
            font.setItalic(True)
            return font
        if role == Qt.ForegroundRole and placeholder:
            return QBrush(PLACEHOLDER_FOREGROUND)
        if role == Qt.BackgroundRole:
            if cell.is_invalid:
                return QBrush(INVALID_BACKGROUND)
            if cell.is_dirty:
                return QBrush(DIRTY_BACKGROUND)
            return None
        if role == Qt.ToolTipRole:
            if placeholder:
                return "Click to add a new item"
            if cell.is_invalid:
                return f"Invalid {HEADERS[col].lower()}"
            if cell.is_dirty:
                return "Modified"
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:
        if not index.isValid() or role != Qt.EditRole:
            return False
        if self._grid.is_placeholder_row(index.row()):
            return False
        self.commit_cell(index.row(), index.column(), "" if value is None else str(value))
        return True

    def headerData(
        self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole
    ) -> Any:
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal and 0 <= section < len(HEADERS):
            return HEADERS[section]
        if orientation == Qt.Vertical and 0 <= section < self._grid.row_count:
            if self._grid.is_placeholder_row(section):
                return "*"
            return section + 1
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid():
            return Qt.NoItemFlags
        # Edits go through the cell editor, never through Qt edit triggers.
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    # ------------------------------------------------------------------ #
    # Grid mutations (same API as ItemsGridViewModel)
    # ------------------------------------------------------------------ #
    def load(self, items: Iterable[Item]) -> None:
        self.beginResetModel()
        self._grid.load(items)
        self.endResetModel()
        self.grid_changed.emit()

    def load_failed(self) -> None:
        self.beginResetModel()
        self._grid.load_failed()
        self.endResetModel()
        self.grid_changed.emit()

    def begin_new_row(self, row: int) -> None:
        new_placeholder = self._grid.row_count
        self.beginInsertRows(QModelIndex(), new_placeholder, new_placeholder)
        self._grid.begin_new_row(row)
        self.endInsertRows()
        self._emit_row_changed(row)
        self.headerDataChanged.emit(Qt.Vertical, row, new_placeholder)
        self.grid_changed.emit()

    def commit_cell(self, row: int, col: int, raw_value: Optional[str]) -> CellState:
        cell = self._grid.commit_cell(row, col, raw_value)
        index = self.index(row, col)
        self.dataChanged.emit(index, index)
        self.grid_changed.emit()
        return cell

    def undo_row(self, row: int) -> bool:
        if not self._grid.undo_row(row):
            return False
        self._emit_row_changed(row)
        self.grid_changed.emit()
        return True

    def discard_all(self) -> None:
        self.beginResetModel()
        self._grid.discard_all()
        self.endResetModel()
        self.grid_changed.emit()

    # ------------------------------------------------------------------ #
    # Read-only passthroughs
    # ------------------------------------------------------------------ #
    @property
    def row_count(self) -> int:
        return self._grid.row_count

    @property
    def column_count(self) -> int:
        return self._grid.column_count

    @property
    def original_row_count(self) -> int:
        return self._grid.original_row_count

    def rows(self) -> Sequence[RowState]:
        return self._grid.rows()

    def row(self, row: int) -> RowState:
        return self._grid.row(row)

    def cell(self, row: int, col: int) -> CellState:
        return self._grid.cell(row, col)

    def row_values(self, row: int) -> tuple[str, ...]:
        return self._grid.row_values(row)

    def original_row(self, row: int) -> Optional[RowState]:
        return self._grid.original_row(row)

    def backing_id(self, row: int) -> Optional[Any]:
        return self._grid.backing_id(row)

    def backing_ids(self) -> Sequence[Optional[Any]]:
        return self._grid.backing_ids()

    def is_placeholder_row(self, row: int) -> bool:
        return self._grid.is_placeholder_row(row)

    def is_new_row(self, row: int) -> bool:
        return self._grid.is_new_row(row)

    def is_row_modified(self, row: int) -> bool:
        return self._grid.is_row_modified(row)

    def iter_pending_rows(self) -> Iterator[tuple[int, Optional[Any], tuple[str, ...]]]:
        return self._grid.iter_pending_rows()

    @property
    def has_dirty_changes(self) -> bool:
        return self._grid.has_dirty_changes

    @property
    def has_invalid_cells(self) -> bool:
        return self._grid.has_invalid_cells

    @property
    def has_unsaved_rows(self) -> bool:
        return self._grid.has_unsaved_rows

    @property
    def can_discard(self) -> bool:
        return self._grid.can_discard

    @property
    def has_pending_changes(self) -> bool:
        return self._grid.has_pending_changes

    def _emit_row_changed(self, row: int) -> None:
        left = self.index(row, 0)
        right = self.index(row, self.columnCount() - 1)
        self.dataChanged.emit(left, right)
