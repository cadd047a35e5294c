from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Iterator, Optional, Sequence

from wolfcafe.domain.item_models import COLUMN_COUNT, PLACEHOLDER_TEXT, Item
from wolfcafe.exceptions import GridStateError
from wolfcafe.services.item_validation import is_valid_cell, normalize_cell_value


@dataclass(frozen=True)
class CellState:
    """A single grid cell: raw text plus its dirty/invalid flags."""

    value: str = ""
    is_dirty: bool = False
    is_invalid: bool = False

    def cleared(self) -> "CellState":
        return replace(self, is_dirty=False, is_invalid=False)


RowState = tuple[CellState, ...]


def _placeholder_row() -> RowState:
    return tuple(CellState(value=text) for text in PLACEHOLDER_TEXT)


def _empty_row() -> RowState:
    return tuple(CellState() for _ in range(COLUMN_COUNT))


def _item_row(item: Item) -> RowState:
    return tuple(CellState(value=text) for text in item.cell_values())


class ItemsGridViewModel:
    """Pure-Python model of the editable items grid.

    Holds the working rows (always terminated by a placeholder row), the
    baseline rows last confirmed by the server and the backing identity of
    every non-placeholder row. Rows are immutable tuples; every mutation
    replaces the affected row.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._rows: list[RowState] = [_placeholder_row()]
        self._original: list[RowState] = []
        self._backing_ids: list[Optional[Any]] = []

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def load(self, items: Iterable[Item]) -> None:
        """Rebuild rows, baseline and identities from ``items``."""
        items = list(items)
        rows = [_item_row(item) for item in items]
        self._rows = rows + [_placeholder_row()]
        self._original = list(rows)
        self._backing_ids = [item.id for item in items]
        self._logger.debug("Grid loaded with %s item(s)", len(items))

    def load_failed(self) -> None:
        """Fall back to an empty grid holding only the placeholder row."""
        self.load(())

    def begin_new_row(self, row: int) -> None:
        """Turn the placeholder row into an empty editable row."""
        if not self.is_placeholder_row(row):
            raise GridStateError(f"Row {row} is not the placeholder row")
        self._rows[row] = _empty_row()
        self._rows.append(_placeholder_row())
        self._backing_ids.append(None)

    def commit_cell(self, row: int, col: int, raw_value: Optional[str]) -> CellState:
        """Store an edited value and recompute the cell's flags."""
        self._check_position(row, col)
        value = normalize_cell_value(raw_value, col)
        baseline = self._baseline_cell(row, col)
        cell = CellState(
            value=value,
            is_dirty=baseline is not None and baseline.value != value,
            is_invalid=not is_valid_cell(value, col),
        )
        cells = list(self._rows[row])
        cells[col] = cell
        self._rows[row] = tuple(cells)
        return cell

    def undo_row(self, row: int) -> bool:
        """Restore ``row`` to its baseline; returns False for rows without one."""
        if not (0 <= row < len(self._original)):
            return False
        self._rows[row] = tuple(cell.cleared() for cell in self._original[row])
        return True

    def discard_all(self) -> None:
        """Drop every edit and every unsaved row."""
        self._rows = [
            tuple(cell.cleared() for cell in row) for row in self._original
        ] + [_placeholder_row()]
        self._backing_ids = self._backing_ids[: len(self._original)]

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def column_count(self) -> int:
        return COLUMN_COUNT

    @property
    def original_row_count(self) -> int:
        return len(self._original)

    def rows(self) -> Sequence[RowState]:
        return tuple(self._rows)

    def row(self, row: int) -> RowState:
        return self._rows[row]

    def cell(self, row: int, col: int) -> CellState:
        self._check_position(row, col)
        return self._rows[row][col]

    def row_values(self, row: int) -> tuple[str, ...]:
        return tuple(cell.value for cell in self._rows[row])

    def original_row(self, row: int) -> Optional[RowState]:
        if 0 <= row < len(self._original):
            return self._original[row]
        return None

    def backing_id(self, row: int) -> Optional[Any]:
        if 0 <= row < len(self._backing_ids):
            return self._backing_ids[row]
        return None

    def backing_ids(self) -> Sequence[Optional[Any]]:
        return tuple(self._backing_ids)

    def is_placeholder_row(self, row: int) -> bool:
        if not self._rows or row != len(self._rows) - 1:
            return False
        return all(
            cell.value == text for cell, text in zip(self._rows[row], PLACEHOLDER_TEXT)
        )

    def is_new_row(self, row: int) -> bool:
        return len(self._original) <= row < len(self._rows) - 1

    def is_row_modified(self, row: int) -> bool:
        baseline = self.original_row(row)
        if baseline is None:
            return False
        return any(
            cell.value != base.value for cell, base in zip(self._rows[row], baseline)
        )

    def iter_pending_rows(self) -> Iterator[tuple[int, Optional[Any], tuple[str, ...]]]:
        """Yield ``(row, backing_id, values)`` for every row except the placeholder."""
        for row in range(len(self._rows) - 1):
            yield row, self.backing_id(row), self.row_values(row)

    # ------------------------------------------------------------------ #
    # Derived flags
    # ------------------------------------------------------------------ #
    @property
    def has_dirty_changes(self) -> bool:
        return any(
            cell.is_dirty
            for row in self._rows[: len(self._original)]
            for cell in row
        )

    @property
    def has_invalid_cells(self) -> bool:
        return any(cell.is_invalid for row in self._rows for cell in row)

    @property
    def has_unsaved_rows(self) -> bool:
        return len(self._rows) - 1 > len(self._original)

    @property
    def can_discard(self) -> bool:
        return self.has_dirty_changes or self.has_unsaved_rows

    @property
    def has_pending_changes(self) -> bool:
        return self.has_dirty_changes or self.has_unsaved_rows

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _baseline_cell(self, row: int, col: int) -> Optional[CellState]:
        baseline = self.original_row(row)
        if baseline is None:
            return None
        return baseline[col]

    def _check_position(self, row: int, col: int) -> None:
        if not (0 <= row < len(self._rows)) or not (0 <= col < COLUMN_COUNT):
            raise IndexError(f"Cell ({row}, {col}) is outside the grid")
