"""View-model helpers for the items grid."""

from .cell_editor import CellEditor, EditingState
from .items_grid_view_model import CellState, ItemsGridViewModel

__all__ = [
    "CellEditor",
    "CellState",
    "EditingState",
    "ItemsGridViewModel",
]
