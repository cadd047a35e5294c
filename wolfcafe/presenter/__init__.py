"""Presenter layer modules."""

from .items_grid_presenter import (
    ItemsGridPresenter,
    ItemsGridView,
    SaveOutcome,
)

__all__ = [
    "ItemsGridPresenter",
    "ItemsGridView",
    "SaveOutcome",
]
