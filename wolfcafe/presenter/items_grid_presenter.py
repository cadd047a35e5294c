"""Presenter for the items grid experience."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Union

from wolfcafe.domain.item_models import Item
from wolfcafe.exceptions import ValidationError
from wolfcafe.services.item_repository import ItemRepository
from wolfcafe.services.save_reconciler import SavePlan, SaveReconciler
from wolfcafe.ui.view_models.items_grid_view_model import ItemsGridViewModel

LoadResult = Union[Sequence[Item], BaseException]


class ItemsGridView(Protocol):
    """Interface implemented by the Qt widget so the presenter can talk to it."""

    def show_status(self, message: str, timeout: int = 3000, level: str = "info") -> None:
        """Display a transient status message."""

    def set_saving(self, saving: bool) -> None:
        """Reflect whether a save is in flight."""

    def show_save_error(self, message: Optional[str]) -> None:
        """Show (or clear, with None) the last save error."""

    def refresh_actions(self) -> None:
        """Re-evaluate which actions are enabled."""


@dataclass(frozen=True)
class SaveOutcome:
    """Result of attempting to save the grid."""

    success: bool
    message: str
    created: int = 0
    updated: int = 0
    error_detail: Optional[str] = None


class ItemsGridPresenter:
    """Orchestrates loading, saving, discarding and undo independent of Qt.

    ``grid`` is anything with the ``ItemsGridViewModel`` API; the Qt table
    model wraps the view model with the same methods so the view is notified
    of every mutation.
    """

    def __init__(
        self,
        view: ItemsGridView,
        repository: ItemRepository,
        grid: Optional[ItemsGridViewModel] = None,
        *,
        reconciler: Optional[SaveReconciler] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._view = view
        self._repository = repository
        self._grid = grid if grid is not None else ItemsGridViewModel()
        self._logger = logger or logging.getLogger(__name__)
        self._reconciler = reconciler or SaveReconciler(repository, logger=self._logger)
        self._is_saving = False
        self._save_error: Optional[str] = None
        self._load_token = 0
        self._disposed = False
        self._pending_plan: Optional[SavePlan] = None
        self._last_outcome = SaveOutcome(success=False, message="")

    @property
    def repository(self) -> ItemRepository:
        """Expose the underlying repository (useful for testing)."""
        return self._repository

    @property
    def reconciler(self) -> SaveReconciler:
        return self._reconciler

    @property
    def grid(self):
        return self._grid

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def save_error(self) -> Optional[str]:
        return self._save_error

    @property
    def can_save(self) -> bool:
        return (
            not self._is_saving
            and not self._grid.has_invalid_cells
            and self._grid.has_pending_changes
        )

    @property
    def can_discard(self) -> bool:
        return not self._is_saving and self._grid.can_discard

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #
    def load_items(self) -> bool:
        """Fetch the listing synchronously and rebuild the grid."""
        token = self.begin_load()
        try:
            result: LoadResult = list(self._repository.list_items())
        except Exception as exc:
            result = exc
        return self.apply_loaded(token, result)

    def begin_load(self) -> int:
        """Start a load and return the token its result must present."""
        self._load_token += 1
        return self._load_token

    def apply_loaded(self, token: int, result: LoadResult) -> bool:
        """Apply a finished load unless it was superseded or the view is gone."""
        if self._disposed:
            self._logger.debug("Dropping item listing that arrived after teardown")
            return False
        if token != self._load_token:
            self._logger.debug("Dropping stale item listing (token %s, current %s)", token, self._load_token)
            return False
        if isinstance(result, BaseException):
            self._logger.error("Failed to load items: %s", result, exc_info=result)
            self._grid.load_failed()
            self._view.show_status("Could not load items.", 5000, level="error")
            self._view.refresh_actions()
            return False
        self._grid.load(result)
        self._logger.info("Loaded %s item(s)", len(result))
        self._view.refresh_actions()
        return True

    def dispose(self) -> None:
        """Stop applying asynchronous results; the view is being torn down."""
        self._disposed = True

    # ------------------------------------------------------------------ #
    # Saving
    # ------------------------------------------------------------------ #
    def save_changes(self) -> SaveOutcome:
        """Validate, persist and reload in one synchronous call."""
        plan = self.prepare_save()
        if plan is None:
            return self._last_outcome
        try:
            result: LoadResult = self._reconciler.persist(plan)
        except Exception as exc:
            result = exc
        return self.apply_save_result(result)

    def prepare_save(self) -> Optional[SavePlan]:
        """Enter the saving state and build the plan; None when the save cannot start."""
        if self._is_saving:
            self._last_outcome = SaveOutcome(success=False, message="A save is already in progress.")
            self._view.show_status(self._last_outcome.message, 2000, level="warning")
            return None

        self._set_saving(True)
        self._set_error(None)
        try:
            plan = self._reconciler.prepare(self._grid)
        except ValidationError as exc:
            self._logger.warning("Save aborted: %s (columns %s)", exc, getattr(exc, "columns", ()))
            self._last_outcome = SaveOutcome(success=False, message=str(exc), error_detail=str(exc))
            self._set_error(str(exc))
            self._set_saving(False)
            return None
        self._pending_plan = plan
        return plan

    def apply_save_result(self, result: LoadResult) -> SaveOutcome:
        """Finish a save started with ``prepare_save``."""
        plan = self._pending_plan or SavePlan()
        self._pending_plan = None
        try:
            if isinstance(result, BaseException):
                message = SaveReconciler.describe_error(result)
                self._logger.error("Save failed: %s", message, exc_info=result)
                self._set_error(message)
                outcome = SaveOutcome(
                    success=False,
                    message=message,
                    error_detail=getattr(result, "detail", None) or str(result),
                )
            else:
                if not self._disposed:
                    self._grid.load(result)
                outcome = SaveOutcome(
                    success=True,
                    message=f"Saved {len(plan.creates)} new and {len(plan.updates)} updated item(s).",
                    created=len(plan.creates),
                    updated=len(plan.updates),
                )
                self._view.show_status(outcome.message, 3000)
        finally:
            self._set_saving(False)
        self._last_outcome = outcome
        return outcome

    # ------------------------------------------------------------------ #
    # Local edits
    # ------------------------------------------------------------------ #
    def discard_changes(self) -> None:
        if self._is_saving:
            return
        self._grid.discard_all()
        self._set_error(None)
        self._view.show_status("Changes discarded.", 2000)
        self._view.refresh_actions()

    def undo_row(self, row: int) -> bool:
        if not self._grid.undo_row(row):
            return False
        self._view.refresh_actions()
        return True

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _set_saving(self, saving: bool) -> None:
        self._is_saving = saving
        self._view.set_saving(saving)
        self._view.refresh_actions()

    def _set_error(self, message: Optional[str]) -> None:
        self._save_error = message
        self._view.show_save_error(message)
