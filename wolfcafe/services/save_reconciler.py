"""Persist grid edits and rebuild the grid from the server's listing."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Protocol, Sequence

from wolfcafe.domain.item_models import Item, ItemPayload
from wolfcafe.exceptions import RepositoryError, WolfCafeError
from wolfcafe.services.item_repository import ItemRepository
from wolfcafe.services.item_validation import build_payload

SAVE_FAILED_MESSAGE = "Failed to save changes. Please try again."


class ReconcilableGrid(Protocol):
    """Subset of the grid model the reconciler reads and reloads."""

    def iter_pending_rows(self) -> Iterator[tuple[int, Optional[Any], tuple[str, ...]]]:
        ...

    def is_row_modified(self, row: int) -> bool:
        ...

    def load(self, items: Iterable[Item]) -> None:
        ...


@dataclass(frozen=True)
class SavePlan:
    """Rows partitioned into creates (in row order) and updates."""

    creates: Sequence[ItemPayload] = ()
    updates: Sequence[tuple[Any, ItemPayload]] = ()

    @property
    def is_empty(self) -> bool:
        return not self.creates and not self.updates


class SaveReconciler:
    """Diff the grid against its baseline and push the difference to the repository.

    Creates run one at a time in row order because the backend assigns
    identities (and therefore listing order) in arrival order. Updates target
    distinct existing identities and run concurrently. After everything has
    settled the full listing is fetched again and becomes the new grid.
    """

    def __init__(
        self,
        repository: ItemRepository,
        *,
        logger: Optional[logging.Logger] = None,
        max_workers: int = 4,
    ) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)
        self._max_workers = max(1, int(max_workers))

    @property
    def repository(self) -> ItemRepository:
        return self._repository

    def prepare(self, grid: ReconcilableGrid) -> SavePlan:
        """Validate every row and partition them.

        Raises:
            RowValidationError: on the first invalid row; nothing is sent.
        """
        creates: list[ItemPayload] = []
        updates: list[tuple[Any, ItemPayload]] = []
        for row, backing_id, values in grid.iter_pending_rows():
            payload = build_payload(values, row + 1)
            if backing_id is None:
                creates.append(payload)
            elif grid.is_row_modified(row):
                updates.append((backing_id, payload))
        return SavePlan(creates=tuple(creates), updates=tuple(updates))

    def persist(self, plan: SavePlan) -> list[Item]:
        """Send ``plan`` to the repository and return the fresh listing.

        Raises:
            RepositoryError: the first failure; earlier writes are not rolled back.
        """
        self._logger.info(
            "Saving items: %s create(s), %s update(s)", len(plan.creates), len(plan.updates)
        )
        for payload in plan.creates:
            self._call(self._repository.create_item, payload)
        if plan.updates:
            self._run_updates(plan.updates)
        items = list(self._call(self._repository.list_items))
        self._logger.info("Save complete; %s item(s) listed", len(items))
        return items

    def reconcile(self, grid: ReconcilableGrid) -> list[Item]:
        """Validate, persist and reload ``grid``; the grid is untouched on error."""
        plan = self.prepare(grid)
        items = self.persist(plan)
        grid.load(items)
        return items

    @staticmethod
    def describe_error(exc: BaseException) -> str:
        """Return the message shown to the user for a failed save."""
        if isinstance(exc, RepositoryError):
            return exc.message or SAVE_FAILED_MESSAGE
        return str(exc) or SAVE_FAILED_MESSAGE

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _run_updates(self, updates: Sequence[tuple[Any, ItemPayload]]) -> None:
        first_error: Optional[BaseException] = None
        workers = min(self._max_workers, len(updates))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ItemUpdate") as pool:
            futures = {
                pool.submit(self._call, self._repository.update_item, item_id, payload): item_id
                for item_id, payload in updates
            }
            for future in as_completed(futures):
                exc = future.exception()
                if exc is None:
                    continue
                self._logger.error("Update of item %s failed: %s", futures[future], exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def _call(self, func, *args):
        try:
            return func(*args)
        except WolfCafeError:
            raise
        except Exception as exc:
            raise RepositoryError(str(exc) or SAVE_FAILED_MESSAGE, detail=repr(exc)) from exc
