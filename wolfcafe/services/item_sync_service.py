"""Background loading and saving of items off the UI thread."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from wolfcafe.services.item_repository import ItemRepository
from wolfcafe.services.save_reconciler import SavePlan, SaveReconciler


class ItemSyncService(QObject):
    """Run repository calls on worker threads and report back through signals.

    Signals are emitted from the worker thread; Qt queues them onto the
    receiver's thread, so slots always run on the UI thread.
    """

    # token, list[Item] | Exception
    load_finished = pyqtSignal(int, object)
    # list[Item] | Exception
    save_finished = pyqtSignal(object)

    def __init__(
        self,
        repository: ItemRepository,
        reconciler: SaveReconciler,
        parent: Optional[QObject] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(parent)
        self._repository = repository
        self._reconciler = reconciler
        self._logger = logger or logging.getLogger(__name__)
        self._save_in_progress = False

    @property
    def save_in_progress(self) -> bool:
        return self._save_in_progress

    def load(self, token: int) -> None:
        self._logger.debug("Item listing %s started", token)

        def _worker():
            try:
                result = list(self._repository.list_items())
            except Exception as exc:
                self._logger.warning("Item listing %s failed: %s", token, exc)
                result = exc
            self.load_finished.emit(token, result)

        threading.Thread(target=_worker, name="ItemLoad", daemon=True).start()

    def save(self, plan: SavePlan) -> bool:
        if self._save_in_progress:
            return False
        self._save_in_progress = True

        def _worker():
            try:
                result = self._reconciler.persist(plan)
            except Exception as exc:
                result = exc
            self._save_in_progress = False
            self.save_finished.emit(result)

        threading.Thread(target=_worker, name="ItemSave", daemon=True).start()
        return True
