#!/usr/bin/env python
"""Items grid widget: the editable WolfCafe menu table with its actions."""
from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from wolfcafe.controllers.grid_navigation_controller import GridNavigationController
from wolfcafe.presenter import ItemsGridPresenter
from wolfcafe.services.item_repository import ItemRepository
from wolfcafe.services.item_sync_service import ItemSyncService
from wolfcafe.services.save_reconciler import SaveReconciler
from wolfcafe.ui.inline_status import InlineStatusController, set_alert
from wolfcafe.ui.items_grid_components import ItemsTableView
from wolfcafe.ui.models import ItemsTableModel
from wolfcafe.ui.view_models import CellEditor

TIP_TEXT = "<b>Tip:</b> Enter to save a cell, Escape to cancel editing."
RULES_TEXT = (
    "<b>Name:</b> Required | <b>Description:</b> Optional | "
    "<b>Price:</b> Required (number) | <b>Amount:</b> Required (integer)"
)
INVALID_DATA_TEXT = "Invalid Data: Ensure that all fields are filled correctly before saving."


class ItemsGridWidget(QWidget):
    """Hosts the items table, the save/discard actions and their feedback.

    Implements the ``ItemsGridView`` protocol for ``ItemsGridPresenter``.
    Repository calls run on worker threads through ``ItemSyncService``.
    """

    # Emitted whenever the pending-change state may have changed
    state_changed = pyqtSignal()

    def __init__(
        self,
        repository: ItemRepository,
        parent=None,
        *,
        logger: Optional[logging.Logger] = None,
        update_workers: int = 4,
        sync_service: Optional[ItemSyncService] = None,
    ):
        super().__init__(parent)
        self.logger = logger or logging.getLogger(__name__)

        self.grid_model = ItemsTableModel(parent=self)
        reconciler = SaveReconciler(repository, logger=self.logger, max_workers=update_workers)
        self.presenter = ItemsGridPresenter(
            self,
            repository,
            grid=self.grid_model,
            reconciler=reconciler,
            logger=self.logger,
        )
        self.cell_editor = CellEditor(self.grid_model, logger=self.logger)
        self.navigation = GridNavigationController(
            self.grid_model, self.cell_editor, logger=self.logger
        )
        self.sync_service = sync_service or ItemSyncService(
            repository, reconciler, parent=self, logger=self.logger
        )

        self._setup_ui()
        self.table_view.bind(self.navigation, self.cell_editor)

        self._status_helper = InlineStatusController(
            parent=self,
            label_getter=lambda: getattr(self, "status_label", None),
            logger=self.logger,
        )

        self._wire_signals()
        self.refresh_actions()

    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(16)

        left = QVBoxLayout()
        header = QHBoxLayout()
        title = QLabel("Items", self)
        title_font = title.font()
        title_font.setPointSize(title_font.pointSize() + 4)
        title.setFont(title_font)
        header.addWidget(title)
        self.status_label = QLabel("", self)
        header.addWidget(self.status_label, 1)
        left.addLayout(header)

        self.table_view = ItemsTableView(self.grid_model, self, logger=self.logger)
        left.addWidget(self.table_view, 1)

        tip_label = QLabel(TIP_TEXT, self)
        tip_label.setTextFormat(Qt.RichText)
        left.addWidget(tip_label)
        rules_label = QLabel(RULES_TEXT, self)
        rules_label.setTextFormat(Qt.RichText)
        left.addWidget(rules_label)

        self.invalid_alert = QLabel("", self)
        self.invalid_alert.setWordWrap(True)
        self.invalid_alert.setVisible(False)
        left.addWidget(self.invalid_alert)
        layout.addLayout(left, 1)

        right = QVBoxLayout()
        self.save_button = QPushButton("Save Changes", self)
        self.save_button.setMinimumHeight(48)
        self.save_button.setToolTip("Save all changes (Ctrl+S)")
        right.addWidget(self.save_button)

        self.discard_button = QPushButton("Discard Changes", self)
        self.discard_button.setMinimumHeight(48)
        right.addWidget(self.discard_button)

        self.undo_row_button = QPushButton("Undo Row", self)
        self.undo_row_button.setToolTip("Undo changes to this row (Ctrl+Z)")
        right.addWidget(self.undo_row_button)

        self.save_error_label = QLabel("", self)
        self.save_error_label.setWordWrap(True)
        self.save_error_label.setStyleSheet("color: #a61b1b;")
        self.save_error_label.setVisible(False)
        right.addWidget(self.save_error_label)
        right.addStretch(1)

        side = QWidget(self)
        side.setLayout(right)
        side.setFixedWidth(200)
        layout.addWidget(side)

    def _wire_signals(self) -> None:
        self.save_button.clicked.connect(self.save_changes)
        self.discard_button.clicked.connect(self.discard_changes)
        self.undo_row_button.clicked.connect(self._undo_current_row)
        self.table_view.undo_requested.connect(self.undo_row)
        self.grid_model.grid_changed.connect(self.refresh_actions)
        self.table_view.selectionModel().currentChanged.connect(
            lambda *_: self._refresh_undo_button()
        )
        self.sync_service.load_finished.connect(self._on_load_finished)
        self.sync_service.save_finished.connect(self._on_save_finished)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def load_items(self) -> None:
        """Fetch the item listing in the background and rebuild the grid."""
        self.cell_editor.cancel()
        token = self.presenter.begin_load()
        self.show_status("Loading items...", 0)
        self.sync_service.load(token)

    def save_changes(self) -> bool:
        """Commit any open edit, validate every row and start the save."""
        self.cell_editor.commit(refocus=False)
        plan = self.presenter.prepare_save()
        if plan is None:
            return False
        if not self.sync_service.save(plan):
            self.logger.warning("Save requested while a save worker is still running")
            self.presenter.apply_save_result(RuntimeError("A save is already in progress."))
            return False
        return True

    def discard_changes(self) -> None:
        if self.presenter.is_saving:
            return
        self.cell_editor.cancel()
        self.presenter.discard_changes()
        self._restore_grid_focus()

    def undo_row(self, row: int) -> bool:
        editing = self.cell_editor.editing
        if editing is not None and editing.row == row:
            self.cell_editor.cancel()
        return self.presenter.undo_row(row)

    def has_unsaved_changes(self) -> bool:
        return self.grid_model.has_pending_changes or self.cell_editor.is_editing

    def dispose(self) -> None:
        self.presenter.dispose()

    # ------------------------------------------------------------------ #
    # ItemsGridView
    # ------------------------------------------------------------------ #
    def show_status(self, message, timeout=3000, level="info"):
        self._status_helper.show(message, timeout=timeout, level=level)

    def set_saving(self, saving: bool) -> None:
        self.save_button.setText("Saving..." if saving else "Save Changes")

    def show_save_error(self, message: Optional[str]) -> None:
        if message:
            self.save_error_label.setText(message)
            self.save_error_label.setVisible(True)
        else:
            self.save_error_label.clear()
            self.save_error_label.setVisible(False)

    def refresh_actions(self) -> None:
        self.save_button.setEnabled(self.presenter.can_save)
        self.discard_button.setEnabled(self.presenter.can_discard)
        set_alert(
            self.invalid_alert,
            INVALID_DATA_TEXT if self.grid_model.has_invalid_cells else None,
        )
        self._refresh_undo_button()
        self.state_changed.emit()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _on_load_finished(self, token: int, result) -> None:
        if self.presenter.apply_loaded(token, result):
            self._status_helper.clear()
            self._restore_grid_focus()

    def _on_save_finished(self, result) -> None:
        if not isinstance(result, BaseException):
            # The reload rebuilds every row; an edit opened during the save has no target.
            self.cell_editor.cancel()
        outcome = self.presenter.apply_save_result(result)
        if outcome.success:
            self._restore_grid_focus()

    def _undo_current_row(self) -> None:
        index = self.table_view.currentIndex()
        if index.isValid():
            self.undo_row(index.row())

    def _refresh_undo_button(self) -> None:
        index = self.table_view.currentIndex()
        self.undo_row_button.setEnabled(
            index.isValid() and self.grid_model.is_row_modified(index.row())
        )

    def _restore_grid_focus(self) -> None:
        # Rows may have been dropped; only re-focus when the grid owns keyboard focus.
        if self.table_view.hasFocus():
            self.navigation.restore_focus()
        elif self.navigation.focused_cell is not None:
            focused = self.navigation.focused_cell
            if focused.row >= self.grid_model.row_count:
                self.navigation.clear_focus()

    def closeEvent(self, event):
        self.dispose()
        super().closeEvent(event)
