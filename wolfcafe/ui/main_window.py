"""Main application window hosting the items grid."""
from __future__ import annotations

import logging

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import QAction, QMainWindow, QMessageBox

from wolfcafe.infrastructure.app_constants import APP_NAME, APP_TITLE, APP_VERSION
from wolfcafe.infrastructure.application import StartupError
from wolfcafe.infrastructure.logger import LoggingStatusBar
from wolfcafe.infrastructure.settings import get_update_workers
from wolfcafe.services.item_repository import DatabaseItemRepository
from wolfcafe.ui.items_grid import ItemsGridWidget


class MainWindow(QMainWindow):
    """Main application window for the WolfCafe items editor."""

    def __init__(self, db_manager, logger=None, repository=None):
        super().__init__()
        self.logger = logger or logging.getLogger(__name__)
        self.logger.info("Initializing MainWindow")

        if db_manager is None and repository is None:
            raise StartupError("Database manager not provided. Cannot start application.")

        self.db = db_manager
        self.setWindowTitle(f"{APP_TITLE}[*]")
        self.resize(1000, 640)

        try:
            repository = repository or DatabaseItemRepository(self.db, logger=self.logger)
            self.items_widget = ItemsGridWidget(
                repository,
                self,
                logger=self.logger,
                update_workers=get_update_workers(),
            )
        except Exception as exc:
            self.logger.critical("Failed to initialize widgets: %s", exc, exc_info=True)
            raise StartupError(f"Failed to initialize application widgets: {exc}") from exc

        self.setCentralWidget(self.items_widget)
        self.status = LoggingStatusBar(self.statusBar(), self.logger)
        self._build_menu_bar()
        self.items_widget.state_changed.connect(self._sync_window_modified)
        self.items_widget.load_items()
        self.status.show_message("Ready", 2000)

    def _build_menu_bar(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        self.save_action = QAction("&Save Changes", self)
        self.save_action.setShortcut(QKeySequence.Save)
        self.save_action.triggered.connect(self.items_widget.save_changes)
        file_menu.addAction(self.save_action)

        self.discard_action = QAction("&Discard Changes", self)
        self.discard_action.triggered.connect(self.items_widget.discard_changes)
        file_menu.addAction(self.discard_action)

        reload_action = QAction("&Reload Items", self)
        reload_action.setShortcut(QKeySequence.Refresh)
        reload_action.triggered.connect(self.reload_items)
        file_menu.addAction(reload_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        help_menu = self.menuBar().addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

        self._sync_window_modified()

    def reload_items(self) -> None:
        if self.items_widget.has_unsaved_changes() and not self._confirm_discard(
            "Reloading will discard your unsaved changes. Continue?"
        ):
            return
        self.items_widget.load_items()

    def show_about(self) -> None:
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"{APP_NAME}\nVersion {APP_VERSION}\n\nSpreadsheet-style editor for the WolfCafe menu.",
        )

    def _sync_window_modified(self) -> None:
        presenter = self.items_widget.presenter
        self.setWindowModified(self.items_widget.grid_model.has_pending_changes)
        self.save_action.setEnabled(presenter.can_save)
        self.discard_action.setEnabled(presenter.can_discard)

    def _confirm_discard(self, text: str) -> bool:
        answer = QMessageBox.question(
            self,
            "Unsaved Changes",
            text,
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        return answer == QMessageBox.Yes

    def closeEvent(self, event):
        if self.items_widget.has_unsaved_changes() and not self._confirm_discard(
            "You have unsaved changes. Exit anyway?"
        ):
            event.ignore()
            return
        self.logger.info("Application closing")
        self.items_widget.dispose()
        super().closeEvent(event)
