"""Application bootstrap utilities for the WolfCafe items editor."""
from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Optional, TYPE_CHECKING, Tuple

from PyQt5.QtCore import Qt
import PyQt5.QtCore as QtCore
from PyQt5.QtWidgets import QApplication, QMessageBox

from wolfcafe.exceptions import ConfigurationError, DatabaseError
from wolfcafe.infrastructure.app_constants import APP_TITLE, LOG_APP_NAME
from wolfcafe.infrastructure.logger import (
    LogCleanupScheduler,
    get_log_config,
    qt_message_handler,
    setup_logging,
)
from wolfcafe.infrastructure.settings import get_database_path
from wolfcafe.persistence.database_manager import DatabaseManager

if TYPE_CHECKING:
    from PyQt5.QtWidgets import QMainWindow

    MainWindowFactory = Callable[..., QMainWindow]
else:
    MainWindowFactory = Callable[..., Any]


class StartupError(RuntimeError):
    """Raised when the main window cannot complete initialization."""


@dataclass
class ApplicationContext:
    """Aggregate of resources created during application bootstrap."""

    app: Optional[QApplication] = None
    logger: Optional[logging.Logger] = None
    cleanup_scheduler: Optional[LogCleanupScheduler] = None
    db_manager: Optional[DatabaseManager] = None
    main_window: Optional["QMainWindow"] = None

    def shutdown(self) -> None:
        """Release resources created during startup."""
        if self.cleanup_scheduler:
            try:
                self.cleanup_scheduler.stop()
            except Exception as exc:
                if self.logger:
                    self.logger.debug("Failed to stop cleanup scheduler: %s", exc)
        if self.db_manager:
            try:
                self.db_manager.close()
            except Exception as exc:
                if self.logger:
                    self.logger.debug("Failed to close database on exit: %s", exc)


class ApplicationBuilder:
    """Coordinate logging, Qt bootstrapping, database opening and window creation."""

    def __init__(
        self,
        *,
        main_window_factory: MainWindowFactory,
        db_manager_factory: Callable[..., DatabaseManager] = DatabaseManager,
        db_path_getter: Callable[[], str] = get_database_path,
        log_config_getter: Callable[[], dict[str, Any]] = get_log_config,
        logging_setup: Callable[..., logging.Logger] = setup_logging,
        qt_handler: Callable[..., None] = qt_message_handler,
        qt_attributes: Tuple[int, ...] = (
            Qt.AA_EnableHighDpiScaling,
            Qt.AA_UseHighDpiPixmaps,
        ),
        theme: Optional[str] = "light_blue.xml",
        app_name: str = LOG_APP_NAME,
    ) -> None:
        self._main_window_factory = main_window_factory
        self._db_manager_factory = db_manager_factory
        self._db_path_getter = db_path_getter
        self._log_config_getter = log_config_getter
        self._logging_setup = logging_setup
        self._qt_handler = qt_handler
        self._qt_attributes = qt_attributes
        self._theme = theme
        self._app_name = app_name

    def run(self) -> int:
        """Build and execute the application, returning an exit code."""
        context = ApplicationContext()
        try:
            return self._run(context)
        except (StartupError, ConfigurationError, DatabaseError) as exc:
            logger = context.logger or logging.getLogger(__name__)
            logger.critical("Failed to initialize application: %s", exc, exc_info=True)
            self._show_message_box("Initialization Error", str(exc))
            return 1
        except Exception as exc:
            self._handle_unexpected_exception(context, exc)
            return 1
        finally:
            context.shutdown()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(self, context: ApplicationContext) -> int:
        self._configure_logging(context)
        self._configure_qt(context)
        context.db_manager = self._open_database(context)
        context.main_window = self._main_window_factory(
            db_manager=context.db_manager,
            logger=context.logger,
        )
        return self._enter_event_loop(context)

    def _configure_logging(self, context: ApplicationContext) -> None:
        log_config = self._log_config_getter()
        logger = self._logging_setup(
            app_name=self._app_name,
            log_dir=log_config["log_dir"],
            debug_mode=log_config["debug_mode"],
            enable_info=log_config["enable_info"],
            enable_error=log_config["enable_error"],
            enable_debug=log_config["enable_debug"],
        )
        context.logger = logger
        logger.info("%s starting", APP_TITLE)
        logger.debug("Logging configuration: %s", log_config)

        if log_config.get("auto_cleanup"):
            try:
                cleanup_scheduler = LogCleanupScheduler(
                    log_dir=log_config["log_dir"],
                    cleanup_days=log_config["cleanup_days"],
                )
                cleanup_scheduler.start()
                context.cleanup_scheduler = cleanup_scheduler
            except Exception as exc:
                logger.error(
                    "Failed to initialize log cleanup scheduler: %s",
                    exc,
                    exc_info=True,
                )

    def _configure_qt(self, context: ApplicationContext) -> None:
        QtCore.qInstallMessageHandler(self._qt_handler)
        if context.logger:
            context.logger.debug("Qt message handler installed")

        for attr in self._qt_attributes:
            try:
                QApplication.setAttribute(attr)
            except Exception as exc:
                if context.logger:
                    context.logger.warning("Failed to set Qt attribute %s: %s", attr, exc)

        app = QApplication.instance() or QApplication(sys.argv)
        app.setQuitOnLastWindowClosed(True)
        context.app = app

        if not self._theme:
            return
        try:
            from qt_material import apply_stylesheet

            apply_stylesheet(app, theme=self._theme)
        except ImportError:
            if context.logger:
                context.logger.warning("qt-material library not found; skipping theme application.")
        except Exception as exc:
            if context.logger:
                context.logger.warning("Failed to apply application theme: %s", exc)

    def _open_database(self, context: ApplicationContext) -> DatabaseManager:
        db_path = self._db_path_getter()
        if not db_path or not str(db_path).strip():
            raise ConfigurationError("No database path configured (database/path or WOLFCAFE_DB_PATH).")
        if context.logger:
            context.logger.info("Opening items database at %s", db_path)
        return self._db_manager_factory(db_path, logger=context.logger)

    def _enter_event_loop(self, context: ApplicationContext) -> int:
        if not context.app or not context.main_window:
            return 1
        if context.logger:
            context.logger.info("Showing main application window")
        context.main_window.show()
        exit_code = context.app.exec_()
        if context.logger:
            context.logger.info("Application exiting with code %s", exit_code)
        return exit_code

    def _show_message_box(self, title: str, message: str) -> None:
        try:
            QMessageBox.critical(None, title, message)
        except Exception:
            pass

    def _handle_unexpected_exception(
        self,
        context: ApplicationContext,
        exc: Exception,
    ) -> None:
        logger = context.logger
        if logger:
            logger.critical(
                "Unhandled exception during application startup", exc_info=True
            )
        else:
            print(f"CRITICAL ERROR: {exc}", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        message = (
            "The application encountered a fatal error and cannot continue.\n\n"
            f"Error: {exc}"
        )
        self._show_message_box("Fatal Error", message)
