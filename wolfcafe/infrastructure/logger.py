#!/usr/bin/env python
import logging
import logging.handlers
import os
from datetime import datetime, timedelta
from pathlib import Path

import PyQt5.QtCore as QtCore
from PyQt5.QtCore import QtMsgType

from wolfcafe.infrastructure.app_constants import LOG_APP_NAME, LOG_DIR
from wolfcafe.infrastructure.settings import get_app_settings

LOG_FORMAT = '%(asctime)s [%(levelname)s] [%(module)s:%(lineno)d] [%(funcName)s] %(message)s'


def setup_logging(app_name=LOG_APP_NAME, log_dir=LOG_DIR, debug_mode=False,
                  enable_info=True, enable_error=True, enable_debug=True):
    """
    Configure the logging system for the WolfCafe items editor.

    Args:
        app_name (str): Base name for log files
        log_dir (str): Directory to store log files
        debug_mode (bool): Whether to enable debug logging
        enable_info (bool): Whether to write the INFO level log file
        enable_error (bool): Whether to write the ERROR and CRITICAL log file
        enable_debug (bool): Whether to write the DEBUG log file (only when debug_mode is True)

    Returns:
        logging.Logger: Configured root logger
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    (log_path / "archived").mkdir(exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    log_format = logging.Formatter(LOG_FORMAT)

    if enable_info:
        main_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}.log",
            maxBytes=5*1024*1024,  # 5MB
            backupCount=10,
            encoding='utf-8'
        )
        main_handler.setLevel(logging.INFO)
        main_handler.setFormatter(log_format)
        root_logger.addHandler(main_handler)

    if enable_error:
        error_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}_error.log",
            maxBytes=5*1024*1024,  # 5MB
            backupCount=10,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(log_format)
        root_logger.addHandler(error_handler)

    if debug_mode and enable_debug:
        debug_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}_debug.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        debug_handler.setLevel(logging.DEBUG)
        debug_handler.setFormatter(log_format)
        root_logger.addHandler(debug_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    console_handler.setFormatter(log_format)
    root_logger.addHandler(console_handler)

    root_logger.info(f"Logging initialized at {datetime.now().isoformat()}")
    if debug_mode:
        root_logger.info("Debug logging enabled")

    return root_logger


def qt_message_handler(mode, context, message):
    """Redirect Qt debug/warning/critical messages to Python logging."""
    logger = logging.getLogger('qt')

    # Benign noise when an edit is requested on a non-editable index
    if "edit: editing failed" in (message or "").lower():
        logger.debug(message)
        return

    if mode == QtMsgType.QtDebugMsg:
        logger.debug(message)
    elif mode == QtMsgType.QtInfoMsg:
        logger.info(message)
    elif mode == QtMsgType.QtWarningMsg:
        logger.warning(message)
    elif mode == QtMsgType.QtCriticalMsg:
        logger.error(message)
    elif mode == QtMsgType.QtFatalMsg:
        logger.critical(message)


class LoggingStatusBar:
    """Status bar that logs messages in addition to displaying them."""

    def __init__(self, status_bar, logger=None):
        self.status_bar = status_bar
        self.logger = logger or logging.getLogger()

    def show_message(self, message, timeout=0):
        self.logger.debug(f"Status: {message}")
        self.status_bar.showMessage(message, timeout)


def cleanup_old_logs(log_dir=LOG_DIR, max_age_days=1):
    """
    Remove log files older than max_age_days.

    Args:
        log_dir (str): Directory containing log files
        max_age_days (int): Maximum age of log files in days

    Returns:
        int: Number of files removed
    """
    logger = logging.getLogger(__name__)
    logger.debug(f"Starting log cleanup for files older than {max_age_days} days in {log_dir}")

    if max_age_days < 1:
        logger.warning(f"Invalid max_age_days value ({max_age_days}), using default of 1 day")
        max_age_days = 1

    log_path = Path(log_dir)
    if not log_path.exists():
        logger.warning(f"Log directory {log_dir} does not exist, nothing to clean up")
        return 0

    cutoff = datetime.now() - timedelta(days=max_age_days)
    removed_count = 0

    for directory in (log_path, log_path / "archived"):
        if not directory.exists():
            continue
        for file_path in directory.glob("*.log*"):
            if not file_path.is_file():
                continue
            if datetime.fromtimestamp(file_path.stat().st_mtime) >= cutoff:
                continue
            try:
                file_path.unlink()
                removed_count += 1
                logger.debug(f"Removed old log file: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to remove old log file {file_path}: {e}")

    logger.info(f"Log cleanup completed: removed {removed_count} files older than {max_age_days} days")
    return removed_count


class LogCleanupScheduler:
    """Runs cleanup_old_logs once at the next midnight and then every 24 hours."""

    def __init__(self, log_dir=LOG_DIR, cleanup_days=1):
        self.log_dir = log_dir
        self.cleanup_days = max(1, min(cleanup_days, 365))
        self.timer = None
        self.midnight_timer = None
        self.logger = logging.getLogger(__name__)
        self.is_running = False

    def start(self):
        if self.is_running:
            self.stop()

        now = datetime.now()
        midnight = (now + timedelta(days=1)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        seconds_until_midnight = (midnight - now).total_seconds()

        self.timer = QtCore.QTimer()
        self.timer.timeout.connect(self._run_cleanup)
        self.timer.setSingleShot(False)
        self.timer.start(24 * 60 * 60 * 1000)

        self.midnight_timer = QtCore.QTimer()
        self.midnight_timer.timeout.connect(self._run_cleanup)
        self.midnight_timer.setSingleShot(True)
        self.midnight_timer.start(int(seconds_until_midnight * 1000))

        self.is_running = True
        self.logger.info(
            f"Log cleanup scheduler started. Next cleanup at {midnight:%Y-%m-%d %H:%M:%S} "
            f"(in {seconds_until_midnight/3600:.1f} hours)"
        )

    def stop(self):
        if self.timer is not None:
            self.timer.stop()
            self.timer = None
        if self.midnight_timer is not None:
            self.midnight_timer.stop()
            self.midnight_timer = None
        self.is_running = False
        self.logger.info("Log cleanup scheduler stopped")

    def _run_cleanup(self):
        try:
            removed_count = cleanup_old_logs(self.log_dir, self.cleanup_days)
            self.logger.info(f"Automatic log cleanup completed. Removed {removed_count} old log files")
        except Exception as e:
            self.logger.error(f"Error during automatic log cleanup: {e}", exc_info=True)


def get_log_config():
    """
    Get logging configuration from environment variables or settings.

    Returns:
        dict: Dictionary containing all logging configuration settings
    """
    settings = get_app_settings()

    # Environment variables take precedence
    if 'WOLFCAFE_DEBUG' in os.environ:
        debug_mode = os.environ['WOLFCAFE_DEBUG'].lower() in ('true', '1', 'yes')
    else:
        debug_mode = settings.value("logging/debug_mode", False, type=bool)

    log_dir = os.environ.get('WOLFCAFE_LOG_DIR', LOG_DIR)

    enable_info = settings.value("logging/enable_info", True, type=bool)
    enable_error = settings.value("logging/enable_error", True, type=bool)
    enable_debug = settings.value("logging/enable_debug", True, type=bool)

    auto_cleanup = settings.value("logging/auto_cleanup", False, type=bool)
    try:
        cleanup_days = int(settings.value("logging/cleanup_days", 1, type=int))
    except (TypeError, ValueError):
        cleanup_days = 1
    cleanup_days = max(1, min(cleanup_days, 365))

    return {
        'debug_mode': debug_mode,
        'log_dir': log_dir,
        'enable_info': enable_info,
        'enable_error': enable_error,
        'enable_debug': enable_debug,
        'auto_cleanup': auto_cleanup,
        'cleanup_days': cleanup_days
    }

