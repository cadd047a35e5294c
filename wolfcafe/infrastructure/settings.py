"""Utility helpers for application QSettings access."""
import os

from PyQt5.QtCore import QSettings

from .app_constants import DB_PATH, DEFAULT_UPDATE_WORKERS, SETTINGS_APP, SETTINGS_ORG


def get_app_settings(*, org: str = SETTINGS_ORG, app: str = SETTINGS_APP) -> QSettings:
    """Return a QSettings instance using the default org/app identifiers."""
    return QSettings(org, app)


def get_database_path(settings=None) -> str:
    """Resolve the items database path; ``WOLFCAFE_DB_PATH`` wins over settings."""
    env_path = os.environ.get("WOLFCAFE_DB_PATH")
    if env_path:
        return env_path
    settings = settings or get_app_settings()
    value = settings.value("database/path", DB_PATH, type=str)
    return value or DB_PATH


def get_update_workers(settings=None) -> int:
    """Number of concurrent update requests a save may issue (1-16)."""
    settings = settings or get_app_settings()
    try:
        workers = int(settings.value("grid/update_workers", DEFAULT_UPDATE_WORKERS, type=int))
    except (TypeError, ValueError):
        workers = DEFAULT_UPDATE_WORKERS
    return max(1, min(workers, 16))


__all__ = ["get_app_settings", "get_database_path", "get_update_workers", "QSettings"]
