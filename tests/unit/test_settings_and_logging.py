import os
import time

from wolfcafe.infrastructure.app_constants import DB_PATH, DEFAULT_UPDATE_WORKERS, LOG_DIR
from wolfcafe.infrastructure.logger import cleanup_old_logs, get_log_config
from wolfcafe.infrastructure.settings import (
    get_app_settings,
    get_database_path,
    get_update_workers,
)


def test_database_path_defaults_and_overrides(settings_stub, monkeypatch):
    assert get_database_path() == DB_PATH

    get_app_settings().setValue("database/path", "custom/items.db")
    assert get_database_path() == "custom/items.db"

    monkeypatch.setenv("WOLFCAFE_DB_PATH", "/tmp/override.db")
    assert get_database_path() == "/tmp/override.db"


def test_update_workers_are_clamped(settings_stub):
    assert get_update_workers() == DEFAULT_UPDATE_WORKERS

    settings = get_app_settings()
    settings.setValue("grid/update_workers", 0)
    assert get_update_workers() == 1

    settings.setValue("grid/update_workers", 64)
    assert get_update_workers() == 16

    settings.setValue("grid/update_workers", "lots")
    assert get_update_workers() == DEFAULT_UPDATE_WORKERS


def test_log_config_defaults(settings_stub):
    config = get_log_config()

    assert config == {
        "debug_mode": False,
        "log_dir": LOG_DIR,
        "enable_info": True,
        "enable_error": True,
        "enable_debug": True,
        "auto_cleanup": False,
        "cleanup_days": 1,
    }


def test_log_config_environment_wins(settings_stub, monkeypatch):
    settings = get_app_settings()
    settings.setValue("logging/debug_mode", False)
    settings.setValue("logging/cleanup_days", 900)
    monkeypatch.setenv("WOLFCAFE_DEBUG", "yes")
    monkeypatch.setenv("WOLFCAFE_LOG_DIR", "/var/log/wolfcafe")

    config = get_log_config()

    assert config["debug_mode"] is True
    assert config["log_dir"] == "/var/log/wolfcafe"
    assert config["cleanup_days"] == 365


def test_cleanup_removes_only_stale_logs(tmp_path):
    archived = tmp_path / "archived"
    archived.mkdir()
    stale = tmp_path / "wolfcafe.log.1"
    stale_archived = archived / "wolfcafe_error.log"
    fresh = tmp_path / "wolfcafe.log"
    other = tmp_path / "notes.txt"
    for path in (stale, stale_archived, fresh, other):
        path.write_text("entry\n")

    three_days_ago = time.time() - 3 * 24 * 3600
    for path in (stale, stale_archived, other):
        os.utime(path, (three_days_ago, three_days_ago))

    removed = cleanup_old_logs(str(tmp_path), max_age_days=1)

    assert removed == 2
    assert not stale.exists()
    assert not stale_archived.exists()
    assert fresh.exists()
    assert other.exists()


def test_cleanup_of_missing_directory_is_noop(tmp_path):
    assert cleanup_old_logs(str(tmp_path / "missing")) == 0
