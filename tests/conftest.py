import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _coerce_bool(value, default):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if value is None:
        return default if isinstance(default, bool) else False
    return bool(value)


class _SettingsStub:
    """In-memory replacement for QSettings during tests."""

    _data = {}

    def __init__(self, org="WolfCafe", app="WolfCafeItems"):
        self._key = (org, app)
        self._store = _SettingsStub._data.setdefault(self._key, {})

    def value(self, key, default=None, type=None, **kwargs):  # noqa: A002 - signature mirrors QSettings
        if "defaultValue" in kwargs and default is None:
            default = kwargs["defaultValue"]
        val = self._store.get(key, default)
        if type is bool:
            return _coerce_bool(val, default)
        if type is int and val is not None:
            return int(val)
        return val

    def setValue(self, key, value):
        self._store[key] = value

    def remove(self, key):
        self._store.pop(key, None)

    def sync(self):  # QSettings compatibility
        return True

    @classmethod
    def clear(cls):
        cls._data.clear()


@pytest.fixture(scope="session")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture()
def settings_stub(monkeypatch):
    _SettingsStub.clear()
    monkeypatch.setattr("wolfcafe.infrastructure.settings.QSettings", _SettingsStub, raising=False)
    for name in ("WOLFCAFE_DEBUG", "WOLFCAFE_LOG_DIR", "WOLFCAFE_DB_PATH"):
        monkeypatch.delenv(name, raising=False)
    yield _SettingsStub
    _SettingsStub.clear()


def _patch_thread_to_run_inline(monkeypatch, module_path):
    class _InlineThread:
        def __init__(self, target=None, name=None, daemon=None, args=(), kwargs=None):
            self._target = target
            self._args = args
            self._kwargs = kwargs or {}

        def start(self):
            if self._target:
                self._target(*self._args, **self._kwargs)

    # Replace only the module's reference; the save executor still needs real threads.
    monkeypatch.setattr(f"{module_path}.threading", SimpleNamespace(Thread=_InlineThread))


@pytest.fixture()
def inline_threads(monkeypatch):
    """Run ItemSyncService workers synchronously on the calling thread."""
    _patch_thread_to_run_inline(monkeypatch, "wolfcafe.services.item_sync_service")
    return True
