from __future__ import annotations

import pytest

from wolfcafe.exceptions import DatabaseConnectionError
from wolfcafe.infrastructure import application as application_module
from wolfcafe.infrastructure.application import ApplicationBuilder, StartupError


class StubLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def _record(self, level: str, message: str, *args, **kwargs) -> None:
        if args:
            message = message % args
        self.records.append((level, message))

    def info(self, message: str, *args, **kwargs) -> None:
        self._record("info", message, *args)

    def debug(self, message: str, *args, **kwargs) -> None:
        self._record("debug", message, *args)

    def warning(self, message: str, *args, **kwargs) -> None:
        self._record("warning", message, *args)

    def error(self, message: str, *args, **kwargs) -> None:
        self._record("error", message, *args)

    def critical(self, message: str, *args, **kwargs) -> None:
        self._record("critical", message, *args)


class StubDatabase:
    def __init__(self, path, logger=None):
        self.path = path
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def stub_qt(monkeypatch):
    class StubQtCore:
        handler = None

        @staticmethod
        def qInstallMessageHandler(handler):
            StubQtCore.handler = handler

    class StubQApplication:
        instance_ref = None
        set_attrs: list[int] = []
        exec_result = 0

        def __init__(self, args):
            type(self).instance_ref = self
            self.args = list(args)
            self.exec_calls = 0
            self.quit_on_last_window = None

        @classmethod
        def instance(cls):
            return cls.instance_ref

        @classmethod
        def setAttribute(cls, attr):
            cls.set_attrs.append(attr)

        def setQuitOnLastWindowClosed(self, value):
            self.quit_on_last_window = value

        def exec_(self):
            self.exec_calls += 1
            return type(self).exec_result

    class StubMessageBox:
        last_call = None

        @staticmethod
        def critical(parent, title, message):
            StubMessageBox.last_call = (parent, title, message)

    StubQApplication.set_attrs = []
    monkeypatch.setattr(application_module, "QtCore", StubQtCore)
    monkeypatch.setattr(application_module, "QApplication", StubQApplication)
    monkeypatch.setattr(application_module, "QMessageBox", StubMessageBox)
    return StubQApplication, StubMessageBox


def _make_builder(main_window_factory, tmp_path, *, db_manager_factory=StubDatabase):
    log_config = {
        "log_dir": str(tmp_path / "logs"),
        "debug_mode": False,
        "enable_info": True,
        "enable_error": True,
        "enable_debug": False,
        "cleanup_days": 7,
        "auto_cleanup": False,
    }
    return ApplicationBuilder(
        main_window_factory=main_window_factory,
        db_manager_factory=db_manager_factory,
        db_path_getter=lambda: str(tmp_path / "db" / "wolfcafe.db"),
        log_config_getter=lambda: log_config,
        logging_setup=lambda **kwargs: StubLogger(),
        qt_handler=lambda *args, **kwargs: None,
        qt_attributes=(11, 22),
        theme=None,
    )


class _Window:
    def __init__(self, *, db_manager, logger):
        self.db = db_manager
        self.shown = False

    def show(self):
        self.shown = True


def test_run_opens_database_and_enters_event_loop(tmp_path, stub_qt):
    stub_app, message_box = stub_qt
    created = {}

    def main_window_factory(*, db_manager, logger):
        created["window"] = _Window(db_manager=db_manager, logger=logger)
        return created["window"]

    exit_code = _make_builder(main_window_factory, tmp_path).run()

    assert exit_code == 0
    window = created["window"]
    assert window.shown
    assert window.db.path.endswith("wolfcafe.db")
    assert window.db.closed
    assert stub_app.instance_ref.exec_calls == 1
    assert stub_app.set_attrs == [11, 22]
    assert stub_app.instance_ref.quit_on_last_window is True
    assert message_box.last_call is None


def test_run_reports_database_failure(tmp_path, stub_qt):
    _, message_box = stub_qt

    def failing_db(path, logger=None):
        raise DatabaseConnectionError("Could not open database")

    def main_window_factory(*, db_manager, logger):
        raise AssertionError("window must not be created")

    exit_code = _make_builder(main_window_factory, tmp_path, db_manager_factory=failing_db).run()

    assert exit_code == 1
    assert message_box.last_call[1] == "Initialization Error"
    assert "Could not open database" in message_box.last_call[2]


def test_run_reports_startup_error_and_closes_database(tmp_path, stub_qt):
    _, message_box = stub_qt
    opened = []

    def db_factory(path, logger=None):
        opened.append(StubDatabase(path))
        return opened[-1]

    def main_window_factory(*, db_manager, logger):
        raise StartupError("widgets failed")

    exit_code = _make_builder(main_window_factory, tmp_path, db_manager_factory=db_factory).run()

    assert exit_code == 1
    assert message_box.last_call[1:] == ("Initialization Error", "widgets failed")
    assert opened[0].closed


def test_unexpected_exception_shows_fatal_error(tmp_path, stub_qt):
    _, message_box = stub_qt

    def main_window_factory(*, db_manager, logger):
        raise ValueError("kaboom")

    exit_code = _make_builder(main_window_factory, tmp_path).run()

    assert exit_code == 1
    assert message_box.last_call[1] == "Fatal Error"
    assert "kaboom" in message_box.last_call[2]


def test_blank_database_path_is_a_configuration_error(tmp_path, stub_qt):
    _, message_box = stub_qt
    builder = _make_builder(_Window, tmp_path)
    builder._db_path_getter = lambda: "  "

    exit_code = builder.run()

    assert exit_code == 1
    assert message_box.last_call[1] == "Initialization Error"
    assert "No database path configured" in message_box.last_call[2]
