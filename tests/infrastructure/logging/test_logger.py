"""Tests for the logging helpers."""

import logging
from unittest.mock import MagicMock

from src.infrastructure.logging import logger as logger_module


def test_logger_builder_writes_to_dated_log_file(tmp_path, monkeypatch):
    """LoggerBuilder should place logs under logs/<subdir>/<date>_<prefix>."""
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20260301"),
    )

    builder = (
        logger_module.LoggerBuilder()
        .name("spendly.test.builder")
        .subdir("ledger")
        .prefix("ledger_audit")
        .console(False)
        .level(logging.DEBUG)
    )
    built = builder.build()

    assert built.name == "spendly.test.builder"
    assert built.level == logging.DEBUG
    assert built.propagate is False
    file_handlers = [
        handler
        for handler in built.handlers
        if isinstance(handler, logging.FileHandler)
    ]
    assert len(file_handlers) == 1
    expected = tmp_path / "logs" / "ledger" / "20260301_ledger_audit.log"
    assert file_handlers[0].baseFilename == str(expected)
    assert not [
        handler
        for handler in built.handlers
        if type(handler) is logging.StreamHandler
    ]
    # Handlers are attached only once per logger name.
    assert builder.build() is built
    assert len(built.handlers) == 1


def test_logger_builder_uses_custom_factories(tmp_path, monkeypatch):
    """Custom formatter and handler factories should be honoured."""
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    fmt = logging.Formatter("%(message)s")
    file_handler = logging.NullHandler()
    console_handler = logging.NullHandler()
    seen = {}

    def _file_factory(path, formatter):
        seen["path"] = path
        seen["file_fmt"] = formatter
        return file_handler

    def _console_factory(formatter):
        seen["console_fmt"] = formatter
        return console_handler

    built = (
        logger_module.LoggerBuilder()
        .name("spendly.test.factories")
        .formatter(lambda: fmt)
        .file_handler(_file_factory)
        .console_handler(_console_factory)
        .build()
    )

    assert built.handlers == [file_handler, console_handler]
    assert seen["file_fmt"] is fmt
    assert seen["console_fmt"] is fmt
    assert seen["path"].parent == tmp_path / "logs" / "app"


def test_default_handlers_log_info_and_above(tmp_path):
    """Default handlers should apply the formatter at INFO level."""
    fmt = logger_module.LoggerBuilder._default_formatter()
    file_handler = logger_module.LoggerBuilder._default_file_handler(
        tmp_path / "spendly.log",
        fmt,
    )
    console_handler = logger_module.LoggerBuilder._default_console_handler(fmt)

    assert file_handler.level == logging.INFO
    assert file_handler.formatter is fmt
    assert console_handler.level == logging.INFO
    assert console_handler.formatter is fmt
    file_handler.close()


def test_logger_delegates_every_level(monkeypatch):
    """The singleton wrapper should forward calls to the built logger."""
    fake_logger = MagicMock()
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "build",
        lambda self: fake_logger,
    )
    monkeypatch.setattr(logger_module.Logger, "_instance", None)

    wrapper = logger_module.Logger("spendly.test")
    wrapper.debug("dbg")
    wrapper.info("committed version %s", 3)
    wrapper.warning("deferred")
    wrapper.error("failed")
    wrapper.critical("crit")
    wrapper.exception("boom")

    fake_logger.debug.assert_called_with("dbg")
    fake_logger.info.assert_called_with("committed version %s", 3)
    fake_logger.warning.assert_called_with("deferred")
    fake_logger.error.assert_called_with("failed")
    fake_logger.critical.assert_called_with("crit")
    fake_logger.exception.assert_called_with("boom")
    assert logger_module.Logger("other") is wrapper


def test_app_and_usage_loggers_are_separate_singletons(monkeypatch):
    """App and usage loggers should each be built once with their subdir."""
    built = []

    def _fake_build(self):
        built.append((self._name, self._subdir, self._prefix))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    app_first = logger_module.get_app_logger()
    app_second = logger_module.get_app_logger()
    usage_first = logger_module.get_usage_logger()
    usage_second = logger_module.get_usage_logger()

    assert app_first is app_second
    assert usage_first is usage_second
    assert app_first is not usage_first
    assert built == [
        ("spendly.app", "app", "spendly_app"),
        ("spendly.usage", "usage", "spendly_usage"),
    ]
