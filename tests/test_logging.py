"""Tests for backlog_relay.utils.logging module."""

import logging

import pytest

import backlog_relay.utils.logging as logging_module


@pytest.fixture
def fresh_logger(monkeypatch):
    """Reset the cached package logger and restore it afterwards."""
    package_logger = logging.getLogger("backlog_relay")
    saved_handlers = list(package_logger.handlers)
    saved_level = package_logger.level
    monkeypatch.setattr(logging_module, "_logger", None)
    yield package_logger
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers[:] = saved_handlers
    package_logger.setLevel(saved_level)


class TestLogging:
    def test_log_file_default_path(self):
        from pathlib import Path

        assert logging_module.LOG_FILE == Path.home() / ".backlog-relay.log"

    def test_disabled_uses_null_handler(self, monkeypatch, fresh_logger):
        monkeypatch.setattr(logging_module, "LOG_ENABLED", False)

        logger = logging_module.setup_logging()

        assert logger is fresh_logger
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.NullHandler)

    def test_setup_is_cached(self, monkeypatch, fresh_logger):
        monkeypatch.setattr(logging_module, "LOG_ENABLED", False)

        assert logging_module.setup_logging() is logging_module.get_logger()

    def test_enabled_writes_to_file(self, monkeypatch, tmp_path, fresh_logger):
        log_file = tmp_path / "logs" / "relay.log"
        monkeypatch.setattr(logging_module, "LOG_ENABLED", True)
        monkeypatch.setattr(logging_module, "LOG_FILE", log_file)

        logging_module.setup_logging()
        logging_module.log_message("hello")
        logging_module.log_request("GitHub", "GET", "https://api.github.com/x", 404)
        logging_module.log_request("Jira", "POST", "https://jira/x", None)
        for handler in fresh_logger.handlers:
            handler.flush()

        text = log_file.read_text()
        assert "hello" in text
        assert "GitHub GET https://api.github.com/x | STATUS: 404" in text
        assert "Jira POST https://jira/x | STATUS: no response" in text
