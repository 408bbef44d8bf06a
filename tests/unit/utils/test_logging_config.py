"""
Unit tests for logging and tracing setup.
"""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

import pytest
from groupmatch.utils.logging_config import setup_langsmith, setup_logging


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_and_file_handlers(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "engine.log"
        setup_logging(debug=False, log_file=str(log_file))

        root = logging.getLogger()
        assert len(root.handlers) == 2
        console, rotating = root.handlers
        assert console.level == logging.INFO
        assert isinstance(rotating, RotatingFileHandler)
        assert rotating.level == logging.DEBUG
        assert log_file.parent.is_dir()

    def test_debug_console(self, tmp_path, restore_root_logger):
        setup_logging(debug=True, log_file=str(tmp_path / "engine.log"))
        assert logging.getLogger().handlers[0].level == logging.DEBUG

    def test_repeated_setup_does_not_duplicate(self, tmp_path, restore_root_logger):
        setup_logging(log_file=str(tmp_path / "engine.log"))
        setup_logging(log_file=str(tmp_path / "engine.log"))
        assert len(logging.getLogger().handlers) == 2


class TestSetupLangsmith:
    """Test optional tracing."""

    @patch("groupmatch.utils.logging_config.config")
    def test_disabled_by_default(self, mock_config):
        mock_config.LANGSMITH_ENABLED = False
        mock_config.LANGSMITH_API_KEY = None
        assert setup_langsmith() is False

    @patch("groupmatch.utils.logging_config.config")
    def test_enabled_without_key_is_skipped(self, mock_config):
        mock_config.LANGSMITH_ENABLED = True
        mock_config.LANGSMITH_API_KEY = None
        assert setup_langsmith() is False
