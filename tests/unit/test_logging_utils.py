"""Unit tests for logging setup."""

import logging
import sys

from prebuild.logging_utils import LOG_FORMAT, setup_logging


def prebuild_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "_prebuild", False)]


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_info_by_default(self, monkeypatch):
        """Test that INFO is the default level."""
        monkeypatch.delenv("PREBUILD_LOG_LEVEL", raising=False)
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_verbose(self, monkeypatch):
        """Test that verbose selects DEBUG."""
        monkeypatch.delenv("PREBUILD_LOG_LEVEL", raising=False)
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_environment_level(self, monkeypatch):
        """Test that PREBUILD_LOG_LEVEL wins over verbose."""
        monkeypatch.setenv("PREBUILD_LOG_LEVEL", "warning")
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_environment_level(self, monkeypatch):
        """Test that an unknown level name falls back to INFO."""
        monkeypatch.setenv("PREBUILD_LOG_LEVEL", "chatty")
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_single_stderr_handler(self, monkeypatch):
        """Test that repeated setup keeps one stderr handler."""
        monkeypatch.delenv("PREBUILD_LOG_LEVEL", raising=False)
        setup_logging()
        setup_logging()

        handlers = prebuild_handlers()
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
        assert handlers[0].formatter._fmt == LOG_FORMAT
