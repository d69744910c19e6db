"""
Tests for envguard.logging module.

Tests the logger interface including:
- Verbosity flags of DefaultLogger
- Global logger configuration
- Logger injection into Config
"""

from __future__ import annotations

from envguard.core import Config
from envguard.logging import (
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    get_logger,
    set_global_logger,
)


class TestDefaultLogger:
    """Tests for DefaultLogger output."""

    def test_verbose_suppressed_by_default(self, capsys):
        """Test that a quiet logger prints nothing for verbose/debug."""
        logger = DefaultLogger()
        logger.verbose("MERGE", "hidden")
        logger.debug("MERGE", "hidden")

        assert capsys.readouterr().out == ""

    def test_debug_implies_verbose(self, capsys):
        """Test that debug mode prints both levels."""
        logger = get_logger(debug=True)
        logger.verbose("SOURCE", "one")
        logger.debug("MERGE", "two")

        assert capsys.readouterr().out == "[SOURCE] one\n[MERGE] two\n"

    def test_warning_always_printed(self, capsys):
        """Test that warnings go to stderr regardless of flags."""
        DefaultLogger().warning("SOURCE", "missing file")

        assert capsys.readouterr().err == "[SOURCE] WARNING: missing file\n"


class TestGlobalLogger:
    """Tests for global logger configuration."""

    def test_default_is_silent(self):
        """Test that the library is quiet unless configured."""
        assert isinstance(get_global_logger(), SilentLogger)

    def test_config_uses_global_logger_when_not_injected(self, capsys):
        """Test that Config falls back to the global logger at call time."""
        previous = get_global_logger()
        set_global_logger(get_logger(verbose=True))
        try:
            config = Config()
            config.require("app/name")
            config.load({"app/name": "svc"}, name="inline")
        finally:
            set_global_logger(previous)

        out = capsys.readouterr().out
        assert "[MERGE] Merged 1 key(s) from inline (0 ignored)" in out
        assert "[VALIDATE] All 1 key(s) conform" in out

    def test_injected_logger_wins(self, capsys):
        """Test that an injected logger is used instead of the global one."""
        config = Config(logger=get_logger(debug=True))
        config.require("app/name")
        config.load({"app/name": "svc", "app/other": 1})

        out = capsys.readouterr().out
        assert "[MERGE] app/name <- load" in out
        assert "(1 ignored)" in out
