"""
Tests for logging setup.
"""

import json
import logging

import pytest
import structlog

from otpauth_core.log_config import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for structlog configuration."""

    def test_json_output(self, capsys, restore_logging):
        setup_logging(service_name="login", level="INFO", json_output=True)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)

        assert payload["event"] == "Logging configured"
        assert payload["service"] == "login"
        assert payload["level"] == "info"
        assert "timestamp" in payload

    def test_level_filters_debug(self, capsys, restore_logging):
        setup_logging(service_name="login", level="WARNING", json_output=True)
        capsys.readouterr()

        structlog.get_logger("otpauth_core.test").info("hidden")

        assert capsys.readouterr().out == ""
