"""Tests for structlog configuration."""

import json
import logging

import pytest
import structlog

from radar.logging import QUIET_LOGGERS, redact_secrets, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:

    def test_level_and_quiet_loggers(self) -> None:
        setup_logging("debug", "console")
        assert logging.getLogger().level == logging.DEBUG
        for name, level in QUIET_LOGGERS.items():
            assert logging.getLogger(name).level == level

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_output_carries_context(self, capsys) -> None:
        setup_logging("INFO", "json")
        structlog.contextvars.bind_contextvars(filter_key="-10")
        try:
            structlog.get_logger("radar.test").info("radar_ready", count=3, api_key="secret")
        finally:
            structlog.contextvars.unbind_contextvars("filter_key")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "radar_ready"
        assert event["filter_key"] == "-10"
        assert event["count"] == 3
        assert event["api_key"] == "***"


class TestRedactSecrets:

    def test_masks_only_secret_keys(self) -> None:
        out = redact_secrets(None, "info", {"event": "x", "x-api-key": "k", "symbol": "BTC"})
        assert out == {"event": "x", "x-api-key": "***", "symbol": "BTC"}
