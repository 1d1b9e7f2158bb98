"""Tests for structured logging helpers and settings reload."""
from __future__ import annotations

import json
import logging

from core.config import reload_settings
from core.logging_config import ContextLogger, JSONFormatter, get_context_logger


def _record(**attrs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="betterside.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg="Lead %s updated",
        args=("abc",),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "betterside.test"
        assert payload["message"] == "Lead abc updated"
        assert "extra" not in payload
        assert "user_id" not in payload

    def test_context_and_extra_data(self):
        record = _record(user_id="u1", role="cp", extra_data={"lead_id": "abc"})
        payload = json.loads(JSONFormatter().format(record))
        assert payload["user_id"] == "u1"
        assert payload["role"] == "cp"
        assert payload["extra"] == {"lead_id": "abc"}


class TestContextLogger:
    def test_context_is_attached(self, caplog):
        logger = get_context_logger("betterside.test", user_id="u1", role="developer")
        assert isinstance(logger, ContextLogger)

        with caplog.at_level(logging.INFO, logger="betterside.test"):
            logger.info("Project created", extra={"path": "/api/projects"})

        record = caplog.records[-1]
        assert record.user_id == "u1"
        assert record.role == "developer"
        assert record.path == "/api/projects"

    def test_call_extra_overrides_context(self, caplog):
        logger = get_context_logger("betterside.test", role="cp")
        with caplog.at_level(logging.INFO, logger="betterside.test"):
            logger.info("Role switched", extra={"role": "developer"})
        assert caplog.records[-1].role == "developer"


class TestReloadSettings:
    def test_reload_picks_up_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        try:
            assert reload_settings().log_level == "WARNING"
        finally:
            monkeypatch.undo()
            reload_settings()

