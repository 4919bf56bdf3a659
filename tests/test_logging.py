"""
Tests for structured logging helpers
"""

import json
import logging

from crp_engine.shared.infrastructure.logging import (
    ContextLoggerAdapter,
    CustomJsonFormatter,
    get_context_logger,
)


def make_record(**extra):
    record = logging.LogRecord("crp_engine.test", logging.INFO, __file__, 1, "Ticket classified", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCustomJsonFormatter:
    """Test JSON log formatting"""

    def test_adds_context_fields(self):
        formatter = CustomJsonFormatter(fmt="%(name)s %(levelname)s %(message)s", environment="staging")

        data = json.loads(formatter.format(make_record(correlation_id="req-1", ticket_id="TKT-1")))

        assert data["message"] == "Ticket classified"
        assert data["environment"] == "staging"
        assert data["correlation_id"] == "req-1"
        assert data["ticket_id"] == "TKT-1"
        assert "timestamp" in data

    def test_redacts_sensitive_fields(self):
        formatter = CustomJsonFormatter(fmt="%(message)s")

        data = json.loads(formatter.format(make_record(api_key="abc123", user_password="hunter2")))

        assert data["api_key"] == "***REDACTED***"
        assert data["user_password"] == "***REDACTED***"


class TestContextLogger:
    """Test correlation-aware loggers"""

    def test_adapter_merges_extra(self):
        adapter = get_context_logger("crp_engine.test", "req-9")
        assert isinstance(adapter, ContextLoggerAdapter)

        _, kwargs = adapter.process("msg", {"extra": {"ticket_id": "TKT-1"}})
        assert kwargs["extra"] == {"correlation_id": "req-9", "ticket_id": "TKT-1"}

    def test_plain_logger_without_correlation_id(self):
        assert isinstance(get_context_logger("crp_engine.test"), logging.Logger)
