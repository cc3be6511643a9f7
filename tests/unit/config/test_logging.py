"""Unit tests for log redaction and request context."""

import structlog

from emabot.config import bind_request_context, clear_request_context
from emabot.config.logging import redact_credentials


class TestRedactCredentials:
    def test_sensitive_keys_masked(self):
        event = {"event": "application.store.connected", "database_url": "x", "Token": "abc"}

        result = redact_credentials(None, "info", event)

        assert result["database_url"] == "[REDACTED]"
        assert result["Token"] == "[REDACTED]"
        assert result["event"] == "application.store.connected"

    def test_password_in_url_masked(self):
        event = {
            "event": "application.store.unreachable",
            "error": "connect failed: postgresql+asyncpg://bot:hunter2@db:5432/btcbotema",
        }

        result = redact_credentials(None, "critical", event)

        assert "hunter2" not in result["error"]
        assert "postgresql+asyncpg://bot:***@db:5432/btcbotema" in result["error"]

    def test_nested_dict_masked(self):
        event = {"event": "x", "extra": {"password": "p", "symbol": "BTCUSDT"}}

        result = redact_credentials(None, "info", event)

        assert result["extra"] == {"password": "[REDACTED]", "symbol": "BTCUSDT"}

    def test_plain_values_untouched(self):
        event = {"event": "tick.completed", "price": "64000.1", "actions": ["OPEN LONG"]}

        assert redact_credentials(None, "info", dict(event)) == event


class TestRequestContext:
    def test_bind_and_clear(self):
        bind_request_context("req-1", path="/api/v1/price")

        assert structlog.contextvars.get_contextvars() == {
            "request_id": "req-1",
            "path": "/api/v1/price",
        }

        clear_request_context()

        assert structlog.contextvars.get_contextvars() == {}
