"""
Tests for structured logging configuration.
"""

import json
import logging

import structlog

from apps.core.logging import (
    _add_trace_id,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_contextvars,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def teardown_method(self):
        configure_logging(json_format=False, log_level="INFO")

    def test_sets_root_level(self):
        """Should apply the requested level to the root logger."""
        configure_logging(json_format=True, log_level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        """Should default to INFO for an unrecognized level name."""
        configure_logging(json_format=False, log_level="chatty")

        assert logging.getLogger().level == logging.INFO

    def test_replaces_root_handlers(self):
        """Should install exactly one handler, however often it is called."""
        configure_logging(json_format=True)
        configure_logging(json_format=True)

        assert len(logging.getLogger().handlers) == 1

    def test_structlog_uses_stdlib_logger(self):
        """Should route structlog through the stdlib logging machinery."""
        configure_logging(json_format=True)

        config = structlog.get_config()
        assert config["wrapper_class"] is structlog.stdlib.BoundLogger


class TestContextVars:
    """Tests for context variable binding."""

    def test_bind_and_get(self):
        """Bound values should be visible to get_contextvars."""
        bind_contextvars(correlation_id="abc123", **{"usr.id": "42"})

        ctx = get_contextvars()
        assert ctx["correlation_id"] == "abc123"
        assert ctx["usr.id"] == "42"

    def test_clear_removes_everything(self):
        """Should leave no context behind."""
        bind_contextvars(correlation_id="abc123")
        clear_contextvars()

        assert get_contextvars() == {}


class TestTraceIdProcessor:
    """Tests for the correlation id -> trace_id renaming."""

    def test_renames_correlation_id(self):
        event = _add_trace_id(None, "info", {"event": "x", "correlation_id": "req-1"})

        assert event == {"event": "x", "trace_id": "req-1"}

    def test_leaves_events_without_correlation_id(self):
        event = _add_trace_id(None, "info", {"event": "x"})

        assert event == {"event": "x"}


class TestLogOutput:
    """Tests for actual log output."""

    def teardown_method(self):
        configure_logging(json_format=False, log_level="INFO")

    def test_json_output_includes_context(self, capsys):
        """JSON lines should carry the event, fields and request trace id."""
        configure_logging(json_format=True, log_level="DEBUG")
        bind_contextvars(correlation_id="req-123")

        get_logger("tests.json_output").info("organization_provisioned", slug="acme-corp")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "organization_provisioned"
        assert record["slug"] == "acme-corp"
        assert record["trace_id"] == "req-123"
        assert record["level"] == "info"
        assert "correlation_id" not in record

    def test_stdlib_records_share_format(self, capsys):
        """Third-party stdlib loggers should be rendered as JSON too."""
        configure_logging(json_format=True, log_level="DEBUG")
        logging.getLogger("stripe").warning("retrying request")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "retrying request"
        assert record["logger"] == "stripe"
