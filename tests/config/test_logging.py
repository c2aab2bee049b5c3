"""Tests for logging configuration."""

import logging

import structlog

from batchtrace.config import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_settings,
)
from batchtrace.config.logging import add_service_context


class TestLogging:
    def test_service_context_added(self):
        event = add_service_context(None, "info", {"event": "action_applied"})

        assert event["service"] == get_settings().app_name
        assert event["seed_profile"] == get_settings().engine.seed_profile

    def test_service_context_keeps_explicit_values(self):
        event = add_service_context(None, "info", {"event": "x", "seed_profile": "custom"})
        assert event["seed_profile"] == "custom"

    def test_request_context_binding(self):
        clear_request_context()
        bind_request_context(request_id="abc123")

        assert structlog.contextvars.get_contextvars() == {"request_id": "abc123"}

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_configure_sets_level_and_quiets_sqlite(self):
        configure_logging(level="DEBUG", json_logs=True)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("aiosqlite").level == logging.WARNING
