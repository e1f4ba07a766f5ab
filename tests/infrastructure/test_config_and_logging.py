"""Tests for settings and structured logging."""

import json
import logging

import pytest
from pydantic import ValidationError

from homemarket.infrastructure.config import Settings
from homemarket.infrastructure.observability import JSONFormatter, setup_logging


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HOMEMARKET_DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.database_url.startswith("sqlite")
        assert "shipped" in settings.order_status_whitelist

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("HOMEMARKET_DATABASE_URL", "sqlite://")
        monkeypatch.setenv("HOMEMARKET_ORDER_STATUS_WHITELIST", '["PAID", "completed"]')
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite://"
        assert settings.order_status_whitelist == ["paid", "completed"]

    def test_unknown_whitelist_status_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, order_status_whitelist=["refunded"])

    def test_unknown_log_format_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")


class TestLogging:

    def test_json_formatter_includes_extras(self):
        record = logging.LogRecord(
            "homemarket.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None
        )
        record.order_id = "abc"
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "hello world"
        assert payload["level"] == "WARNING"
        assert payload["order_id"] == "abc"
        assert "user_id" not in payload

    def test_setup_logging_is_idempotent(self):
        root = logging.getLogger()
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        ours = [h for h in root.handlers if getattr(h, "_homemarket", False)]
        assert len(ours) == 1
        assert root.level == logging.INFO
        root.removeHandler(ours[0])
