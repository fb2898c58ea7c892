"""
Tests for settings, structured logging and exception logging.
"""

import json
import logging

import pytest

from cafe_shared.config.logging import (
    DevelopmentFormatter,
    StructuredFormatter,
    get_logger,
    mask_email,
    setup_logging,
)
from cafe_shared.config.settings import Settings
from cafe_shared.utils.exceptions import InvalidArgumentError, StaleEntityError


def _record(logger_name="cafe_ordering.orders", **data):
    record = logging.LogRecord(logger_name, logging.INFO, __file__, 1, "Order paid", (), None)
    record.extra_data = data or None
    return record


class TestSettings:
    """pydantic-settings configuration."""

    def test_defaults(self):
        settings = Settings()
        assert settings.order_number_max_attempts == 10
        assert settings.database_url.startswith("sqlite")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ORDER_NUMBER_MAX_ATTEMPTS", "3")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        settings = Settings()

        assert settings.order_number_max_attempts == 3
        assert settings.environment == "staging"

    def test_production_validation(self):
        settings = Settings(environment="production", debug=True, sql_echo=False)

        errors = settings.validate_production_settings()

        assert "DEBUG must be False in production" in errors
        assert any("DATABASE_URL" in e for e in errors)

    def test_valid_production_settings(self):
        settings = Settings(
            environment="production",
            debug=False,
            database_url="postgresql+psycopg://cafe@db/cafe",
        )
        assert settings.validate_production_settings() == []


class TestStructuredLogging:
    """Formatters and the keyword-context logger."""

    def test_structured_formatter_emits_json(self):
        payload = json.loads(StructuredFormatter().format(_record(order_id=7)))

        assert payload["message"] == "Order paid"
        assert payload["level"] == "INFO"
        assert payload["data"] == {"order_id": 7}

    def test_development_formatter_appends_context(self):
        line = DevelopmentFormatter().format(_record(order_id=7, total="9.90"))
        assert "order_id=7 | total=9.90" in line

    def test_keyword_context_reaches_record(self, caplog):
        logger = get_logger("cafe_ordering.test")
        with caplog.at_level(logging.INFO, logger="cafe_ordering.test"):
            logger.info("Order created", order_id=1, order_number="20261019-ABCD")

        record = caplog.records[-1]
        assert record.extra_data == {"order_id": 1, "order_number": "20261019-ABCD"}
        assert record.funcName == "test_keyword_context_reaches_record"

    def test_exceptions_log_themselves(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cafe_shared.utils.exceptions"):
            error = StaleEntityError("Order", 5, 2)

        assert error.status_code == 409
        record = caplog.records[-1]
        assert record.extra_data["entity"] == "Order"
        assert record.extra_data["expected_version"] == 2

    def test_invalid_argument_is_a_bad_request(self):
        assert InvalidArgumentError("Quantity must be positive").status_code == 400

    def test_setup_logging_installs_one_handler(self):
        root = logging.getLogger()
        saved = root.handlers[:]
        try:
            setup_logging()
            assert len(root.handlers) == 1
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = saved

    @pytest.mark.parametrize(
        "email,masked",
        [
            ("ada@example.com", "ad***@example.com"),
            ("a@example.com", "a***@example.com"),
            (None, "<no-email>"),
            ("invalid", "***@invalid"),
        ],
    )
    def test_mask_email(self, email, masked):
        assert mask_email(email) == masked
