"""
Unit tests for structured logging helpers.
"""

import json
import logging

import pytest

from webhook_lifecycle.observability.logging import (
    CorrelationIDFilter,
    OperatorLogger,
    StructuredFormatter,
    get_correlation_id,
    set_correlation_id,
    setup_structured_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(**extra):
    record = logging.LogRecord(
        "webhook_lifecycle.test", logging.INFO, __file__, 1, "hello", None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """JSON rendering of log records."""

    def test_structured_fields_included(self):
        record = make_record(
            correlation_id="abc123",
            webhook_kind="ValidatingWebhookConfiguration",
            generate_name="webhook.test.com",
        )

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["correlation_id"] == "abc123"
        assert data["webhook_kind"] == "ValidatingWebhookConfiguration"
        assert data["generate_name"] == "webhook.test.com"

    def test_unknown_attributes_ignored(self):
        data = json.loads(StructuredFormatter().format(make_record(secret="x")))

        assert "secret" not in data


class TestCorrelationIds:
    """Correlation id propagation."""

    def test_filter_uses_current_id(self):
        set_correlation_id("fixed-id")
        record = make_record()

        assert CorrelationIDFilter().filter(record)
        assert record.correlation_id == "fixed-id"

    def test_reconciliation_start_sets_id(self):
        corr_id = OperatorLogger("test").log_reconciliation_start(
            "ValidatingWebhookConfiguration", "webhook.test.com", "ns1"
        )

        assert get_correlation_id() == corr_id
        assert len(corr_id) == 8


class TestSetupStructuredLogging:
    """Root logger configuration."""

    def test_json_handler_installed(self, restore_root_logger):
        setup_structured_logging(log_level="DEBUG", webhook_log_level="ERROR")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(
            restore_root_logger.handlers[0].formatter, StructuredFormatter
        )
        assert logging.getLogger("webhook_lifecycle.webhooks").level == logging.ERROR

    def test_plain_formatter(self, restore_root_logger):
        setup_structured_logging(
            enable_json_formatting=False, correlation_id_enabled=False
        )

        handler = restore_root_logger.handlers[0]
        assert not isinstance(handler.formatter, StructuredFormatter)
        assert handler.filters == []
