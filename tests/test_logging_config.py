"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from escow.logging import ComponentLoggerAdapter, get_logger
from escow.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from escow.logging.context import clear_log_context, log_context


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def logger():
    test_logger = logging.getLogger("escow.test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()
    yield test_logger
    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(logger, message="Test message", extra=None):
    return logger.makeRecord("test", logging.INFO, "test.py", 1, message, (), None, extra=extra)


def test_json_formatter_basic(logger):
    """JSONFormatter produces valid JSON with the mandatory fields."""
    log_obj = json.loads(JSONFormatter().format(_record(logger)))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["timestamp"].endswith("Z")
    assert len(log_obj["timestamp"]) == 24


def test_json_formatter_with_extra_fields(logger):
    record = _record(logger, extra={"event": "lookup.record.matched", "match_count": 2, "cancelled": False})

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "lookup.record.matched"
    assert log_obj["match_count"] == 2
    assert log_obj["cancelled"] is False
    assert "name" not in log_obj


def test_json_formatter_keeps_japanese_text_readable(logger):
    record = _record(logger, message="検索中: さくら苑", extra={"input_name": "さくら苑"})

    output = JSONFormatter().format(record)

    assert "さくら苑" in output
    assert "\\u" not in output


def test_json_formatter_stringifies_unknown_types(logger):
    record = _record(logger, extra={"path": object()})

    log_obj = json.loads(JSONFormatter().format(record))

    assert isinstance(log_obj["path"], str)


def test_contextual_filter_adds_static_fields(logger):
    record = _record(logger)

    ContextualFilter(service="escow", environment="test").filter(record)

    assert record.service == "escow"
    assert record.environment == "test"


def test_contextual_filter_adds_context_fields(logger):
    with log_context(run_id="abc123", job_log="data/output.json"):
        record = _record(logger)
        ContextualFilter().filter(record)

    assert record.run_id == "abc123"
    assert record.job_log == "data/output.json"


def test_contextual_filter_explicit_extra_wins(logger):
    with log_context(input_name="from-context"):
        record = _record(logger, extra={"input_name": "explicit"})
        ContextualFilter().filter(record)

    assert record.input_name == "explicit"


def test_key_value_formatter_with_extras(logger):
    formatter = KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    record = _record(logger, extra={"event": "job_store.appended", "processed": 3, "cancelled": True})

    output = formatter.format(record)

    assert "[INFO]" in output
    assert "event=job_store.appended" in output
    assert "processed=3" in output
    assert "cancelled=true" in output


def test_key_value_formatter_quotes_values_with_spaces(logger):
    formatter = KeyValueFormatter("%(message)s")
    record = _record(logger, extra={"input_name": "デイサービス　さくら", "note": "a b"})

    output = formatter.format(record)

    assert 'input_name="デイサービス　さくら"' in output
    assert 'note="a b"' in output


def test_key_value_formatter_skips_service_fields(logger):
    formatter = KeyValueFormatter("%(message)s")
    record = _record(logger)
    ContextualFilter(environment="test").filter(record)

    assert formatter.format(record) == "Test message"


def test_configure_logging_invalid_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="INVALID")


def test_configure_logging_invalid_format():
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="invalid")


def test_configure_logging_json_format(restore_root_logger):
    configure_logging(level="DEBUG", format_type="json", environment="test")

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, JSONFormatter)
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_writes_to_stderr(restore_root_logger):
    configure_logging(level="INFO", format_type="key-value")

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, KeyValueFormatter)
    assert handler.stream is sys.stderr


def test_get_logger_with_component_injects_field():
    adapter = get_logger("escow.test", component="matching")

    assert isinstance(adapter, ComponentLoggerAdapter)
    msg, kwargs = adapter.process("hello", {"extra": {"event": "x"}})
    assert kwargs["extra"] == {"component": "matching", "event": "x"}


def test_get_logger_without_component_returns_plain_logger():
    assert isinstance(get_logger("escow.test"), logging.Logger)
