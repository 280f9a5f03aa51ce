"""Unit tests for logging, serialization and log text helpers."""

import datetime
import io
import logging
from collections.abc import Generator

import pytest

from sqlscan.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    get_correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
)
from sqlscan.utils.serializers import from_json, to_json
from sqlscan.utils.text import format_arguments, truncate_middle


@pytest.fixture
def correlation_id() -> Generator[str, None, None]:
    set_correlation_id("req-123")
    yield "req-123"
    set_correlation_id(None)


class TestTruncation:
    def test_short_value_unchanged(self) -> None:
        value = "x" * 100
        assert truncate_middle(value, 100) == value

    def test_long_value_keeps_head_and_tail(self) -> None:
        value = "a" * 95 + "b" * 50 + "0123456789"
        truncated = truncate_middle(value, 100)
        assert truncated == "a" * 90 + "..." + "0123456789"
        assert len(truncated) == 103

    def test_format_arguments(self) -> None:
        long_value = "y" * 150
        assert format_arguments((1, None, long_value, b"ab"), 100) == [
            "1",
            "None",
            "y" * 90 + "..." + "y" * 10,
            "b'ab'",
        ]


class TestLoggers:
    def test_logger_names(self) -> None:
        assert get_logger().name == "sqlscan"
        assert get_logger("registry").name == "sqlscan.registry"
        assert get_logger("sqlscan.base").name == "sqlscan.base"

    def test_correlation_filter_is_added_once(self) -> None:
        get_logger("filters")
        logger = get_logger("filters")
        assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1

    def test_correlation_id(self, correlation_id: str) -> None:
        assert get_correlation_id() == correlation_id


class TestStructuredFormatter:
    def test_format_includes_extra_fields(self, correlation_id: str) -> None:
        record = logging.LogRecord("sqlscan", logging.INFO, __file__, 10, "Running query", (), None)
        record.extra_fields = {"database": "main", "rows_returned": 2}  # type: ignore[attr-defined]

        entry = from_json(StructuredFormatter().format(record))

        assert entry["message"] == "Running query"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "sqlscan"
        assert entry["correlation_id"] == correlation_id
        assert entry["database"] == "main"
        assert entry["rows_returned"] == 2


class TestLogWithContext:
    def test_emits_extra_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("context")
        with caplog.at_level(logging.INFO, logger="sqlscan.context"):
            log_with_context(logger, logging.INFO, "hello", database="main")
        assert caplog.records[-1].getMessage() == "hello"
        assert caplog.records[-1].extra_fields == {"database": "main"}  # type: ignore[attr-defined]

    def test_record_points_at_caller(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("context")
        with caplog.at_level(logging.INFO, logger="sqlscan.context"):
            log_with_context(logger, logging.INFO, "located", elapsed_ms=1.5)
        record = caplog.records[-1]
        assert record.filename == "test_logging.py"
        assert record.funcName == "test_record_points_at_caller"

    def test_handler_renders_trace_fields(self) -> None:
        logger = get_logger("structured")
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            log_with_context(logger, logging.INFO, "Running SQL", database="main", rows_affected=1)
        finally:
            logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)

        entry = from_json(stream.getvalue())
        assert entry["message"] == "Running SQL"
        assert entry["database"] == "main"
        assert entry["rows_affected"] == 1
        assert "correlation_id" not in entry

    def test_disabled_level_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("context")
        with caplog.at_level(logging.WARNING, logger="sqlscan.context"):
            log_with_context(logger, logging.INFO, "hidden")
        assert "hidden" not in caplog.text


class TestSerializers:
    def test_round_trip(self) -> None:
        assert from_json(to_json({"a": [1, "b", None]})) == {"a": [1, "b", None]}

    def test_as_bytes(self) -> None:
        assert to_json([1], as_bytes=True) == b"[1]"

    def test_driver_values_are_encodable(self) -> None:
        encoded = from_json(to_json({"when": datetime.date(2024, 1, 2), "blob": bytearray(b"\x01"), "obj": object}))
        assert encoded["when"] == "2024-01-02"
        assert encoded["blob"] == "AQ=="
        assert encoded["obj"] == repr(object)
