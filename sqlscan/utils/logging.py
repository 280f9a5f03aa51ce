"""Loggers and structured output for sqlscan statement traces.

Every logger lives under the ``sqlscan`` namespace. Statement traces carry their
database, SQL, arguments and timings as ``extra_fields``; :class:`StructuredFormatter`
renders those as top-level JSON keys next to the message.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqlscan.utils.serializers import to_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

_ROOT_LOGGER = "sqlscan"

correlation_id_var: ContextVar[str | None] = ContextVar("sqlscan_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag statement traces in the current context with ``correlation_id`` (None clears it)."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON object.

    Trace fields attached by :func:`log_with_context` become top-level keys, so a
    query trace reads as ``{"message": ..., "database": ..., "sql": ..., "elapsed_ms": ...}``.
    """

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return to_json(entry)


class CorrelationIDFilter(logging.Filter):
    """Copy the context's correlation id onto each record; never drops a record."""

    def filter(self, record: LogRecord) -> bool:  # noqa: PLR6301
        if correlation_id := get_correlation_id():
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``sqlscan`` or a child logger of it.

    Args:
        name: Child name such as ``"registry"``; names already under the
            namespace are used as given.

    Returns:
        The logger, with a :class:`CorrelationIDFilter` attached.
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER)
    if not name.startswith(_ROOT_LOGGER):
        name = f"{_ROOT_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for :class:`StructuredFormatter`.

    The record points at the caller's file and line.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
