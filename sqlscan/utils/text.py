"""Text helpers for log output."""

from typing import Any

__all__ = ("format_arguments", "truncate_middle")

_TAIL_LENGTH = 10


def truncate_middle(value: str, limit: int) -> str:
    """Shorten ``value`` to its head and last 10 characters when longer than ``limit``.

    Args:
        value: Text to shorten.
        limit: Maximum length kept unchanged.

    Returns:
        The original text, or ``head + "..." + tail``.
    """
    if len(value) <= limit:
        return value
    return value[: limit - _TAIL_LENGTH] + "..." + value[-_TAIL_LENGTH:]


def format_arguments(arguments: "tuple[Any, ...]", limit: int) -> "list[str]":
    """Render statement arguments for logs, truncating long values."""
    return [truncate_middle(str(argument), limit) for argument in arguments]
