"""Runtime configuration for sqlscan.

Settings can be built directly or loaded from the environment.

Environment Variables Supported:
- SQLSCAN_DEBUG: Log every statement with its arguments and timings (true/false)
- SQLSCAN_MAX_LOGGED_ARGUMENT_LENGTH: Arguments longer than this are truncated in logs (integer)
- SQLSCAN_BINDING_CACHE_SIZE: Number of column bindings kept per process (integer)
"""

import os
from dataclasses import dataclass, replace

from sqlscan.exceptions import ImproperConfigurationError
from sqlscan.utils.logging import get_logger

__all__ = ("SQLScanConfig", "load_config_from_env")

logger = get_logger("config")

_MIN_LOGGED_ARGUMENT_LENGTH = 16


@dataclass(frozen=True)
class SQLScanConfig:
    """Settings shared by every database registered on one :class:`~sqlscan.base.SQLScan`."""

    debug: bool = False
    max_logged_argument_length: int = 100
    binding_cache_size: int = 256

    def __post_init__(self) -> None:
        if self.max_logged_argument_length < _MIN_LOGGED_ARGUMENT_LENGTH:
            msg = f"max_logged_argument_length must be at least {_MIN_LOGGED_ARGUMENT_LENGTH}"
            raise ImproperConfigurationError(msg)
        if self.binding_cache_size < 1:
            msg = "binding_cache_size must be positive"
            raise ImproperConfigurationError(msg)

    def with_debug(self, debug: bool = True) -> "SQLScanConfig":
        """Return a copy with the debug flag changed."""
        return replace(self, debug=debug)


def load_config_from_env() -> SQLScanConfig:
    """Load configuration from environment variables.

    Returns:
        SQLScanConfig loaded from environment variables, defaults elsewhere.
    """
    return SQLScanConfig(
        debug=_env_bool("SQLSCAN_DEBUG", False),
        max_logged_argument_length=_env_int("SQLSCAN_MAX_LOGGED_ARGUMENT_LENGTH", 100),
        binding_cache_size=_env_int("SQLSCAN_BINDING_CACHE_SIZE", 256),
    )


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def _env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer value for %s: %s, using default %d", key, value, default)
        return default
