"""Tests for sqlscan.config module."""

import logging

import pytest

from sqlscan.config import SQLScanConfig, load_config_from_env
from sqlscan.exceptions import ImproperConfigurationError


def test_defaults() -> None:
    config = SQLScanConfig()
    assert config.debug is False
    assert config.max_logged_argument_length == 100
    assert config.binding_cache_size == 256


def test_with_debug_returns_copy() -> None:
    config = SQLScanConfig()
    debug = config.with_debug()
    assert debug.debug is True
    assert config.debug is False
    assert debug.with_debug(False) == config


@pytest.mark.parametrize(
    "kwargs", [{"max_logged_argument_length": 10}, {"binding_cache_size": 0}, {"binding_cache_size": -5}]
)
def test_invalid_settings(kwargs: "dict[str, int]") -> None:
    with pytest.raises(ImproperConfigurationError):
        SQLScanConfig(**kwargs)


def test_load_config_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SQLSCAN_DEBUG", "SQLSCAN_MAX_LOGGED_ARGUMENT_LENGTH", "SQLSCAN_BINDING_CACHE_SIZE"):
        monkeypatch.delenv(key, raising=False)
    assert load_config_from_env() == SQLScanConfig()


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQLSCAN_DEBUG", "true")
    monkeypatch.setenv("SQLSCAN_MAX_LOGGED_ARGUMENT_LENGTH", "40")
    monkeypatch.setenv("SQLSCAN_BINDING_CACHE_SIZE", "8")
    assert load_config_from_env() == SQLScanConfig(debug=True, max_logged_argument_length=40, binding_cache_size=8)


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("ON", True), ("no", False), ("", False)])
def test_debug_flag_values(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("SQLSCAN_DEBUG", value)
    assert load_config_from_env().debug is expected


def test_invalid_integer_falls_back(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("SQLSCAN_BINDING_CACHE_SIZE", "lots")
    with caplog.at_level(logging.WARNING, logger="sqlscan.config"):
        config = load_config_from_env()
    assert config.binding_cache_size == 256
    assert "Invalid integer value for SQLSCAN_BINDING_CACHE_SIZE" in caplog.text
