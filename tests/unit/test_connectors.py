"""Unit tests for driver connectors."""

import sqlite3
from typing import Any
from unittest.mock import MagicMock, call

import pytest

from sqlscan.adapters import (
    Connector,
    DBAPIConnector,
    OracleConnector,
    PsycopgConnector,
    SqliteConnector,
    get_connector,
)
from sqlscan.adapters.oracledb import fetch_lobs_as_values
from sqlscan.exceptions import MissingDependencyError
from sqlscan.parameters import ParameterStyle


@pytest.mark.parametrize(
    ("driver", "connector_type", "style"),
    [
        ("sqlite", SqliteConnector, ParameterStyle.QMARK),
        ("SQLite3", SqliteConnector, ParameterStyle.QMARK),
        ("postgres", PsycopgConnector, ParameterStyle.NUMERIC_DOLLAR),
        ("postgresql", PsycopgConnector, ParameterStyle.NUMERIC_DOLLAR),
        ("oracle", OracleConnector, ParameterStyle.NUMERIC_COLON),
        ("oracledb", OracleConnector, ParameterStyle.NUMERIC_COLON),
    ],
)
def test_get_known_connector(driver: str, connector_type: "type[Connector]", style: ParameterStyle) -> None:
    connector = get_connector(driver)
    assert isinstance(connector, connector_type)
    assert connector.parameter_style is style


def test_unknown_driver_is_a_dbapi_module() -> None:
    connector = get_connector("pymysql")
    assert isinstance(connector, DBAPIConnector)
    assert connector.module == "pymysql"
    assert connector.parameter_style is ParameterStyle.QMARK


def test_missing_module_names_install_extra() -> None:
    connector = Connector(driver="x", module="sqlscan_not_installed", install_package="extra")
    with pytest.raises(MissingDependencyError) as exc_info:
        connector.load_module()
    assert "pip install sqlscan[extra]" in str(exc_info.value)
    assert isinstance(exc_info.value, ImportError)


def test_dbapi_connector_uses_module_connect(monkeypatch: pytest.MonkeyPatch) -> None:
    module = MagicMock(threadsafety=1)
    monkeypatch.setattr(DBAPIConnector, "load_module", lambda self: module)
    connector = DBAPIConnector("somedriver")

    assert connector.connect("dsn://x", timeout=3) is module.connect.return_value
    module.connect.assert_called_once_with("dsn://x", timeout=3)
    assert connector.serialize_execution is True


def test_dbapi_connector_shareable_connections(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(DBAPIConnector, "load_module", lambda self: MagicMock(threadsafety=2))
    assert DBAPIConnector("somedriver").serialize_execution is False


class TestSqliteConnector:
    def test_connection_is_autocommit(self) -> None:
        connection = SqliteConnector().connect(":memory:")
        try:
            assert isinstance(connection, sqlite3.Connection)
            assert connection.isolation_level is None
            assert connection.execute("SELECT 1").fetchone() == (1,)
        finally:
            connection.close()

    def test_uri_connection_string(self) -> None:
        connection = SqliteConnector().connect("file:sqlscan_uri_test?mode=memory")
        try:
            assert connection.execute("SELECT 2").fetchone() == (2,)
        finally:
            connection.close()

    def test_execution_is_serialized(self) -> None:
        assert SqliteConnector().serialize_execution is True


class TestPsycopgConnector:
    def test_connect_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        module = MagicMock()
        monkeypatch.setattr(PsycopgConnector, "load_module", lambda self: module)

        connection = PsycopgConnector().connect("postgresql://localhost/app")

        assert connection is module.connect.return_value
        module.connect.assert_called_once_with(
            "postgresql://localhost/app", autocommit=True, cursor_factory=module.RawCursor
        )

    def test_statements_are_prepared(self) -> None:
        assert dict(PsycopgConnector().execute_options) == {"prepare": True}
        assert PsycopgConnector().dialect == "postgres"

    def test_supported_driver_has_raw_cursor(self) -> None:
        psycopg = pytest.importorskip("psycopg", minversion="3.2")
        assert isinstance(psycopg.RawCursor, type)


class TestOracleConnector:
    def test_connect_sets_autocommit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        connection = MagicMock(autocommit=False)
        module = MagicMock()
        module.connect.return_value = connection
        monkeypatch.setattr(OracleConnector, "load_module", lambda self: module)

        result: Any = OracleConnector().connect("scott/tiger@localhost:1521/FREEPDB1", mode=0)

        assert result is connection
        assert connection.autocommit is True
        module.connect.assert_called_once_with(dsn="scott/tiger@localhost:1521/FREEPDB1", mode=0)

    def test_connect_fetches_lobs_inline(self, monkeypatch: pytest.MonkeyPatch) -> None:
        module = MagicMock()
        monkeypatch.setattr(OracleConnector, "load_module", lambda self: module)
        connection = OracleConnector().connect("scott/tiger@localhost:1521/FREEPDB1")
        cursor = MagicMock(arraysize=100)

        clob = connection.outputtypehandler(cursor, MagicMock(type_code=module.DB_TYPE_CLOB))
        blob = connection.outputtypehandler(cursor, MagicMock(type_code=module.DB_TYPE_BLOB))

        assert clob is blob is cursor.var.return_value
        assert cursor.var.call_args_list == [
            call(module.DB_TYPE_LONG, arraysize=100),
            call(module.DB_TYPE_LONG_RAW, arraysize=100),
        ]

    def test_other_columns_use_driver_default(self) -> None:
        module = MagicMock()
        cursor = MagicMock()
        assert fetch_lobs_as_values(module, cursor, MagicMock(type_code=module.DB_TYPE_NUMBER)) is None
        cursor.var.assert_not_called()
