"""Driver connectors, resolved from driver identifiers."""

from typing import Final

from sqlscan.adapters._base import Connector, DBAPIConnector
from sqlscan.adapters.oracledb import OracleConnector
from sqlscan.adapters.psycopg import PsycopgConnector
from sqlscan.adapters.sqlite import SqliteConnector

__all__ = (
    "Connector",
    "DBAPIConnector",
    "OracleConnector",
    "PsycopgConnector",
    "SqliteConnector",
    "get_connector",
)

_KNOWN_CONNECTORS: Final[dict[str, Connector]] = {
    "sqlite": SqliteConnector(),
    "sqlite3": SqliteConnector(driver="sqlite3"),
    "postgres": PsycopgConnector(),
    "postgresql": PsycopgConnector(driver="postgresql"),
    "psycopg": PsycopgConnector(driver="psycopg"),
    "oracle": OracleConnector(),
    "oracledb": OracleConnector(driver="oracledb"),
}


def get_connector(driver: str) -> Connector:
    """Return the connector for a driver identifier.

    Unknown identifiers are treated as the name of an importable DB-API module.
    Nothing is imported until a connection is opened.
    """
    connector = _KNOWN_CONNECTORS.get(driver.lower())
    if connector is not None:
        return connector
    return DBAPIConnector(driver)
