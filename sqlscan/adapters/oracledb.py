"""Oracle connector using python-oracledb (thin mode by default)."""

from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

from sqlscan.adapters._base import Connector
from sqlscan.parameters import ParameterStyle

__all__ = ("OracleConnector", "fetch_lobs_as_values")


def fetch_lobs_as_values(oracledb: Any, cursor: Any, metadata: Any) -> Any:
    """Output type handler returning CLOB/NCLOB columns as ``str`` and BLOB as ``bytes``.

    Without it the driver hands back LOB locators that no record field accepts.
    """
    long_types = {
        oracledb.DB_TYPE_CLOB: oracledb.DB_TYPE_LONG,
        oracledb.DB_TYPE_NCLOB: oracledb.DB_TYPE_LONG_NVARCHAR,
        oracledb.DB_TYPE_BLOB: oracledb.DB_TYPE_LONG_RAW,
    }
    long_type = long_types.get(metadata.type_code)
    if long_type is None:
        return None
    return cursor.var(long_type, arraysize=cursor.arraysize)


@dataclass(frozen=True)
class OracleConnector(Connector):
    """Opens autocommit Oracle connections; binds use ``:1, :2`` placeholders.

    The connection string is an Easy Connect string such as
    ``user/password@host:1521/service``. LOB columns are fetched inline.
    """

    driver: str = "oracle"
    module: str = "oracledb"
    parameter_style: ParameterStyle = ParameterStyle.NUMERIC_COLON
    dialect: str = "oracle"
    install_package: Optional[str] = "oracledb"

    def connect(self, connection_string: str, **kwargs: Any) -> Any:
        oracledb = self.load_module()
        connection = oracledb.connect(dsn=connection_string, **kwargs)
        connection.autocommit = True
        connection.outputtypehandler = partial(fetch_lobs_as_values, oracledb)
        return connection
