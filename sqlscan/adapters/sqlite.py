"""SQLite connector using the standard library ``sqlite3`` module."""

from dataclasses import dataclass
from typing import Any

from sqlscan.adapters._base import Connector
from sqlscan.parameters import ParameterStyle

__all__ = ("SqliteConnector",)


@dataclass(frozen=True)
class SqliteConnector(Connector):
    """Opens SQLite databases in autocommit mode, shareable across threads.

    The connection string is the database path, ``:memory:``, or a ``file:`` URI.
    """

    driver: str = "sqlite"
    module: str = "sqlite3"
    parameter_style: ParameterStyle = ParameterStyle.QMARK
    dialect: str = "sqlite"

    def connect(self, connection_string: str, **kwargs: Any) -> Any:
        sqlite3 = self.load_module()
        kwargs.setdefault("check_same_thread", False)
        kwargs.setdefault("isolation_level", None)
        if connection_string.startswith("file:"):
            kwargs.setdefault("uri", True)
        return sqlite3.connect(connection_string, **kwargs)

    @property
    def serialize_execution(self) -> bool:
        # one sqlite3 connection is not safe for interleaved cursors across threads
        return True
