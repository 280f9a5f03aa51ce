"""PostgreSQL connector using psycopg 3.

Connections use :class:`psycopg.RawCursor`, which accepts PostgreSQL's native
``$1, $2`` placeholders, and statements are sent with ``prepare=True`` so the
server keeps a prepared plan for every cached statement.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from sqlscan.adapters._base import Connector
from sqlscan.parameters import ParameterStyle

__all__ = ("PsycopgConnector",)


@dataclass(frozen=True)
class PsycopgConnector(Connector):
    """Opens autocommit psycopg connections with server-side placeholders."""

    driver: str = "postgres"
    module: str = "psycopg"
    parameter_style: ParameterStyle = ParameterStyle.NUMERIC_DOLLAR
    dialect: str = "postgres"
    install_package: Optional[str] = "psycopg"
    execute_options: Any = field(default_factory=lambda: MappingProxyType({"prepare": True}))

    def connect(self, connection_string: str, **kwargs: Any) -> Any:
        psycopg = self.load_module()
        kwargs.setdefault("autocommit", True)
        kwargs.setdefault("cursor_factory", psycopg.RawCursor)
        return psycopg.connect(connection_string, **kwargs)
