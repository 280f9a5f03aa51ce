"""Driver connector base.

A connector knows how to import a DB-API 2.0 driver module, open a connection
from a connection string, and which placeholder syntax and SQL dialect the
driver speaks.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from sqlscan.exceptions import MissingDependencyError
from sqlscan.parameters import ParameterStyle, placeholder_style_for
from sqlscan.utils.module_loader import import_string

__all__ = ("Connector", "DBAPIConnector")

_SHAREABLE_CONNECTIONS = 2


@dataclass(frozen=True)
class Connector:
    """Opens connections for one driver identifier."""

    driver: str
    module: str
    parameter_style: ParameterStyle = ParameterStyle.QMARK
    dialect: Optional[str] = None
    install_package: Optional[str] = None
    execute_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def load_module(self) -> Any:
        """Import the driver module.

        Raises:
            MissingDependencyError: If the module is not installed.
        """
        try:
            return import_string(self.module)
        except ImportError as exc:
            raise MissingDependencyError(self.module, self.install_package) from exc

    def connect(self, connection_string: str, **kwargs: Any) -> Any:
        """Open a new connection.

        Args:
            connection_string: Driver-specific DSN, path or URL.
            **kwargs: Extra keyword arguments passed to the driver's ``connect``.

        Returns:
            The open DB-API connection.
        """
        module = self.load_module()
        return module.connect(connection_string, **kwargs)

    @property
    def serialize_execution(self) -> bool:
        """Whether statements on one connection must run one at a time.

        DB-API ``threadsafety`` below 2 means threads may not share a connection.
        """
        module = self.load_module()
        return getattr(module, "threadsafety", 0) < _SHAREABLE_CONNECTIONS


class DBAPIConnector(Connector):
    """Fallback connector: the driver identifier names an importable DB-API module.

    The module's own ``connect(connection_string)`` is used unchanged, so
    transaction behavior follows the driver's defaults.
    """

    def __init__(self, driver: str) -> None:
        super().__init__(driver=driver, module=driver, parameter_style=placeholder_style_for(driver))
