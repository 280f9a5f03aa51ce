"""sqlscan: run SQL against named databases and scan rows into typed records."""

from sqlscan import adapters, base, core, exceptions, parameters, registry, typing, utils
from sqlscan.__metadata__ import __version__
from sqlscan.adapters import Connector, DBAPIConnector, OracleConnector, PsycopgConnector, SqliteConnector
from sqlscan.base import SQLScan
from sqlscan.config import SQLScanConfig, load_config_from_env
from sqlscan.core import EffectResult, classify_operation
from sqlscan.exceptions import (
    BindingError,
    CoercionError,
    ConnectivityError,
    DatabaseConnectionError,
    ImproperConfigurationError,
    MissingDependencyError,
    MultipleResultsFoundError,
    ParameterError,
    SQLScanError,
    StatementExecutionError,
    StatementPrepareError,
)
from sqlscan.parameters import Arg, ParameterStyle, RenderedStatement, render_statement, with_arg
from sqlscan.registry import DatabaseRegistry, NamedDatabase, PreparedStatement

__all__ = (
    "Arg",
    "BindingError",
    "CoercionError",
    "ConnectivityError",
    "Connector",
    "DBAPIConnector",
    "DatabaseConnectionError",
    "DatabaseRegistry",
    "EffectResult",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "MultipleResultsFoundError",
    "NamedDatabase",
    "OracleConnector",
    "ParameterError",
    "ParameterStyle",
    "PreparedStatement",
    "PsycopgConnector",
    "RenderedStatement",
    "SQLScan",
    "SQLScanConfig",
    "SQLScanError",
    "SqliteConnector",
    "StatementExecutionError",
    "StatementPrepareError",
    "__version__",
    "adapters",
    "base",
    "classify_operation",
    "core",
    "exceptions",
    "load_config_from_env",
    "parameters",
    "registry",
    "render_statement",
    "typing",
    "utils",
    "with_arg",
)
