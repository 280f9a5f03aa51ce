"""Statement execution against registered databases.

:class:`SQLScan` is the entry point: it renders statement arguments, runs them on
the named database's connection, and maps result rows onto record types.
"""

import atexit
import contextlib
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, overload

from sqlscan.config import SQLScanConfig
from sqlscan.core.binding import BindingCache, RowBinder
from sqlscan.core.operation import classify_operation
from sqlscan.core.result import EffectResult
from sqlscan.exceptions import MultipleResultsFoundError, SQLScanError, wrap_database_errors
from sqlscan.registry import DatabaseRegistry
from sqlscan.utils.logging import get_logger, log_with_context
from sqlscan.utils.text import format_arguments

if TYPE_CHECKING:
    from sqlscan.adapters import Connector
    from sqlscan.parameters import RenderedStatement, StatementRenderer
    from sqlscan.registry import NamedDatabase
    from sqlscan.typing import SchemaT, StatementArgument

__all__ = ("SQLScan",)

logger = get_logger()


class SQLScan:
    """Runs statements against named databases and maps rows onto typed records.

    Example::

        @dataclass
        class User:
            user_id: int
            name: str

        db = SQLScan()
        db.register("main", "sqlite", "app.db")
        users = db.query_all(
            "main", "SELECT user_id, name FROM users", with_arg(" WHERE name = ", name), schema_type=User
        )
    """

    __slots__ = ("_binders", "config", "registry")

    def __init__(self, config: "Optional[SQLScanConfig]" = None, registry: "Optional[DatabaseRegistry]" = None) -> None:
        self.config = config or SQLScanConfig()
        self.registry = registry or DatabaseRegistry()
        self._binders = BindingCache(self.config.binding_cache_size)
        atexit.register(self._cleanup)

    def _cleanup(self) -> None:
        """Close all open connections at program exit."""
        with contextlib.suppress(Exception):
            self.registry.reset()

    def __enter__(self) -> "SQLScan":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.reset()

    def register(
        self,
        name: str,
        driver: str,
        connection_string: str,
        *,
        connector: "Optional[Connector]" = None,
        renderer: "Optional[StatementRenderer]" = None,
        connect_kwargs: "Optional[Mapping[str, Any]]" = None,
    ) -> None:
        """Register a database under ``name``; see :meth:`DatabaseRegistry.register`."""
        if self.config.debug:
            logger.info("Registering database %s (%s)", name, driver)
        self.registry.register(
            name, driver, connection_string, connector=connector, renderer=renderer, connect_kwargs=connect_kwargs
        )

    def close(self, db_name: str) -> None:
        """Close one database's statements and connection; it reopens on next use."""
        self.registry.close(db_name)

    def reset(self) -> None:
        """Close every connection and statement, forget all registrations and cached bindings."""
        if self.config.debug:
            logger.info("Resetting databases")
        self.registry.reset()
        self._binders.clear()

    def _trace(
        self, message: str, database: "NamedDatabase", statement: "RenderedStatement", started: float, **fields: Any
    ) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        arguments = format_arguments(statement.parameters, self.config.max_logged_argument_length)
        details = " ".join(f"{key.replace('_', ' ').capitalize()}: {value}" for key, value in fields.items())
        log_with_context(
            logger,
            logging.INFO,
            f"{message}: {statement.sql} {arguments} Elapsed: {elapsed_ms:.3f}ms {details}".rstrip(),
            database=database.name,
            sql=statement.sql,
            parameters=arguments,
            elapsed_ms=elapsed_ms,
            **fields,
        )

    def execute(self, db_name: str, /, *args: "StatementArgument") -> EffectResult:
        """Run a statement for its effect.

        The statement is sent to the connection directly, without going through
        the prepared-statement cache.

        Args:
            db_name: Registered database name.
            *args: Literal SQL fragments and bound arguments.

        Raises:
            ImproperConfigurationError: If the database is not registered.
            ParameterError: If an argument has an unsupported type.
            ConnectivityError: If the driver fails.

        Returns:
            The effect summary.
        """
        started = time.perf_counter()
        database = self.registry.get(db_name)
        statement = database.render(args)
        connection = database.open()
        with database.execution_guard(), wrap_database_errors(statement.sql):
            cursor = connection.cursor()
            try:
                cursor.execute(statement.sql, statement.parameters)
                rowcount = getattr(cursor, "rowcount", -1)
                last_row_id = getattr(cursor, "lastrowid", None)
            finally:
                with contextlib.suppress(Exception):
                    cursor.close()
        result = EffectResult(
            rows_affected=rowcount if rowcount is not None else -1,
            last_row_id=last_row_id,
            operation_type=classify_operation(statement.sql, database.connector.dialect),
            sql=statement.sql,
            parameters=statement.parameters,
        )
        if self.config.debug:
            self._trace(
                "Running SQL",
                database,
                statement,
                started,
                rows_affected=result.rows_affected,
                operation=result.operation_type,
            )
        return result

    def try_execute(self, db_name: str, /, *args: "StatementArgument") -> EffectResult:
        """Run a statement for its effect, ignoring any failure.

        Returns:
            The effect summary, or an empty :class:`EffectResult` if the statement failed.
        """
        try:
            return self.execute(db_name, *args)
        except SQLScanError as exc:
            logger.debug("Ignoring failed statement on %s: %s", db_name, exc)
            return EffectResult()

    def _select(
        self, db_name: str, args: "tuple[StatementArgument, ...]", schema_type: Any
    ) -> "tuple[list[Any], RowBinder, str]":
        started = time.perf_counter()
        database = self.registry.get(db_name)
        statement = database.render(args)
        prepared = database.prepare(statement.sql)
        with database.execution_guard():
            cursor = prepared.query(statement.parameters)
            try:
                columns = [description[0] for description in cursor.description or ()]
                binder = self._binders.get(schema_type, columns)
                rows: list[Any] = []
                with wrap_database_errors(statement.sql):
                    for row in cursor:
                        rows.append(binder.build(row))
            except BaseException:
                with contextlib.suppress(Exception):
                    cursor.close()
                raise
            with wrap_database_errors(statement.sql):
                cursor.close()
        if self.config.debug:
            self._trace("Running query", database, statement, started, rows_returned=len(rows))
        return rows, binder, statement.sql

    @overload
    def query_all(self, db_name: str, /, *args: "StatementArgument", schema_type: "type[SchemaT]") -> "list[SchemaT]": ...

    @overload
    def query_all(self, db_name: str, /, *args: "StatementArgument", schema_type: Any = ...) -> "list[Any]": ...

    def query_all(self, db_name: str, /, *args: "StatementArgument", schema_type: Any = dict) -> "list[Any]":
        """Run a query and map every row onto ``schema_type``.

        Args:
            db_name: Registered database name.
            *args: Literal SQL fragments and bound arguments.
            schema_type: Record type, scalar type, or ``dict`` for raw rows.

        Raises:
            BindingError: If the columns do not fit ``schema_type``.
            CoercionError: If a value cannot be converted to its field type.
            ConnectivityError: If the driver fails.

        Returns:
            One value per row, in result order.
        """
        rows, _, _ = self._select(db_name, args, schema_type)
        return rows

    @overload
    def query_one(self, db_name: str, /, *args: "StatementArgument", schema_type: "type[SchemaT]") -> "SchemaT": ...

    @overload
    def query_one(self, db_name: str, /, *args: "StatementArgument", schema_type: Any = ...) -> Any: ...

    def query_one(self, db_name: str, /, *args: "StatementArgument", schema_type: Any = dict) -> Any:
        """Run a query expected to match at most one row.

        Raises:
            MultipleResultsFoundError: If more than one row matched.

        Returns:
            The mapped row, or the zero value of ``schema_type`` when nothing matched.
        """
        rows, binder, sql = self._select(db_name, args, schema_type)
        if len(rows) == 1:
            return rows[0]
        if not rows:
            return binder.zero()
        msg = f"Query returned more than one row: {len(rows)} rows\nSQL: {sql}"
        raise MultipleResultsFoundError(msg)

    @overload
    def query_scalar(self, db_name: str, /, *args: "StatementArgument", schema_type: "type[SchemaT]") -> "SchemaT": ...

    @overload
    def query_scalar(self, db_name: str, /, *args: "StatementArgument", schema_type: Any = ...) -> Any: ...

    def query_scalar(self, db_name: str, /, *args: "StatementArgument", schema_type: Any = Any) -> Any:
        """Run a query and return its single value directly.

        With the default ``schema_type`` the query must return exactly one column
        whose value is returned as the driver produced it.
        """
        return self.query_one(db_name, *args, schema_type=schema_type)
