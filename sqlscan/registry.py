"""Named database registry.

Maps logical database names to lazily opened DB-API connections and a cache of
prepared statements keyed by rendered SQL text. One registry lock guards the
name map; each database has its own lock guarding its connection and its
statement cache, so concurrent first use opens one connection and prepares
each statement once.
"""

import contextlib
import threading
from collections.abc import Iterable, Iterator, Mapping
from functools import partial
from typing import Any, Optional

from sqlscan.adapters import Connector, get_connector
from sqlscan.exceptions import (
    DatabaseConnectionError,
    ImproperConfigurationError,
    StatementExecutionError,
    StatementPrepareError,
    wrap_database_errors,
)
from sqlscan.parameters import RenderedStatement, StatementRenderer, render_statement
from sqlscan.utils.logging import get_logger

__all__ = ("DatabaseRegistry", "NamedDatabase", "PreparedStatement")

logger = get_logger("registry")


class PreparedStatement:
    """Rendered SQL bound to one open connection.

    DB-API has no separate prepare call; drivers that can prepare server-side
    receive the connector's execute options (``prepare=True`` for psycopg).
    """

    __slots__ = ("_closed", "_connection", "_execute_options", "sql")

    def __init__(self, connection: Any, sql: str, execute_options: "Optional[Mapping[str, Any]]" = None) -> None:
        self._connection = connection
        self._execute_options = dict(execute_options or {})
        self._closed = False
        self.sql = sql

    @property
    def closed(self) -> bool:
        return self._closed

    def query(self, parameters: "tuple[Any, ...]") -> Any:
        """Execute the statement and return the open cursor.

        The caller owns the cursor and must close it.

        Raises:
            StatementExecutionError: If the statement is closed or the driver fails.
        """
        if self._closed:
            msg = "Statement is closed"
            raise StatementExecutionError(msg, sql=self.sql)
        with wrap_database_errors(self.sql):
            cursor = self._connection.cursor()
            try:
                cursor.execute(self.sql, parameters, **self._execute_options)
            except Exception:
                with contextlib.suppress(Exception):
                    cursor.close()
                raise
        return cursor

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"PreparedStatement({self.sql!r}, closed={self._closed})"


class NamedDatabase:
    """One registered database: its connector, connection and statement cache."""

    __slots__ = (
        "_execution_lock",
        "_lock",
        "connect_kwargs",
        "connection",
        "connection_string",
        "connector",
        "driver",
        "name",
        "renderer",
        "statements",
    )

    def __init__(
        self,
        name: str,
        driver: str,
        connection_string: str,
        connector: Connector,
        renderer: "Optional[StatementRenderer]" = None,
        connect_kwargs: "Optional[Mapping[str, Any]]" = None,
    ) -> None:
        self.name = name
        self.driver = driver
        self.connection_string = connection_string
        self.connector = connector
        self.renderer: StatementRenderer = renderer or partial(render_statement, connector.parameter_style)
        self.connect_kwargs = dict(connect_kwargs or {})
        self.connection: Any = None
        self.statements: dict[str, PreparedStatement] = {}
        self._lock = threading.RLock()
        self._execution_lock: "Optional[threading.RLock]" = None

    @property
    def lock(self) -> "threading.RLock":
        return self._lock

    @property
    def is_open(self) -> bool:
        return self.connection is not None

    def render(self, args: "Iterable[Any]") -> RenderedStatement:
        """Render statement arguments with this database's placeholder syntax."""
        return self.renderer(args)

    def open(self) -> Any:
        """Open the connection if it is not open yet.

        Raises:
            DatabaseConnectionError: If the driver fails to connect. The connection
                stays unset so a later call retries.
            MissingDependencyError: If the driver module is not installed.
        """
        with self._lock:
            if self.connection is None:
                logger.debug("Opening database %s (%s)", self.name, self.driver)
                with wrap_database_errors(error_class=DatabaseConnectionError):
                    connection = self.connector.connect(self.connection_string, **self.connect_kwargs)
                self._execution_lock = threading.RLock() if self.connector.serialize_execution else None
                self.connection = connection
            return self.connection

    def execution_guard(self) -> "contextlib.AbstractContextManager[Any]":
        """Serialize statements on drivers whose connections cannot be shared by threads."""
        if self._execution_lock is None:
            return contextlib.nullcontext()
        return self._execution_lock

    def prepare(self, sql: str) -> PreparedStatement:
        """Return the cached statement for ``sql``, preparing it on first use.

        Raises:
            StatementPrepareError: If the statement cannot be prepared.
        """
        statement = self.statements.get(sql)
        if statement is not None:
            return statement
        with self._lock:
            statement = self.statements.get(sql)
            if statement is None:
                logger.debug("Preparing statement on %s: %s", self.name, sql)
                with wrap_database_errors(sql, StatementPrepareError):
                    statement = PreparedStatement(self.open(), sql, self.connector.execute_options)
                self.statements[sql] = statement
        return statement

    def close(self) -> None:
        """Close every cached statement and the connection."""
        with self._lock:
            for statement in self.statements.values():
                statement.close()
            self.statements.clear()
            if self.connection is not None:
                logger.debug("Closing database %s", self.name)
                with contextlib.suppress(Exception):
                    self.connection.close()
                self.connection = None
                self._execution_lock = None

    def __repr__(self) -> str:
        return f"NamedDatabase({self.name!r}, driver={self.driver!r}, open={self.is_open})"


class DatabaseRegistry:
    """Registry of named databases."""

    __slots__ = ("_databases", "_lock")

    def __init__(self) -> None:
        self._databases: dict[str, NamedDatabase] = {}
        self._lock = threading.RLock()

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
        """Register a database under ``name``, replacing and closing any previous entry.

        No connection is opened until the database is first used.

        Args:
            name: Logical database name.
            driver: Driver identifier (``sqlite``, ``postgres``, ``oracle`` or a DB-API module name).
            connection_string: Driver-specific connection string.
            connector: Connector overriding the one resolved from ``driver``.
            renderer: Statement renderer overriding the driver's placeholder syntax.
            connect_kwargs: Extra keyword arguments for the driver's ``connect``.
        """
        logger.debug("Registering database %s (%s)", name, driver)
        database = NamedDatabase(
            name,
            driver,
            connection_string,
            connector or get_connector(driver),
            renderer=renderer,
            connect_kwargs=connect_kwargs,
        )
        with self._lock:
            previous = self._databases.get(name)
            self._databases[name] = database
        if previous is not None:
            previous.close()

    def get(self, name: str) -> NamedDatabase:
        """Return the named database, opening its connection on first access.

        Raises:
            ImproperConfigurationError: If ``name`` was never registered.
            DatabaseConnectionError: If the connection cannot be opened.
        """
        with self._lock:
            database = self._databases.get(name)
        if database is None:
            msg = f"Unknown database: {name}"
            raise ImproperConfigurationError(msg)
        if database.connection is None:
            database.open()
        return database

    def prepare(self, name: str, sql: str) -> PreparedStatement:
        """Return the cached prepared statement for ``sql`` on the named database."""
        return self.get(name).prepare(sql)

    def close(self, name: str) -> None:
        """Close one database's statements and connection, keeping it registered."""
        with self._lock:
            database = self._databases.get(name)
        if database is None:
            msg = f"Unknown database: {name}"
            raise ImproperConfigurationError(msg)
        database.close()

    def reset(self) -> None:
        """Close every statement and connection and forget all registrations."""
        logger.debug("Resetting database registry")
        with self._lock:
            databases = list(self._databases.values())
            self._databases.clear()
        for database in databases:
            database.close()

    def names(self) -> "list[str]":
        with self._lock:
            return list(self._databases)

    def __contains__(self, name: object) -> bool:
        return name in self._databases

    def __iter__(self) -> "Iterator[str]":
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._databases)
