from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "BindingError",
    "CoercionError",
    "ConnectivityError",
    "DatabaseConnectionError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "MultipleResultsFoundError",
    "ParameterError",
    "SQLScanError",
    "StatementExecutionError",
    "StatementPrepareError",
    "wrap_database_errors",
)


class SQLScanError(Exception):
    """Base exception class from which all sqlscan exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLScanError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLScanError, ImportError):
    """Missing optional dependency.

    This exception is raised when a database driver module has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlscan[{install_package or package}]' to install sqlscan with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLScanError):
    """Improper Configuration error.

    Raised for unregistered database names and invalid settings.
    """


class _SQLContextError(SQLScanError):
    """Error that optionally carries the SQL text it was raised for."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParameterError(_SQLContextError):
    """An argument passed to the statement renderer has an unsupported type."""


class ConnectivityError(_SQLContextError):
    """Base class for driver failures while opening, preparing or executing."""


class DatabaseConnectionError(ConnectivityError):
    """The driver failed to open a connection."""


class StatementPrepareError(ConnectivityError):
    """The driver failed to prepare a statement."""


class StatementExecutionError(ConnectivityError):
    """The driver failed to execute a statement or fetch its rows."""


class BindingError(SQLScanError):
    """Result columns cannot be mapped onto the destination type."""


class CoercionError(SQLScanError):
    """A wire value cannot be converted to its destination's type."""

    value: Any
    wire_type: str
    target_type: str

    def __init__(self, value: Any, wire_type: str, target_type: str) -> None:
        super().__init__(detail=f"Can't convert {value!r} {wire_type} to {target_type}")
        self.value = value
        self.wire_type = wire_type
        self.target_type = target_type


class MultipleResultsFoundError(SQLScanError):
    """A single database result was required but more than one were found."""


@contextmanager
def wrap_database_errors(
    sql: Optional[str] = None, error_class: "type[ConnectivityError]" = StatementExecutionError
) -> Generator[None, None, None]:
    """Translate driver exceptions into sqlscan exceptions.

    Exceptions that already belong to the sqlscan hierarchy pass through untouched.

    Args:
        sql: SQL text attached to the raised error.
        error_class: Connectivity error type to raise.

    Raises:
        ConnectivityError: when the wrapped block raises a driver exception.
    """
    try:
        yield
    except SQLScanError:
        raise
    except Exception as exc:
        msg = f"{type(exc).__name__}: {exc}"
        raise error_class(msg, sql=sql) from exc
