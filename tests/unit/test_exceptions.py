import pytest

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
    wrap_database_errors,
)


def test_exception_hierarchy() -> None:
    """Test exception classes inherit correctly."""
    assert issubclass(DatabaseConnectionError, ConnectivityError)
    assert issubclass(StatementPrepareError, ConnectivityError)
    assert issubclass(StatementExecutionError, ConnectivityError)
    for error in (
        BindingError,
        CoercionError,
        ConnectivityError,
        ImproperConfigurationError,
        MissingDependencyError,
        MultipleResultsFoundError,
        ParameterError,
    ):
        assert issubclass(error, SQLScanError)
    assert issubclass(MissingDependencyError, ImportError)


def test_detail_message() -> None:
    exc = BindingError("Unable to map column")
    assert str(exc) == "Unable to map column"
    assert exc.detail == "Unable to map column"
    assert repr(exc) == "BindingError - Unable to map column"


def test_sql_context_is_appended() -> None:
    exc = StatementExecutionError("no such table: t", sql="SELECT * FROM t")
    assert str(exc) == "no such table: t\nSQL: SELECT * FROM t"
    assert exc.sql == "SELECT * FROM t"
    assert str(StatementExecutionError("failed")) == "failed"


def test_coercion_error_fields() -> None:
    exc = CoercionError(3.5, "float", "int")
    assert str(exc) == "Can't convert 3.5 float to int"
    assert (exc.value, exc.wire_type, exc.target_type) == (3.5, "float", "int")


def test_wrap_database_errors_translates_driver_errors() -> None:
    with pytest.raises(StatementPrepareError) as exc_info, wrap_database_errors("SELECT 1", StatementPrepareError):
        raise ValueError("bad statement")
    assert str(exc_info.value) == "ValueError: bad statement\nSQL: SELECT 1"
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_wrap_database_errors_keeps_library_errors() -> None:
    original = CoercionError("x", "str", "int")
    with pytest.raises(CoercionError) as exc_info, wrap_database_errors("SELECT 1"):
        raise original
    assert exc_info.value is original
