"""Statement kind detection for diagnostics and effect results."""

from functools import lru_cache
from typing import Final, Literal, Optional

from sqlglot import exp, parse_one
from sqlglot.errors import SqlglotError

__all__ = ("OperationType", "classify_operation")

OperationType = Literal["SELECT", "INSERT", "UPDATE", "DELETE", "MERGE", "DDL", "PRAGMA", "EXECUTE", "UNKNOWN"]

_DDL_EXPRESSIONS: Final = (exp.Create, exp.Drop, exp.Alter)


@lru_cache(maxsize=512)
def classify_operation(sql: str, dialect: Optional[str] = None) -> OperationType:
    """Classify a rendered statement by its top-level SQL kind.

    Args:
        sql: Rendered SQL text.
        dialect: sqlglot dialect name of the target database.

    Returns:
        Operation type, ``UNKNOWN`` when the text cannot be parsed.
    """
    if not sql.strip():
        return "UNKNOWN"
    try:
        expression = parse_one(sql, dialect=dialect)
    except SqlglotError:
        return "UNKNOWN"
    if isinstance(expression, exp.Query):
        return "SELECT"
    if isinstance(expression, exp.Insert):
        return "INSERT"
    if isinstance(expression, exp.Update):
        return "UPDATE"
    if isinstance(expression, exp.Delete):
        return "DELETE"
    if isinstance(expression, exp.Merge):
        return "MERGE"
    if isinstance(expression, _DDL_EXPRESSIONS):
        return "DDL"
    if isinstance(expression, exp.Pragma):
        return "PRAGMA"
    if isinstance(expression, exp.Command):
        return "EXECUTE"
    return "UNKNOWN"
