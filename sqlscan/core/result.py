"""Results of effect-only statements."""

from dataclasses import dataclass, field
from typing import Any, Optional

from sqlscan.core.operation import OperationType

__all__ = ("EffectResult",)


@dataclass(frozen=True)
class EffectResult:
    """Summary of an INSERT/UPDATE/DELETE/DDL statement.

    ``rows_affected`` is the driver's ``rowcount``; drivers report -1 when the
    count is not applicable (DDL on most backends). An empty result, returned by
    a failed best-effort execution, has no SQL and ``rows_affected == -1``.
    """

    rows_affected: int = -1
    last_row_id: Optional[Any] = None
    operation_type: OperationType = "UNKNOWN"
    sql: str = ""
    parameters: "tuple[Any, ...]" = field(default=(), repr=False)

    @property
    def is_empty(self) -> bool:
        """Whether this result came from a statement that did not run."""
        return not self.sql
