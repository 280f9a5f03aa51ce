"""Binding, coercion and result primitives."""

from sqlscan.core.binding import BindingCache, ColumnBinding, RowBinder, bind_columns
from sqlscan.core.coercion import CoercionTarget, TargetKind, WireKind, coerce_value
from sqlscan.core.operation import OperationType, classify_operation
from sqlscan.core.result import EffectResult

__all__ = (
    "BindingCache",
    "CoercionTarget",
    "ColumnBinding",
    "EffectResult",
    "OperationType",
    "RowBinder",
    "TargetKind",
    "WireKind",
    "bind_columns",
    "classify_operation",
    "coerce_value",
)
