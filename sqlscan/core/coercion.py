"""Conversion of driver values into destination slot types.

Drivers surface the same logical value in different wire shapes: PostgreSQL
numerics arrive as :class:`~decimal.Decimal` or text, Oracle flags as ``'Y'``/``'N'``,
SQLite has no boolean type at all. Every value read from a cursor passes through
:func:`coerce_value`, which applies one fixed precedence of rules:

1. ``None`` becomes the slot's zero value (``None`` for optional slots).
2. Bytes are copied for byte slots, otherwise decoded and treated as text.
3. Text is parsed according to the slot kind.
4. Temporal values go to temporal slots only.
5. Booleans go to boolean slots only.
6. Floats go to float slots, or are formatted for string slots.
7. Integers go to integer slots, or are formatted for string slots.

Anything else raises :class:`~sqlscan.exceptions.CoercionError`.
"""

import datetime
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Final, Optional

from mypy_extensions import mypyc_attr

from sqlscan.exceptions import CoercionError

__all__ = (
    "CoercionTarget",
    "TargetKind",
    "WireKind",
    "classify_wire_value",
    "coerce_value",
    "format_float",
    "parse_bool",
    "zero_value",
)

_INT64_MIN: Final = -(2**63)
_INT64_MAX: Final = 2**63 - 1
_INTEGER_RE: Final = re.compile(r"[+-]?[0-9]+")
_TRUE_STRINGS: Final = frozenset({"1", "t", "true"})
_FALSE_STRINGS: Final = frozenset({"0", "f", "false"})


class TargetKind(str, Enum):
    """Static kind of a destination slot."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    TIME = "time"
    ANY = "any"


class WireKind(str, Enum):
    """Shape of a value as returned by a driver."""

    NULL = "null"
    BYTES = "bytes"
    TEXT = "text"
    TIME = "time"
    BOOL = "bool"
    FLOAT = "float"
    INTEGER = "integer"
    OTHER = "other"


@mypyc_attr(allow_interpreted_subclasses=False)
@dataclass(frozen=True)
class CoercionTarget:
    """A destination slot: its kind, concrete Python type and nullability."""

    kind: TargetKind
    python_type: Any
    nullable: bool = False

    @property
    def type_name(self) -> str:
        name = getattr(self.python_type, "__name__", repr(self.python_type))
        return f"Optional[{name}]" if self.nullable else name


_ZERO_TIME: Final[dict[Any, Any]] = {
    datetime.datetime: datetime.datetime.min,
    datetime.date: datetime.date.min,
    datetime.time: datetime.time.min,
}

_ZERO_VALUES: Final[dict[TargetKind, Any]] = {
    TargetKind.STRING: "",
    TargetKind.INTEGER: 0,
    TargetKind.FLOAT: 0.0,
    TargetKind.BOOLEAN: False,
    TargetKind.BYTES: b"",
    TargetKind.ANY: None,
}


def zero_value(target: CoercionTarget) -> Any:
    """Return the value a slot holds before anything is stored in it."""
    if target.nullable:
        return None
    if target.kind is TargetKind.TIME:
        return _ZERO_TIME[target.python_type]
    return _ZERO_VALUES[target.kind]


def classify_wire_value(value: Any) -> WireKind:
    """Classify a driver value into its wire kind.

    ``bool`` is checked before ``int`` because it is a subclass of it.
    """
    if value is None:
        return WireKind.NULL
    if isinstance(value, (bytes, bytearray, memoryview)):
        return WireKind.BYTES
    if isinstance(value, (str, Decimal)):
        return WireKind.TEXT
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return WireKind.TIME
    if isinstance(value, bool):
        return WireKind.BOOL
    if isinstance(value, float):
        return WireKind.FLOAT
    if isinstance(value, int):
        return WireKind.INTEGER
    return WireKind.OTHER


def parse_bool(text: str) -> Optional[bool]:
    """Parse a lenient boolean flag.

    ``Y``/``N`` (any case) first, then ``1``/``t``/``true`` and ``0``/``f``/``false`` (any case).

    Returns:
        The parsed flag, or None when the text is not a boolean.
    """
    folded = text.casefold()
    if folded == "y":
        return True
    if folded == "n":
        return False
    if folded in _TRUE_STRINGS:
        return True
    if folded in _FALSE_STRINGS:
        return False
    return None


def format_float(value: float) -> str:
    """Format a float with its shortest exact digits and no exponent notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _parse_int(text: str) -> Optional[int]:
    if not _INTEGER_RE.fullmatch(text):
        return None
    parsed = int(text)
    if not _INT64_MIN <= parsed <= _INT64_MAX:
        return None
    return parsed


def _parse_float(text: str) -> Optional[float]:
    # float() also accepts surrounding whitespace and digit separators
    if "_" in text or text != text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _coerce_text(text: str, target: CoercionTarget) -> Any:
    kind = target.kind
    if kind is TargetKind.STRING:
        return text
    if kind is TargetKind.INTEGER:
        return _parse_int(text)
    if kind is TargetKind.FLOAT:
        return _parse_float(text)
    if kind is TargetKind.BOOLEAN:
        return parse_bool(text)
    return None


def _conversion_error(value: Any, target: CoercionTarget) -> CoercionError:
    return CoercionError(value, type(value).__name__, target.type_name)


def coerce_value(value: Any, target: CoercionTarget) -> Any:
    """Convert a driver value into the destination slot's type.

    Args:
        value: Value as returned by the driver.
        target: Destination slot.

    Raises:
        CoercionError: If the value cannot be stored in the slot.

    Returns:
        The converted value.
    """
    kind = target.kind
    if value is None:
        return zero_value(target)
    if kind is TargetKind.ANY:
        return value

    wire = classify_wire_value(value)
    source = value
    if wire is WireKind.BYTES:
        if kind is TargetKind.BYTES:
            return bytes(value)
        try:
            value = bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise _conversion_error(source, target) from exc
        wire = WireKind.TEXT

    if wire is WireKind.TEXT:
        # numeric columns keep their positional digits, never exponent form
        text = format(value, "f") if isinstance(value, Decimal) else str(value)
        converted = _coerce_text(text, target)
        if converted is None:
            raise _conversion_error(source, target)
        return converted

    if wire is WireKind.TIME:
        if kind is TargetKind.TIME and _accepts_time(value, target.python_type):
            return value
    elif wire is WireKind.BOOL:
        if kind is TargetKind.BOOLEAN:
            return value
    elif wire is WireKind.FLOAT:
        if kind is TargetKind.FLOAT:
            return value
        if kind is TargetKind.STRING:
            return format_float(value)
    elif wire is WireKind.INTEGER:
        if kind is TargetKind.INTEGER:
            return int(value)
        if kind is TargetKind.STRING:
            return str(int(value))

    raise _conversion_error(source, target)


def _accepts_time(value: Any, python_type: Any) -> bool:
    # datetime subclasses date, so a date slot must not receive a datetime
    if python_type is datetime.date:
        return type(value) is datetime.date
    return isinstance(value, python_type)
