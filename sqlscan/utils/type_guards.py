"""Type guard functions for recognizing record-shaped destination types.

Optional libraries (attrs, pydantic) are only imported once they are known
to be installed, so these checks are safe to call without them.
"""

import dataclasses
from typing import Any

from typing_extensions import TypeGuard, is_typeddict

from sqlscan.typing import ATTRS_INSTALLED, MSGSPEC_INSTALLED, PYDANTIC_INSTALLED

__all__ = (
    "is_attrs_schema",
    "is_dataclass",
    "is_dict_schema",
    "is_msgspec_struct",
    "is_named_tuple",
    "is_pydantic_model",
    "is_typed_dict",
)


def is_dataclass(obj: Any) -> "TypeGuard[type[Any]]":
    """Check if a type is a dataclass.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def is_typed_dict(obj: Any) -> "TypeGuard[type[dict[str, Any]]]":
    """Check if a type is a TypedDict.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return is_typeddict(obj)


def is_named_tuple(obj: Any) -> "TypeGuard[type[tuple[Any, ...]]]":
    """Check if a type is a ``typing.NamedTuple`` class."""
    return isinstance(obj, type) and issubclass(obj, tuple) and hasattr(obj, "_fields")


def is_msgspec_struct(obj: Any) -> "TypeGuard[type[Any]]":
    """Check if a type is a msgspec struct.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not MSGSPEC_INSTALLED or not isinstance(obj, type):
        return False
    from msgspec import Struct

    return issubclass(obj, Struct)


def is_pydantic_model(obj: Any) -> "TypeGuard[type[Any]]":
    """Check if a type is a pydantic model.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not PYDANTIC_INSTALLED or not isinstance(obj, type):
        return False
    from pydantic import BaseModel

    return issubclass(obj, BaseModel)


def is_attrs_schema(obj: Any) -> "TypeGuard[type[Any]]":
    """Check if a type is an attrs class.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not ATTRS_INSTALLED or not isinstance(obj, type):
        return False
    from attrs import has

    return has(obj)


def is_dict_schema(obj: Any) -> "TypeGuard[type[dict[str, Any]]]":
    """Check if the destination is a plain ``dict`` (optionally parameterized)."""
    return obj is dict or getattr(obj, "__origin__", None) is dict

