"""Shared type variables, aliases and optional-dependency flags."""

from typing import TYPE_CHECKING, Any, Union

from typing_extensions import TypeAlias, TypeVar

from sqlscan.utils.module_loader import module_available

if TYPE_CHECKING:
    from sqlscan.parameters import Arg

__all__ = ("ATTRS_INSTALLED", "MSGSPEC_INSTALLED", "PYDANTIC_INSTALLED", "SchemaT", "StatementArgument")

ATTRS_INSTALLED = module_available("attrs")
MSGSPEC_INSTALLED = module_available("msgspec")
PYDANTIC_INSTALLED = module_available("pydantic")

SchemaT = TypeVar("SchemaT", default=dict[str, Any])
"""Type variable for destination record and scalar types.

Defaults to ``dict[str, Any]`` rows when no schema type is given.
"""

StatementArgument: TypeAlias = Union[str, "Arg", "list[Arg]", "tuple[Arg, ...]"]
"""One element of the statement DSL: literal SQL, a bound argument, or an optional clause."""
