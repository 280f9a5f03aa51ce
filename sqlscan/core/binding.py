"""Column-to-field binding.

Result columns are matched to destination fields by normalized name: both
sides are case-folded and stripped of underscores, so a ``user_id`` column
fills a ``userid`` or ``UserID`` field. Only public fields (no leading
underscore) take part.

Supported destinations:

- record types: dataclasses, ``NamedTuple``, ``TypedDict``, ``msgspec.Struct``,
  attrs classes and pydantic models. Every column must match a field.
- ``dict``: every column becomes a key, values are passed through unchanged.
- scalar types (``str``, ``int``, ``float``, ``bool``, ``bytes``, ``datetime``,
  ``date``, ``time``, ``Any`` and their ``Optional`` forms): exactly one column.

A binding depends only on the destination type and the column names, so it is
computed once per (type, columns) pair and reused for every row.
"""

import dataclasses
import datetime
import threading
import types
from collections import OrderedDict
from collections.abc import Callable, Sequence
from functools import lru_cache
from typing import Annotated, Any, Final, NamedTuple, Optional, Union, get_type_hints

from typing_extensions import NotRequired, ReadOnly, Required, get_args, get_origin

from sqlscan.core.coercion import CoercionTarget, TargetKind, coerce_value, zero_value
from sqlscan.exceptions import BindingError
from sqlscan.utils.type_guards import (
    is_attrs_schema,
    is_dataclass,
    is_dict_schema,
    is_msgspec_struct,
    is_named_tuple,
    is_pydantic_model,
    is_typed_dict,
)

__all__ = (
    "BindingCache",
    "ColumnBinding",
    "FieldSpec",
    "RowBinder",
    "bind_columns",
    "normalize_name",
    "schema_fields",
    "target_for_annotation",
)

DEFAULT_BINDING_CACHE_SIZE: Final = 256

_SCALAR_KINDS: Final[dict[Any, TargetKind]] = {
    str: TargetKind.STRING,
    bool: TargetKind.BOOLEAN,
    int: TargetKind.INTEGER,
    float: TargetKind.FLOAT,
    bytes: TargetKind.BYTES,
    bytearray: TargetKind.BYTES,
    datetime.datetime: TargetKind.TIME,
    datetime.date: TargetKind.TIME,
    datetime.time: TargetKind.TIME,
    Any: TargetKind.ANY,
    object: TargetKind.ANY,
}

_NO_DEFAULT: Final = object()
_TYPED_DICT_QUALIFIERS: Final = (Required, NotRequired, ReadOnly)


class FieldSpec(NamedTuple):
    """A public field of a record type."""

    name: str
    target: CoercionTarget
    default: Any = _NO_DEFAULT
    default_factory: Optional[Callable[[], Any]] = None

    def initial_value(self) -> Any:
        """Value the field holds before any column is stored in it."""
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not _NO_DEFAULT:
            return self.default
        return zero_value(self.target)


class ColumnBinding(NamedTuple):
    """Assignment of one result column to one destination slot.

    ``field_name`` is None when the column binds to the destination value itself.
    """

    column_index: int
    column_name: str
    field_name: Optional[str]
    target: CoercionTarget


def normalize_name(name: str) -> str:
    """Case-fold a field or column name and drop its underscores."""
    return name.replace("_", "").casefold()


def _type_name(schema_type: Any) -> str:
    return getattr(schema_type, "__name__", repr(schema_type))


def target_for_annotation(annotation: Any, owner: str = "") -> CoercionTarget:
    """Resolve a type annotation into a coercion target.

    Args:
        annotation: The annotation, e.g. ``int`` or ``Optional[datetime]``.
        owner: Field description used in error messages.

    Raises:
        BindingError: If the annotation is not a supported slot type.

    Returns:
        The coercion target.
    """
    nullable = False
    resolved = annotation
    while True:
        origin = get_origin(resolved)
        if origin is Annotated or origin in _TYPED_DICT_QUALIFIERS:
            resolved = get_args(resolved)[0]
            continue
        if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
            members = [arg for arg in get_args(resolved) if arg is not type(None)]
            if len(members) != 1:
                break
            nullable = True
            resolved = members[0]
            continue
        supertype = getattr(resolved, "__supertype__", None)
        if supertype is not None:
            resolved = supertype
            continue
        break

    kind = _SCALAR_KINDS.get(resolved)
    if kind is None:
        where = f" for {owner}" if owner else ""
        msg = f"Unsupported destination type {annotation!r}{where}"
        raise BindingError(msg)
    python_type = bytes if resolved is bytearray else resolved
    return CoercionTarget(kind=kind, python_type=python_type, nullable=nullable or kind is TargetKind.ANY)


def _resolve_hints(schema_type: Any) -> "dict[str, Any]":
    try:
        return get_type_hints(schema_type, include_extras=True)
    except (NameError, TypeError) as exc:
        msg = f"Unable to resolve field annotations of {_type_name(schema_type)}: {exc}"
        raise BindingError(msg) from exc


def _public(name: str) -> bool:
    return not name.startswith("_")


def _dataclass_fields(schema_type: Any) -> "list[FieldSpec]":
    hints = _resolve_hints(schema_type)
    specs: list[FieldSpec] = []
    for field in dataclasses.fields(schema_type):
        if not field.init or not _public(field.name):
            continue
        target = target_for_annotation(hints.get(field.name, Any), f"{_type_name(schema_type)}.{field.name}")
        default = _NO_DEFAULT if field.default is dataclasses.MISSING else field.default
        factory = None if field.default_factory is dataclasses.MISSING else field.default_factory
        specs.append(FieldSpec(field.name, target, default, factory))
    return specs


def _named_tuple_fields(schema_type: Any) -> "list[FieldSpec]":
    hints = _resolve_hints(schema_type)
    defaults = getattr(schema_type, "_field_defaults", {})
    return [
        FieldSpec(
            name,
            target_for_annotation(hints.get(name, Any), f"{_type_name(schema_type)}.{name}"),
            defaults.get(name, _NO_DEFAULT),
        )
        for name in schema_type._fields
        if _public(name)
    ]


def _typed_dict_fields(schema_type: Any) -> "list[FieldSpec]":
    hints = _resolve_hints(schema_type)
    return [
        FieldSpec(name, target_for_annotation(annotation, f"{_type_name(schema_type)}.{name}"))
        for name, annotation in hints.items()
        if _public(name)
    ]


def _msgspec_fields(schema_type: Any) -> "list[FieldSpec]":
    import msgspec

    specs: list[FieldSpec] = []
    for field in msgspec.structs.fields(schema_type):
        if not _public(field.name):
            continue
        target = target_for_annotation(field.type, f"{_type_name(schema_type)}.{field.name}")
        default = _NO_DEFAULT if field.default is msgspec.NODEFAULT else field.default
        factory = None if field.default_factory is msgspec.NODEFAULT else field.default_factory
        specs.append(FieldSpec(field.name, target, default, factory))
    return specs


def _attrs_fields(schema_type: Any) -> "list[FieldSpec]":
    import attrs

    attrs.resolve_types(schema_type)
    specs: list[FieldSpec] = []
    for field in attrs.fields(schema_type):
        if not field.init or not _public(field.name):
            continue
        target = target_for_annotation(field.type, f"{_type_name(schema_type)}.{field.name}")
        default: Any = _NO_DEFAULT
        factory = None
        if isinstance(field.default, attrs.Factory):  # type: ignore[arg-type]
            if not field.default.takes_self:
                factory = field.default.factory
        elif field.default is not attrs.NOTHING:
            default = field.default
        specs.append(FieldSpec(field.name, target, default, factory))
    return specs


def _pydantic_fields(schema_type: Any) -> "list[FieldSpec]":
    specs: list[FieldSpec] = []
    for name, field in schema_type.model_fields.items():
        if not _public(name):
            continue
        target = target_for_annotation(field.annotation, f"{_type_name(schema_type)}.{name}")
        default: Any = _NO_DEFAULT
        factory = None
        if field.default_factory is not None:
            factory = field.default_factory
        elif not field.is_required():
            default = field.default
        specs.append(FieldSpec(name, target, default, factory))
    return specs


@lru_cache(maxsize=128)
def _detect_schema_type(schema_type: Any) -> "Optional[str]":
    """Detect the record flavor of a destination type.

    Returns:
        Flavor identifier, or None for non-record destinations.
    """
    return (
        "typed_dict"
        if is_typed_dict(schema_type)
        else "dataclass"
        if is_dataclass(schema_type)
        else "named_tuple"
        if is_named_tuple(schema_type)
        else "msgspec"
        if is_msgspec_struct(schema_type)
        else "pydantic"
        if is_pydantic_model(schema_type)
        else "attrs"
        if is_attrs_schema(schema_type)
        else None
    )


_FIELD_EXTRACTORS: Final[dict[str, Callable[[Any], "list[FieldSpec]"]]] = {
    "dataclass": _dataclass_fields,
    "named_tuple": _named_tuple_fields,
    "typed_dict": _typed_dict_fields,
    "msgspec": _msgspec_fields,
    "attrs": _attrs_fields,
    "pydantic": _pydantic_fields,
}


@lru_cache(maxsize=128)
def schema_fields(schema_type: Any) -> "tuple[FieldSpec, ...]":
    """Return the public fields of a record type, in declaration order.

    Raises:
        BindingError: If the type is not a record type or a field type is unsupported.
    """
    flavor = _detect_schema_type(schema_type)
    if flavor is None:
        msg = f"{_type_name(schema_type)} is not a record type"
        raise BindingError(msg)
    return tuple(_FIELD_EXTRACTORS[flavor](schema_type))


def _construct_record(schema_type: Any, flavor: str, values: "dict[str, Any]") -> Any:
    if flavor == "typed_dict":
        return values
    if flavor == "pydantic":
        return schema_type.model_construct(**values)
    return schema_type(**values)


class RowBinder:
    """Builds destination values from result rows using a fixed column binding."""

    __slots__ = ("_fields", "_flavor", "bindings", "columns", "schema_type")

    def __init__(
        self,
        schema_type: Any,
        columns: "tuple[str, ...]",
        bindings: "tuple[ColumnBinding, ...]",
        flavor: str,
        fields: "tuple[FieldSpec, ...]" = (),
    ) -> None:
        self.schema_type = schema_type
        self.columns = columns
        self.bindings = bindings
        self._flavor = flavor
        self._fields = fields

    @property
    def is_scalar(self) -> bool:
        return self._flavor == "scalar"

    def _scratch(self) -> "dict[str, Any]":
        return {field.name: field.initial_value() for field in self._fields}

    def build(self, row: "Sequence[Any]") -> Any:
        """Convert one result row into the destination type.

        Raises:
            CoercionError: If a column value cannot be stored in its slot.
        """
        if self._flavor == "scalar":
            binding = self.bindings[0]
            return coerce_value(row[binding.column_index], binding.target)
        if self._flavor == "dict":
            return {binding.column_name: row[binding.column_index] for binding in self.bindings}
        values = self._scratch()
        for binding in self.bindings:
            values[binding.field_name] = coerce_value(row[binding.column_index], binding.target)  # type: ignore[index]
        return _construct_record(self.schema_type, self._flavor, values)

    def zero(self) -> Any:
        """Return the destination's zero value: defaults and zero-valued fields, or a zero scalar."""
        if self._flavor == "scalar":
            return zero_value(self.bindings[0].target)
        if self._flavor == "dict":
            return {}
        return _construct_record(self.schema_type, self._flavor, self._scratch())

    def __repr__(self) -> str:
        return f"RowBinder({_type_name(self.schema_type)}, columns={self.columns!r})"


def bind_columns(schema_type: Any, columns: "Sequence[str]") -> RowBinder:
    """Compute the binding of result columns onto a destination type.

    Args:
        schema_type: Destination record or scalar type.
        columns: Column names in result order.

    Raises:
        BindingError: If a column matches no field, or a scalar destination gets
            anything other than exactly one column.

    Returns:
        The row binder.
    """
    column_names = tuple(columns)
    type_name = _type_name(schema_type)

    if is_dict_schema(schema_type):
        any_target = CoercionTarget(kind=TargetKind.ANY, python_type=Any, nullable=True)
        bindings = tuple(ColumnBinding(i, name, name, any_target) for i, name in enumerate(column_names))
        return RowBinder(schema_type, column_names, bindings, "dict")

    flavor = _detect_schema_type(schema_type)
    if flavor is None:
        target = target_for_annotation(schema_type)
        if len(column_names) != 1:
            msg = f"Query returns {len(column_names)} columns, expecting 1 for {type_name}"
            raise BindingError(msg)
        return RowBinder(schema_type, column_names, (ColumnBinding(0, column_names[0], None, target),), "scalar")

    fields = schema_fields(schema_type)
    by_name: dict[str, FieldSpec] = {}
    for field in fields:
        by_name[normalize_name(field.name)] = field

    bindings_list: list[ColumnBinding] = []
    for index, column in enumerate(column_names):
        field = by_name.get(normalize_name(column))
        if field is None:
            msg = (
                f"Unable to map '{column}' column to a {type_name} field, "
                "make sure the field is: public, underscore collapsed, case-insensitive"
            )
            raise BindingError(msg)
        bindings_list.append(ColumnBinding(index, column, field.name, field.target))
    return RowBinder(schema_type, column_names, tuple(bindings_list), flavor, fields)


class BindingCache:
    """LRU cache of row binders keyed by destination type and column names."""

    __slots__ = ("_cache", "_lock", "_max_size")

    def __init__(self, max_size: int = DEFAULT_BINDING_CACHE_SIZE) -> None:
        self._cache: OrderedDict[tuple[Any, tuple[str, ...]], RowBinder] = OrderedDict()
        self._lock = threading.Lock()
        self._max_size = max_size

    def get(self, schema_type: Any, columns: "Sequence[str]") -> RowBinder:
        """Return the cached binder, computing and storing it on first use."""
        key = (schema_type, tuple(columns))
        with self._lock:
            binder = self._cache.get(key)
            if binder is not None:
                self._cache.move_to_end(key)
                return binder
        binder = bind_columns(schema_type, key[1])
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
            if len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)
            self._cache[key] = binder
        return binder

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
