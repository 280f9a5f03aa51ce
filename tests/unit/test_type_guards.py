"""Unit tests for record-type guards."""

from dataclasses import dataclass
from typing import Any, NamedTuple

import msgspec
import pytest
from typing_extensions import TypedDict

from sqlscan.utils import type_guards
from sqlscan.utils.type_guards import (
    is_dataclass,
    is_dict_schema,
    is_msgspec_struct,
    is_named_tuple,
    is_typed_dict,
)


@dataclass
class Point:
    x: int


class PointTuple(NamedTuple):
    x: int


class PointDict(TypedDict):
    x: int


class PointStruct(msgspec.Struct):
    x: int


@pytest.mark.parametrize(
    ("guard", "accepted"),
    [
        (is_dataclass, Point),
        (is_named_tuple, PointTuple),
        (is_typed_dict, PointDict),
        (is_msgspec_struct, PointStruct),
        (is_dict_schema, dict),
        (is_dict_schema, dict[str, Any]),
    ],
)
def test_guard_accepts_its_record_type(guard: Any, accepted: Any) -> None:
    assert guard(accepted)


@pytest.mark.parametrize("guard", [is_dataclass, is_named_tuple, is_typed_dict, is_msgspec_struct, is_dict_schema])
def test_guards_reject_scalars(guard: Any) -> None:
    assert not guard(int)
    assert not guard(tuple)


def test_dataclass_instance_is_not_a_record_type() -> None:
    assert not is_dataclass(Point(1))


def test_optional_library_guards_without_library(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(type_guards, "PYDANTIC_INSTALLED", False)
    monkeypatch.setattr(type_guards, "ATTRS_INSTALLED", False)
    assert not type_guards.is_pydantic_model(Point)
    assert not type_guards.is_attrs_schema(Point)


def test_exports_match_module() -> None:
    assert all(callable(getattr(type_guards, name)) for name in type_guards.__all__)
