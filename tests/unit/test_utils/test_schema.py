"""Tests for row conversion and JSON helpers."""

from dataclasses import dataclass
from typing import NamedTuple, TypedDict

import attrs
import msgspec
import pytest
from pydantic import BaseModel

from sqlbound.exceptions import SQLBoundError
from sqlbound.utils.schema import schema_mapper, to_schema
from sqlbound.utils.serializers import from_json, to_json

ROW = {"id": 1, "name": "a"}


@dataclass
class RowData:
    id: int
    name: str


class RowStruct(msgspec.Struct):
    id: int
    name: str


class RowModel(BaseModel):
    id: int
    name: str


@attrs.define
class RowAttrs:
    id: int
    name: str


class RowTuple(NamedTuple):
    id: int
    name: str


class RowDict(TypedDict):
    id: int
    name: str


@pytest.mark.parametrize("schema_type", [RowData, RowStruct, RowModel, RowAttrs, RowTuple])
def test_to_schema_builds_typed_rows(schema_type: type) -> None:
    row = to_schema(ROW, schema_type)
    assert isinstance(row, schema_type)
    assert row.id == 1  # type: ignore[attr-defined]
    assert row.name == "a"  # type: ignore[attr-defined]


@pytest.mark.parametrize("schema_type", [None, dict, RowDict])
def test_to_schema_passes_dicts_through(schema_type: "type | None") -> None:
    assert to_schema(ROW, schema_type) is ROW


def test_to_schema_wraps_conversion_errors() -> None:
    with pytest.raises(SQLBoundError, match="RowData"):
        to_schema({"id": 1}, RowData)


def test_to_schema_rejects_unsupported_types() -> None:
    with pytest.raises(SQLBoundError, match="schema_type"):
        to_schema(ROW, int)


def test_schema_mapper_is_reusable() -> None:
    mapper = schema_mapper(RowData)
    assert [mapper(ROW), mapper({"id": 2, "name": "b"})] == [RowData(1, "a"), RowData(2, "b")]


def test_json_helpers() -> None:
    assert to_json({"a": [1, 2]}) == '{"a":[1,2]}'
    assert to_json([1], as_bytes=True) == b"[1]"
    assert from_json('{"a":1}') == {"a": 1}
