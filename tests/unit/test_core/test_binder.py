"""Tests for binding value objects to named placeholders."""

from dataclasses import dataclass
from typing import Any

import pytest

from sqlbound.core.binder import StructBinder, make_binder
from sqlbound.core.compiler import render
from sqlbound.core.mapping import FieldMapper
from sqlbound.core.parameters import Argument
from sqlbound.exceptions import MissingArgError, NamedArgRequiredError, NilArgumentError


@dataclass
class Record:
    name: str
    id: int


def named(*names: str) -> "list[Argument]":
    return [Argument(name, ordinal=index) for index, name in enumerate(names)]


def test_binder_aligns_placeholders_with_fields(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id", "name"), field_mapper)
    assert binder.args == ("id", "name")
    assert binder.fields == ("id", "name")
    assert len(binder) == 2


def test_to_args_follows_placeholder_order(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id", "name"), field_mapper)
    assert binder.to_args(Record(name="x", id=7)) == [7, "x"]


def test_repeated_placeholder_reads_field_twice(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id", "name", "id"), field_mapper)
    assert binder.to_args(Record(name="x", id=7)) == [7, "x", 7]


def test_unknown_placeholder_fails_construction(field_mapper: FieldMapper) -> None:
    with pytest.raises(MissingArgError) as exc_info:
        make_binder(Record, named("id", "missing"), field_mapper)
    assert exc_info.value.name == "missing"
    assert str(exc_info.value) == "missing arg missing"


def test_first_unknown_placeholder_is_reported(field_mapper: FieldMapper) -> None:
    with pytest.raises(MissingArgError) as exc_info:
        make_binder(Record, named("first", "id", "second"), field_mapper)
    assert exc_info.value.name == "first"


@pytest.mark.parametrize(
    "arguments",
    [
        pytest.param([Argument(ordinal=0)], id="only-anonymous"),
        pytest.param([Argument("id"), Argument(ordinal=1)], id="anonymous-after-valid"),
        pytest.param([Argument("missing"), Argument(value=1, ordinal=1)], id="anonymous-after-invalid"),
    ],
)
def test_anonymous_placeholder_fails_construction(field_mapper: FieldMapper, arguments: "list[Argument]") -> None:
    with pytest.raises(NamedArgRequiredError):
        make_binder(Record, arguments, field_mapper)


def test_binder_from_rendered_query(field_mapper: FieldMapper) -> None:
    rendered = render("UPDATE t SET name = :name WHERE id = :id", "sqlite")
    binder = make_binder(Record, rendered.arguments, field_mapper)
    assert binder.to_args(Record(name="y", id=1)) == ["y", 1]


def test_to_args_rejects_none(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id"), field_mapper)
    with pytest.raises(NilArgumentError, match="object is nil"):
        binder.to_args(None)  # type: ignore[arg-type]


def test_to_args_fails_whole_extraction(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id", "name"), field_mapper)

    class Partial:
        id = 3

    with pytest.raises(MissingArgError) as exc_info:
        binder.to_args(Partial())  # type: ignore[arg-type]
    assert exc_info.value.name == "name"


def test_to_args_does_not_mutate_input(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id"), field_mapper)
    record = Record(name="x", id=1)
    binder.to_args(record)
    assert record == Record(name="x", id=1)


def test_binder_reads_mappings_by_key(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, named("id", "name"), field_mapper)
    row: dict[str, Any] = {"id": 4, "name": "z"}
    assert binder.to_args(row) == [4, "z"]  # type: ignore[arg-type]


def test_binder_uses_default_mapper() -> None:
    binder = make_binder(Record, named("name"))
    assert isinstance(binder, StructBinder)
    assert binder.arg_type is Record


def test_no_placeholders_binds_nothing(field_mapper: FieldMapper) -> None:
    binder = make_binder(Record, [], field_mapper)
    assert binder.to_args(Record(name="x", id=1)) == []


def test_explicit_empty_mapper_is_used(field_mapper: FieldMapper) -> None:
    assert len(field_mapper) == 0
    make_binder(Record, named("id"), field_mapper)
    assert Record in field_mapper
