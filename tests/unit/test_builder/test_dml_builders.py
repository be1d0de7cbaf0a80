"""Tests for the INSERT, UPDATE and DELETE builders."""

import pytest

from sqlbound.builder import Delete, Insert, Update, named_arg
from sqlbound.exceptions import SQLBuilderError


def test_insert_values_become_placeholders() -> None:
    rendered = Insert(table="users", dialect="sqlite").columns("id", "name").values(1, "a").render()
    assert rendered.sql == "INSERT INTO users (id, name) VALUES (?, ?)"
    assert [argument.value for argument in rendered.arguments] == [1, "a"]


def test_insert_with_named_args_and_returning() -> None:
    query = (
        Insert(dialect="sqlite")
        .into("users")
        .columns("id", "name")
        .values(named_arg("id"), named_arg("name"))
        .returning("id")
    )
    rendered = query.render()
    assert rendered.sql == "INSERT INTO users (id, name) VALUES (?, ?) RETURNING id"
    assert [argument.name for argument in rendered.arguments] == ["id", "name"]


def test_insert_multiple_rows() -> None:
    rendered = Insert(table="t", dialect="sqlite").columns("a").values(1).values(2).render()
    assert rendered.sql == "INSERT INTO t (a) VALUES (?), (?)"


def test_insert_values_from_dict() -> None:
    rendered = Insert(table="t", dialect="sqlite").values_from_dict({"a": 1, "b": 2}).render()
    assert rendered.sql == "INSERT INTO t (a, b) VALUES (?, ?)"
    assert [argument.value for argument in rendered.arguments] == [1, 2]


def test_insert_value_count_must_match_columns() -> None:
    with pytest.raises(SQLBuilderError, match="Expected 2 values"):
        Insert(table="t").columns("a", "b").values(1)


def test_insert_requires_table_and_rows() -> None:
    with pytest.raises(SQLBuilderError, match="target table"):
        Insert().values(1).render()
    with pytest.raises(SQLBuilderError, match="row of values"):
        Insert(table="t").render()


def test_update_set_and_where() -> None:
    query = Update(table="users", dialect="sqlite").set("name", named_arg("name")).where_eq("id", named_arg("id"))
    rendered = query.render()
    assert rendered.sql == "UPDATE users SET name = ? WHERE id = ?"
    assert [argument.name for argument in rendered.arguments] == ["name", "id"]


def test_update_combines_conditions() -> None:
    query = Update(table="t", dialect="sqlite").set("a", 1).where("b = :b", "c = :c").returning("a")
    assert str(query) == "UPDATE t SET a = ? WHERE b = ? AND c = ? RETURNING a"


def test_update_requires_assignment() -> None:
    with pytest.raises(SQLBuilderError, match="SET"):
        Update(table="t").where("a = 1").render()


def test_delete_with_condition() -> None:
    rendered = Delete(table="users", dialect="sqlite").where("id = :id").render()
    assert rendered.sql == "DELETE FROM users WHERE id = ?"
    assert [argument.name for argument in rendered.arguments] == ["id"]


def test_delete_from_with_returning() -> None:
    query = Delete(dialect="sqlite").from_("users").where_eq("id", 3).returning("id")
    assert str(query) == "DELETE FROM users WHERE id = ? RETURNING id"


def test_delete_requires_table() -> None:
    with pytest.raises(SQLBuilderError):
        Delete().render()
