"""Tests for the SELECT builder."""

import pytest

from sqlbound.builder import Select, arg, named_arg
from sqlbound.exceptions import SQLBuilderError


def test_basic_select_with_named_condition() -> None:
    query = Select(dialect="sqlite").select("id", "name").from_("users").where("id = :id")
    rendered = query.render()
    assert rendered.sql == "SELECT id, name FROM users WHERE id = ?"
    assert [argument.name for argument in rendered.arguments] == ["id"]
    assert str(query) == rendered.sql


def test_distinct() -> None:
    assert str(Select(dialect="sqlite").select("name").distinct().from_("users")) == "SELECT DISTINCT name FROM users"


def test_joins() -> None:
    query = (
        Select(dialect="sqlite")
        .select("u.id")
        .from_("users", alias="u")
        .join("orders", on="o.user_id = u.id", alias="o")
        .left_join("notes", on="n.user_id = u.id", alias="n")
    )
    assert str(query) == (
        "SELECT u.id FROM users AS u JOIN orders AS o ON o.user_id = u.id LEFT JOIN notes AS n ON n.user_id = u.id"
    )


def test_where_conditions_are_combined_with_and() -> None:
    query = Select(dialect="sqlite").select("*").from_("t").where("a = :a", "b = :b").where_eq("c", 3)
    rendered = query.render()
    assert rendered.sql == "SELECT * FROM t WHERE a = ? AND b = ? AND c = ?"
    assert [argument.name for argument in rendered.arguments] == ["a", "b", None]
    assert rendered.arguments[2].value == 3


def test_where_in_passes_values_as_placeholders() -> None:
    rendered = Select(dialect="sqlite").select("*").from_("t").where_in("id", [1, 2]).render()
    assert rendered.sql == "SELECT * FROM t WHERE id IN (?, ?)"
    assert [argument.value for argument in rendered.arguments] == [1, 2]


def test_group_by_having() -> None:
    query = (
        Select(dialect="sqlite")
        .select("name", "COUNT(*) AS n")
        .from_("t")
        .group_by("name")
        .having("COUNT(*) > 1")
    )
    assert str(query) == "SELECT name, COUNT(*) AS n FROM t GROUP BY name HAVING COUNT(*) > 1"


def test_order_limit_offset() -> None:
    query = Select(dialect="sqlite").select("id").from_("t").order_by("id DESC").limit(10).offset(5)
    assert str(query) == "SELECT id FROM t ORDER BY id DESC LIMIT 10 OFFSET 5"


@pytest.mark.parametrize(
    ("method", "keyword"),
    [("union", "UNION"), ("union_all", "UNION ALL"), ("intersect", "INTERSECT"), ("except_", "EXCEPT")],
)
def test_compound_queries(method: str, keyword: str) -> None:
    left = Select(dialect="sqlite").select("a").from_("x")
    right = Select(dialect="sqlite").select("a").from_("y")
    assert str(getattr(left, method)(right)) == f"SELECT a FROM x {keyword} SELECT a FROM y"


def test_named_window() -> None:
    query = (
        Select(dialect="sqlite")
        .select("id", "ROW_NUMBER() OVER w AS rn")
        .from_("emp")
        .where("dept = :dept")
        .window("w", partition_by=["dept"], order_by=["salary DESC"])
    )
    rendered = query.render()
    assert "OVER w AS rn" in rendered.sql
    assert rendered.sql.endswith("WHERE dept = ? WINDOW w AS (PARTITION BY dept ORDER BY salary DESC)")
    assert [argument.name for argument in rendered.arguments] == ["dept"]


def test_with_clause() -> None:
    inner = Select(dialect="sqlite").select("id").from_("t")
    query = Select(dialect="sqlite").with_("recent", inner).select("id").from_("recent")
    assert str(query) == "WITH recent AS (SELECT id FROM t) SELECT id FROM recent"


def test_subquery_in_from() -> None:
    inner = Select(dialect="sqlite").select("id").from_("t").where("id > :min_id")
    rendered = Select(dialect="sqlite").select("s.id").from_(inner, alias="s").render()
    assert rendered.sql == "SELECT s.id FROM (SELECT id FROM t WHERE id > ?) AS s"
    assert [argument.name for argument in rendered.arguments] == ["min_id"]


def test_arg_and_named_arg_helpers() -> None:
    query = Select(dialect="sqlite").select("*").from_("t").where_eq("a", arg("x")).where_eq("b", named_arg("b"))
    rendered = query.render()
    assert rendered.arguments[0].value == "x"
    assert rendered.arguments[1].name == "b"


def test_named_arg_requires_name() -> None:
    with pytest.raises(SQLBuilderError):
        named_arg("")


def test_select_without_columns_is_rejected() -> None:
    with pytest.raises(SQLBuilderError, match="at least one column"):
        Select(dialect="sqlite").from_("t").render()


def test_where_after_union_is_rejected() -> None:
    query = Select(dialect="sqlite").select("a").from_("x").union(Select(dialect="sqlite").select("a").from_("y"))
    with pytest.raises(SQLBuilderError):
        query.where("a = 1")


def test_subquery_without_alias_is_rejected() -> None:
    with pytest.raises(SQLBuilderError, match="alias"):
        Select().select("*").from_(Select().select("1"))


def test_negative_limit_is_rejected() -> None:
    with pytest.raises(SQLBuilderError):
        Select().select("*").from_("t").limit(-1)


def test_invalid_condition_is_rejected() -> None:
    with pytest.raises(SQLBuilderError, match="Invalid condition"):
        Select().select("*").from_("t").where("a = (")
