"""SELECT query builder."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

from sqlbound.builder._base import QueryBuilder
from sqlbound.core.compiler import to_expression
from sqlbound.exceptions import SQLBuilderError

__all__ = ("Select",)

TableLike = Union[str, exp.Expression, QueryBuilder]


@dataclass
class Select(QueryBuilder):
    """Builder for SELECT queries.

    Example:
        ```python
        query = Select().select("id", "name").from_("users").where("id = :id")
        ```
    """

    def _create_base_expression(self) -> exp.Expression:
        return exp.Select()

    def _select(self) -> exp.Select:
        if not isinstance(self._expression, exp.Select):
            msg = "Clause is not allowed after a compound query (UNION, INTERSECT, EXCEPT)"
            raise SQLBuilderError(msg)
        return self._expression

    def _table(self, table: TableLike, alias: Optional[str] = None) -> exp.Expression:
        if isinstance(table, QueryBuilder):
            return exp.alias_(exp.Subquery(this=table.get_expression()), alias, table=True)
        expression = exp.to_table(table, dialect=self.dialect) if isinstance(table, str) else table
        return exp.alias_(expression, alias, table=True) if alias else expression

    def with_(self, name: str, query: Any, recursive: bool = False) -> "Select":
        """Add a common table expression."""
        self._expression = self._select().with_(
            name, as_=to_expression(query, self.dialect), recursive=recursive, dialect=self.dialect, copy=False
        )
        return self

    def select(self, *columns: Union[str, exp.Expression]) -> "Select":
        self._expression = self._select().select(*columns, dialect=self.dialect, copy=False)
        return self

    def distinct(self) -> "Select":
        self._expression = self._select().distinct(copy=False)
        return self

    def from_(self, table: TableLike, alias: Optional[str] = None) -> "Select":
        if isinstance(table, QueryBuilder) and not alias:
            msg = "A subquery in FROM requires an alias"
            raise SQLBuilderError(msg)
        self._expression = self._select().from_(self._table(table, alias), copy=False)
        return self

    def join(
        self,
        table: TableLike,
        on: "Optional[Union[str, exp.Expression]]" = None,
        alias: Optional[str] = None,
        join_type: str = "",
    ) -> "Select":
        """Add a JOIN clause.

        Args:
            table: Table name, expression or subquery builder.
            on: Join condition.
            alias: Table alias.
            join_type: ``LEFT``, ``RIGHT``, ``FULL``, ``CROSS`` or empty for an inner join.

        Returns:
            The builder.
        """
        condition = self._parse_condition(on) if on is not None else None
        self._expression = self._select().join(
            self._table(table, alias), on=condition, join_type=join_type or None, dialect=self.dialect, copy=False
        )
        return self

    def left_join(
        self, table: TableLike, on: "Optional[Union[str, exp.Expression]]" = None, alias: Optional[str] = None
    ) -> "Select":
        return self.join(table, on=on, alias=alias, join_type="left")

    def where(self, *conditions: Union[str, exp.Expression]) -> "Select":
        """Add conditions to the WHERE clause, combined with AND."""
        if not conditions:
            msg = "where() requires at least one condition"
            raise SQLBuilderError(msg)
        select = self._select()
        for condition in conditions:
            select = select.where(self._parse_condition(condition), copy=False)
        self._expression = select
        return self

    def where_eq(self, column: str, value: Any) -> "Select":
        """Add a ``column = value`` condition, passing ``value`` as a placeholder."""
        return self.where(exp.EQ(this=exp.to_column(column), expression=self._value(value)))

    def where_in(self, column: str, values: "list[Any]") -> "Select":
        if not values:
            msg = "where_in() requires at least one value"
            raise SQLBuilderError(msg)
        return self.where(exp.to_column(column).isin(*[self._value(value) for value in values]))

    def group_by(self, *columns: Union[str, exp.Expression]) -> "Select":
        self._expression = self._select().group_by(*columns, dialect=self.dialect, copy=False)
        return self

    def having(self, *conditions: Union[str, exp.Expression]) -> "Select":
        select = self._select()
        for condition in conditions:
            select = select.having(self._parse_condition(condition), copy=False)
        self._expression = select
        return self

    def window(
        self, name: str, partition_by: "Sequence[str]" = (), order_by: "Sequence[str]" = ()
    ) -> "Select":
        """Add a named window to the WINDOW clause.

        Example:
            ```python
            Select().select("ROW_NUMBER() OVER w").from_("t").window("w", partition_by=["dept"])
            ```
        """
        parts = []
        if partition_by:
            parts.append(f"PARTITION BY {', '.join(partition_by)}")
        if order_by:
            parts.append(f"ORDER BY {', '.join(order_by)}")
        try:
            parsed = sqlglot.parse_one(f"SELECT 1 WINDOW {name} AS ({' '.join(parts)})", read=self.dialect)
        except ParseError as e:
            msg = f"Invalid window {name!r}: {e}"
            raise SQLBuilderError(msg) from e
        select = self._select()
        for window in parsed.args.get("windows") or []:
            select.append("windows", window)
        return self

    def _compound(self, kind: "type[exp.SetOperation]", other: Any, distinct: bool) -> "Select":
        left = self.get_expression()
        right = to_expression(other, self.dialect)
        self._expression = kind(this=left, expression=right, distinct=distinct)
        return self

    def union(self, other: Any) -> "Select":
        return self._compound(exp.Union, other, distinct=True)

    def union_all(self, other: Any) -> "Select":
        return self._compound(exp.Union, other, distinct=False)

    def intersect(self, other: Any) -> "Select":
        return self._compound(exp.Intersect, other, distinct=True)

    def except_(self, other: Any) -> "Select":
        return self._compound(exp.Except, other, distinct=True)

    def order_by(self, *columns: Union[str, exp.Expression]) -> "Select":
        query = self.get_expression()
        if not isinstance(query, exp.Query):
            msg = "ORDER BY is only allowed on queries"
            raise SQLBuilderError(msg)
        self._expression = query.order_by(*columns, dialect=self.dialect, copy=False)
        return self

    def limit(self, limit: int) -> "Select":
        if limit < 0:
            msg = f"LIMIT must not be negative, got {limit}"
            raise SQLBuilderError(msg)
        self._expression = self.get_expression().limit(limit, copy=False)  # type: ignore[attr-defined]
        return self

    def offset(self, offset: int) -> "Select":
        if offset < 0:
            msg = f"OFFSET must not be negative, got {offset}"
            raise SQLBuilderError(msg)
        self._expression = self.get_expression().offset(offset, copy=False)  # type: ignore[attr-defined]
        return self

    def get_expression(self) -> exp.Expression:
        expression = super().get_expression()
        if isinstance(expression, exp.Select) and not expression.expressions:
            msg = "SELECT requires at least one column"
            raise SQLBuilderError(msg)
        return expression
