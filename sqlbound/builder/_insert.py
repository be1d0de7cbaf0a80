"""INSERT statement builder."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from sqlglot import exp

from sqlbound.builder._base import QueryBuilder
from sqlbound.exceptions import SQLBuilderError

__all__ = ("Insert",)


@dataclass
class Insert(QueryBuilder):
    """Builder for INSERT statements.

    Rows added with :meth:`values` are passed to the database as placeholder
    values; :func:`~sqlbound.builder.named_arg` expressions stay named.
    """

    table: Optional[str] = None
    _columns: "list[str]" = field(default_factory=list, init=False, repr=False)
    _rows: "list[list[exp.Expression]]" = field(default_factory=list, init=False, repr=False)
    _returning: "list[Union[str, exp.Expression]]" = field(default_factory=list, init=False, repr=False)

    def _create_base_expression(self) -> exp.Expression:
        return exp.Insert()

    def into(self, table: str) -> "Insert":
        self.table = table
        return self

    def columns(self, *columns: str) -> "Insert":
        if self._rows:
            msg = "Columns must be set before values are added"
            raise SQLBuilderError(msg)
        self._columns = list(columns)
        return self

    def values(self, *values: Any) -> "Insert":
        """Add one row of values.

        Raises:
            SQLBuilderError: The number of values differs from the number of columns.
        """
        if not values:
            msg = "values() requires at least one value"
            raise SQLBuilderError(msg)
        width = len(self._columns) or (len(self._rows[0]) if self._rows else len(values))
        if len(values) != width:
            msg = f"Expected {width} values, got {len(values)}"
            raise SQLBuilderError(msg)
        self._rows.append([self._value(value) for value in values])
        return self

    def values_from_dict(self, row: "Mapping[str, Any]") -> "Insert":
        """Add one row from a column to value mapping."""
        if not self._columns:
            self._columns = list(row)
        try:
            return self.values(*(row[column] for column in self._columns))
        except KeyError as e:
            msg = f"Row is missing column {e.args[0]!r}"
            raise SQLBuilderError(msg) from e

    def returning(self, *columns: Union[str, exp.Expression]) -> "Insert":
        self._returning.extend(columns)
        return self

    def get_expression(self) -> exp.Expression:
        if not self.table:
            msg = "INSERT requires a target table"
            raise SQLBuilderError(msg)
        if not self._rows:
            msg = "INSERT requires at least one row of values"
            raise SQLBuilderError(msg)
        target: exp.Expression = exp.to_table(self.table, dialect=self.dialect)
        if self._columns:
            target = exp.Schema(this=target, expressions=[exp.to_identifier(column) for column in self._columns])
        values = exp.Values(expressions=[exp.Tuple(expressions=row) for row in self._rows])
        insert = exp.Insert(this=target, expression=values)
        if self._returning:
            insert = insert.returning(*self._returning, dialect=self.dialect, copy=False)
        return insert
