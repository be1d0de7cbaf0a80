"""DELETE statement builder."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from sqlglot import exp

from sqlbound.builder._base import QueryBuilder
from sqlbound.exceptions import SQLBuilderError

__all__ = ("Delete",)


@dataclass
class Delete(QueryBuilder):
    """Builder for DELETE statements."""

    table: Optional[str] = None
    _conditions: "list[exp.Expression]" = field(default_factory=list, init=False, repr=False)
    _returning: "list[Union[str, exp.Expression]]" = field(default_factory=list, init=False, repr=False)

    def _create_base_expression(self) -> exp.Expression:
        return exp.Delete()

    def from_(self, table: str) -> "Delete":
        self.table = table
        return self

    def where(self, *conditions: Union[str, exp.Expression]) -> "Delete":
        self._conditions.extend(self._parse_condition(condition) for condition in conditions)
        return self

    def where_eq(self, column: str, value: Any) -> "Delete":
        return self.where(exp.EQ(this=exp.to_column(column), expression=self._value(value)))

    def returning(self, *columns: Union[str, exp.Expression]) -> "Delete":
        self._returning.extend(columns)
        return self

    def get_expression(self) -> exp.Expression:
        if not self.table:
            msg = "DELETE requires a target table"
            raise SQLBuilderError(msg)
        delete = exp.Delete(this=exp.to_table(self.table, dialect=self.dialect))
        if self._conditions:
            delete.set("where", exp.Where(this=exp.and_(*self._conditions, copy=False)))
        if self._returning:
            delete = delete.returning(*self._returning, dialect=self.dialect, copy=False)
        return delete
