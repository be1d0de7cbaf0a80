"""UPDATE statement builder."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from sqlglot import exp

from sqlbound.builder._base import QueryBuilder
from sqlbound.exceptions import SQLBuilderError

__all__ = ("Update",)


@dataclass
class Update(QueryBuilder):
    """Builder for UPDATE statements."""

    table: Optional[str] = None
    _assignments: "list[exp.Expression]" = field(default_factory=list, init=False, repr=False)
    _conditions: "list[exp.Expression]" = field(default_factory=list, init=False, repr=False)
    _returning: "list[Union[str, exp.Expression]]" = field(default_factory=list, init=False, repr=False)

    def _create_base_expression(self) -> exp.Expression:
        return exp.Update()

    def set(self, column: str, value: Any) -> "Update":
        """Assign ``value`` to ``column``.

        Plain values become placeholders; sqlglot expressions are used as given.
        """
        self._assignments.append(exp.EQ(this=exp.to_column(column), expression=self._value(value)))
        return self

    def where(self, *conditions: Union[str, exp.Expression]) -> "Update":
        self._conditions.extend(self._parse_condition(condition) for condition in conditions)
        return self

    def where_eq(self, column: str, value: Any) -> "Update":
        return self.where(exp.EQ(this=exp.to_column(column), expression=self._value(value)))

    def returning(self, *columns: Union[str, exp.Expression]) -> "Update":
        self._returning.extend(columns)
        return self

    def get_expression(self) -> exp.Expression:
        if not self.table:
            msg = "UPDATE requires a target table"
            raise SQLBuilderError(msg)
        if not self._assignments:
            msg = "UPDATE requires at least one SET assignment"
            raise SQLBuilderError(msg)
        update = exp.Update(this=exp.to_table(self.table, dialect=self.dialect), expressions=list(self._assignments))
        if self._conditions:
            update.set("where", exp.Where(this=exp.and_(*self._conditions, copy=False)))
        if self._returning:
            update = update.returning(*self._returning, dialect=self.dialect, copy=False)
        return update
