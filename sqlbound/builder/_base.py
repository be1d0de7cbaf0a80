"""Base class and value helpers of the query builders."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlglot import exp
from sqlglot.errors import ParseError

from sqlbound.core.compiler import VALUE_META_KEY, render
from sqlbound.core.statement import Query
from sqlbound.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from sqlglot.dialects.dialect import DialectType

    from sqlbound.core.compiler import RenderedQuery
    from sqlbound.core.parameters import ParameterStyle

__all__ = ("QueryBuilder", "arg", "named_arg")


def arg(value: Any) -> exp.Placeholder:
    """Return an anonymous placeholder carrying ``value``.

    The value is passed to the database when the query runs, it is never
    inlined in the SQL text.
    """
    placeholder = exp.Placeholder()
    placeholder.meta[VALUE_META_KEY] = value
    return placeholder


def named_arg(name: str) -> exp.Placeholder:
    """Return a placeholder named ``name``, filled at execution time."""
    if not name:
        msg = "named_arg requires a non-empty name"
        raise SQLBuilderError(msg)
    return exp.Placeholder(this=name)


@dataclass
class QueryBuilder:
    """Base class for SQL query builders."""

    dialect: "Optional[DialectType]" = None
    _expression: Optional[exp.Expression] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self._expression = self._create_base_expression()

    def _create_base_expression(self) -> exp.Expression:
        """Create the base expression for this builder type."""
        msg = "Subclasses must implement _create_base_expression"
        raise NotImplementedError(msg)

    def _parse_condition(self, condition: "Union[str, exp.Expression]") -> exp.Expression:
        if isinstance(condition, exp.Expression):
            return condition
        try:
            return exp.condition(condition, dialect=self.dialect)
        except ParseError as e:
            msg = f"Invalid condition {condition!r}: {e}"
            raise SQLBuilderError(msg) from e

    def _value(self, value: Any) -> exp.Expression:
        """Return the expression for a value, wrapping plain values in placeholders."""
        if isinstance(value, exp.Expression):
            return value
        if isinstance(value, QueryBuilder):
            return exp.Subquery(this=value.get_expression())
        return arg(value)

    def get_expression(self) -> exp.Expression:
        """Return the sqlglot expression built so far.

        Raises:
            SQLBuilderError: The statement is incomplete.
        """
        if self._expression is None:
            msg = "No expression to build"
            raise SQLBuilderError(msg)
        return self._expression

    def to_query(self) -> Query:
        return Query(self.get_expression(), self.dialect)

    def render(
        self,
        start: int = 1,
        parameter_style: "Optional[Union[ParameterStyle, str]]" = None,
        pretty: bool = False,
    ) -> "RenderedQuery":
        """Render the query with positional placeholders."""
        return render(self, self.dialect, start=start, parameter_style=parameter_style, pretty=pretty)

    def __str__(self) -> str:
        return self.render().sql
