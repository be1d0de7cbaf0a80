"""Query and statement configuration objects."""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlglot import exp

from sqlbound.core.compiler import RenderedQuery, default_parameter_style, render, to_expression
from sqlbound.core.mapping import FieldMapper, default_field_mapper
from sqlbound.core.parameters import ParameterStyle

if TYPE_CHECKING:
    from sqlglot.dialects.dialect import DialectType

__all__ = ("Query", "QueryLike", "StatementConfig")


class Query:
    """A SQL statement waiting to be rendered.

    Wraps SQL text or a sqlglot expression together with the dialect it is
    written in. Text is parsed once, on first use.
    """

    __slots__ = ("_expression", "_statement", "dialect")

    def __init__(self, statement: "Union[str, exp.Expression]", dialect: "DialectType" = None) -> None:
        self._statement = statement
        self._expression: Optional[exp.Expression] = statement if isinstance(statement, exp.Expression) else None
        self.dialect = dialect

    def __repr__(self) -> str:
        return f"Query({self.sql!r}, dialect={self.dialect!r})"

    def __str__(self) -> str:
        return self.sql

    def get_expression(self) -> exp.Expression:
        if self._expression is None:
            self._expression = to_expression(self._statement, self.dialect)
        return self._expression

    @property
    def expression(self) -> exp.Expression:
        return self.get_expression()

    @property
    def sql(self) -> str:
        """SQL text as written, or as generated from the expression."""
        if isinstance(self._statement, str):
            return self._statement
        return self._statement.sql(dialect=self.dialect)

    def render(
        self,
        start: int = 1,
        parameter_style: "Optional[Union[ParameterStyle, str]]" = None,
        pretty: bool = False,
    ) -> RenderedQuery:
        return render(self, self.dialect, start=start, parameter_style=parameter_style, pretty=pretty)


QueryLike = Union[str, exp.Expression, Query, Any]
"""Anything :func:`~sqlbound.core.compiler.render` accepts."""


class StatementConfig:
    """Driver level settings for rendering and executing statements.

    Attributes:
        dialect: Dialect statements are rendered for
        parameter_style: Placeholder style the driver executes, defaults to the dialect's
        type_coercion_map: Converters applied to values before execution, keyed by type
        pretty: Render multi-line SQL
        field_mapper: Field mapping cache used when binding value objects
    """

    __slots__ = ("dialect", "field_mapper", "parameter_style", "pretty", "type_coercion_map")

    def __init__(
        self,
        dialect: "DialectType" = None,
        parameter_style: "Optional[ParameterStyle]" = None,
        type_coercion_map: "Optional[Mapping[type, Callable[[Any], Any]]]" = None,
        pretty: bool = False,
        field_mapper: "Optional[FieldMapper]" = None,
    ) -> None:
        self.dialect = dialect
        self.parameter_style = parameter_style
        self.type_coercion_map: dict[type, Callable[[Any], Any]] = dict(type_coercion_map or {})
        self.pretty = pretty
        self.field_mapper = field_mapper if field_mapper is not None else default_field_mapper

    def __repr__(self) -> str:
        return (
            f"StatementConfig(dialect={self.dialect!r}, parameter_style={self.output_style.value!r}, "
            f"pretty={self.pretty!r})"
        )

    @property
    def output_style(self) -> ParameterStyle:
        return self.parameter_style or default_parameter_style(self.dialect)

    def replace(self, **kwargs: Any) -> "StatementConfig":
        """Return a copy with the given attributes replaced."""
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(kwargs)
        return StatementConfig(**values)

    def render(self, query: "QueryLike") -> RenderedQuery:
        """Render ``query`` for this configuration's dialect and placeholder style."""
        return render(query, self.dialect, parameter_style=self.output_style, pretty=self.pretty)
