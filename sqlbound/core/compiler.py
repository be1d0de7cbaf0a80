"""SQL rendering.

Turns a query (raw SQL text, a sqlglot expression, a :class:`~sqlbound.core.statement.Query`
or a query builder) into dialect SQL text with positional placeholders plus the
ordered list of placeholder descriptors.
"""

import re
from typing import TYPE_CHECKING, Any, Final, Optional, Union

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

from sqlbound.core.parameters import POSITIONAL_STYLES, Argument, ParameterStyle
from sqlbound.exceptions import SQLBuilderError, SQLParsingError
from sqlbound.typing import Empty

if TYPE_CHECKING:
    from sqlglot.dialects.dialect import DialectType

__all__ = (
    "DEFAULT_DIALECT_STYLES",
    "VALUE_META_KEY",
    "RenderedQuery",
    "default_parameter_style",
    "render",
    "to_expression",
)

VALUE_META_KEY: Final = "sqlbound_value"
"""Key of a placeholder node's ``meta`` holding a value captured at build time."""

DEFAULT_DIALECT_STYLES: "Final[dict[str, ParameterStyle]]" = {
    "sqlite": ParameterStyle.QMARK,
    "duckdb": ParameterStyle.QMARK,
    "mysql": ParameterStyle.POSITIONAL_PYFORMAT,
    "postgres": ParameterStyle.NUMERIC,
    "oracle": ParameterStyle.POSITIONAL_COLON,
}

_SENTINEL_TEMPLATE: Final = "__sqlbound_arg_{}__"
_SENTINEL_PATTERN: Final = re.compile(r"__sqlbound_arg_(\d+)__")


class RenderedQuery:
    """Rendered SQL text and its placeholder descriptors.

    Attributes:
        sql: SQL text with positional placeholders
        arguments: One descriptor per placeholder, in order of appearance
        dialect: Dialect the SQL was rendered for
        parameter_style: Placeholder style used in ``sql``
    """

    __slots__ = ("arguments", "dialect", "parameter_style", "sql")

    def __init__(
        self,
        sql: str,
        arguments: "tuple[Argument, ...]",
        dialect: "DialectType" = None,
        parameter_style: ParameterStyle = ParameterStyle.QMARK,
    ) -> None:
        self.sql = sql
        self.arguments = arguments
        self.dialect = dialect
        self.parameter_style = parameter_style

    def __iter__(self) -> Any:
        yield self.sql
        yield self.arguments

    def __repr__(self) -> str:
        return f"RenderedQuery(sql={self.sql!r}, arguments={self.arguments!r})"


def default_parameter_style(dialect: "DialectType" = None) -> ParameterStyle:
    """Return the positional placeholder style used for ``dialect``."""
    if dialect is None:
        return ParameterStyle.QMARK
    name = dialect if isinstance(dialect, str) else type(dialect).__name__
    return DEFAULT_DIALECT_STYLES.get(name.lower(), ParameterStyle.QMARK)


def to_expression(query: Any, dialect: "DialectType" = None) -> exp.Expression:
    """Return the sqlglot expression of ``query``.

    Args:
        query: SQL text, a sqlglot expression or an object exposing ``get_expression()``.
        dialect: Dialect used to parse SQL text.

    Raises:
        SQLParsingError: The SQL text cannot be parsed.
        SQLBuilderError: The object is not a query.

    Returns:
        The sqlglot expression.
    """
    if isinstance(query, exp.Expression):
        return query
    if isinstance(query, str):
        try:
            expression = sqlglot.parse_one(query, read=dialect)
        except ParseError as e:
            msg = f"Failed to parse SQL: {e}"
            raise SQLParsingError(msg) from e
        if expression is None:
            msg = "SQL text contains no statement"
            raise SQLParsingError(msg)
        return expression
    get_expression = getattr(query, "get_expression", None)
    if callable(get_expression):
        return get_expression()
    msg = f"Cannot render object of type {type(query).__name__} as SQL"
    raise SQLBuilderError(msg)


def _is_slot(node: exp.Expression) -> bool:
    if isinstance(node, exp.Placeholder):
        return True
    # $1 style parameters
    return isinstance(node, exp.Parameter) and node.name.isdigit()


def _describe(node: exp.Expression) -> "tuple[Optional[str], Any]":
    value = node.meta.get(VALUE_META_KEY, Empty)
    if isinstance(node, exp.Placeholder):
        name = node.name
        if name and not name.isdigit():
            return name, value
    return None, value


def render(
    query: Any,
    dialect: "DialectType" = None,
    start: int = 1,
    parameter_style: "Optional[Union[ParameterStyle, str]]" = None,
    pretty: bool = False,
) -> RenderedQuery:
    """Render ``query`` to SQL text with positional placeholders.

    Placeholders are numbered by their order of appearance in the rendered
    text, beginning at ``start``.

    Args:
        query: Query to render.
        dialect: Target dialect. Defaults to the query's own dialect.
        start: Number of the first placeholder for numbered styles.
        parameter_style: Output placeholder style. Defaults to the dialect's style.
        pretty: Render multi-line SQL.

    Raises:
        SQLBuilderError: The output style is not positional.

    Returns:
        The rendered query.
    """
    if dialect is None:
        dialect = getattr(query, "dialect", None)
    style = ParameterStyle(parameter_style) if parameter_style is not None else default_parameter_style(dialect)
    if style not in POSITIONAL_STYLES:
        msg = f"Cannot render placeholders in non-positional style {style.value!r}"
        raise SQLBuilderError(msg)

    expression = to_expression(query, dialect)
    slots = [_describe(node) for node in expression.walk(bfs=False) if _is_slot(node)]
    if not slots:
        return RenderedQuery(expression.sql(dialect=dialect, pretty=pretty), (), dialect, style)

    rendered = expression.copy()
    for index, node in enumerate([node for node in rendered.walk(bfs=False) if _is_slot(node)]):
        node.replace(exp.var(_SENTINEL_TEMPLATE.format(index)))

    arguments: list[Argument] = []

    def _substitute(match: "re.Match[str]") -> str:
        name, value = slots[int(match.group(1))]
        arguments.append(Argument(name=name, value=value, ordinal=len(arguments)))
        return style.marker(start + len(arguments) - 1)

    sql = _SENTINEL_PATTERN.sub(_substitute, rendered.sql(dialect=dialect, pretty=pretty))
    return RenderedQuery(sql, tuple(arguments), dialect, style)
