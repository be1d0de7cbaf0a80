"""Shared driver types and helpers."""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Union

from mypy_extensions import trait

from sqlbound.core.parameters import coerce_parameters, resolve_arguments
from sqlbound.typing import DictRow
from sqlbound.utils.schema import schema_mapper
from sqlbound.utils.type_guards import is_dict_row

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlbound.core.compiler import RenderedQuery
    from sqlbound.core.statement import QueryLike, StatementConfig

__all__ = (
    "CommonDriverAttributesMixin",
    "ErrorStatement",
    "ExecResult",
    "RowMapper",
    "column_names",
    "make_row_mapper",
    "row_to_dict",
)

RowMapper = Callable[["dict[str, Any]"], Any]
"""Converts one result row, as a column name to value dictionary, to the caller's row type."""


class ExecResult(NamedTuple):
    """Outcome of a statement that produces no rows.

    Attributes:
        rows_affected: Number of rows changed, as reported by the driver
        last_insert_id: Row id of the last inserted row, when the driver reports one
    """

    rows_affected: int
    last_insert_id: Optional[Union[int, str]] = None


class ErrorStatement:
    """Stand-in for a prepared statement that could not be obtained.

    Bound statements holding an ``ErrorStatement`` raise its error from every
    operation, so the failure is reported where the statement is used.
    """

    __slots__ = ("error",)

    def __init__(self, error: Exception) -> None:
        self.error = error

    def __repr__(self) -> str:
        return f"ErrorStatement({self.error!r})"


def column_names(cursor: Any) -> "list[str]":
    return [column[0] for column in cursor.description or ()]


def row_to_dict(columns: "Sequence[str]", row: Any) -> DictRow:
    if is_dict_row(row):
        return row
    return dict(zip(columns, row))


def make_row_mapper(schema_type: "Optional[type[Any]]" = None, mapper: "Optional[RowMapper]" = None) -> RowMapper:
    """Return ``mapper`` when given, otherwise a mapper converting rows to ``schema_type``."""
    if mapper is not None:
        return mapper
    return schema_mapper(schema_type)


@trait
class CommonDriverAttributesMixin:
    """Common attributes and methods for driver adapters."""

    __slots__ = ("connection", "driver_features", "statement_config")
    connection: "Any"
    statement_config: "StatementConfig"
    driver_features: "dict[str, Any]"

    def __init__(
        self, connection: "Any", statement_config: "StatementConfig", driver_features: "Optional[dict[str, Any]]" = None
    ) -> None:
        """Initialize driver adapter with connection and configuration.

        Args:
            connection: Database connection instance
            statement_config: Statement configuration for the driver
            driver_features: Driver-specific features
        """
        self.connection = connection
        self.statement_config = statement_config
        self.driver_features = driver_features or {}

    @property
    def dialect(self) -> Any:
        return self.statement_config.dialect

    def render(self, query: "QueryLike") -> "RenderedQuery":
        """Render ``query`` with this driver's statement configuration."""
        return self.statement_config.render(query)

    def prepare_parameters(self, values: "Sequence[Any]") -> "list[Any]":
        """Apply the driver's type coercion to positional values."""
        return coerce_parameters(values, self.statement_config.type_coercion_map)

    def resolve_parameters(
        self, rendered: "RenderedQuery", positional: "Sequence[Any]", named: "Mapping[str, Any]"
    ) -> "list[Any]":
        """Return the positional values of a statement executed without a binder."""
        return resolve_arguments(rendered.arguments, positional, named, rendered.sql)
