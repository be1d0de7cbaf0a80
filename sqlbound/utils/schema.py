"""Schema transformation utilities for converting result rows to typed values."""

from collections.abc import Callable
from functools import partial
from typing import Any, Optional, cast

import msgspec

from sqlbound.exceptions import SQLBoundError
from sqlbound.typing import RowT
from sqlbound.utils.type_guards import (
    is_attrs_class,
    is_dataclass_type,
    is_msgspec_struct_type,
    is_namedtuple_type,
    is_pydantic_model_type,
    is_typed_dict_type,
)

__all__ = ("schema_mapper", "to_schema")


def to_schema(row: "dict[str, Any]", schema_type: "Optional[type[RowT]]" = None) -> "RowT":
    """Convert a row dictionary to ``schema_type``.

    Args:
        row: Column name to value mapping of one result row.
        schema_type: Target type. ``None`` and ``dict`` return the row unchanged.

    Raises:
        SQLBoundError: The row cannot be converted to ``schema_type``.

    Returns:
        The converted row.
    """
    if schema_type is None or schema_type is dict or is_typed_dict_type(schema_type):
        return cast("RowT", row)
    try:
        if is_msgspec_struct_type(schema_type):
            return msgspec.convert(row, type=schema_type, from_attributes=True, strict=False)
        if is_pydantic_model_type(schema_type):
            return cast("RowT", schema_type.model_validate(row))  # type: ignore[attr-defined]
        if is_dataclass_type(schema_type) or is_attrs_class(schema_type) or is_namedtuple_type(schema_type):
            return schema_type(**row)
    except (TypeError, ValueError, msgspec.ValidationError) as e:
        msg = f"Cannot convert row to {schema_type.__name__}: {e}"
        raise SQLBoundError(msg) from e
    msg = f"`schema_type` should be a valid Dataclass, Pydantic model, Msgspec struct, attrs class or NamedTuple: {schema_type!r}"
    raise SQLBoundError(msg)


def schema_mapper(schema_type: "Optional[type[RowT]]" = None) -> "Callable[[dict[str, Any]], RowT]":
    """Return a row mapper converting row dictionaries to ``schema_type``."""
    return partial(to_schema, schema_type=schema_type)
