"""Shared type variables, aliases and optional-dependency flags."""

from typing import Any

from typing_extensions import TypeAlias, TypeVar

from sqlbound.utils.module_loader import module_available

__all__ = (
    "AIOSQLITE_INSTALLED",
    "ATTRS_INSTALLED",
    "MSGSPEC_INSTALLED",
    "PYDANTIC_INSTALLED",
    "ArgT",
    "CollectionT",
    "ConnectionT",
    "DictRow",
    "Empty",
    "EmptyType",
    "RowT",
)

PYDANTIC_INSTALLED: bool = module_available("pydantic")
MSGSPEC_INSTALLED: bool = module_available("msgspec")
ATTRS_INSTALLED: bool = module_available("attrs")
AIOSQLITE_INSTALLED: bool = module_available("aiosqlite")


class EmptyType:
    """Sentinel type marking an absent value where ``None`` is a valid value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False


Empty = EmptyType()

ArgT = TypeVar("ArgT")
"""Type of the value object bound to a statement's named placeholders."""
RowT = TypeVar("RowT", default=dict[str, Any])
"""Type of a single mapped result row."""
CollectionT = TypeVar("CollectionT", default=list[Any])
"""Type of the collection returned by a fetch-all operation."""
ConnectionT = TypeVar("ConnectionT")

DictRow: TypeAlias = dict[str, Any]
