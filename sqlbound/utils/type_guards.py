"""Type guards for the value objects sqlbound binds and produces."""

import dataclasses
from typing import TYPE_CHECKING, Any

from typing_extensions import is_typeddict

from sqlbound.typing import ATTRS_INSTALLED, MSGSPEC_INSTALLED, PYDANTIC_INSTALLED

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "is_attrs_class",
    "is_dataclass_type",
    "is_dict_row",
    "is_msgspec_struct_type",
    "is_namedtuple_type",
    "is_pydantic_model_type",
    "is_typed_dict_type",
)


def is_dataclass_type(obj: Any) -> bool:
    """Check if an object is a dataclass type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def is_namedtuple_type(obj: Any) -> bool:
    """Check if an object is a ``NamedTuple`` type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and issubclass(obj, tuple) and hasattr(obj, "_fields")


def is_typed_dict_type(obj: Any) -> bool:
    """Check if an object is a ``TypedDict`` type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return is_typeddict(obj)


def is_msgspec_struct_type(obj: Any) -> bool:
    """Check if an object is a msgspec ``Struct`` type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not MSGSPEC_INSTALLED or not isinstance(obj, type):
        return False
    from msgspec import Struct

    return issubclass(obj, Struct)


def is_pydantic_model_type(obj: Any) -> bool:
    """Check if an object is a pydantic model type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not PYDANTIC_INSTALLED or not isinstance(obj, type):
        return False
    from pydantic import BaseModel

    return issubclass(obj, BaseModel)


def is_attrs_class(obj: Any) -> bool:
    """Check if an object is an attrs class.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not ATTRS_INSTALLED or not isinstance(obj, type):
        return False
    import attrs

    return attrs.has(obj)


def is_dict_row(row: Any) -> "TypeGuard[dict[str, Any]]":
    """Check if a row is a dictionary.

    Args:
        row: Value to check.

    Returns:
        bool
    """
    return isinstance(row, dict)
