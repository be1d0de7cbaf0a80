"""Field mapping for bindable value types.

A field mapping is the ordered list of externally visible field names of a
type, together with the attribute (or key) each value is read from. Mappings
are computed once per type and cached by the owning :class:`FieldMapper`.
"""

import dataclasses
import threading
import typing
from collections.abc import Mapping
from typing import Any, ClassVar, Final, Optional

from mypy_extensions import mypyc_attr

from sqlbound.exceptions import ImproperConfigurationError
from sqlbound.utils.logging import get_logger
from sqlbound.utils.type_guards import (
    is_attrs_class,
    is_dataclass_type,
    is_msgspec_struct_type,
    is_namedtuple_type,
    is_pydantic_model_type,
    is_typed_dict_type,
)

__all__ = (
    "FIELD_NAME_KEY",
    "SKIP_FIELD",
    "FieldInfo",
    "FieldMapper",
    "FieldMapping",
    "default_field_mapper",
    "get_field_names",
)

logger = get_logger("core.mapping")

FIELD_NAME_KEY: Final = "db"
"""Field metadata key that overrides the bound name of a dataclass or attrs field."""
SKIP_FIELD: Final = "-"
"""Override value that removes a field from the mapping."""


@mypyc_attr(allow_interpreted_subclasses=False)
class FieldInfo:
    """A single bindable field.

    Attributes:
        name: Name the field is bound by.
        attribute: Attribute (or key) the value is read from.
        by_key: Read the value with item access instead of attribute access.
    """

    __slots__ = ("attribute", "by_key", "name")

    def __init__(self, name: str, attribute: str, by_key: bool = False) -> None:
        self.name = name
        self.attribute = attribute
        self.by_key = by_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldInfo):
            return NotImplemented
        return (self.name, self.attribute, self.by_key) == (other.name, other.attribute, other.by_key)

    def __hash__(self) -> int:
        return hash((self.name, self.attribute, self.by_key))

    def __repr__(self) -> str:
        return f"FieldInfo(name={self.name!r}, attribute={self.attribute!r}, by_key={self.by_key!r})"


def _type_name(type_: Any) -> str:
    return getattr(type_, "__qualname__", repr(type_))


@mypyc_attr(allow_interpreted_subclasses=False)
class FieldMapping:
    """Ordered, immutable field list of one type."""

    __slots__ = ("_by_name", "fields", "names", "type")

    def __init__(self, type_: type, fields: "tuple[FieldInfo, ...]") -> None:
        by_name: dict[str, FieldInfo] = {}
        for field in fields:
            if field.name in by_name:
                msg = f"Type {_type_name(type_)} maps more than one field to the name {field.name!r}"
                raise ImproperConfigurationError(msg)
            by_name[field.name] = field
        self.type = type_
        self.fields = fields
        self.names: tuple[str, ...] = tuple(field.name for field in fields)
        self._by_name = by_name

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"FieldMapping(type={_type_name(self.type)}, names={self.names!r})"

    def get(self, name: str) -> "Optional[FieldInfo]":
        return self._by_name.get(name)

    @staticmethod
    def read(obj: Any, field: FieldInfo) -> Any:
        """Read the value of ``field`` from ``obj``.

        Raises:
            KeyError: The field is read by key and the key is absent.
            AttributeError: The field is read by attribute and the attribute is absent.
        """
        if field.by_key or isinstance(obj, Mapping):
            return obj[field.attribute]
        return getattr(obj, field.attribute)


def _is_exported(name: str) -> bool:
    return not name.startswith("_")


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or typing.get_origin(annotation) is ClassVar


def _override(name: str, metadata: "Mapping[str, Any]") -> "Optional[str]":
    override = metadata.get(FIELD_NAME_KEY, name)
    if override == SKIP_FIELD:
        return None
    return str(override)


def _dataclass_fields(type_: type) -> "list[FieldInfo]":
    result = []
    for field in dataclasses.fields(type_):
        if not _is_exported(field.name):
            continue
        name = _override(field.name, field.metadata)
        if name is not None:
            result.append(FieldInfo(name, field.name))
    return result


def _attrs_fields(type_: type) -> "list[FieldInfo]":
    import attrs

    result = []
    for field in attrs.fields(type_):
        if not _is_exported(field.name):
            continue
        name = _override(field.name, field.metadata)
        if name is not None:
            result.append(FieldInfo(name, field.name))
    return result


def _msgspec_fields(type_: type) -> "list[FieldInfo]":
    attributes: tuple[str, ...] = type_.__struct_fields__  # type: ignore[attr-defined]
    encoded: tuple[str, ...] = type_.__struct_encode_fields__  # type: ignore[attr-defined]
    return [
        FieldInfo(name, attribute) for attribute, name in zip(attributes, encoded) if _is_exported(attribute)
    ]


def _pydantic_fields(type_: type) -> "list[FieldInfo]":
    model_fields: dict[str, Any] = type_.model_fields  # type: ignore[attr-defined]
    return [
        FieldInfo(info.alias or attribute, attribute)
        for attribute, info in model_fields.items()
        if _is_exported(attribute)
    ]


def _annotated_fields(type_: type, *, by_key: bool = False) -> "list[FieldInfo]":
    annotations: dict[str, Any] = {}
    for klass in reversed(type_.__mro__):
        annotations.update(getattr(klass, "__annotations__", None) or {})
    return [
        FieldInfo(attribute, attribute, by_key=by_key)
        for attribute, annotation in annotations.items()
        if _is_exported(attribute) and not _is_class_var(annotation)
    ]


def _collect_fields(type_: type) -> "list[FieldInfo]":
    if is_pydantic_model_type(type_):
        return _pydantic_fields(type_)
    if is_msgspec_struct_type(type_):
        return _msgspec_fields(type_)
    if is_attrs_class(type_):
        return _attrs_fields(type_)
    if is_dataclass_type(type_):
        return _dataclass_fields(type_)
    if is_namedtuple_type(type_):
        return [FieldInfo(name, name) for name in type_._fields if _is_exported(name)]  # type: ignore[attr-defined]
    if is_typed_dict_type(type_):
        return [FieldInfo(name, name, by_key=True) for name in type_.__annotations__ if _is_exported(name)]
    if isinstance(type_, type):
        return _annotated_fields(type_)
    return []


@mypyc_attr(allow_interpreted_subclasses=False)
class FieldMapper:
    """Per-type cache of field mappings.

    Mappings are built on first use of a type and kept for the lifetime of the
    mapper. Lookups never take the lock once a type is cached; a lock guards
    insertion so concurrent first use cannot leave two mappings for one type.
    """

    __slots__ = ("_cache", "_lock")

    def __init__(self) -> None:
        self._cache: dict[Any, FieldMapping] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, type_: object) -> bool:
        return type_ in self._cache

    def get_mapping(self, type_: Any) -> FieldMapping:
        """Return the cached field mapping of ``type_``, building it on first use.

        Args:
            type_: The value type to map.

        Raises:
            ImproperConfigurationError: Two fields of the type resolve to the same name.

        Returns:
            The field mapping of the type.
        """
        mapping = self._cache.get(type_)
        if mapping is not None:
            return mapping
        with self._lock:
            mapping = self._cache.get(type_)
            if mapping is None:
                mapping = FieldMapping(type_, tuple(_collect_fields(type_)))
                self._cache[type_] = mapping
                logger.debug("Mapped %d fields of %r", len(mapping), type_)
        return mapping

    def field_names(self, type_: Any) -> "tuple[str, ...]":
        """Return the ordered bindable field names of ``type_``."""
        return self.get_mapping(type_).names

    def clear(self) -> None:
        """Drop every cached mapping."""
        with self._lock:
            self._cache.clear()


default_field_mapper = FieldMapper()


def get_field_names(type_: Any) -> "tuple[str, ...]":
    """Return the ordered bindable field names of ``type_`` from the default mapper."""
    return default_field_mapper.field_names(type_)
