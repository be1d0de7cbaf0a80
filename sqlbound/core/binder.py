"""Binding of value objects to named placeholders.

A binder is built once per prepared statement from the statement's
placeholder descriptors and the field mapping of an argument type. Each
execution then turns one value object into the positional value list the
database expects.
"""

from collections.abc import Sequence
from typing import Any, Generic, Optional

from mypy_extensions import mypyc_attr

from sqlbound.core.mapping import FieldInfo, FieldMapper, FieldMapping, default_field_mapper
from sqlbound.core.parameters import Argument, extract_argument_names
from sqlbound.exceptions import MissingArgError, NilArgumentError
from sqlbound.typing import ArgT
from sqlbound.utils.logging import get_logger

__all__ = ("StructBinder", "make_binder")

logger = get_logger("core.binder")


@mypyc_attr(allow_interpreted_subclasses=False)
class StructBinder(Generic[ArgT]):
    """Maps the named placeholders of a statement to fields of ``ArgT``.

    ``args[i]`` is the name of placeholder ``i`` and ``fields[i]`` names the
    field that supplies its value. Binders hold no mutable state and can be
    shared by concurrent executions.

    Attributes:
        arg_type: The bound value type
        args: Placeholder names, in placeholder order
        fields: Field names supplying each placeholder, index-aligned with ``args``
    """

    __slots__ = ("_mapping", "arg_type", "args", "fields")

    def __init__(
        self, arg_type: "type[ArgT]", args: "Sequence[str]", fields: "Sequence[str]", mapping: FieldMapping
    ) -> None:
        self.arg_type = arg_type
        self.args: tuple[str, ...] = tuple(args)
        self.fields: tuple[str, ...] = tuple(fields)
        self._mapping = mapping

    def __len__(self) -> int:
        return len(self.args)

    @property
    def type_name(self) -> str:
        return getattr(self.arg_type, "__qualname__", repr(self.arg_type))

    def __repr__(self) -> str:
        return f"StructBinder[{self.type_name}](args={self.args!r}, fields={self.fields!r})"

    def _find_field(self, name: str) -> "Optional[FieldInfo]":
        for field_name in self.fields:
            if field_name == name:
                return self._mapping.get(field_name)
        return None

    def to_args(self, arg: "ArgT") -> "list[Any]":
        """Return the positional values for one execution.

        Args:
            arg: The value object to read fields from.

        Raises:
            NilArgumentError: ``arg`` is None.
            MissingArgError: A placeholder's field cannot be read from ``arg``.

        Returns:
            One value per placeholder, in placeholder order.
        """
        if arg is None:
            raise NilArgumentError

        values: list[Any] = [None] * len(self.args)
        for index, name in enumerate(self.args):
            field = self._find_field(name)
            if field is None:
                raise MissingArgError(name)
            try:
                values[index] = self._mapping.read(arg, field)
            except (AttributeError, KeyError) as e:
                raise MissingArgError(name) from e
        return values


def make_binder(
    arg_type: "type[ArgT]", arguments: "Sequence[Argument]", field_mapper: "Optional[FieldMapper]" = None
) -> "StructBinder[ArgT]":
    """Build the binder of a statement for ``arg_type``.

    Args:
        arg_type: The value type executions will receive.
        arguments: Placeholder descriptors of the rendered statement.
        field_mapper: Field mapping cache. Defaults to the process-wide mapper.

    Raises:
        NamedArgRequiredError: A placeholder is anonymous.
        MissingArgError: A placeholder name matches no field of ``arg_type``.

    Returns:
        The binder.
    """
    names = extract_argument_names(arguments)
    mapping = (field_mapper if field_mapper is not None else default_field_mapper).get_mapping(arg_type)

    fields: list[str] = []
    for name in names:
        if name not in mapping:
            raise MissingArgError(name)
        fields.append(name)

    binder = StructBinder(arg_type, names, fields, mapping)
    logger.debug("Built %r", binder)
    return binder
