"""Placeholder descriptors and parameter handling.

Components:
- ParameterStyle enum: Supported placeholder styles
- Argument: Describes one placeholder slot of a rendered statement
- extract_argument_names: Collects the names of a fully named placeholder list
- resolve_arguments: Builds positional values for non-bound execution
- coerce_parameters: Applies driver type coercion before execution
"""

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any, Optional

from mypy_extensions import mypyc_attr

from sqlbound.exceptions import ExtraParameterError, MissingParameterError, NamedArgRequiredError
from sqlbound.typing import Empty

__all__ = (
    "POSITIONAL_STYLES",
    "Argument",
    "ParameterStyle",
    "coerce_parameters",
    "extract_argument_names",
    "resolve_arguments",
)


class ParameterStyle(str, Enum):
    """Parameter style enumeration.

    Supported parameter styles:
    - QMARK: ? placeholders
    - NUMERIC: $1, $2 placeholders
    - POSITIONAL_COLON: :1, :2 placeholders
    - POSITIONAL_PYFORMAT: %s placeholders
    - NAMED_COLON: :name placeholders (input only)
    """

    QMARK = "qmark"
    NUMERIC = "numeric"
    POSITIONAL_COLON = "positional_colon"
    POSITIONAL_PYFORMAT = "pyformat_positional"
    NAMED_COLON = "named_colon"

    def marker(self, position: int) -> str:
        """Return the placeholder text for the 1-based ``position``.

        Raises:
            ValueError: The style is not positional.
        """
        if self is ParameterStyle.QMARK:
            return "?"
        if self is ParameterStyle.NUMERIC:
            return f"${position}"
        if self is ParameterStyle.POSITIONAL_COLON:
            return f":{position}"
        if self is ParameterStyle.POSITIONAL_PYFORMAT:
            return "%s"
        msg = f"Parameter style {self.value!r} is not positional"
        raise ValueError(msg)


POSITIONAL_STYLES: "frozenset[ParameterStyle]" = frozenset({
    ParameterStyle.QMARK,
    ParameterStyle.NUMERIC,
    ParameterStyle.POSITIONAL_COLON,
    ParameterStyle.POSITIONAL_PYFORMAT,
})


@mypyc_attr(allow_interpreted_subclasses=False)
class Argument:
    """One placeholder slot of a rendered statement.

    A slot is either named, filled at execution time from a value looked up
    by name, or anonymous. Anonymous slots written by a query builder carry
    their value; anonymous slots taken from raw SQL carry nothing and must be
    supplied positionally.

    Attributes:
        name: Placeholder name, None for anonymous placeholders
        value: Value captured when the query was built, ``Empty`` if none
        ordinal: Position of the slot in the rendered SQL (0-indexed)
    """

    __slots__ = ("name", "ordinal", "value")

    def __init__(self, name: "Optional[str]" = None, value: Any = Empty, ordinal: int = 0) -> None:
        self.name = name
        self.value = value
        self.ordinal = ordinal

    @property
    def is_named(self) -> bool:
        return self.name is not None

    @property
    def has_value(self) -> bool:
        return self.value is not Empty

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Argument):
            return NotImplemented
        return self.name == other.name and self.value == other.value and self.ordinal == other.ordinal

    def __hash__(self) -> int:
        return hash((self.name, self.ordinal))

    def __repr__(self) -> str:
        if self.is_named:
            return f"Argument(name={self.name!r}, ordinal={self.ordinal})"
        if self.has_value:
            return f"Argument(value={self.value!r}, ordinal={self.ordinal})"
        return f"Argument(ordinal={self.ordinal})"


def extract_argument_names(arguments: "Sequence[Argument]") -> "list[str]":
    """Return placeholder names in placeholder order.

    Args:
        arguments: Placeholder descriptors of a rendered statement.

    Raises:
        NamedArgRequiredError: A placeholder is anonymous. Raised for the first one found.

    Returns:
        The placeholder names, one per slot.
    """
    names: list[str] = []
    for argument in arguments:
        if argument.name is None:
            raise NamedArgRequiredError(argument)
        names.append(argument.name)
    return names


def resolve_arguments(
    arguments: "Sequence[Argument]",
    positional: "Sequence[Any]" = (),
    named: "Optional[Mapping[str, Any]]" = None,
    sql: "Optional[str]" = None,
) -> "list[Any]":
    """Build the positional value list of a statement executed without a binder.

    Args:
        arguments: Placeholder descriptors of the rendered statement.
        positional: Values for anonymous placeholders without a captured value.
        named: Values for named placeholders.
        sql: Rendered SQL, used for error context.

    Raises:
        MissingParameterError: A named value or a positional value is missing.
        ExtraParameterError: More positional values were given than there are slots for.

    Returns:
        One value per placeholder slot.
    """
    named = named or {}
    remaining = iter(positional)
    consumed = 0
    values: list[Any] = []
    for argument in arguments:
        if argument.name is not None:
            if argument.name not in named:
                msg = f"No value supplied for named parameter {argument.name!r}"
                raise MissingParameterError(msg, sql)
            values.append(named[argument.name])
        elif argument.has_value:
            values.append(argument.value)
        else:
            try:
                values.append(next(remaining))
            except StopIteration:
                msg = f"No value supplied for positional parameter at slot {argument.ordinal}"
                raise MissingParameterError(msg, sql) from None
            consumed += 1
    if consumed < len(positional):
        msg = f"{len(positional) - consumed} positional parameter(s) supplied but not used"
        raise ExtraParameterError(msg, sql)
    return values


def coerce_parameters(
    values: "Sequence[Any]", type_coercion_map: "Optional[Mapping[type, Callable[[Any], Any]]]"
) -> "list[Any]":
    """Apply driver type coercion to positional values.

    The most specific registered type of each value wins, so ``bool`` is not
    handled by an ``int`` entry.
    """
    if not type_coercion_map:
        return list(values)
    coerced: list[Any] = []
    for value in values:
        converter = None
        for klass in type(value).__mro__:
            converter = type_coercion_map.get(klass)
            if converter is not None:
                break
        coerced.append(value if converter is None else converter(value))
    return coerced
