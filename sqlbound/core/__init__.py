"""Core rendering, parameter and binding components."""

from sqlbound.core.binder import StructBinder, make_binder
from sqlbound.core.compiler import RenderedQuery, default_parameter_style, render, to_expression
from sqlbound.core.mapping import FieldInfo, FieldMapper, FieldMapping, default_field_mapper, get_field_names
from sqlbound.core.parameters import (
    Argument,
    ParameterStyle,
    coerce_parameters,
    extract_argument_names,
    resolve_arguments,
)
from sqlbound.core.statement import Query, QueryLike, StatementConfig

__all__ = (
    "Argument",
    "FieldInfo",
    "FieldMapper",
    "FieldMapping",
    "ParameterStyle",
    "Query",
    "QueryLike",
    "RenderedQuery",
    "StatementConfig",
    "StructBinder",
    "coerce_parameters",
    "default_field_mapper",
    "default_parameter_style",
    "extract_argument_names",
    "get_field_names",
    "make_binder",
    "render",
    "resolve_arguments",
    "to_expression",
)
