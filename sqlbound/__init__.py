"""sqlbound: prepared SQL statements bound to typed value objects."""

from sqlbound import adapters, bound, builder, core, driver, exceptions, typing, utils
from sqlbound.__metadata__ import __version__
from sqlbound.bound import (
    AsyncBoundQueryStatement,
    AsyncBoundStatement,
    BoundQueryStatement,
    BoundStatement,
    prepare_async_bound,
    prepare_async_bound_query,
    prepare_bound,
    prepare_bound_query,
)
from sqlbound.builder import Delete, Insert, QueryBuilder, Select, Update, arg, named_arg
from sqlbound.config import NoPoolAsyncConfig, NoPoolSyncConfig
from sqlbound.core import (
    FieldMapper,
    ParameterStyle,
    Query,
    StatementConfig,
    StructBinder,
    default_field_mapper,
    make_binder,
    render,
)
from sqlbound.driver import AsyncDriverAdapterBase, ErrorStatement, ExecResult, SyncDriverAdapterBase
from sqlbound.exceptions import (
    BindingError,
    MissingArgError,
    NamedArgRequiredError,
    NilArgumentError,
    NotFoundError,
    SQLBoundError,
    StatementClosedError,
    TransactionError,
)

__all__ = (
    "AsyncBoundQueryStatement",
    "AsyncBoundStatement",
    "AsyncDriverAdapterBase",
    "BindingError",
    "BoundQueryStatement",
    "BoundStatement",
    "Delete",
    "ErrorStatement",
    "ExecResult",
    "FieldMapper",
    "Insert",
    "MissingArgError",
    "NamedArgRequiredError",
    "NilArgumentError",
    "NoPoolAsyncConfig",
    "NoPoolSyncConfig",
    "NotFoundError",
    "ParameterStyle",
    "Query",
    "QueryBuilder",
    "SQLBoundError",
    "Select",
    "StatementClosedError",
    "StatementConfig",
    "StructBinder",
    "SyncDriverAdapterBase",
    "TransactionError",
    "Update",
    "__version__",
    "adapters",
    "arg",
    "bound",
    "builder",
    "core",
    "default_field_mapper",
    "driver",
    "exceptions",
    "make_binder",
    "named_arg",
    "prepare_async_bound",
    "prepare_async_bound_query",
    "prepare_bound",
    "prepare_bound_query",
    "render",
    "typing",
    "utils",
)
