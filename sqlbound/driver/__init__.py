"""Driver protocols and base classes for database adapters."""

from sqlbound.driver._async import (
    AsyncCursor,
    AsyncDriverAdapterBase,
    AsyncPreparedStatement,
    AsyncQueryStatement,
    AsyncTransaction,
)
from sqlbound.driver._common import (
    CommonDriverAttributesMixin,
    ErrorStatement,
    ExecResult,
    RowMapper,
    column_names,
    make_row_mapper,
    row_to_dict,
)
from sqlbound.driver._sync import (
    SyncCursor,
    SyncDriverAdapterBase,
    SyncPreparedStatement,
    SyncQueryStatement,
    SyncTransaction,
)

__all__ = (
    "AsyncCursor",
    "AsyncDriverAdapterBase",
    "AsyncPreparedStatement",
    "AsyncQueryStatement",
    "AsyncTransaction",
    "CommonDriverAttributesMixin",
    "ErrorStatement",
    "ExecResult",
    "RowMapper",
    "SyncCursor",
    "SyncDriverAdapterBase",
    "SyncPreparedStatement",
    "SyncQueryStatement",
    "SyncTransaction",
    "column_names",
    "make_row_mapper",
    "row_to_dict",
)
