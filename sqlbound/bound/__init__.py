"""Statements bound to value types.

A bound statement pairs a prepared statement with a binder so it can be
executed repeatedly with a single value object instead of positional values.
"""

from sqlbound.bound._async import (
    AsyncBoundQueryStatement,
    AsyncBoundStatement,
    prepare_async_bound,
    prepare_async_bound_query,
)
from sqlbound.bound._sync import BoundQueryStatement, BoundStatement, prepare_bound, prepare_bound_query

__all__ = (
    "AsyncBoundQueryStatement",
    "AsyncBoundStatement",
    "BoundQueryStatement",
    "BoundStatement",
    "prepare_async_bound",
    "prepare_async_bound_query",
    "prepare_bound",
    "prepare_bound_query",
)
