"""Bound statements for asynchronous drivers."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, Optional, Union

from sqlbound.core.binder import StructBinder, make_binder
from sqlbound.driver._async import AsyncCursor, AsyncPreparedStatement, AsyncQueryStatement
from sqlbound.driver._common import ErrorStatement, ExecResult
from sqlbound.exceptions import SQLBoundError, StatementClosedError
from sqlbound.typing import ArgT, CollectionT, RowT
from sqlbound.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlbound.core.mapping import FieldMapper
    from sqlbound.core.statement import QueryLike
    from sqlbound.driver._async import AsyncDriverAdapterBase, AsyncTransaction

__all__ = (
    "AsyncBoundQueryStatement",
    "AsyncBoundStatement",
    "prepare_async_bound",
    "prepare_async_bound_query",
)

logger = get_logger("bound")


def _rebind_error(statement: Any) -> ErrorStatement:
    if isinstance(statement, ErrorStatement):
        return statement
    return ErrorStatement(StatementClosedError())


class AsyncBoundStatement(Generic[ArgT]):
    """A prepared statement producing no rows, executed with ``ArgT`` values."""

    __slots__ = ("binder", "statement")

    def __init__(
        self, statement: "Union[AsyncPreparedStatement, ErrorStatement]", binder: "StructBinder[ArgT]"
    ) -> None:
        self.statement = statement
        self.binder = binder

    def __repr__(self) -> str:
        return f"AsyncBoundStatement({self.statement!r}, {self.binder!r})"

    def _live(self) -> AsyncPreparedStatement:
        statement = self.statement
        if isinstance(statement, ErrorStatement):
            raise statement.error
        return statement

    async def in_tx(self, tx: "AsyncTransaction") -> "AsyncBoundStatement[ArgT]":
        """Return a copy of this statement that runs inside ``tx``."""
        statement = self.statement
        if isinstance(statement, AsyncPreparedStatement) and not statement.closed:
            try:
                derived: Union[AsyncPreparedStatement, ErrorStatement] = await tx.prepare_statement(statement)
            except SQLBoundError as e:
                derived = ErrorStatement(e)
        else:
            derived = _rebind_error(statement)
        log_with_context(
            logger, logging.DEBUG, "Rebound statement to transaction", arg_type=self.binder.type_name
        )
        return AsyncBoundStatement(derived, self.binder)

    async def execute(self, arg: "ArgT") -> ExecResult:
        statement = self._live()
        return await statement.execute(*self.binder.to_args(arg))

    async def close(self) -> None:
        if isinstance(self.statement, AsyncPreparedStatement):
            await self.statement.close()
            log_with_context(logger, logging.DEBUG, "Closed bound statement", sql=self.statement.sql)


class AsyncBoundQueryStatement(Generic[ArgT, RowT, CollectionT]):
    """A prepared row-producing statement, executed with ``ArgT`` values."""

    __slots__ = ("binder", "statement")

    def __init__(
        self,
        statement: "Union[AsyncQueryStatement[RowT, CollectionT], ErrorStatement]",
        binder: "StructBinder[ArgT]",
    ) -> None:
        self.statement = statement
        self.binder = binder

    def __repr__(self) -> str:
        return f"AsyncBoundQueryStatement({self.statement!r}, {self.binder!r})"

    def _live(self) -> "AsyncQueryStatement[RowT, CollectionT]":
        statement = self.statement
        if isinstance(statement, ErrorStatement):
            raise statement.error
        return statement

    async def in_tx(self, tx: "AsyncTransaction") -> "AsyncBoundQueryStatement[ArgT, RowT, CollectionT]":
        statement = self.statement
        derived: Union[AsyncQueryStatement[RowT, CollectionT], ErrorStatement]
        if isinstance(statement, AsyncQueryStatement) and not statement.statement.closed:
            try:
                derived = statement.with_statement(await tx.prepare_statement(statement.statement))
            except SQLBoundError as e:
                derived = ErrorStatement(e)
        else:
            derived = _rebind_error(statement)
        log_with_context(
            logger, logging.DEBUG, "Rebound statement to transaction", arg_type=self.binder.type_name
        )
        return AsyncBoundQueryStatement(derived, self.binder)

    async def one(self, arg: "ArgT") -> RowT:
        statement = self._live()
        return await statement.one(*self.binder.to_args(arg))

    async def all(self, arg: "ArgT") -> CollectionT:
        statement = self._live()
        return await statement.all(*self.binder.to_args(arg))

    async def cursor(self, arg: "ArgT") -> "AsyncCursor[RowT]":
        statement = self._live()
        return await statement.cursor(*self.binder.to_args(arg))

    async def close(self) -> None:
        if isinstance(self.statement, AsyncQueryStatement):
            await self.statement.close()
            log_with_context(logger, logging.DEBUG, "Closed bound query statement", sql=self.statement.sql)


async def prepare_async_bound(
    driver: "AsyncDriverAdapterBase",
    query: "QueryLike",
    arg_type: "type[ArgT]",
    *,
    field_mapper: "Optional[FieldMapper]" = None,
) -> "AsyncBoundStatement[ArgT]":
    """Prepare ``query`` and bind its placeholders to the fields of ``arg_type``.

    Raises:
        NamedArgRequiredError: A placeholder is anonymous.
        MissingArgError: A placeholder name matches no field of ``arg_type``.
        ImproperConfigurationError: Two fields of ``arg_type`` resolve to the same name.
    """
    statement, arguments = await driver.prepare(query)
    try:
        binder = make_binder(
            arg_type, arguments, field_mapper if field_mapper is not None else driver.statement_config.field_mapper
        )
    except SQLBoundError:
        await statement.close()
        raise
    log_with_context(
        logger,
        logging.DEBUG,
        "Bound statement",
        sql=statement.sql,
        arg_type=binder.type_name,
        args=list(binder.args),
    )
    return AsyncBoundStatement(statement, binder)


async def prepare_async_bound_query(
    driver: "AsyncDriverAdapterBase",
    query: "QueryLike",
    arg_type: "type[ArgT]",
    schema_type: "Optional[type[RowT]]" = None,
    *,
    mapper: "Optional[Callable[[dict[str, Any]], RowT]]" = None,
    collection_type: "Callable[[list[RowT]], CollectionT]" = list,  # type: ignore[assignment]
    field_mapper: "Optional[FieldMapper]" = None,
) -> "AsyncBoundQueryStatement[ArgT, RowT, CollectionT]":
    """Prepare a row-producing ``query`` and bind its placeholders to ``arg_type``.

    Raises:
        NamedArgRequiredError: A placeholder is anonymous.
        MissingArgError: A placeholder name matches no field of ``arg_type``.
        ImproperConfigurationError: Two fields of ``arg_type`` resolve to the same name.
    """
    statement, arguments = await driver.prepare_query(
        query, schema_type, mapper=mapper, collection_type=collection_type
    )
    try:
        binder = make_binder(
            arg_type, arguments, field_mapper if field_mapper is not None else driver.statement_config.field_mapper
        )
    except SQLBoundError:
        await statement.close()
        raise
    log_with_context(
        logger,
        logging.DEBUG,
        "Bound statement",
        sql=statement.sql,
        arg_type=binder.type_name,
        args=list(binder.args),
    )
    return AsyncBoundQueryStatement(statement, binder)
