"""Asynchronous driver protocol implementation."""

import logging
from abc import abstractmethod
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING, Any, Generic, Optional, Union

from sqlbound.driver._common import (
    CommonDriverAttributesMixin,
    ExecResult,
    RowMapper,
    column_names,
    make_row_mapper,
    row_to_dict,
)
from sqlbound.exceptions import NotFoundError, StatementClosedError, TransactionError
from sqlbound.typing import CollectionT, RowT
from sqlbound.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager
    from types import TracebackType

    from sqlbound.core.parameters import Argument
    from sqlbound.core.statement import QueryLike

__all__ = (
    "AsyncCursor",
    "AsyncDriverAdapterBase",
    "AsyncPreparedStatement",
    "AsyncQueryStatement",
    "AsyncTransaction",
)

logger = get_logger("driver")


class AsyncTransaction:
    """A transaction opened on an async driver's connection."""

    __slots__ = ("_done", "driver")

    def __init__(self, driver: "AsyncDriverAdapterBase") -> None:
        self.driver = driver
        self._done = False

    async def __aenter__(self) -> "AsyncTransaction":
        return self

    async def __aexit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        if self._done:
            return
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    @property
    def done(self) -> bool:
        return self._done

    @property
    def connection(self) -> Any:
        return self.driver.connection

    def _require_active(self) -> None:
        if self._done:
            msg = "transaction has already been committed or rolled back"
            raise TransactionError(msg)

    async def commit(self) -> None:
        self._require_active()
        await self.driver.commit()
        self._done = True
        logger.debug("Transaction committed")

    async def rollback(self) -> None:
        self._require_active()
        await self.driver.rollback()
        self._done = True
        logger.debug("Transaction rolled back")

    async def prepare_statement(self, statement: "AsyncPreparedStatement") -> "AsyncPreparedStatement":
        """Prepare ``statement`` again so it executes within this transaction."""
        self._require_active()
        return AsyncPreparedStatement(self.driver, statement.sql, statement.arguments, executor=self)


class AsyncCursor(Generic[RowT]):
    """Async iterator over the mapped rows of an executed query."""

    __slots__ = ("_closed", "_columns", "_cursor", "_cursor_manager", "_driver", "_mapper")

    def __init__(
        self,
        driver: "AsyncDriverAdapterBase",
        cursor_manager: "AbstractAsyncContextManager[Any]",
        cursor: Any,
        mapper: "Callable[[dict[str, Any]], RowT]",
    ) -> None:
        self._driver = driver
        self._cursor_manager = cursor_manager
        self._cursor = cursor
        self._mapper = mapper
        self._columns = column_names(cursor)
        self._closed = False

    def __aiter__(self) -> "AsyncCursor[RowT]":
        return self

    async def __anext__(self) -> RowT:
        if self._closed:
            raise StopAsyncIteration
        async with self._driver.handle_database_exceptions():
            row = await self._cursor.fetchone()
        if row is None:
            await self.close()
            raise StopAsyncIteration
        return self._mapper(row_to_dict(self._columns, row))

    async def __aenter__(self) -> "AsyncCursor[RowT]":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    @property
    def columns(self) -> "list[str]":
        return self._columns

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._cursor_manager.__aexit__(None, None, None)


class AsyncPreparedStatement:
    """A statement prepared for repeated asynchronous execution.

    Attributes:
        driver: Driver the statement runs on
        sql: Rendered SQL text
        arguments: Placeholder descriptors of ``sql``
        executor: The driver or the transaction the statement runs in
    """

    __slots__ = ("_closed", "arguments", "driver", "executor", "sql")

    def __init__(
        self,
        driver: "AsyncDriverAdapterBase",
        sql: str,
        arguments: "tuple[Argument, ...]" = (),
        executor: "Optional[Union[AsyncDriverAdapterBase, AsyncTransaction]]" = None,
    ) -> None:
        self.driver = driver
        self.sql = sql
        self.arguments = arguments
        self.executor = executor or driver
        self._closed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.sql!r}, closed={self._closed!r})"

    @property
    def closed(self) -> bool:
        return self._closed

    def _values(self, args: "tuple[Any, ...]") -> "list[Any]":
        if self._closed:
            raise StatementClosedError
        if isinstance(self.executor, AsyncTransaction):
            self.executor._require_active()
        return self.driver.prepare_parameters(args)

    async def execute(self, *args: Any) -> ExecResult:
        values = self._values(args)
        return await self.driver.execute_prepared(self.sql, values)

    async def fetch_one(self, *args: Any) -> "Optional[dict[str, Any]]":
        values = self._values(args)
        return await self.driver.fetch_one_prepared(self.sql, values)

    async def fetch_all(self, *args: Any) -> "list[dict[str, Any]]":
        values = self._values(args)
        return await self.driver.fetch_all_prepared(self.sql, values)

    async def cursor(self, *args: Any, mapper: "Optional[RowMapper]" = None) -> "AsyncCursor[Any]":
        values = self._values(args)
        return await self.driver.open_cursor_prepared(self.sql, values, mapper or make_row_mapper())

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            log_with_context(logger, logging.DEBUG, "Closed prepared statement", sql=self.sql)


class AsyncQueryStatement(Generic[RowT, CollectionT]):
    """A prepared row-producing statement with its row mapping, for async drivers."""

    __slots__ = ("collection_type", "mapper", "statement")

    def __init__(
        self,
        statement: AsyncPreparedStatement,
        mapper: "Callable[[dict[str, Any]], RowT]",
        collection_type: "Callable[[list[RowT]], CollectionT]" = list,  # type: ignore[assignment]
    ) -> None:
        self.statement = statement
        self.mapper = mapper
        self.collection_type = collection_type

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.statement.sql!r})"

    @property
    def sql(self) -> str:
        return self.statement.sql

    def with_statement(self, statement: AsyncPreparedStatement) -> "AsyncQueryStatement[RowT, CollectionT]":
        return AsyncQueryStatement(statement, self.mapper, self.collection_type)

    async def one(self, *args: Any) -> RowT:
        row = await self.statement.fetch_one(*args)
        if row is None:
            msg = "No result found when one was expected"
            raise NotFoundError(msg)
        return self.mapper(row)

    async def all(self, *args: Any) -> CollectionT:
        rows = await self.statement.fetch_all(*args)
        return self.collection_type([self.mapper(row) for row in rows])

    async def cursor(self, *args: Any) -> "AsyncCursor[RowT]":
        return await self.statement.cursor(*args, mapper=self.mapper)

    async def close(self) -> None:
        await self.statement.close()


class AsyncDriverAdapterBase(CommonDriverAttributesMixin):
    """Base class of asynchronous drivers."""

    __slots__ = ()

    @abstractmethod
    def with_cursor(self, connection: Any) -> Any:
        """Create and return an async context manager for cursor acquisition and cleanup."""

    @abstractmethod
    def handle_database_exceptions(self) -> "AbstractAsyncContextManager[None]":
        """Return an async context manager translating driver errors to sqlbound errors."""

    @abstractmethod
    async def begin(self) -> None:
        """Begin a database transaction on the current connection."""

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback the current transaction on the current connection."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction on the current connection."""

    async def execute_prepared(self, sql: str, values: "list[Any]") -> ExecResult:
        async with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            await cursor.execute(sql, values)
            return ExecResult(cursor.rowcount if cursor.rowcount is not None else -1, cursor.lastrowid)

    async def fetch_one_prepared(self, sql: str, values: "list[Any]") -> "Optional[dict[str, Any]]":
        async with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            await cursor.execute(sql, values)
            row = await cursor.fetchone()
            return None if row is None else row_to_dict(column_names(cursor), row)

    async def fetch_all_prepared(self, sql: str, values: "list[Any]") -> "list[dict[str, Any]]":
        async with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            await cursor.execute(sql, values)
            columns = column_names(cursor)
            return [row_to_dict(columns, row) for row in await cursor.fetchall()]

    async def open_cursor_prepared(self, sql: str, values: "list[Any]", mapper: "RowMapper") -> "AsyncCursor[Any]":
        cursor_manager = self.with_cursor(self.connection)
        cursor = await cursor_manager.__aenter__()
        try:
            async with self.handle_database_exceptions():
                await cursor.execute(sql, values)
        except BaseException as e:
            await cursor_manager.__aexit__(type(e), e, e.__traceback__)
            raise
        return AsyncCursor(self, cursor_manager, cursor, mapper)

    async def prepare(self, query: "QueryLike") -> "tuple[AsyncPreparedStatement, tuple[Argument, ...]]":
        """Render ``query`` and prepare it.

        Returns:
            The prepared statement and its placeholder descriptors.
        """
        rendered = self.render(query)
        statement = AsyncPreparedStatement(self, rendered.sql, rendered.arguments)
        log_with_context(
            logger, logging.DEBUG, "Prepared statement", sql=rendered.sql, arguments=len(rendered.arguments)
        )
        return statement, rendered.arguments

    async def prepare_query(
        self,
        query: "QueryLike",
        schema_type: "Optional[type[RowT]]" = None,
        *,
        mapper: "Optional[Callable[[dict[str, Any]], RowT]]" = None,
        collection_type: "Callable[[list[RowT]], CollectionT]" = list,  # type: ignore[assignment]
    ) -> "tuple[AsyncQueryStatement[RowT, CollectionT], tuple[Argument, ...]]":
        statement, arguments = await self.prepare(query)
        return AsyncQueryStatement(statement, make_row_mapper(schema_type, mapper), collection_type), arguments

    async def transaction(self) -> AsyncTransaction:
        """Begin a transaction and return its handle."""
        await self.begin()
        logger.debug("Transaction started")
        return AsyncTransaction(self)

    async def execute(self, query: "QueryLike", *parameters: Any, **kwargs: Any) -> ExecResult:
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        return await self.execute_prepared(rendered.sql, self.prepare_parameters(values))

    async def select_one(
        self, query: "QueryLike", *parameters: Any, schema_type: "Optional[type[RowT]]" = None, **kwargs: Any
    ) -> RowT:
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        row = await self.fetch_one_prepared(rendered.sql, self.prepare_parameters(values))
        if row is None:
            msg = "No result found when one was expected"
            raise NotFoundError(msg)
        return make_row_mapper(schema_type)(row)

    async def select(
        self, query: "QueryLike", *parameters: Any, schema_type: "Optional[type[RowT]]" = None, **kwargs: Any
    ) -> "list[RowT]":
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        mapper = make_row_mapper(schema_type)
        return [mapper(row) for row in await self.fetch_all_prepared(rendered.sql, self.prepare_parameters(values))]

    async def iter_rows(self, query: "QueryLike", *parameters: Any, **kwargs: Any) -> "AsyncIterator[dict[str, Any]]":
        """Stream the rows of a query as dictionaries."""
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        cursor = await self.open_cursor_prepared(rendered.sql, self.prepare_parameters(values), make_row_mapper())
        async with cursor:
            async for row in cursor:
                yield row
