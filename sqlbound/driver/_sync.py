"""Synchronous driver protocol implementation."""

import logging
from abc import abstractmethod
from collections.abc import Callable, Iterator
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
    from contextlib import AbstractContextManager
    from types import TracebackType

    from sqlbound.core.parameters import Argument
    from sqlbound.core.statement import QueryLike

__all__ = (
    "SyncCursor",
    "SyncDriverAdapterBase",
    "SyncPreparedStatement",
    "SyncQueryStatement",
    "SyncTransaction",
)

logger = get_logger("driver")


class SyncTransaction:
    """A transaction opened on a driver's connection.

    Statements prepared against the transaction run on its connection and
    fail with :class:`~sqlbound.exceptions.TransactionError` once the
    transaction is committed or rolled back.
    """

    __slots__ = ("_done", "driver")

    def __init__(self, driver: "SyncDriverAdapterBase") -> None:
        self.driver = driver
        self._done = False

    def __enter__(self) -> "SyncTransaction":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        if self._done:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

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

    def commit(self) -> None:
        self._require_active()
        self.driver.commit()
        self._done = True
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        self._require_active()
        self.driver.rollback()
        self._done = True
        logger.debug("Transaction rolled back")

    def prepare_statement(self, statement: "SyncPreparedStatement") -> "SyncPreparedStatement":
        """Prepare ``statement`` again so it executes within this transaction."""
        self._require_active()
        return SyncPreparedStatement(self.driver, statement.sql, statement.arguments, executor=self)


class SyncCursor(Generic[RowT]):
    """Iterator over the mapped rows of an executed query.

    The database cursor is released when the rows are exhausted, when
    :meth:`close` is called or when the context manager exits.
    """

    __slots__ = ("_closed", "_columns", "_cursor", "_cursor_manager", "_driver", "_mapper")

    def __init__(
        self,
        driver: "SyncDriverAdapterBase",
        cursor_manager: "AbstractContextManager[Any]",
        cursor: Any,
        mapper: "Callable[[dict[str, Any]], RowT]",
    ) -> None:
        self._driver = driver
        self._cursor_manager = cursor_manager
        self._cursor = cursor
        self._mapper = mapper
        self._columns = column_names(cursor)
        self._closed = False

    def __iter__(self) -> "SyncCursor[RowT]":
        return self

    def __next__(self) -> RowT:
        if self._closed:
            raise StopIteration
        with self._driver.handle_database_exceptions():
            row = self._cursor.fetchone()
        if row is None:
            self.close()
            raise StopIteration
        return self._mapper(row_to_dict(self._columns, row))

    def __enter__(self) -> "SyncCursor[RowT]":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def columns(self) -> "list[str]":
        return self._columns

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._cursor_manager.__exit__(None, None, None)


class SyncPreparedStatement:
    """A statement prepared for repeated execution with positional values.

    Attributes:
        driver: Driver the statement runs on
        sql: Rendered SQL text
        arguments: Placeholder descriptors of ``sql``
        executor: The driver or the transaction the statement runs in
    """

    __slots__ = ("_closed", "arguments", "driver", "executor", "sql")

    def __init__(
        self,
        driver: "SyncDriverAdapterBase",
        sql: str,
        arguments: "tuple[Argument, ...]" = (),
        executor: "Optional[Union[SyncDriverAdapterBase, SyncTransaction]]" = None,
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
        if isinstance(self.executor, SyncTransaction):
            self.executor._require_active()
        return self.driver.prepare_parameters(args)

    def execute(self, *args: Any) -> ExecResult:
        """Execute the statement with positional values."""
        values = self._values(args)
        return self.driver.execute_prepared(self.sql, values)

    def fetch_one(self, *args: Any) -> "Optional[dict[str, Any]]":
        values = self._values(args)
        return self.driver.fetch_one_prepared(self.sql, values)

    def fetch_all(self, *args: Any) -> "list[dict[str, Any]]":
        values = self._values(args)
        return self.driver.fetch_all_prepared(self.sql, values)

    def cursor(self, *args: Any, mapper: "Optional[RowMapper]" = None) -> "SyncCursor[Any]":
        values = self._values(args)
        return self.driver.open_cursor_prepared(self.sql, values, mapper or make_row_mapper())

    def close(self) -> None:
        """Release the statement. Closing twice is a no-op."""
        if not self._closed:
            self._closed = True
            log_with_context(logger, logging.DEBUG, "Closed prepared statement", sql=self.sql)


class SyncQueryStatement(Generic[RowT, CollectionT]):
    """A prepared row-producing statement with its row mapping.

    Attributes:
        statement: The prepared statement
        mapper: Converts row dictionaries to ``RowT``
        collection_type: Builds the result of :meth:`all` from a list of rows
    """

    __slots__ = ("collection_type", "mapper", "statement")

    def __init__(
        self,
        statement: SyncPreparedStatement,
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

    def with_statement(self, statement: SyncPreparedStatement) -> "SyncQueryStatement[RowT, CollectionT]":
        """Return a copy running ``statement`` with the same row mapping."""
        return SyncQueryStatement(statement, self.mapper, self.collection_type)

    def one(self, *args: Any) -> RowT:
        """Return the first row.

        Raises:
            NotFoundError: The query returned no rows.
        """
        row = self.statement.fetch_one(*args)
        if row is None:
            msg = "No result found when one was expected"
            raise NotFoundError(msg)
        return self.mapper(row)

    def all(self, *args: Any) -> CollectionT:
        return self.collection_type([self.mapper(row) for row in self.statement.fetch_all(*args)])

    def cursor(self, *args: Any) -> "SyncCursor[RowT]":
        return self.statement.cursor(*args, mapper=self.mapper)

    def close(self) -> None:
        self.statement.close()


class SyncDriverAdapterBase(CommonDriverAttributesMixin):
    """Base class of synchronous drivers.

    Adapters supply cursor management, exception translation and the
    transaction primitives; this class builds prepared statements,
    transactions and the plain execution helpers on top of them.
    """

    __slots__ = ()

    @abstractmethod
    def with_cursor(self, connection: Any) -> Any:
        """Create and return a context manager for cursor acquisition and cleanup."""

    @abstractmethod
    def handle_database_exceptions(self) -> "AbstractContextManager[None]":
        """Return a context manager translating driver errors to sqlbound errors."""

    @abstractmethod
    def begin(self) -> None:
        """Begin a database transaction on the current connection."""

    @abstractmethod
    def rollback(self) -> None:
        """Rollback the current transaction on the current connection."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the current transaction on the current connection."""

    # -- prepared statement primitives --

    def execute_prepared(self, sql: str, values: "list[Any]") -> ExecResult:
        with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            cursor.execute(sql, values)
            return ExecResult(cursor.rowcount if cursor.rowcount is not None else -1, cursor.lastrowid)

    def fetch_one_prepared(self, sql: str, values: "list[Any]") -> "Optional[dict[str, Any]]":
        with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            cursor.execute(sql, values)
            row = cursor.fetchone()
            return None if row is None else row_to_dict(column_names(cursor), row)

    def fetch_all_prepared(self, sql: str, values: "list[Any]") -> "list[dict[str, Any]]":
        with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            cursor.execute(sql, values)
            columns = column_names(cursor)
            return [row_to_dict(columns, row) for row in cursor.fetchall()]

    def open_cursor_prepared(self, sql: str, values: "list[Any]", mapper: "RowMapper") -> "SyncCursor[Any]":
        cursor_manager = self.with_cursor(self.connection)
        cursor = cursor_manager.__enter__()
        try:
            with self.handle_database_exceptions():
                cursor.execute(sql, values)
        except BaseException as e:
            cursor_manager.__exit__(type(e), e, e.__traceback__)
            raise
        return SyncCursor(self, cursor_manager, cursor, mapper)

    # -- public API --

    def prepare(self, query: "QueryLike") -> "tuple[SyncPreparedStatement, tuple[Argument, ...]]":
        """Render ``query`` and prepare it.

        Returns:
            The prepared statement and its placeholder descriptors.
        """
        rendered = self.render(query)
        statement = SyncPreparedStatement(self, rendered.sql, rendered.arguments)
        log_with_context(
            logger, logging.DEBUG, "Prepared statement", sql=rendered.sql, arguments=len(rendered.arguments)
        )
        return statement, rendered.arguments

    def prepare_query(
        self,
        query: "QueryLike",
        schema_type: "Optional[type[RowT]]" = None,
        *,
        mapper: "Optional[Callable[[dict[str, Any]], RowT]]" = None,
        collection_type: "Callable[[list[RowT]], CollectionT]" = list,  # type: ignore[assignment]
    ) -> "tuple[SyncQueryStatement[RowT, CollectionT], tuple[Argument, ...]]":
        """Render ``query`` and prepare it as a row-producing statement.

        Args:
            query: The query to prepare.
            schema_type: Type rows are converted to. Rows stay dictionaries when omitted.
            mapper: Custom row mapper, takes precedence over ``schema_type``.
            collection_type: Builds fetch-all results from a list of rows.

        Returns:
            The prepared query statement and its placeholder descriptors.
        """
        statement, arguments = self.prepare(query)
        return SyncQueryStatement(statement, make_row_mapper(schema_type, mapper), collection_type), arguments

    def transaction(self) -> SyncTransaction:
        """Begin a transaction and return its handle."""
        self.begin()
        logger.debug("Transaction started")
        return SyncTransaction(self)

    def execute(self, query: "QueryLike", *parameters: Any, **kwargs: Any) -> ExecResult:
        """Execute a statement that produces no rows.

        Args:
            query: The statement.
            *parameters: Values for anonymous placeholders without a built-in value.
            **kwargs: Values for named placeholders.
        """
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        return self.execute_prepared(rendered.sql, self.prepare_parameters(values))

    def select_one(
        self, query: "QueryLike", *parameters: Any, schema_type: "Optional[type[RowT]]" = None, **kwargs: Any
    ) -> RowT:
        """Return the first row of a query.

        Raises:
            NotFoundError: The query returned no rows.
        """
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        row = self.fetch_one_prepared(rendered.sql, self.prepare_parameters(values))
        if row is None:
            msg = "No result found when one was expected"
            raise NotFoundError(msg)
        return make_row_mapper(schema_type)(row)

    def select(
        self, query: "QueryLike", *parameters: Any, schema_type: "Optional[type[RowT]]" = None, **kwargs: Any
    ) -> "list[RowT]":
        """Return all rows of a query."""
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        mapper = make_row_mapper(schema_type)
        return [mapper(row) for row in self.fetch_all_prepared(rendered.sql, self.prepare_parameters(values))]

    def iter_rows(self, query: "QueryLike", *parameters: Any, **kwargs: Any) -> "Iterator[dict[str, Any]]":
        """Stream the rows of a query as dictionaries."""
        rendered = self.render(query)
        values = self.resolve_parameters(rendered, parameters, kwargs)
        with self.open_cursor_prepared(rendered.sql, self.prepare_parameters(values), make_row_mapper()) as cursor:
            yield from cursor
