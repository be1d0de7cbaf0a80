"""Bound statements for synchronous drivers."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, Optional, Union

from sqlbound.core.binder import StructBinder, make_binder
from sqlbound.driver._common import ErrorStatement, ExecResult
from sqlbound.driver._sync import SyncCursor, SyncPreparedStatement, SyncQueryStatement
from sqlbound.exceptions import SQLBoundError, StatementClosedError
from sqlbound.typing import ArgT, CollectionT, RowT
from sqlbound.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlbound.core.mapping import FieldMapper
    from sqlbound.core.statement import QueryLike
    from sqlbound.driver._sync import SyncDriverAdapterBase, SyncTransaction

__all__ = ("BoundQueryStatement", "BoundStatement", "prepare_bound", "prepare_bound_query")

logger = get_logger("bound")


def _rebind_error(statement: Any) -> ErrorStatement:
    if isinstance(statement, ErrorStatement):
        return statement
    return ErrorStatement(StatementClosedError())


class BoundStatement(Generic[ArgT]):
    """A prepared statement producing no rows, executed with ``ArgT`` values.

    Attributes:
        statement: The prepared statement, or an :class:`ErrorStatement`
        binder: Maps ``ArgT`` fields to the statement's placeholders
    """

    __slots__ = ("binder", "statement")

    def __init__(
        self, statement: "Union[SyncPreparedStatement, ErrorStatement]", binder: "StructBinder[ArgT]"
    ) -> None:
        self.statement = statement
        self.binder = binder

    def __repr__(self) -> str:
        return f"BoundStatement({self.statement!r}, {self.binder!r})"

    def _live(self) -> SyncPreparedStatement:
        statement = self.statement
        if isinstance(statement, ErrorStatement):
            raise statement.error
        return statement

    def in_tx(self, tx: "SyncTransaction") -> "BoundStatement[ArgT]":
        """Return a copy of this statement that runs inside ``tx``.

        The copy shares the binder. A statement that is closed or already
        failed yields a copy whose operations raise that failure.
        """
        statement = self.statement
        if isinstance(statement, SyncPreparedStatement) and not statement.closed:
            try:
                derived: Union[SyncPreparedStatement, ErrorStatement] = tx.prepare_statement(statement)
            except SQLBoundError as e:
                derived = ErrorStatement(e)
        else:
            derived = _rebind_error(statement)
        log_with_context(
            logger, logging.DEBUG, "Rebound statement to transaction", arg_type=self.binder.type_name
        )
        return BoundStatement(derived, self.binder)

    def execute(self, arg: "ArgT") -> ExecResult:
        """Bind ``arg`` and execute the statement.

        Raises:
            NilArgumentError: ``arg`` is None.
            MissingArgError: A placeholder's field cannot be read from ``arg``.
            StatementClosedError: The statement is closed.
        """
        statement = self._live()
        return statement.execute(*self.binder.to_args(arg))

    def close(self) -> None:
        if isinstance(self.statement, SyncPreparedStatement):
            self.statement.close()
            log_with_context(logger, logging.DEBUG, "Closed bound statement", sql=self.statement.sql)


class BoundQueryStatement(Generic[ArgT, RowT, CollectionT]):
    """A prepared row-producing statement, executed with ``ArgT`` values.

    Attributes:
        statement: The prepared query statement, or an :class:`ErrorStatement`
        binder: Maps ``ArgT`` fields to the statement's placeholders
    """

    __slots__ = ("binder", "statement")

    def __init__(
        self,
        statement: "Union[SyncQueryStatement[RowT, CollectionT], ErrorStatement]",
        binder: "StructBinder[ArgT]",
    ) -> None:
        self.statement = statement
        self.binder = binder

    def __repr__(self) -> str:
        return f"BoundQueryStatement({self.statement!r}, {self.binder!r})"

    def _live(self) -> "SyncQueryStatement[RowT, CollectionT]":
        statement = self.statement
        if isinstance(statement, ErrorStatement):
            raise statement.error
        return statement

    def in_tx(self, tx: "SyncTransaction") -> "BoundQueryStatement[ArgT, RowT, CollectionT]":
        """Return a copy of this statement that runs inside ``tx``."""
        statement = self.statement
        derived: Union[SyncQueryStatement[RowT, CollectionT], ErrorStatement]
        if isinstance(statement, SyncQueryStatement) and not statement.statement.closed:
            try:
                derived = statement.with_statement(tx.prepare_statement(statement.statement))
            except SQLBoundError as e:
                derived = ErrorStatement(e)
        else:
            derived = _rebind_error(statement)
        log_with_context(
            logger, logging.DEBUG, "Rebound statement to transaction", arg_type=self.binder.type_name
        )
        return BoundQueryStatement(derived, self.binder)

    def one(self, arg: "ArgT") -> RowT:
        """Bind ``arg`` and return the first row.

        Raises:
            NotFoundError: The query returned no rows.
        """
        statement = self._live()
        return statement.one(*self.binder.to_args(arg))

    def all(self, arg: "ArgT") -> CollectionT:
        statement = self._live()
        return statement.all(*self.binder.to_args(arg))

    def cursor(self, arg: "ArgT") -> "SyncCursor[RowT]":
        statement = self._live()
        return statement.cursor(*self.binder.to_args(arg))

    def close(self) -> None:
        if isinstance(self.statement, SyncQueryStatement):
            self.statement.close()
            log_with_context(logger, logging.DEBUG, "Closed bound query statement", sql=self.statement.sql)


def prepare_bound(
    driver: "SyncDriverAdapterBase",
    query: "QueryLike",
    arg_type: "type[ArgT]",
    *,
    field_mapper: "Optional[FieldMapper]" = None,
) -> "BoundStatement[ArgT]":
    """Prepare ``query`` and bind its placeholders to the fields of ``arg_type``.

    Args:
        driver: Driver the statement runs on.
        query: Statement with named placeholders.
        arg_type: Type of the values passed to :meth:`BoundStatement.execute`.
        field_mapper: Field mapping cache. Defaults to the driver's.

    Raises:
        NamedArgRequiredError: A placeholder is anonymous.
        MissingArgError: A placeholder name matches no field of ``arg_type``.
        ImproperConfigurationError: Two fields of ``arg_type`` resolve to the same name.

    Returns:
        The bound statement.
    """
    statement, arguments = driver.prepare(query)
    try:
        binder = make_binder(
            arg_type, arguments, field_mapper if field_mapper is not None else driver.statement_config.field_mapper
        )
    except SQLBoundError:
        statement.close()
        raise
    log_with_context(
        logger,
        logging.DEBUG,
        "Bound statement",
        sql=statement.sql,
        arg_type=binder.type_name,
        args=list(binder.args),
    )
    return BoundStatement(statement, binder)


def prepare_bound_query(
    driver: "SyncDriverAdapterBase",
    query: "QueryLike",
    arg_type: "type[ArgT]",
    schema_type: "Optional[type[RowT]]" = None,
    *,
    mapper: "Optional[Callable[[dict[str, Any]], RowT]]" = None,
    collection_type: "Callable[[list[RowT]], CollectionT]" = list,  # type: ignore[assignment]
    field_mapper: "Optional[FieldMapper]" = None,
) -> "BoundQueryStatement[ArgT, RowT, CollectionT]":
    """Prepare a row-producing ``query`` and bind its placeholders to ``arg_type``.

    Args:
        driver: Driver the statement runs on.
        query: Query with named placeholders.
        arg_type: Type of the values passed to the query operations.
        schema_type: Type rows are converted to. Rows stay dictionaries when omitted.
        mapper: Custom row mapper, takes precedence over ``schema_type``.
        collection_type: Builds the result of :meth:`BoundQueryStatement.all`.
        field_mapper: Field mapping cache. Defaults to the driver's.

    Raises:
        NamedArgRequiredError: A placeholder is anonymous.
        MissingArgError: A placeholder name matches no field of ``arg_type``.
        ImproperConfigurationError: Two fields of ``arg_type`` resolve to the same name.

    Returns:
        The bound query statement.
    """
    statement, arguments = driver.prepare_query(
        query, schema_type, mapper=mapper, collection_type=collection_type
    )
    try:
        binder = make_binder(
            arg_type, arguments, field_mapper if field_mapper is not None else driver.statement_config.field_mapper
        )
    except SQLBoundError:
        statement.close()
        raise
    log_with_context(
        logger,
        logging.DEBUG,
        "Bound statement",
        sql=statement.sql,
        arg_type=binder.type_name,
        args=list(binder.args),
    )
    return BoundQueryStatement(statement, binder)
