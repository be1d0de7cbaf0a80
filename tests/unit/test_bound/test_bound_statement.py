"""Unit tests for bound statements using mocked drivers."""

import logging
from dataclasses import dataclass, field
from unittest.mock import AsyncMock, MagicMock

import pytest

from sqlbound.bound import (
    AsyncBoundStatement,
    BoundQueryStatement,
    BoundStatement,
    prepare_async_bound,
    prepare_async_bound_query,
    prepare_bound,
    prepare_bound_query,
)
from sqlbound.core.binder import make_binder
from sqlbound.core.mapping import FieldMapper
from sqlbound.core.parameters import Argument
from sqlbound.driver import (
    AsyncPreparedStatement,
    ErrorStatement,
    ExecResult,
    SyncPreparedStatement,
    SyncQueryStatement,
)
from sqlbound.exceptions import (
    ImproperConfigurationError,
    MissingArgError,
    NamedArgRequiredError,
    NilArgumentError,
    StatementClosedError,
    TransactionError,
)


@dataclass
class Item:
    name: str
    id: int


ARGUMENTS = (Argument("id", ordinal=0), Argument("name", ordinal=1))


@dataclass
class Clash:
    first: int = field(metadata={"db": "x"})
    second: int = field(metadata={"db": "x"})


@pytest.fixture
def driver(field_mapper: FieldMapper) -> MagicMock:
    mock = MagicMock()
    mock.statement_config.field_mapper = field_mapper
    mock.prepare_parameters.side_effect = list
    mock.execute_prepared.return_value = ExecResult(1, 10)
    return mock


@pytest.fixture
def prepared(driver: MagicMock) -> SyncPreparedStatement:
    return SyncPreparedStatement(driver, "UPDATE items SET name = ? WHERE id = ?", ARGUMENTS)


def test_prepare_bound_builds_binder(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    driver.prepare.return_value = (prepared, ARGUMENTS)
    bound = prepare_bound(driver, "UPDATE ...", Item)
    assert isinstance(bound, BoundStatement)
    assert bound.binder.args == ("id", "name")
    assert bound.statement is prepared


def test_execute_forwards_positional_values(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    driver.prepare.return_value = (prepared, ARGUMENTS)
    bound = prepare_bound(driver, "UPDATE ...", Item)
    result = bound.execute(Item(name="x", id=7))
    assert result == ExecResult(1, 10)
    driver.execute_prepared.assert_called_once_with(prepared.sql, [7, "x"])


def test_binding_failure_closes_prepared_statement(driver: MagicMock) -> None:
    statement = MagicMock()
    driver.prepare.return_value = (statement, (Argument("id"), Argument(ordinal=1)))
    with pytest.raises(NamedArgRequiredError):
        prepare_bound(driver, "SELECT ...", Item)
    statement.close.assert_called_once_with()


def test_missing_field_closes_prepared_query(driver: MagicMock) -> None:
    statement = MagicMock()
    driver.prepare_query.return_value = (statement, (Argument("nope"),))
    with pytest.raises(MissingArgError):
        prepare_bound_query(driver, "SELECT ...", Item)
    statement.close.assert_called_once_with()


def test_mapping_failure_closes_prepared_statement(driver: MagicMock) -> None:
    statement = MagicMock()
    driver.prepare.return_value = (statement, (Argument("x"),))
    with pytest.raises(ImproperConfigurationError):
        prepare_bound(driver, "SELECT :x", Clash)
    statement.close.assert_called_once_with()


def test_prepare_bound_uses_explicit_mapper(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    driver.prepare.return_value = (prepared, ARGUMENTS)
    mapper = FieldMapper()
    prepare_bound(driver, "UPDATE ...", Item, field_mapper=mapper)
    assert Item in mapper
    assert Item not in driver.statement_config.field_mapper


def test_prepare_bound_logs_statement_fields(
    driver: MagicMock, prepared: SyncPreparedStatement, caplog: pytest.LogCaptureFixture
) -> None:
    driver.prepare.return_value = (prepared, ARGUMENTS)
    with caplog.at_level(logging.DEBUG, logger="sqlbound.bound"):
        prepare_bound(driver, "UPDATE ...", Item)
    record = next(r for r in caplog.records if r.getMessage() == "Bound statement")
    assert record.extra_fields == {  # type: ignore[attr-defined]
        "sql": prepared.sql,
        "arg_type": "Item",
        "args": ["id", "name"],
    }


def test_bind_failure_short_circuits(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    bound = BoundStatement(prepared, make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))
    with pytest.raises(NilArgumentError):
        bound.execute(None)  # type: ignore[arg-type]
    driver.execute_prepared.assert_not_called()


def test_error_variant_raises_stored_error(driver: MagicMock) -> None:
    error = TransactionError("transaction has already been committed or rolled back")
    bound = BoundStatement(ErrorStatement(error), make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))
    with pytest.raises(TransactionError) as exc_info:
        bound.execute(Item(name="x", id=1))
    assert exc_info.value is error
    driver.execute_prepared.assert_not_called()


def test_closed_statement_rejects_execution(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    bound = BoundStatement(prepared, make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))
    bound.close()
    bound.close()
    assert prepared.closed
    with pytest.raises(StatementClosedError):
        bound.execute(Item(name="x", id=1))


def test_in_tx_derives_new_statement(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    binder = make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper)
    bound = BoundStatement(prepared, binder)
    reprepared = SyncPreparedStatement(driver, prepared.sql, prepared.arguments)
    tx = MagicMock()
    tx.prepare_statement.return_value = reprepared

    derived = bound.in_tx(tx)

    tx.prepare_statement.assert_called_once_with(prepared)
    assert derived is not bound
    assert derived.statement is reprepared
    assert derived.binder is binder
    assert bound.statement is prepared
    assert not prepared.closed


def test_in_tx_on_closed_statement_defers_failure(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    bound = BoundStatement(prepared, make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))
    bound.close()
    tx = MagicMock()

    derived = bound.in_tx(tx)

    tx.prepare_statement.assert_not_called()
    assert isinstance(derived.statement, ErrorStatement)
    with pytest.raises(StatementClosedError):
        derived.execute(Item(name="x", id=1))


def test_in_tx_on_error_variant_keeps_error(driver: MagicMock) -> None:
    error = StatementClosedError()
    bound = BoundStatement(ErrorStatement(error), make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))
    derived = bound.in_tx(MagicMock())
    assert isinstance(derived.statement, ErrorStatement)
    assert derived.statement.error is error


def test_in_tx_with_finished_transaction_defers_failure(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    bound = BoundStatement(prepared, make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))
    tx = MagicMock()
    tx.prepare_statement.side_effect = TransactionError("done")

    derived = bound.in_tx(tx)

    with pytest.raises(TransactionError):
        derived.execute(Item(name="x", id=1))


def test_bound_query_maps_rows(driver: MagicMock, prepared: SyncPreparedStatement) -> None:
    driver.fetch_all_prepared.return_value = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
    driver.fetch_one_prepared.return_value = {"id": 1, "name": "a"}
    query = SyncQueryStatement(prepared, lambda row: Item(**row), tuple)
    bound = BoundQueryStatement(query, make_binder(Item, ARGUMENTS, driver.statement_config.field_mapper))

    assert bound.all(Item(name="a", id=1)) == (Item(name="a", id=1), Item(name="b", id=2))
    assert bound.one(Item(name="a", id=1)) == Item(name="a", id=1)
    driver.fetch_one_prepared.assert_called_once_with(prepared.sql, [1, "a"])


@pytest.mark.anyio
async def test_async_prepare_bound_closes_on_failure(field_mapper: FieldMapper) -> None:
    driver = MagicMock()
    driver.statement_config.field_mapper = field_mapper
    statement = AsyncMock()
    driver.prepare = AsyncMock(return_value=(statement, (Argument(ordinal=0),)))

    with pytest.raises(NamedArgRequiredError):
        await prepare_async_bound(driver, "SELECT ?", Item)
    statement.close.assert_awaited_once_with()


@pytest.mark.anyio
async def test_async_in_tx_derives_new_statement(field_mapper: FieldMapper) -> None:
    driver = MagicMock()
    driver.prepare_parameters.side_effect = list
    driver.execute_prepared = AsyncMock(return_value=ExecResult(1))
    prepared = AsyncPreparedStatement(driver, "UPDATE items SET name = ? WHERE id = ?", ARGUMENTS)
    reprepared = AsyncPreparedStatement(driver, prepared.sql, prepared.arguments)
    tx = MagicMock()
    tx.prepare_statement = AsyncMock(return_value=reprepared)
    bound = AsyncBoundStatement(prepared, make_binder(Item, ARGUMENTS, field_mapper))

    derived = await bound.in_tx(tx)

    assert derived.statement is reprepared
    assert bound.statement is prepared
    assert await derived.execute(Item(name="x", id=3)) == ExecResult(1)
    driver.execute_prepared.assert_awaited_once_with(prepared.sql, [3, "x"])


@pytest.mark.anyio
async def test_async_mapping_failure_closes_prepared_query(field_mapper: FieldMapper) -> None:
    driver = MagicMock()
    driver.statement_config.field_mapper = field_mapper
    statement = AsyncMock()
    driver.prepare_query = AsyncMock(return_value=(statement, (Argument("x"),)))

    with pytest.raises(ImproperConfigurationError):
        await prepare_async_bound_query(driver, "SELECT :x", Clash)
    statement.close.assert_awaited_once_with()
