"""Integration tests for the SQLite driver and configuration."""

import datetime
from collections.abc import Generator
from decimal import Decimal

import pytest

from sqlbound.adapters.sqlite import SqliteConfig, SqliteDriver
from sqlbound.builder import Insert, Select
from sqlbound.exceptions import ExtraParameterError, MissingParameterError, NotFoundError

pytestmark = pytest.mark.integration


@pytest.fixture
def sqlite_session() -> Generator[SqliteDriver, None, None]:
    config = SqliteConfig()
    with config.provide_session() as session:
        session.execute("CREATE TABLE test_table (id INTEGER PRIMARY KEY, name TEXT, value TEXT)")
        yield session


def test_memory_database_uses_shared_cache_uri() -> None:
    config = SqliteConfig(connection_config={"database": ":memory:"})
    assert config.connection_config["database"].startswith("file:memory_")
    assert config.connection_config["uri"] is True
    assert config.connection_config["isolation_level"] is None


def test_file_uri_enables_uri_mode() -> None:
    config = SqliteConfig(connection_config={"database": "file:test.db?mode=memory"})
    assert config.connection_config["uri"] is True


def test_positional_and_named_parameters(sqlite_session: SqliteDriver) -> None:
    sqlite_session.execute("INSERT INTO test_table (id, name) VALUES (?, ?)", 1, "a")
    sqlite_session.execute("INSERT INTO test_table (id, name) VALUES (:id, :name)", id=2, name="b")
    assert sqlite_session.select_one("SELECT name FROM test_table WHERE id = :id", id=2) == {"name": "b"}
    assert [row["id"] for row in sqlite_session.select("SELECT id FROM test_table ORDER BY id")] == [1, 2]


def test_missing_and_extra_parameters(sqlite_session: SqliteDriver) -> None:
    with pytest.raises(MissingParameterError):
        sqlite_session.execute("INSERT INTO test_table (id, name) VALUES (:id, :name)", id=1)
    with pytest.raises(ExtraParameterError):
        sqlite_session.execute("INSERT INTO test_table (id) VALUES (?)", 1, 2)


def test_builder_values_are_bound(sqlite_session: SqliteDriver) -> None:
    sqlite_session.execute(Insert(table="test_table", dialect="sqlite").columns("id", "name").values(5, "e"))
    row = sqlite_session.select_one(Select(dialect="sqlite").select("name").from_("test_table").where_eq("id", 5))
    assert row["name"] == "e"


@pytest.mark.parametrize(
    ("value", "stored"),
    [
        pytest.param(True, "1", id="bool"),
        pytest.param(Decimal("1.50"), "1.50", id="decimal"),
        pytest.param(datetime.date(2024, 1, 2), "2024-01-02", id="date"),
        pytest.param(datetime.datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05", id="datetime"),
        pytest.param({"a": 1}, '{"a":1}', id="dict"),
        pytest.param((1, 2), "[1,2]", id="tuple"),
    ],
)
def test_values_are_coerced(sqlite_session: SqliteDriver, value: object, stored: str) -> None:
    sqlite_session.execute("INSERT INTO test_table (id, value) VALUES (1, CAST(:value AS TEXT))", value=value)
    assert sqlite_session.select_one("SELECT value FROM test_table WHERE id = 1")["value"] == stored


def test_select_one_without_rows(sqlite_session: SqliteDriver) -> None:
    with pytest.raises(NotFoundError):
        sqlite_session.select_one("SELECT id FROM test_table")


def test_iter_rows(sqlite_session: SqliteDriver) -> None:
    for index in range(3):
        sqlite_session.execute("INSERT INTO test_table (id, name) VALUES (?, ?)", index, str(index))
    assert [row["name"] for row in sqlite_session.iter_rows("SELECT name FROM test_table ORDER BY id")] == [
        "0",
        "1",
        "2",
    ]


def test_prepared_statement_reuse(sqlite_session: SqliteDriver) -> None:
    statement, arguments = sqlite_session.prepare("INSERT INTO test_table (id, name) VALUES (:id, :name)")
    assert [argument.name for argument in arguments] == ["id", "name"]
    statement.execute(1, "a")
    statement.execute(2, "b")
    assert len(statement.driver.fetch_all_prepared("SELECT id FROM test_table", [])) == 2
