import contextlib
import datetime
import sqlite3
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from sqlbound.core.parameters import ParameterStyle
from sqlbound.core.statement import StatementConfig
from sqlbound.driver import SyncDriverAdapterBase
from sqlbound.exceptions import DatabaseError
from sqlbound.utils.serializers import to_json

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("SqliteConnection", "SqliteCursor", "SqliteDriver", "sqlite_statement_config")

SqliteConnection = sqlite3.Connection

sqlite_statement_config = StatementConfig(
    dialect="sqlite",
    parameter_style=ParameterStyle.QMARK,
    type_coercion_map={
        bool: int,
        datetime.datetime: lambda v: v.isoformat(),
        datetime.date: lambda v: v.isoformat(),
        Decimal: str,
        dict: to_json,
        list: to_json,
        tuple: lambda v: to_json(list(v)),
    },
)


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteDriver(SyncDriverAdapterBase):
    """Synchronous SQLite driver built on the standard library ``sqlite3`` module."""

    __slots__ = ()

    def __init__(
        self,
        connection: "SqliteConnection",
        statement_config: "Optional[StatementConfig]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        super().__init__(
            connection=connection,
            statement_config=statement_config or sqlite_statement_config,
            driver_features=driver_features,
        )

    def with_cursor(self, connection: "SqliteConnection") -> "SqliteCursor":
        return SqliteCursor(connection)

    @contextmanager
    def handle_database_exceptions(self) -> "Generator[None, None, None]":
        """Wrap ``sqlite3`` errors in :class:`~sqlbound.exceptions.DatabaseError`."""
        try:
            yield
        except sqlite3.Error as e:
            msg = f"SQLite database error: {e}"
            raise DatabaseError(msg) from e

    def begin(self) -> None:
        """Begin a database transaction."""
        with self.handle_database_exceptions():
            if not self.connection.in_transaction:
                self.connection.execute("BEGIN")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self.handle_database_exceptions():
            self.connection.rollback()

    def commit(self) -> None:
        """Commit the current transaction."""
        with self.handle_database_exceptions():
            self.connection.commit()
