import contextlib
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Optional

import aiosqlite

from sqlbound.adapters.sqlite.driver import sqlite_statement_config
from sqlbound.driver import AsyncDriverAdapterBase
from sqlbound.exceptions import DatabaseError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlbound.core.statement import StatementConfig

__all__ = ("AiosqliteConnection", "AiosqliteCursor", "AiosqliteDriver", "aiosqlite_statement_config")

AiosqliteConnection = aiosqlite.Connection

aiosqlite_statement_config = sqlite_statement_config


class AiosqliteCursor:
    """Async context manager for aiosqlite cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "AiosqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[aiosqlite.Cursor] = None

    async def __aenter__(self) -> "aiosqlite.Cursor":
        self.cursor = await self.connection.cursor()
        return self.cursor

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(aiosqlite.Error):
                await self.cursor.close()


class AiosqliteDriver(AsyncDriverAdapterBase):
    """Asynchronous SQLite driver built on ``aiosqlite``."""

    __slots__ = ()

    def __init__(
        self,
        connection: "AiosqliteConnection",
        statement_config: "Optional[StatementConfig]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        super().__init__(
            connection=connection,
            statement_config=statement_config or aiosqlite_statement_config,
            driver_features=driver_features,
        )

    def with_cursor(self, connection: "AiosqliteConnection") -> "AiosqliteCursor":
        return AiosqliteCursor(connection)

    @asynccontextmanager
    async def handle_database_exceptions(self) -> "AsyncGenerator[None, None]":
        """Wrap ``aiosqlite`` errors in :class:`~sqlbound.exceptions.DatabaseError`."""
        try:
            yield
        except aiosqlite.Error as e:
            msg = f"SQLite database error: {e}"
            raise DatabaseError(msg) from e

    async def begin(self) -> None:
        """Begin a database transaction unless one is already open."""
        async with self.handle_database_exceptions():
            if not self.connection.in_transaction:
                await self.connection.execute("BEGIN")

    async def rollback(self) -> None:
        async with self.handle_database_exceptions():
            await self.connection.rollback()

    async def commit(self) -> None:
        async with self.handle_database_exceptions():
            await self.connection.commit()
