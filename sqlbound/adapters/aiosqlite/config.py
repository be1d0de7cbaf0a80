"""aiosqlite database configuration."""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union, cast

import aiosqlite

from sqlbound.adapters.aiosqlite.driver import AiosqliteConnection, AiosqliteDriver, aiosqlite_statement_config
from sqlbound.adapters.sqlite.config import SqliteConnectionParams, normalize_connection_config
from sqlbound.config import NoPoolAsyncConfig
from sqlbound.exceptions import DatabaseError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlbound.core.statement import StatementConfig

__all__ = ("AiosqliteConfig", "AiosqliteConnectionParams")

AiosqliteConnectionParams = SqliteConnectionParams


class AiosqliteConfig(NoPoolAsyncConfig[AiosqliteConnection, AiosqliteDriver]):
    """aiosqlite configuration opening one connection per session."""

    __slots__ = ()
    driver_type: "ClassVar[type[AiosqliteDriver]]" = AiosqliteDriver
    connection_type: "ClassVar[type[AiosqliteConnection]]" = AiosqliteConnection

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[AiosqliteConnectionParams, dict[str, Any]]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        super().__init__(
            connection_config=normalize_connection_config(cast("dict[str, Any]", connection_config or {})),
            statement_config=statement_config or aiosqlite_statement_config,
            driver_features=driver_features,
        )

    async def create_connection(self) -> AiosqliteConnection:
        """Open a new aiosqlite connection.

        Raises:
            DatabaseError: The connection could not be opened.
        """
        try:
            return await aiosqlite.connect(**self.connection_config)
        except aiosqlite.Error as e:
            msg = f"Could not open SQLite database: {e}"
            raise DatabaseError(msg) from e

    @asynccontextmanager
    async def provide_connection(self, *args: Any, **kwargs: Any) -> "AsyncGenerator[AiosqliteConnection, None]":
        connection = await self.create_connection()
        try:
            yield connection
        finally:
            await connection.close()

    @asynccontextmanager
    async def provide_session(
        self, *args: Any, statement_config: "Optional[StatementConfig]" = None, **kwargs: Any
    ) -> "AsyncGenerator[AiosqliteDriver, None]":
        """Provide an async driver session.

        Yields:
            AiosqliteDriver: A driver on a new connection
        """
        async with self.provide_connection(*args, **kwargs) as connection:
            yield self.driver_type(
                connection=connection,
                statement_config=statement_config or self.statement_config,
                driver_features=self.driver_features,
            )
