"""SQLite database configuration."""

import sqlite3
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union, cast

from typing_extensions import NotRequired

from sqlbound.adapters.sqlite.driver import SqliteConnection, SqliteDriver, sqlite_statement_config
from sqlbound.config import NoPoolSyncConfig
from sqlbound.exceptions import DatabaseError
from sqlbound.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlbound.core.statement import StatementConfig

__all__ = ("SqliteConfig", "SqliteConnectionParams")

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


def normalize_connection_config(connection_config: "dict[str, Any]") -> "dict[str, Any]":
    """Return connection parameters ready for ``sqlite3.connect``.

    ``:memory:`` and a missing database become a uniquely named shared-cache
    in-memory URI, so connections opened from one configuration see the same
    database while any of them is open. Connections default to autocommit;
    transactions are opened explicitly.
    """
    config = dict(connection_config)
    if "database" not in config or config["database"] == ":memory:":
        config["database"] = f"file:memory_{uuid.uuid4().hex}?mode=memory&cache=shared"
        config["uri"] = True
    elif str(config["database"]).startswith("file:") and not config.get("uri"):
        logger.debug("Database URI detected (%s) but uri=True not set, enabling URI mode", config["database"])
        config["uri"] = True
    config.setdefault("isolation_level", None)
    return config


class SqliteConfig(NoPoolSyncConfig[SqliteConnection, SqliteDriver]):
    """SQLite configuration opening one connection per session."""

    __slots__ = ()
    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    connection_type: "ClassVar[type[SqliteConnection]]" = SqliteConnection

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Parameters passed to ``sqlite3.connect``
            statement_config: Default SQL statement configuration
            driver_features: Optional driver feature configuration
        """
        super().__init__(
            connection_config=normalize_connection_config(cast("dict[str, Any]", connection_config or {})),
            statement_config=statement_config or sqlite_statement_config,
            driver_features=driver_features,
        )

    def create_connection(self) -> SqliteConnection:
        """Open a new SQLite connection.

        Raises:
            DatabaseError: The connection could not be opened.
        """
        try:
            return sqlite3.connect(**self.connection_config)
        except sqlite3.Error as e:
            msg = f"Could not open SQLite database: {e}"
            raise DatabaseError(msg) from e

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[SqliteConnection, None, None]":
        """Provide a SQLite connection that is closed on exit.

        Yields:
            SqliteConnection: A new connection
        """
        connection = self.create_connection()
        try:
            yield connection
        finally:
            connection.close()

    @contextmanager
    def provide_session(
        self, *args: Any, statement_config: "Optional[StatementConfig]" = None, **kwargs: Any
    ) -> "Generator[SqliteDriver, None, None]":
        """Provide a SQLite driver session.

        Yields:
            SqliteDriver: A driver on a new connection
        """
        with self.provide_connection(*args, **kwargs) as connection:
            yield self.driver_type(
                connection=connection,
                statement_config=statement_config or self.statement_config,
                driver_features=self.driver_features,
            )
