"""SQLite adapter for sqlbound."""

from sqlbound.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlbound.adapters.sqlite.driver import SqliteConnection, SqliteCursor, SqliteDriver, sqlite_statement_config

__all__ = (
    "SqliteConfig",
    "SqliteConnection",
    "SqliteConnectionParams",
    "SqliteCursor",
    "SqliteDriver",
    "sqlite_statement_config",
)
