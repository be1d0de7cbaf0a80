"""aiosqlite adapter for sqlbound."""

from sqlbound.exceptions import MissingDependencyError
from sqlbound.typing import AIOSQLITE_INSTALLED

if not AIOSQLITE_INSTALLED:
    raise MissingDependencyError("aiosqlite")

from sqlbound.adapters.aiosqlite.config import AiosqliteConfig, AiosqliteConnectionParams  # noqa: E402
from sqlbound.adapters.aiosqlite.driver import AiosqliteConnection, AiosqliteCursor, AiosqliteDriver  # noqa: E402

__all__ = ("AiosqliteConfig", "AiosqliteConnection", "AiosqliteConnectionParams", "AiosqliteCursor", "AiosqliteDriver")
