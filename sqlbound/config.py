from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar, Union

from sqlbound.core.statement import StatementConfig
from sqlbound.typing import ConnectionT

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from contextlib import AbstractAsyncContextManager, AbstractContextManager

    from sqlbound.driver import AsyncDriverAdapterBase, SyncDriverAdapterBase


__all__ = ("DatabaseConfigProtocol", "DriverT", "NoPoolAsyncConfig", "NoPoolSyncConfig")

DriverT = TypeVar("DriverT", bound="Union[SyncDriverAdapterBase, AsyncDriverAdapterBase]")


class DatabaseConfigProtocol(ABC, Generic[ConnectionT, DriverT]):
    """Protocol defining the interface for database configurations."""

    __slots__ = ("connection_config", "driver_features", "statement_config")
    driver_type: "ClassVar[type[Any]]"
    connection_type: "ClassVar[type[Any]]"
    is_async: "ClassVar[bool]" = False

    def __init__(
        self,
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        self.connection_config: dict[str, Any] = dict(connection_config or {})
        self.statement_config = statement_config or StatementConfig()
        self.driver_features: dict[str, Any] = dict(driver_features or {})

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.connection_config == other.connection_config and self.driver_features == other.driver_features

    def __repr__(self) -> str:
        parts = ", ".join(
            [
                f"connection_config={self.connection_config!r}",
                f"statement_config={self.statement_config!r}",
                f"driver_features={self.driver_features!r}",
            ]
        )
        return f"{type(self).__name__}({parts})"

    @abstractmethod
    def create_connection(self) -> "Union[ConnectionT, Awaitable[ConnectionT]]":
        """Create and return a new database connection."""
        raise NotImplementedError

    @abstractmethod
    def provide_connection(
        self, *args: Any, **kwargs: Any
    ) -> "Union[AbstractContextManager[ConnectionT], AbstractAsyncContextManager[ConnectionT]]":
        """Provide a database connection context manager."""
        raise NotImplementedError

    @abstractmethod
    def provide_session(
        self, *args: Any, **kwargs: Any
    ) -> "Union[AbstractContextManager[DriverT], AbstractAsyncContextManager[DriverT]]":
        """Provide a database session context manager."""
        raise NotImplementedError


class NoPoolSyncConfig(DatabaseConfigProtocol[ConnectionT, DriverT]):
    """Base class for sync database configurations that open one connection per session."""

    __slots__ = ()
    is_async: "ClassVar[bool]" = False


class NoPoolAsyncConfig(DatabaseConfigProtocol[ConnectionT, DriverT]):
    """Base class for async database configurations that open one connection per session."""

    __slots__ = ()
    is_async: "ClassVar[bool]" = True
