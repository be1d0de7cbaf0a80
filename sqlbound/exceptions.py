from typing import Any, Optional

__all__ = (
    "BindingError",
    "DatabaseError",
    "ExtraParameterError",
    "ImproperConfigurationError",
    "MissingArgError",
    "MissingDependencyError",
    "MissingParameterError",
    "NamedArgRequiredError",
    "NilArgumentError",
    "NotFoundError",
    "ParameterError",
    "SQLBoundError",
    "SQLBuilderError",
    "SQLParsingError",
    "StatementClosedError",
    "TransactionError",
)


class SQLBoundError(Exception):
    """Base exception class from which all sqlbound exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLBoundError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLBoundError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlbound[{install_package or package}]' to install sqlbound with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLBoundError):
    """Improper Configuration error.

    Raised when a configuration value or a bindable type cannot be used as declared.
    """


class SQLParsingError(SQLBoundError):
    """Issues parsing SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues parsing SQL statement."
        super().__init__(message)


class SQLBuilderError(SQLBoundError):
    """Issues Building or Generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


# -- SQL Parameter Errors --
class ParameterError(SQLBoundError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when required parameters are missing."""


class ExtraParameterError(ParameterError):
    """Raised when extra parameters are provided."""


# -- Binding Errors --
class BindingError(SQLBoundError):
    """Base class for errors raised while binding a value object to a statement."""


class NamedArgRequiredError(BindingError):
    """A placeholder in the rendered query has no name.

    Positional placeholders cannot be filled from the fields of a value object,
    so a single anonymous placeholder rejects the whole query for binding.
    """

    argument: Any

    def __init__(self, argument: Any) -> None:
        self.argument = argument
        super().__init__(f"named argument required, got {argument!r}")


class MissingArgError(BindingError):
    """A named placeholder has no field of the same name on the argument type."""

    name: str

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"missing arg {name}")


class NilArgumentError(BindingError):
    """The value object passed for binding was ``None``."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "object is nil")


# -- Execution Errors --
class StatementClosedError(SQLBoundError):
    """Raised when a closed prepared statement is used."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "statement is closed")


class TransactionError(SQLBoundError):
    """Raised when a transaction is used after it was committed or rolled back."""


class DatabaseError(SQLBoundError):
    """Raised when the underlying database driver reports an error."""


class NotFoundError(SQLBoundError):
    """A single database result was required but none were found."""
