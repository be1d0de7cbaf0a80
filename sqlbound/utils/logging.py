"""Logging helpers for sqlbound.

Every module logs through ``get_logger()`` under the ``sqlbound`` namespace.
Statement lifecycle events carry their SQL and value type as structured
fields, which ``StructuredFormatter`` writes out as JSON lines.
"""

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlbound.utils.serializers import to_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "StructuredFormatter",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlbound"
EXTRA_FIELDS_ATTR = "extra_fields"

_correlation_id: "ContextVar[Optional[str]]" = ContextVar("sqlbound_correlation_id", default=None)


def set_correlation_id(correlation_id: "Optional[str]") -> None:
    """Tag log entries emitted from the current context with ``correlation_id``."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> "Optional[str]":
    return _correlation_id.get()


def get_logger(name: "Optional[str]" = None) -> logging.Logger:
    """Return the logger ``sqlbound.<name>``, or the package logger when ``name`` is omitted."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class StructuredFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: "LogRecord") -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, EXTRA_FIELDS_ATTR, None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return to_json(entry)


def configure_logging(
    level: "Union[str, int]" = "INFO",
    *,
    structured: bool = True,
    handler: "Optional[logging.Handler]" = None,
) -> logging.Logger:
    """Attach a single handler to the ``sqlbound`` logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Level name or number.
        structured: Write JSON lines instead of plain text.
        handler: Handler to install. Defaults to a stream handler on stderr.

    Returns:
        The package logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = handler or logging.StreamHandler(sys.stderr)
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    return root


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached as structured fields.

    Fields are only computed into the record when ``level`` is enabled.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={EXTRA_FIELDS_ATTR: extra_fields}, stacklevel=2)
