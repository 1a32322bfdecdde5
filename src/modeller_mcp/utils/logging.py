"""Logging setup for modeller-mcp.

Records may carry an ``extra_fields`` mapping (operation id, user id,
audit entry id). The plain format drops it; the structured format
appends it as ``key=value`` pairs after the message.
"""

import logging
import sys
import time
from typing import Any, Mapping

ROOT_LOGGER = "modeller_mcp"

PLAIN_FORMAT = "%(levelname)s: %(message)s"
STRUCTURED_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def format_fields(fields: Mapping[str, Any]) -> str:
    """Render context fields as ``key=value`` pairs, quoting values with spaces."""
    parts = []
    for key, value in fields.items():
        if value is None:
            continue
        text = str(value)
        if not text or any(c.isspace() or c == "=" for c in text):
            text = '"' + text.replace('"', '\\"') + '"'
        parts.append(f"{key}={text}")
    return " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Formatter that appends a record's context fields to the message.

    Timestamps are UTC in ISO 8601 form to line up with audit entries.
    """

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        if datefmt:
            return super().formatTime(record, datefmt)
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", self.converter(record.created))
        return f"{stamp}.{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = getattr(record, "extra_fields", None)
        if fields:
            rendered = format_fields(fields)
            if rendered:
                return f"{message} {rendered}"
        return message


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    structured: bool = False,
) -> None:
    """Install a single stderr handler on the package logger.

    Calling it again replaces the previous handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        structured: Use timestamps and append context fields
    """
    if format_string is None:
        format_string = STRUCTURED_FORMAT if structured else PLAIN_FORMAT

    formatter_class = StructuredFormatter if structured else logging.Formatter
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter_class(format_string))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = [handler]
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger placed under the package logger.

    Args:
        name: Module name, e.g. ``security.gateway``

    Returns:
        Logger named ``modeller_mcp.<name>``
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Attaches fixed context fields to every record.

    Fields passed per call through ``extra={"extra_fields": ...}`` are
    merged over the fixed ones.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["extra_fields"] = {**self.extra, **extra.get("extra_fields", {})}
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger_with_context(name: str, **context: Any) -> LoggerAdapter:
    """Get a logger whose records carry ``context`` as extra fields."""
    return LoggerAdapter(get_logger(name), context)
