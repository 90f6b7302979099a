"""
Structured Logging - Text and JSON log output.

Provides:
- TextFormatter: human-readable lines, optionally coloured, with key=value context
- JSONFormatter: one JSON object per line for log aggregation
- ContextLogger: logger wrapper that binds context fields to every record
- setup_logging: configure the root logger for the CLI
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any


# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

NOISY_LOGGERS = ("asyncio", "watchfiles", "watchfiles.main")


def _extract_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Output fields: timestamp, level, logger, message, plus optional context
    (from ``extra``), location, exception details and static fields.
    """

    def __init__(
        self,
        static_fields: dict[str, Any] | None = None,
        include_location: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
    ):
        super().__init__()
        self.static_fields = dict(static_fields or {})
        self.include_location = include_location
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {}

        if self.include_timestamp:
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
            data["timestamp"] = ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"
        if self.include_level:
            data["level"] = record.levelname
        if self.include_logger:
            data["logger"] = record.name

        data["message"] = record.getMessage()
        data.update(self.static_fields)

        context = _extract_context(record)
        if context:
            data["context"] = context

        if self.include_location:
            data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter: ``time LEVEL logger: message key=value``."""

    LEVEL_COLORS = {
        "DEBUG": "\033[2m",
        "INFO": "\033[36m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1m\033[31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_context: bool = True):
        super().__init__(datefmt="%H:%M:%S")
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[level]}{level:<8}{self.RESET}"
        else:
            level = f"{level:<8}"

        line = f"{self.formatTime(record, self.datefmt)} {level} {record.name}: {record.getMessage()}"

        if self.include_context:
            context = _extract_context(record)
            if context:
                line += " " + " ".join(f"{k}={v}" for k, v in context.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger:
    """
    Logger wrapper that attaches bound context to every record.

    Example:
        log = get_logger("SyncEngine", root="/repo")
        log.bind(operation="stage").info("Staging files")
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    def bind(self, **context: Any) -> ContextLogger:
        """Return a new logger with extra context merged in."""
        return ContextLogger(self._logger.name, {**self._context, **context})

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        extra = {**self._context, **kwargs.pop("extra", {})}
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str, **context: Any) -> ContextLogger:
    """Get a ContextLogger with optional bound context."""
    return ContextLogger(name, context)


def setup_logging(
    level: int | str = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure the root logger.

    Existing root handlers are removed, so calling this twice does not
    duplicate output.

    Args:
        level: Logging level (int or name)
        log_format: "text" or "json"
        log_file: Also write logs to this file (never coloured)
        static_fields: Fields added to every JSON record
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    def make_formatter(use_colors: bool) -> logging.Formatter:
        if log_format == "json":
            return JSONFormatter(static_fields=static_fields)
        return TextFormatter(use_colors=use_colors)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(make_formatter(use_colors=sys.stderr.isatty()))
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(make_formatter(use_colors=False))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
