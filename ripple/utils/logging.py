"""\
Logging
=======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Friday, July 04 2025
Last updated on: Tuesday, August 19 2025

This module provides logging utilities and configuration helpers for
the framework. It builds on the standard Python logging library with
formatters for coloured and JSON output and automatic handling of the
structured `extra` fields the attribute engine attaches to its records.

Nothing here runs on import. Applications call :func:`configure` (or
:func:`ripple.setup`) to install handlers; libraries only ever call
:func:`get_logger`.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import re
import sys
import typing as t
from pathlib import Path

from ripple.utils.filesystem import mkdir

if t.TYPE_CHECKING:
    from ripple.core.config import LoggerConfig

__all__: list[str] = [
    "ColouredFormatter",
    "JSONFormatter",
    "RippleFormatter",
    "configure",
    "dehumanise",
    "get_logger",
]

_HANDLER_TAG: t.Final[str] = "_ripple_handler"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    This formatter outputs log records in JSON format, which is useful
    for structured logging, usually in the production environments
    where logs are collected and processed by log management systems.

    :param extras: Whether to include extra fields in output, defaults
        to `True`. If set to `False`, only the standard log fields will
        be included in the output.
    """

    def __init__(self, extras: bool = True) -> None:
        """Initialise the JSON formatter instance."""
        super().__init__()
        self.extras = extras

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        :param record: The log record to format.
        :return: JSON-formatted log message.
        """
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if self.extras:
            for key, value in record.__dict__.items():
                if (
                    key not in RippleFormatter.LOG_RECORD_ATTRS
                    and key not in payload
                    and not key.startswith("_")
                ):
                    payload[key] = value
        return json.dumps(payload, default=str)


class RippleFormatter(logging.Formatter):
    """Custom formatter that automatically includes extra fields.

    This formatter detects extra fields (those not part of the standard
    `LogRecord` attributes), formats them according to `extra_format`
    and makes them available as `%(extra)s` in the format string. It
    also exposes `%(qualName)s`, the logger name joined with the
    function that logged the record.

    :param fmt: The format string for log messages, defaults to `None`.
    :param datefmt: The format string for timestamps in log messages,
        defaults to `None`.
    :param extra_format: Format string for individual extra fields,
        defaults to `key: value` pairs.
    :param extra_separator: Separator between multiple extra fields,
        defaults to a single space.
    :var LOG_RECORD_ATTRS: Set of standard `LogRecord` attributes.
    """

    LOG_RECORD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
        "taskName",
        "qualName",
        "extra",
    }

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        extra_format: str = "{key}: {value}",
        extra_separator: str = " ",
    ) -> None:
        """Initialise the custom formatter."""
        super().__init__(fmt, datefmt)
        self.extra = extra_format
        self.extra_separator = extra_separator

    def extras(self, record: logging.LogRecord) -> str:
        """Return the formatted extra fields of a record."""
        entries = [
            self.extra.format(key=key, value=value)
            for key, value in sorted(record.__dict__.items())
            if key not in self.LOG_RECORD_ATTRS and not key.startswith("_")
        ]
        return self.extra_separator.join(entries)

    def make_qualname(self, record: logging.LogRecord) -> str:
        """Return the logger name qualified with the logging function."""
        if record.funcName and record.funcName != "<module>":
            return f"{record.name}.{record.funcName}"
        return record.name

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with automatic extra field handling.

        :param record: The log record to format.
        :return: Formatted log message with extra fields.
        """
        clone = logging.makeLogRecord(record.__dict__)
        clone.extra = self.extras(record)
        clone.qualName = self.make_qualname(record)
        return super().format(clone)


class ColouredFormatter(RippleFormatter):
    """Formatter that colours the level and qualified name on a TTY.

    Colours are only applied when `is_tty` is set, ensuring that log
    files remain free of ANSI escape sequences.

    :var COLORS: Dictionary mapping log levels to ANSI colour codes.
    """

    COLORS = {
        "DEBUG": "\x1b[38;5;14m",
        "INFO": "\x1b[38;5;41m",
        "WARNING": "\x1b[38;5;215m",
        "ERROR": "\x1b[38;5;204m",
        "CRITICAL": "\x1b[38;5;197m",
        "QUALNAME": "\x1b[38;5;140m",
        "RESET": "\x1b[0m",
    }

    is_tty: bool = False

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, with colours only for TTY output."""
        clone = logging.makeLogRecord(record.__dict__)
        clone.extra = self.extras(record)
        qualname = self.make_qualname(record)
        if self.is_tty:
            colour = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            clone.levelname = f"{colour}{record.levelname:>8s}{reset}"
            clone.qualName = f"{self.COLORS['QUALNAME']}{qualname}{reset}"
        else:
            clone.levelname = f"{record.levelname:>8s}"
            clone.qualName = qualname
        return logging.Formatter.format(self, clone)


def _formatter(
    fmt: str,
    datefmt: str,
    *,
    as_json: bool,
    is_tty: bool,
) -> logging.Formatter:
    if as_json:
        return JSONFormatter()
    formatter = ColouredFormatter(
        fmt=fmt,
        datefmt=datefmt,
        extra_format="[{key}: {value}]",
        extra_separator=" ",
    )
    formatter.is_tty = is_tty
    return formatter


def configure(config: LoggerConfig, name: str = "ripple") -> logging.Logger:
    """Configure the framework logger from configuration settings.

    This function installs a console handler and, when enabled, a
    rotating file handler on the `name` logger. Handlers installed by an
    earlier call are replaced, handlers added by the application are
    left alone.

    :param config: Logging configuration settings.
    :param name: The logger to configure, defaults to `ripple`.
    :return: The configured logger.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()
    handlers: list[logging.Handler] = []
    if config.tty.enable:
        tty = logging.StreamHandler(sys.stdout)
        tty.setLevel(getattr(logging, config.tty.level.upper()))
        tty.setFormatter(
            _formatter(
                config.tty.fmt,
                config.datefmt,
                as_json=config.as_json,
                is_tty=config.tty.colour and sys.stdout.isatty(),
            )
        )
        handlers.append(tty)
    if config.file.enable:
        path = Path(mkdir(config.file.path)) / config.file.output
        file = logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=dehumanise(config.file.max_size),
            backupCount=config.file.backups,
            encoding=config.file.encoding,
        )
        file.setLevel(getattr(logging, config.file.level.upper()))
        file.setFormatter(
            _formatter(
                config.file.fmt,
                config.datefmt,
                as_json=config.as_json,
                is_tty=False,
            )
        )
        handlers.append(file)
    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.level.upper()))
    return logger


def dehumanise(size: str) -> int:
    """Parse size string to bytes.

    This function converts a human-readable size string (like `10MB`,
    `1GB`, etc.) into an integer representing the size in bytes.

    :param size: Size string like `10MB`, `1GB`, etc.
    :return: Size in bytes.
    :raises ValueError: If the size string cannot be parsed.
    """
    size = size.upper().strip()
    multipliers = {
        "B": 1,
        "KB": 1024,
        "MB": 1024**2,
        "GB": 1024**3,
        "TB": 1024**4,
    }
    matched = re.match(r"^(\d+(?:\.\d+)?)\s*([KMGT]?B?)$", size)
    if not matched:
        raise ValueError(f"Invalid size format: {size}")
    value, unit = matched.groups()
    if unit and not unit.endswith("B"):
        unit += "B"
    return int(float(value) * multipliers.get(unit or "B", 1))


def get_logger(logger_name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    :param logger_name: Logger name.
    :return: Logger instance.
    """
    return logging.getLogger(logger_name)
