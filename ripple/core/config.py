"""\
Configurations
==============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Tuesday, August 19 2025

This module provides the configurations used to set up logging and
tracing for this framework. The attribute engine itself needs no
configuration.
"""

from __future__ import annotations

import typing as t

from ripple.core.error import ConfigValidationError
from ripple.utils.logging import dehumanise

if t.TYPE_CHECKING:
    from collections.abc import Iterable

__all__: tuple[str, ...] = (
    "Config",
    "ConsoleLoggerConfig",
    "FileLoggerConfig",
    "LoggerConfig",
    "TelemetryConfig",
    "config_property",
)

_ALLOWED_LOG_LEVELS: tuple[str, ...] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)
_DEFAULT_LOG_FMT: t.Final[str] = (
    "%(asctime)s %(levelname)s %(qualName)s:%(lineno)d %(extra)s: %(message)s"
)
_DEFAULT_LOG_DATEFMT: t.Final[str] = "%Y-%m-%dT%H:%M:%SZ"
_FLAG: t.Final[tuple[bool, bool]] = (True, False)


class config_property[T]:  # noqa: N801
    """Descriptor for validated, optionally frozen configuration values.

    Each property keeps a class-wide default and stores per-instance
    overrides in the instance `__dict__`. Assignments are checked
    against `allowed`, `check` and `between` before they land, and the
    default is checked once when the owning class is created.

    .. code-block:: python

        class ConsoleLoggerConfig:
            level = config_property("DEBUG", allowed=_ALLOWED_LOG_LEVELS)

        config = ConsoleLoggerConfig()
        config.level = "TRACE"  # raises ConfigValidationError

    :param default: Value returned until the instance overrides it.
    :param frozen: Reject every assignment, defaults to `False`.
    :param description: Human readable description, defaults to `None`.
    :param allowed: Values the property may take, defaults to `None`.
    :param check: Predicate the value must satisfy, defaults to `None`.
    :param between: Inclusive `(minimum, maximum)` range, defaults to
        `None`.
    """

    __slots__: tuple[str, ...] = (
        "allowed",
        "between",
        "check",
        "default",
        "description",
        "frozen",
        "property",
        "validate",
    )

    def __init__(
        self,
        default: T,
        *,
        frozen: bool = False,
        description: str | None = None,
        allowed: Iterable[T] | None = None,
        check: t.Callable[[T], bool] | None = None,
        between: tuple[int | float, int | float] | None = None,
    ) -> None:
        self.default = default
        self.frozen = frozen
        self.description = description
        self.allowed = None if allowed is None else tuple(allowed)
        self.check = check
        self.between = between
        self.property: str = ""
        self.validate = (allowed, check, between) != (None, None, None)

    def __set_name__(self, owner: type, name: str) -> None:
        """Record the storage name and validate the default.

        :raises ConfigValidationError: If the default value is invalid.
        """
        self.property = f"_{name}"
        if self.default is None or not self.validate:
            return
        try:
            self.__validate__(self.default)
        except ConfigValidationError as error:
            raise ConfigValidationError(
                f"got invalid value for {name!r}: {error}",
                attribute=f"{owner.__name__}.{name}",
            ) from error

    @t.overload
    def __get__(self, instance: None, owner: type) -> config_property[T]: ...

    @t.overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(
        self,
        instance: object | None,
        owner: type,
    ) -> config_property[T] | T:
        if instance is None:
            return self
        return instance.__dict__.get(self.property, self.default)

    def __set__(self, instance: object, value: T) -> None:
        """Store a per-instance value after checking it.

        :raises ConfigValidationError: If the property is frozen or the
            value is invalid.
        """
        if self.frozen:
            raise ConfigValidationError(
                "cannot modify frozen property",
                attribute=self.property[1:],
            )
        if self.validate:
            self.__validate__(value)
        instance.__dict__[self.property] = value

    def __validate__(self, value: t.Any) -> None:
        """Raise if value breaks one of the declared constraints.

        Constraints are checked in the order `allowed`, `check` and
        `between`, and the first one that fails is reported.

        :raises ConfigValidationError: If a constraint is not met.
        """
        if self.allowed is not None and value not in self.allowed:
            choices = ", ".join(str(choice) for choice in self.allowed)
            raise ConfigValidationError(
                f"{value!r} is not one of the allowed values ({choices})"
            )
        if self.check is not None:
            self._run_check(value)
        if self.between is not None:
            low, high = self.between
            if not low <= value <= high:
                raise ConfigValidationError(
                    f"{value!r} is not between {low} and {high} (inclusive)"
                )

    def _run_check(self, value: t.Any) -> None:
        try:
            passed = self.check(value)  # type: ignore[misc]
        except Exception as error:
            raise ConfigValidationError(
                f"property validation failed for {value!r} with "
                f"message: {error}"
            ) from error
        if not passed:
            raise ConfigValidationError("property validation failed")


def _is_size(value: str) -> bool:
    """Return `True` if value reads as a human size like `10MB`."""
    try:
        dehumanise(value)
    except (AttributeError, ValueError):
        return False
    return True


class FileLoggerConfig:
    """Rotating log file settings.

    Off by default, so importing or configuring the framework never
    writes to disk unless asked to. The directory is created when the
    handler is installed, not when the configuration is built.
    """

    enable: config_property[bool] = config_property(
        False,
        allowed=_FLAG,
        description="Install the rotating file handler",
    )
    level: config_property[str] = config_property(
        "INFO",
        allowed=_ALLOWED_LOG_LEVELS,
        description="Lowest level written to the file",
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    path: config_property[str] = config_property(
        "logs",
        check=lambda x: bool(x.strip()),
        description="Directory holding the log files",
    )
    output: config_property[str] = config_property("ripple.log")
    encoding: config_property[str] = config_property("utf-8", frozen=True)
    max_size: config_property[str] = config_property(
        "10MB",
        check=_is_size,
        description="Size at which the file is rotated, e.g. 512KB",
    )
    backups: config_property[int] = config_property(
        5,
        between=(0, 100),
        description="Rotated files kept next to the live one",
    )


class ConsoleLoggerConfig:
    """Standard output log settings.

    Colours are applied only when `colour` is set and standard output
    is attached to a terminal.
    """

    enable: config_property[bool] = config_property(
        True,
        allowed=_FLAG,
        description="Install the standard output handler",
    )
    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
        description="Lowest level printed",
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    colour: config_property[bool] = config_property(True, allowed=_FLAG)


class LoggerConfig:
    """Settings of the `ripple` logger and its handlers.

    `level` gates every record before any handler sees it, so the
    engine's debug records about bindings and changes only show up once
    it is lowered to `DEBUG`.
    """

    level: config_property[str] = config_property(
        "WARNING",
        allowed=_ALLOWED_LOG_LEVELS,
        description="Level of the framework logger",
    )
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    as_json: config_property[bool] = config_property(
        False,
        allowed=_FLAG,
        description="Emit one JSON document per record",
    )

    def __init__(self) -> None:
        self.file = FileLoggerConfig()
        self.tty = ConsoleLoggerConfig()


class TelemetryConfig:
    """OpenTelemetry tracing settings.

    The engine always opens `ripple.init_attrs` and `ripple.change`
    spans. They are only exported when `enable` is set.
    """

    enable: config_property[bool] = config_property(False, allowed=_FLAG)
    name: config_property[str | None] = config_property(
        None,
        description="Service name reported instead of `Config.name`",
    )


class Config:
    """Root of the framework configuration, consumed by `setup`."""

    name: config_property[str] = config_property("ripple", frozen=True)
    version: config_property[str] = config_property("20.8.2025", frozen=True)
    debug: config_property[bool] = config_property(
        False,
        allowed=_FLAG,
        description="Print spans to the console instead of exporting",
    )

    def __init__(self) -> None:
        self.logger = LoggerConfig()
        self.telemetry = TelemetryConfig()
