"""\
Error and warnings
==================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Monday, August 18 2025

This module provides various error classes that are used throughout
this framework. Every error carries a human readable message and, where
it makes sense, the name of the attribute that caused it.
"""

from __future__ import annotations

import typing as t

__all__: tuple[str, ...] = (
    "AttrError",
    "BaseError",
    "ConfigValidationError",
    "DeclarationError",
    "ReadOnlyError",
    "ValidationError",
)


class BaseError(Exception):
    """Base error class for all exceptions in the framework.

    This class serves as the base for all custom exceptions in the
    framework, allowing for consistent error handling and logging.

    :param message: The error message to be displayed.
    :param attribute: Name of the attribute the error relates to,
        defaults to `None`.
    """

    def __init__(
        self,
        message: str,
        *args: t.Any,
        attribute: str | None = None,
    ) -> None:
        """Initialise the error with a message and optional context."""
        super().__init__(message, *args)
        if attribute:
            self.message = f"{message} (Attribute: {attribute!r})"
        else:
            self.message = message
        self.attribute = attribute

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.message

    def __repr__(self) -> str:
        """Return a string representation of the exception."""
        return f"<{type(self).__name__}(message={self.message!r})>"


class AttrError(BaseError):
    """Errors related to attribute lifecycle misuse."""


class DeclarationError(AttrError):
    """Errors related to malformed class-level attribute declarations."""


class ReadOnlyError(AttrError, AttributeError):
    """Errors related to writing a read-only attribute.

    This error is raised synchronously by `set` when the targeted
    attribute is declared read-only. Keys processed before the failing
    one in the same call keep their new values.
    """

    def __init__(self, key: str) -> None:
        """Initialise the read-only error for the given attribute."""
        super().__init__(f"attribute is read-only: {key!r}")
        self.attribute = key


class ValidationError(BaseError):
    """Errors related to validation check failure."""


class ConfigValidationError(ValidationError):
    """Errors related to configuration validation failure."""
