"""\
Base Tools
==========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Tuesday, July 22 2025
Last updated on: Wednesday, August 20 2025

This module provides the ready-made host for reactive attributes. The
:class:`Base` class combines the event facility with the attribute
engine, so subclasses only need to declare their `attrs`.
"""

from __future__ import annotations

import typing as t
from collections.abc import Iterator
from collections.abc import Mapping

from ripple.core.attributes import Attributes
from ripple.core.events import Events

__all__: tuple[str, ...] = (
    "Base",
    "Observable",
)

_AttributeStream = Iterator[tuple[str, t.Any]]

# NOTE(xames3): These limits only keep representations readable and are
# not meant to be changed by users.
_SEQUENCE_LIMIT: t.Final[int] = 5
_DICTIONARY_LIMIT: t.Final[int] = 3
_STRING_LIMIT: t.Final[int] = 60


class Observable:
    """Provide observable behaviour for derived classes.

    This class serves as a mixin for objects that expose their internal
    state in a consistent and controlled manner. It formats the values
    yielded by `__inspect_attrs__` with sensible limits so large data
    structures are summarised rather than fully expanded.
    """

    def __inspect_attrs__(self) -> _AttributeStream:
        """Inspect and yield public attributes of the instance.

        :yield: Tuples of attribute names and their values.

        .. note::

            Only attributes that do not start with underscore and are
            not None are included in the introspection output.
        """
        for attr, value in getattr(self, "__dict__", {}).items():
            if not attr.startswith("_") and value is not None:
                yield attr, value

    def _format(self, value: t.Any) -> str:
        """Format value for string representation.

        Circular references are replaced with type indicators, long
        strings are truncated, and large sequences and dictionaries show
        their type and length rather than their full contents.

        :param value: The value to format.
        :return: A formatted string representation of the value.
        """
        if value is self:
            return f"<circular-{type(self).__name__}>"
        elif isinstance(value, str) and len(value) > _STRING_LIMIT:
            return repr(f"{value[:_STRING_LIMIT - 3]}...")
        elif (
            isinstance(value, (list, tuple, set))
            and len(value) > _SEQUENCE_LIMIT
        ):
            return f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict) and len(value) > _DICTIONARY_LIMIT:
            return f"dict({len(value)} items)"
        return repr(value)

    def __repr__(self) -> str:
        """Return a string representation of the instance."""
        attrs = [
            f"{name}={self._format(value)}"
            for name, value in self.__inspect_attrs__()
        ]
        return f"{type(self).__name__}({', '.join(attrs)})"


class Base(Events, Attributes, Observable):
    """Host object with reactive attributes and change events.

    Subclasses declare their attributes in a class-level `attrs`
    mapping. The constructor initialises the attribute set from the
    given configuration.

    .. code-block:: python

        class Counter(Base):
            attrs = {"count": 0}

            def _onChangeCount(self, value, previous, key):
                print(f"{previous} -> {value}")

        counter = Counter({"count": 1})
        counter.set("count", 2)

    :param config: User supplied attribute values, defaults to `None`.
    """

    def __init__(self, config: Mapping[str, t.Any] | None = None) -> None:
        """Initialise the host and its attributes."""
        self.init_attrs(config)

    def __inspect_attrs__(self) -> _AttributeStream:
        """Yield the current attribute values."""
        yield from self._iter_attrs()
