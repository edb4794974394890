"""\
Events
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Wednesday, July 23 2025
Last updated on: Tuesday, August 19 2025

This module provides the named-event facility that attribute hosts use
to publish `change:<attr>` notifications, together with the catalog of
events the attribute engine writes to its logs.

The facility is deliberately synchronous. A subscriber runs inline
before `emit` returns and may emit or write attributes again.
"""

from __future__ import annotations

import typing as t
from enum import Enum
from typing import Final

__all__: tuple[str, ...] = (
    "ALL_EVENTS",
    "EVENTS",
    "EventCategory",
    "EventSeverity",
    "Events",
)

ALL_EVENTS: Final[str] = "all"

_Callback = t.Callable[..., t.Any]


class EventCategory(Enum):
    """Event classification for log organisation."""

    LIFECYCLE = "lifecycle"
    CHANGE = "change"
    ERROR = "error"


class EventSeverity(Enum):
    """Event severity levels for filtering."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


EVENTS: Final[dict[str, dict[str, t.Any]]] = {
    "attrs_initialising": {
        "category": EventCategory.LIFECYCLE,
        "severity": EventSeverity.DEBUG,
        "description": "Host beginning attribute initialisation",
    },
    "attrs_initialised": {
        "category": EventCategory.LIFECYCLE,
        "severity": EventSeverity.DEBUG,
        "description": "Host attribute set installed and primed",
    },
    "handler_bound": {
        "category": EventCategory.LIFECYCLE,
        "severity": EventSeverity.DEBUG,
        "description": "Change handler method subscribed automatically",
    },
    "attribute_changed": {
        "category": EventCategory.CHANGE,
        "severity": EventSeverity.DEBUG,
        "description": "Attribute value changed and event emitted",
    },
    "attribute_deferred": {
        "category": EventCategory.CHANGE,
        "severity": EventSeverity.DEBUG,
        "description": "Attribute value changed silently, event deferred",
    },
    "changes_flushed": {
        "category": EventCategory.CHANGE,
        "severity": EventSeverity.DEBUG,
        "description": "Deferred change events emitted",
    },
    "readonly_violation": {
        "category": EventCategory.ERROR,
        "severity": EventSeverity.WARNING,
        "description": "Write attempted on a read-only attribute",
    },
}


class _Subscription(t.NamedTuple):
    callback: _Callback
    context: t.Any
    once: bool


class Events:
    """Mixin providing named-event subscription and emission.

    Subscribers are kept per event name in subscription order. The
    special event `all` receives every emission with the event name
    prepended to the payload.

    .. code-block:: python

        class Model(Events):
            pass

        model = Model()
        model.on("change:color", lambda new, old, key: print(new))
        model.emit("change:color", "red", "black", "color")
    """

    def _subscriptions(self) -> dict[str, list[_Subscription]]:
        """Return the subscription table, creating it on first use."""
        try:
            return self.__dict__["_events"]
        except KeyError:
            table: dict[str, list[_Subscription]] = {}
            self.__dict__["_events"] = table
            return table

    def on(
        self,
        event: str,
        callback: _Callback,
        context: t.Any = None,
    ) -> t.Self:
        """Subscribe a callback to an event.

        :param event: The event name, for example `change:color`.
        :param callback: The callable to invoke on emission.
        :param context: Optional object passed as the first argument to
            the callback, defaults to `None`.
        :return: The host itself for chaining.
        """
        self._subscribe(event, callback, context, once=False)
        return self

    def once(
        self,
        event: str,
        callback: _Callback,
        context: t.Any = None,
    ) -> t.Self:
        """Subscribe a callback for a single emission of an event."""
        self._subscribe(event, callback, context, once=True)
        return self

    def _subscribe(
        self,
        event: str,
        callback: _Callback,
        context: t.Any,
        *,
        once: bool,
    ) -> None:
        if not callable(callback):
            raise TypeError(f"callback for {event!r} must be callable")
        subscription = _Subscription(callback, context, once)
        self._subscriptions().setdefault(event, []).append(subscription)

    def off(
        self,
        event: str | None = None,
        callback: _Callback | None = None,
    ) -> t.Self:
        """Remove subscriptions.

        With no arguments every subscription is removed. With only an
        event name, every subscription of that event is removed. With a
        callback, only that callback is removed (from every event when
        no event name is given).

        :param event: The event name, defaults to `None`.
        :param callback: The callback to remove, defaults to `None`.
        :return: The host itself for chaining.
        """
        table = self._subscriptions()
        if event is None and callback is None:
            table.clear()
            return self
        events = [event] if event is not None else list(table)
        for name in events:
            if name not in table:
                continue
            if callback is None:
                del table[name]
                continue
            remaining = [
                subscription
                for subscription in table[name]
                if subscription.callback != callback
            ]
            if remaining:
                table[name] = remaining
            else:
                del table[name]
        return self

    def emit(self, event: str, *args: t.Any) -> bool:
        """Emit an event, calling its subscribers synchronously.

        Subscribers of `event` are called first, in subscription order,
        followed by the subscribers of the `all` event which receive the
        event name as their first argument. Exceptions raised by a
        subscriber propagate to the caller.

        :param event: The event name.
        :param args: The payload passed to every subscriber.
        :return: `False` if any subscriber returned `False`, otherwise
            `True`.
        """
        table = self._subscriptions()
        result = True
        batches: list[tuple[str, tuple[t.Any, ...]]] = [(event, args)]
        if event != ALL_EVENTS:
            batches.append((ALL_EVENTS, (event, *args)))
        for name, payload in batches:
            subscriptions = list(table.get(name, ()))
            for subscription in subscriptions:
                if subscription.once:
                    self._discard(name, subscription)
                if subscription.context is None:
                    returned = subscription.callback(*payload)
                else:
                    returned = subscription.callback(
                        subscription.context, *payload
                    )
                if returned is False:
                    result = False
        return result

    trigger = emit

    def _discard(self, event: str, subscription: _Subscription) -> None:
        subscriptions = self._subscriptions().get(event)
        if subscriptions and subscription in subscriptions:
            subscriptions.remove(subscription)
            if not subscriptions:
                del self._subscriptions()[event]
