"""\
Attributes
==========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Monday, August 18 2025
Last updated on: Wednesday, August 20 2025

This module provides the reactive attribute engine. A class declares
named state slots in a class-level `attrs` mapping, each with a default
value and optionally a getter, a setter and a read-only flag. Instances
combine the inherited defaults with their own configuration and emit a
`change:<attr>` event whenever the effective value of a slot changes.

Declarations accumulate along the class hierarchy. A derived class can
override the default of an ancestor's attribute while keeping its
getter, setter and read-only flag, and dictionary defaults are merged
key by key rather than replaced.

.. code-block:: python

    class Shape(Base):
        attrs = {"color": "black", "size": {"value": 1}}

    class Circle(Shape):
        attrs = {"size": 2}

        def _onChangeColor(self, value, previous, key):
            print(f"{key}: {previous} -> {value}")

    circle = Circle({"color": "red"})
    circle.get("size")  # 2
    circle.set("color", "blue")  # prints "color: red -> blue"

The host must provide `on` and `emit`, see :class:`ripple.core.events.Events`.
"""

from __future__ import annotations

import contextlib
import logging
import typing as t
from dataclasses import dataclass
from dataclasses import field
from typing import Final

from opentelemetry import trace

from ripple.core.compare import is_equal
from ripple.core.error import AttrError
from ripple.core.error import DeclarationError
from ripple.core.error import ReadOnlyError
from ripple.core.events import EVENTS
from ripple.core.events import EventSeverity
from ripple.core.merger import clone
from ripple.core.merger import is_plain_mapping
from ripple.core.merger import merge
from ripple.utils.logging import get_logger

if t.TYPE_CHECKING:
    from collections.abc import Iterator
    from collections.abc import Mapping

__all__: tuple[str, ...] = (
    "AttributeMeta",
    "AttributeRecord",
    "Attributes",
    "attribute",
    "get_inherited_attrs",
    "normalize",
    "on_change",
)

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

Getter = t.Callable[[t.Any, t.Any, str], t.Any]
Setter = t.Callable[[t.Any, t.Any, str], t.Any]


class AttributeRecord(t.TypedDict, total=False):
    """Canonical attribute declaration."""

    value: t.Any
    getter: Getter
    setter: Setter
    read_only: bool


AttributeSet = dict[str, AttributeRecord]

ATTR_SPECIAL_KEYS: Final[tuple[str, ...]] = (
    "value",
    "getter",
    "setter",
    "read_only",
    "readOnly",
)
CHANGE_EVENT_PREFIX: Final[str] = "change:"
HANDLER_PREFIXES: Final[tuple[str, ...]] = ("_onChange", "_on_change_")

_LEVELS: Final[dict[EventSeverity, int]] = {
    EventSeverity.DEBUG: logging.DEBUG,
    EventSeverity.INFO: logging.INFO,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.ERROR: logging.ERROR,
}

_MISSING: t.Any = object()


def _log(event: str, message: str, **extra: t.Any) -> None:
    """Log a catalogued engine event at its severity."""
    entry = EVENTS[event]
    level = _LEVELS[entry["severity"]]
    if logger.isEnabledFor(level):
        extra["event"] = event
        extra["category"] = entry["category"].value
        logger.log(level, message, extra=extra)


@dataclass(frozen=True, slots=True)
class attribute:  # noqa: N801
    """Explicit structured attribute declaration.

    This is the tagged form of a class-level declaration. Only the
    fields that are actually supplied end up in the canonical record, so
    a derived class can redeclare the default while inheriting its
    ancestor's getter, setter and read-only flag.

    :param value: The default value, defaults to unset.
    :param getter: Callable `getter(host, value, key)` transforming the
        stored value on read, defaults to `None`.
    :param setter: Callable `setter(host, value, key)` transforming the
        incoming value on write, defaults to `None`.
    :param read_only: Whether public writes are rejected, defaults to
        `False`.
    :raises DeclarationError: If both a setter and the read-only flag
        are given.
    """

    value: t.Any = _MISSING
    getter: Getter | None = field(default=None, kw_only=True)
    setter: Setter | None = field(default=None, kw_only=True)
    read_only: bool = field(default=False, kw_only=True)

    def __post_init__(self) -> None:
        if self.read_only and self.setter is not None:
            raise DeclarationError(
                "a read-only attribute cannot declare a setter"
            )

    def record(self) -> AttributeRecord:
        """Return the canonical record of this declaration."""
        record: dict[str, t.Any] = {}
        if self.value is not _MISSING:
            record["value"] = self.value
        if self.getter is not None:
            record["getter"] = self.getter
        if self.setter is not None:
            record["setter"] = self.setter
        if self.read_only:
            record["read_only"] = True
        return t.cast(AttributeRecord, clone(record))


def on_change(*names: str) -> t.Callable[[t.Callable[..., t.Any]], t.Any]:
    """Register the decorated method as a change handler.

    The method is subscribed to `change:<name>` for every given name
    when the host initialises its attributes. It receives the new value,
    the previous value and the attribute name.

    :param names: The attribute names to watch.
    :return: A decorator returning the method unchanged.
    """
    if not names:
        raise DeclarationError("on_change needs at least one attribute name")

    def decorator(func: t.Callable[..., t.Any]) -> t.Callable[..., t.Any]:
        existing = getattr(func, "__attr_handlers__", ())
        setattr(func, "__attr_handlers__", (*existing, *names))
        return func

    return decorator


def _is_declaration(value: t.Any) -> bool:
    """Return `True` if a plain mapping reads as a structured record."""
    return is_plain_mapping(value) and any(
        key in value for key in ATTR_SPECIAL_KEYS
    )


def normalize(
    attrs: Mapping[str, t.Any],
    user_values: bool = False,
) -> AttributeSet:
    """Convert raw declarations into canonical attribute records.

    Bare values become `{"value": <value>}`. At class level (when
    `user_values` is `False`) an :class:`attribute` or a dictionary
    carrying one of `value`, `getter`, `setter`, `read_only` or
    `readOnly` is read as an already structured declaration. User
    configuration is always wrapped, so a config value that happens to
    be a dictionary with a `value` key is kept as data.

    :param attrs: Mapping of attribute names to raw declarations.
    :param user_values: Whether `attrs` holds user configuration,
        defaults to `False`.
    :return: A fresh attribute set sharing no structure with `attrs`.
    """
    result: AttributeSet = {}
    for key, declared in clone(attrs).items():
        if user_values:
            result[key] = {"value": declared}
        elif isinstance(declared, attribute):
            result[key] = declared.record()
        elif _is_declaration(declared):
            if "readOnly" in declared:
                declared.setdefault("read_only", declared.pop("readOnly"))
            result[key] = t.cast(AttributeRecord, declared)
        else:
            result[key] = {"value": declared}
    return result


def _special_props(cls: type) -> tuple[str, ...]:
    """Return the validated special property names of a class."""
    props = getattr(cls, "props_in_attrs", ())
    if isinstance(props, str) or not all(
        isinstance(name, str) for name in props
    ):
        raise DeclarationError(
            f"{cls.__name__}.props_in_attrs must be a sequence of names"
        )
    return tuple(props)


def _own_declarations(
    cls: type,
    special_props: tuple[str, ...],
) -> dict[str, t.Any]:
    """Return the declarations a class owns, special properties included."""
    own = cls.__dict__.get("attrs")
    if own is None:
        declared: dict[str, t.Any] = {}
    elif hasattr(own, "keys") and hasattr(own, "__getitem__"):
        declared = {key: own[key] for key in own.keys()}
    else:
        raise DeclarationError(
            f"{cls.__name__}.attrs must be a mapping, "
            f"got {type(own).__name__}"
        )
    for name in special_props:
        if name in cls.__dict__:
            declared[name] = cls.__dict__[name]
    return declared


def get_inherited_attrs(
    cls: type,
    special_props: tuple[str, ...] = (),
) -> AttributeSet:
    """Fold the declarations of a class hierarchy into one attribute set.

    Levels are visited from the furthest ancestor to `cls` itself, so a
    more derived level wins on conflicts while dictionary values are
    merged key by key. Levels without declarations are skipped. The
    fold never mutates a class-level mapping.

    :param cls: The most derived class.
    :param special_props: Names of special properties whose class-level
        values take part in the fold, defaults to `()`.
    :return: A fresh inherited attribute set.
    """
    result: AttributeSet = {}
    for klass in reversed(cls.__mro__):
        declared = _own_declarations(klass, special_props)
        if declared:
            merge(t.cast(dict[str, t.Any], result), normalize(declared))
    return result


def _conventional_attrs(name: str) -> tuple[str, ...]:
    """Return the attributes a conventionally named handler watches.

    `_on_change_<attr>` watches `attr`. `_onChange<Attr>` watches both
    `attr` and `Attr`, since capitalising either gives the same name.
    """
    camel, snake = HANDLER_PREFIXES
    if name.startswith(snake) and len(name) > len(snake):
        return (name[len(snake) :],)
    if name.startswith(camel) and len(name) > len(camel):
        attr = name[len(camel) :]
        lowered = f"{attr[:1].lower()}{attr[1:]}"
        return (lowered,) if lowered == attr else (lowered, attr)
    return ()


def _collect_handlers(cls: type) -> dict[str, tuple[str, ...]]:
    """Build the table of change handler methods of a class hierarchy.

    The table maps attribute names to method names, both for methods
    decorated with :func:`on_change` and for methods following the
    `_onChange<Attr>` or `_on_change_<attr>` naming conventions.
    """
    table: dict[str, list[str]] = {}
    seen: set[str] = set()
    for klass in cls.__mro__:
        for name, member in klass.__dict__.items():
            if name in seen or not callable(member):
                continue
            seen.add(name)
            watched = (
                *getattr(member, "__attr_handlers__", ()),
                *_conventional_attrs(name),
            )
            for attr in watched:
                names = table.setdefault(attr, [])
                if name not in names:
                    names.append(name)
    return {attr: tuple(names) for attr, names in table.items()}


def _template(cls: type) -> tuple[AttributeSet, dict[str, tuple[str, ...]]]:
    """Return the cached attribute template and handler table of a class."""
    cached = cls.__dict__.get("__attrs_template__")
    handlers = cls.__dict__.get("__attrs_handlers__")
    if cached is None or handlers is None:
        cached = get_inherited_attrs(cls, _special_props(cls))
        handlers = _collect_handlers(cls)
        type.__setattr__(cls, "__attrs_template__", cached)
        type.__setattr__(cls, "__attrs_handlers__", handlers)
    return cached, handlers


class AttributeMeta(type):
    """Metaclass that composes attribute declarations at definition time.

    When a class is created, its inherited attribute set is folded once
    and cached as `__attrs_template__`, and its change handler methods
    are collected into `__attrs_handlers__`. Instances clone the
    template instead of walking the hierarchy again.
    Malformed declarations are reported when the class is defined.

    .. warning::

        The template is computed when the class is created. Mutating a
        class-level `attrs` mapping afterwards has no effect on new
        instances.
    """

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, t.Any],
        **kwargs: t.Any,
    ) -> type:
        """Create a new class with its attribute template."""
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)
        _template(cls)
        return cls


class Attributes(metaclass=AttributeMeta):
    """Mixin implementing the attribute read/write contract.

    The host must also provide `on(event, callback)` and
    `emit(event, *args)`. Call :meth:`init_attrs` exactly once, before
    any :meth:`get` or :meth:`set`.

    :var attrs: Class-level declarations, replaced on each instance by
        the live attribute set after initialisation.
    :var props_in_attrs: Names of attributes mirrored as plain
        properties on the host.
    """

    attrs: t.ClassVar[Mapping[str, t.Any]]
    props_in_attrs: t.ClassVar[tuple[str, ...]] = ()

    def init_attrs(self, config: Mapping[str, t.Any] | None = None) -> None:
        """Install and prime the attribute set of this host.

        The inherited defaults are merged with the normalised `config`,
        change handlers are subscribed, the set is installed, attributes
        with a setter that appear in `config` are written silently so
        the setter runs, and special properties are copied onto the
        host. No change event fires during any of these steps. If a
        setter raises while priming, the set and the handlers are
        removed again so the call can be retried.

        :param config: User supplied attribute values, defaults to
            `None`.
        :raises AttrError: If the attributes are already initialised.
        """
        if "attrs" in self.__dict__:
            raise AttrError("attributes already initialised")
        host = type(self).__qualname__
        with tracer.start_as_current_span("ripple.init_attrs") as span:
            span.set_attribute("ripple.host", host)
            _log("attrs_initialising", f"Initialising {host} attributes")
            template, handlers = _template(type(self))
            attrs = t.cast(AttributeSet, clone(template))
            user_values: AttributeSet = {}
            if config:
                user_values = normalize(config, user_values=True)
                merge(t.cast(dict[str, t.Any], attrs), user_values)
            bound = self._bind_handlers(attrs, handlers)
            self.__dict__["attrs"] = attrs
            self.__dict__["_changed_attrs"] = {}
            try:
                self._prime_setter_attrs(user_values)
            except Exception:
                for event, callback in bound:
                    self.off(event, callback)
                del self.__dict__["attrs"]
                del self.__dict__["_changed_attrs"]
                raise
            for name in _special_props(type(self)):
                if name in attrs:
                    setattr(self, name, self.get(name))
            span.set_attribute("ripple.attrs", len(attrs))
            _log(
                "attrs_initialised",
                f"Initialised {len(attrs)} attributes on {host}",
                host=host,
            )

    def _bind_handlers(
        self,
        attrs: AttributeSet,
        handlers: dict[str, tuple[str, ...]],
    ) -> list[tuple[str, t.Callable[..., t.Any]]]:
        """Subscribe change handler methods from the handler table.

        Every handler of a declared attribute is bound. Methods
        registered with :func:`on_change` are also bound when their
        attribute is not declared yet, since a later write creates it.

        :return: The `(event, callback)` pairs that were subscribed.
        """
        bound: list[tuple[str, t.Callable[..., t.Any]]] = []
        for attr, names in handlers.items():
            if attr not in attrs:
                names = tuple(
                    name
                    for name in names
                    if attr
                    in getattr(
                        getattr(type(self), name), "__attr_handlers__", ()
                    )
                )
            for name in names:
                event = f"{CHANGE_EVENT_PREFIX}{attr}"
                callback = getattr(self, name)
                self.on(event, callback)
                bound.append((event, callback))
                _log(
                    "handler_bound",
                    f"Bound {name} to {event}",
                    attribute=attr,
                    handler=name,
                )
        return bound

    @contextlib.contextmanager
    def _initialising(self) -> Iterator[None]:
        """Guard writes so that no change event escapes."""
        self.__dict__["_initialising_attrs"] = True
        try:
            yield
        finally:
            self.__dict__.pop("_initialising_attrs", None)
            self.__dict__["_changed_attrs"] = {}

    def _prime_setter_attrs(self, user_values: AttributeSet) -> None:
        """Write user values of setter-backed attributes silently."""
        attrs = self._attrs()
        with self._initialising():
            for key, record in user_values.items():
                if attrs[key].get("setter") is not None:
                    self.set(key, record.get("value"), silent=True)

    def _attrs(self) -> AttributeSet:
        """Return the live attribute set of this host."""
        try:
            return self.__dict__["attrs"]
        except KeyError:
            raise AttrError(
                f"attributes of {type(self).__qualname__} are not "
                "initialised, call init_attrs() first"
            ) from None

    def get(self, key: str) -> t.Any:
        """Return the value of an attribute.

        If a getter is declared, it receives the stored value and the
        key and its result is returned.

        :param key: The attribute name.
        :return: The attribute value, or `None` if it is undeclared.
        """
        record = self._attrs().get(key)
        if record is None:
            return None
        value = record.get("value")
        getter = record.get("getter")
        if getter is not None:
            return getter(self, value, key)
        return value

    @t.overload
    def set(
        self,
        key: str,
        value: t.Any,
        *,
        silent: bool = ...,
        override: bool = ...,
    ) -> t.Self: ...

    @t.overload
    def set(
        self,
        key: Mapping[str, t.Any],
        *,
        silent: bool = ...,
        override: bool = ...,
    ) -> t.Self: ...

    def set(
        self,
        key: str | Mapping[str, t.Any],
        value: t.Any = _MISSING,
        *,
        silent: bool = False,
        override: bool = False,
    ) -> t.Self:
        """Write one or several attributes.

        For every key, the setter (if any) transforms the incoming
        value first. When neither `override` is set nor either side is
        anything but a dictionary, the incoming dictionary is merged
        onto a copy of the previous one. The result is stored and, if
        it differs from the previous value, a `change:<key>` event is
        emitted with `(value, previous, key)`, or deferred until
        :meth:`change` when `silent` is set. Writing an undeclared key
        creates a bare attribute.

        :param key: The attribute name, or a mapping of names to values.
        :param value: The value when `key` is a name.
        :param silent: Defer change events, defaults to `False`.
        :param override: Replace dictionaries instead of merging them,
            defaults to `False`.
        :return: The host itself for chaining.
        :raises ReadOnlyError: If a targeted attribute is read-only.
            Keys written before it keep their new values.
        """
        if isinstance(key, str):
            if value is _MISSING:
                raise TypeError("set() missing a value for attribute")
            values: Mapping[str, t.Any] = {key: value}
        else:
            if value is not _MISSING:
                raise TypeError("set() takes no value with a mapping")
            values = key
        now = self._attrs()
        initialising = self.__dict__.get("_initialising_attrs", False)
        for name, incoming in values.items():
            record = now.setdefault(name, {})
            if record.get("read_only"):
                _log(
                    "readonly_violation",
                    f"Rejected write to read-only attribute {name!r}",
                    attribute=name,
                )
                raise ReadOnlyError(name)
            setter = record.get("setter")
            if setter is not None:
                incoming = setter(self, incoming, name)
            previous = self.get(name)
            if (
                not override
                and is_plain_mapping(previous)
                and is_plain_mapping(incoming)
            ):
                incoming = merge(clone(previous), incoming)
            record["value"] = incoming
            if initialising or is_equal(previous, incoming):
                continue
            if silent:
                self.__dict__["_changed_attrs"][name] = (incoming, previous)
                _log(
                    "attribute_deferred",
                    f"Deferred change of {name!r}",
                    attribute=name,
                )
            else:
                _log(
                    "attribute_changed",
                    f"Attribute {name!r} changed",
                    attribute=name,
                )
                self.emit(
                    f"{CHANGE_EVENT_PREFIX}{name}", incoming, previous, name
                )
        return self

    def change(self) -> t.Self:
        """Emit every deferred change event and clear the buffer.

        The buffer is swapped out before emitting, so silent writes made
        by a handler during the flush are kept for the next call. Each
        entry leaves the buffer as it is emitted. If a subscriber
        raises, the entries not emitted yet go back into the buffer
        ahead of those queued during the flush, and the error
        propagates.

        :return: The host itself for chaining.
        """
        self._attrs()
        pending = self.__dict__["_changed_attrs"]
        if not pending:
            return self
        self.__dict__["_changed_attrs"] = {}
        count = len(pending)
        with tracer.start_as_current_span("ripple.change") as span:
            span.set_attribute("ripple.changes", count)
            try:
                for name in list(pending):
                    value, previous = pending.pop(name)
                    self.emit(
                        f"{CHANGE_EVENT_PREFIX}{name}", value, previous, name
                    )
            finally:
                if pending:
                    pending.update(self.__dict__["_changed_attrs"])
                    self.__dict__["_changed_attrs"] = pending
            _log(
                "changes_flushed",
                f"Flushed {count} deferred changes",
                changes=count,
            )
        return self

    def _iter_attrs(self) -> Iterator[tuple[str, t.Any]]:
        """Yield attribute names and their current values."""
        for name in self.__dict__.get("attrs", {}):
            yield name, self.get(name)
