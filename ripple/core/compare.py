"""\
Value comparator
================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Monday, August 18 2025
Last updated on: Tuesday, August 19 2025

This module decides whether two attribute values should be treated as
unchanged. It is not a general purpose equality check: it only answers
the question "should a write of `b` over `a` fire a change event?".

The rules, checked in order, are::

    1. identical objects are equal
    2. two empty values (None, "", [], (), {}) are equal
    3. values of differing kinds are not equal
    4. strings, numbers, booleans and dates compare by value, with two
       NaNs being equal and signed zeros being different
    5. compiled patterns compare by pattern and flags
    6. sequences of primitives compare by their textual rendering
    7. dictionaries compare one level deep
    8. anything else is not equal
"""

from __future__ import annotations

import datetime
import math
import numbers
import re
import typing as t

__all__: tuple[str, ...] = (
    "is_empty_attr_value",
    "is_equal",
    "kind_of",
)

_DATE_TYPES: t.Final[tuple[type, ...]] = (
    datetime.date,
    datetime.time,
)


def kind_of(value: t.Any) -> str:
    """Return the runtime kind used to compare two values.

    Integers and floats share the `number` kind while booleans have
    their own. Anything not covered by the comparator rules reports its
    type name.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, numbers.Number):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, _DATE_TYPES):
        return "date"
    if isinstance(value, re.Pattern):
        return "pattern"
    if isinstance(value, list):
        return "list"
    if isinstance(value, tuple):
        return "tuple"
    if isinstance(value, dict):
        return "mapping"
    return type(value).__name__


def is_empty_attr_value(value: t.Any) -> bool:
    """Return `True` if value is one of the empty attribute values.

    The empty values are `None`, an empty string, an empty list or
    tuple, and a dictionary with no keys.
    """
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def _is_primitive(value: t.Any) -> bool:
    """Return `True` if value is a scalar compared by value."""
    return value is None or isinstance(
        value, (bool, numbers.Number, str, *_DATE_TYPES)
    )


def _strict_equal(a: t.Any, b: t.Any) -> bool:
    """Compare identity, or value for two primitives of the same kind."""
    if a is b:
        return True
    if _is_primitive(a) and _is_primitive(b) and kind_of(a) == kind_of(b):
        return bool(a == b)
    return False


def _render_item(value: t.Any) -> str | None:
    """Render a sequence item, or return `None` if it is not primitive."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return _render(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, _DATE_TYPES):
        return value.isoformat()
    if _is_primitive(value):
        return str(value)
    return None


def _render(sequence: list[t.Any] | tuple[t.Any, ...]) -> str | None:
    """Render a sequence as comma separated text.

    Nested sequences are flattened into the same text. The rendering is
    `None` as soon as a non-primitive item is found.
    """
    parts: list[str] = []
    for item in sequence:
        rendered = _render_item(item)
        if rendered is None:
            return None
        parts.append(rendered)
    return ",".join(parts)


def _equal_numbers(a: t.Any, b: t.Any) -> bool:
    """Compare numbers, treating NaNs as equal and signed zeros apart."""
    try:
        a_nan = math.isnan(a)
        b_nan = math.isnan(b)
    except (OverflowError, TypeError, ValueError):
        return bool(a == b)
    if a_nan or b_nan:
        return a_nan and b_nan
    if a == 0 and b == 0:
        return math.copysign(1, a) == math.copysign(1, b)
    return bool(a == b)


def is_equal(a: t.Any, b: t.Any) -> bool:
    """Decide whether two attribute values are semantically equal.

    :param a: The previous value.
    :param b: The incoming value.
    :return: `True` if a write of `b` over `a` is not a change.
    """
    if a is b:
        return True
    if is_empty_attr_value(a) and is_empty_attr_value(b):
        return True
    kind = kind_of(a)
    if kind != kind_of(b):
        return False
    if kind in ("string", "boolean", "date"):
        return bool(a == b)
    if kind == "number":
        return _equal_numbers(a, b)
    if kind == "pattern":
        return a.pattern == b.pattern and a.flags == b.flags
    if kind in ("list", "tuple"):
        # NOTE(xames3): Sequences holding anything other than primitives
        # are reported as changed. Missing a change event is worse than
        # firing a redundant one.
        rendered_a = _render(a)
        rendered_b = _render(b)
        if rendered_a is None or rendered_b is None:
            return False
        return rendered_a == rendered_b
    if kind == "mapping":
        if a.keys() != b.keys():
            return False
        return all(_strict_equal(value, b[key]) for key, value in a.items())
    return False
