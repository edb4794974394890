"""\
Merger
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Monday, August 18 2025
Last updated on: Monday, August 18 2025

This module provides the deep-merge utility used for folding attribute
declarations across a class hierarchy and for partial updates of
mapping-valued attributes.

Only lists and plain dictionaries are treated structurally. Lists are
copied shallowly and dictionaries are merged recursively, while every
other value (scalars, tuples, callables, arbitrary objects) is stored by
reference. This way a derived class can never mutate a default its
ancestor declared.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Mapping

__all__: tuple[str, ...] = (
    "clone",
    "is_plain_mapping",
    "merge",
)


def is_plain_mapping(value: t.Any) -> t.TypeGuard[dict[str, t.Any]]:
    """Return `True` if value is a plain structured record."""
    return isinstance(value, dict)


def merge(
    receiver: dict[str, t.Any],
    supplier: Mapping[str, t.Any],
) -> dict[str, t.Any]:
    """Deep-merge supplier into receiver and return the receiver.

    For every key in `supplier`, lists are copied before being stored
    and dictionaries are merged into the matching receiver entry (which
    is replaced by a fresh dictionary if it is absent or not a
    dictionary itself). Any other value is stored as-is.

    :param receiver: The dictionary to merge into. It is mutated.
    :param supplier: The mapping to merge from. It is never mutated.
    :return: The mutated receiver.
    """
    for key, value in supplier.items():
        if isinstance(value, list):
            value = list(value)
        elif is_plain_mapping(value):
            previous = receiver.get(key)
            if not is_plain_mapping(previous):
                previous = {}
            value = merge(previous, value)
        receiver[key] = value
    return receiver


def clone(supplier: Mapping[str, t.Any]) -> dict[str, t.Any]:
    """Return a structural clone of the supplier."""
    return merge({}, supplier)
