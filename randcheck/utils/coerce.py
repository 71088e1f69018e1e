"""Argument padding helpers."""

from __future__ import annotations

from typing import Any, List

from randcheck.errors import InvalidArgument


def pad_to(value: Any, count: int, argument: str = "value") -> List[Any]:
    """Spread *value* over *count* slots.

    A list is treated as per-slot overrides and padded by repeating its last
    element; any other value is broadcast to every slot.

    >>> pad_to(3, 2)
    [3, 3]
    >>> pad_to([1, 2], 4)
    [1, 2, 2, 2]
    """
    if count < 0:
        raise InvalidArgument(argument, "count must not be negative")
    if not isinstance(value, list):
        return [value] * count
    if not value:
        raise InvalidArgument(argument, "override list is empty")
    if len(value) > count:
        raise InvalidArgument(argument, f"{len(value)} overrides given for {count} slots")
    return value + [value[-1]] * (count - len(value))
