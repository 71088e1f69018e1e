"""
Interval values and interval-spec parsing.

An interval is an inclusive ``(start, stop, step)`` triple over integers,
floats or single characters. Characters are handled through their code
points, so every numeric helper below works on all three domains.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

from randcheck.errors import InvalidArgument

Number = Union[int, float]

INT = "int"
FLOAT = "float"
CHAR = "char"


def _kind_of(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return INT
    if isinstance(value, float):
        return FLOAT
    if isinstance(value, str) and len(value) == 1:
        return CHAR
    return None


def to_number(value: Any) -> Number:
    return ord(value) if isinstance(value, str) else value


def from_number(kind: str, number: Number) -> Any:
    if kind == CHAR:
        return chr(int(number))
    if kind == INT:
        return int(number)
    return float(number)


@dataclass(frozen=True)
class Interval:
    """Inclusive interval; ``stop`` is ``None`` for an open-ended interval."""

    start: Any
    stop: Any
    step: Optional[Number] = None

    @property
    def kind(self) -> str:
        return _kind_of(self.start)

    @property
    def is_open(self) -> bool:
        return self.stop is None

    @property
    def is_point(self) -> bool:
        return self.stop is not None and self.start == self.stop

    @property
    def ascending(self) -> bool:
        return self.stop is None or to_number(self.start) <= to_number(self.stop)

    @property
    def low(self) -> Number:
        return min(to_number(self.start), to_number(self.stop))

    @property
    def high(self) -> Number:
        return max(to_number(self.start), to_number(self.stop))

    @property
    def span(self) -> Number:
        return abs(to_number(self.stop) - to_number(self.start))

    def __len__(self) -> int:
        """Number of elements; continuous float intervals have none to count."""
        if self.is_open:
            raise TypeError("open interval has no length")
        if self.kind == FLOAT and self.step is None:
            raise TypeError("continuous interval has no element count")
        return int(math.floor(self.span / abs(self.step or 1))) + 1

    def __contains__(self, value: Any) -> bool:
        if _kind_of(value) is None or (self.kind == CHAR) != (_kind_of(value) == CHAR):
            return False
        number = to_number(value)
        start = to_number(self.start)
        if self.is_open:
            inside = number >= start if (self.step is None or self.step > 0) else number <= start
        else:
            inside = self.low <= number <= self.high
        if not inside or self.step is None:
            return inside
        offset = (number - start) / abs(self.step)
        return math.isclose(offset, round(offset), abs_tol=1e-9)

    def values(self) -> Iterator[Any]:
        """Iterate the elements from ``start`` toward ``stop``."""
        if self.kind == FLOAT and self.step is None:
            raise TypeError("continuous interval cannot be enumerated")
        start = to_number(self.start)
        step = abs(self.step or 1) * (1 if self.ascending else -1)
        for k in range(len(self)):
            yield from_number(self.kind, start + k * step)

    @classmethod
    def of(cls, spec: Any, argument: str = "interval") -> "Interval":
        """
        Parse an interval spec.

        Accepted forms: an ``Interval``; a scalar (a single point); ``(from, to)``;
        ``(from, to, step)``; ``(from, (to, step))`` where the upper bound
        carries the step; a non-empty ``range`` (its last element becomes the
        inclusive stop).
        """
        if isinstance(spec, Interval):
            return spec
        if isinstance(spec, range):
            if len(spec) == 0:
                raise InvalidArgument(argument, f"empty range {spec!r}")
            return cls._checked(spec.start, spec[-1], spec.step, argument)
        if isinstance(spec, (tuple, list)):
            if len(spec) == 2 and isinstance(spec[1], (tuple, list)):
                if len(spec[1]) != 2:
                    raise InvalidArgument(argument, f"nested upper bound must be (to, step), got {spec[1]!r}")
                return cls._checked(spec[0], spec[1][0], spec[1][1], argument)
            if len(spec) == 2:
                return cls._checked(spec[0], spec[1], None, argument)
            if len(spec) == 3:
                return cls._checked(spec[0], spec[1], spec[2], argument)
            raise InvalidArgument(argument, f"expected 2 or 3 elements, got {len(spec)}")
        if _kind_of(spec) is not None:
            return cls(spec, spec)
        raise InvalidArgument(argument, f"not an interval spec: {spec!r}")

    @classmethod
    def _checked(cls, start: Any, stop: Any, step: Any, argument: str) -> "Interval":
        kind = _kind_of(start)
        if kind is None:
            raise InvalidArgument(argument, f"unsupported endpoint {start!r}")
        stop_kind = _kind_of(stop)
        numeric = {INT, FLOAT}
        if stop_kind is None or (stop_kind != kind and not {kind, stop_kind} <= numeric):
            raise InvalidArgument(argument, f"endpoints {start!r} and {stop!r} are of different kinds")
        if kind != stop_kind:
            start, stop = float(start), float(stop)
        if step is not None:
            if _kind_of(step) not in numeric:
                raise InvalidArgument(argument, f"step must be a number, got {step!r}")
            if step == 0:
                raise InvalidArgument(argument, "step must not be zero")
            if kind == CHAR and not isinstance(step, int):
                raise InvalidArgument(argument, "character intervals need an integer step")
        return cls(start, stop, step)


def as_numbers(interval: Interval) -> Tuple[Number, Number]:
    return to_number(interval.start), to_number(interval.stop)
