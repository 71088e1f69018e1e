"""
Random interval generation.

Endpoints are drawn independently, paired, accepted or rejected according to
the requested direction, snapped so the step divides the span, and finally
filtered by element count. Contradictory constraints are detected up front
from the endpoint domains wherever those domains are known.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Any, Callable, Optional, Tuple

from randcheck.config.settings import RngLike, get_settings
from randcheck.errors import FilterUnsatisfiable, InvalidArgument
from randcheck.generator.interval import CHAR, FLOAT, Interval, Number, from_number, to_number
from randcheck.generator.lazy import Generator, is_generator
from randcheck.generator.primitive import number_sampler

logger = logging.getLogger("randcheck.generator.ranges")

Sampler = Callable[[random.Random], Number]


def _endpoint_sampler(spec: Any, argument: str) -> Tuple[Sampler, Optional[Interval]]:
    """Return a numeric draw function plus the domain, when the domain is known."""
    if is_generator(spec):
        return (lambda rng: next(spec)), None
    interval = Interval.of(spec, argument)
    if interval.is_open:
        raise InvalidArgument(argument, "endpoint domain must be closed")
    if interval.kind == FLOAT:
        low, high = float(interval.low), float(interval.high)
        return (lambda rng: low + rng.random() * (high - low)), interval
    draw = number_sampler(interval)
    return (lambda rng: to_number(draw(rng))), interval


def _step_sampler(step: Any) -> Tuple[Optional[Sampler], Optional[Tuple[Number, Number]]]:
    """Draw function for the step plus the range of its magnitude."""
    if step is None:
        return None, None
    if is_generator(step):
        return (lambda rng: next(step)), None
    interval = Interval.of(step, "step")
    if interval.kind == CHAR or interval.is_open:
        raise InvalidArgument("step", f"expected a number or numeric interval, got {step!r}")
    if interval.low <= 0 <= interval.high:
        raise InvalidArgument("step", f"step domain {step!r} contains zero")
    magnitudes = (abs(interval.start), abs(interval.stop))
    if interval.kind == FLOAT:
        low, high = float(interval.start), float(interval.stop)
        return (lambda rng: low + rng.random() * (high - low)), (min(magnitudes), max(magnitudes))
    return number_sampler(interval), (min(magnitudes), max(magnitudes))


def _length_window(length: Any) -> Optional[Tuple[Number, Number]]:
    if length is None:
        return None
    interval = Interval.of(length, "length")
    if interval.kind == CHAR or interval.is_open:
        raise InvalidArgument("length", f"expected a number or numeric interval, got {length!r}")
    if interval.low < 0:
        raise InvalidArgument("length", "lengths must not be negative")
    return interval.low, interval.high


def _measure(span: Number, step: Optional[Number], continuous: bool) -> Number:
    """Element count of a span, or the span itself for continuous ranges."""
    if step is None:
        return span if continuous else span + 1
    return math.floor(span / abs(step) + 1e-9) + 1


def _span_window(from_domain: Interval, to_domain: Interval, direction: int) -> Tuple[Number, Number]:
    fl, fh = from_domain.low, from_domain.high
    tl, th = to_domain.low, to_domain.high
    if direction > 0:
        if th < fl:
            raise InvalidArgument("direction", "no ascending pair of endpoints exists")
        return max(0, tl - fh), th - fl
    if direction < 0:
        if fh < tl:
            raise InvalidArgument("direction", "no descending pair of endpoints exists")
        return max(0, fl - th), fh - tl
    return max(0, tl - fh, fl - th), max(th - fl, fh - tl)


class RangeGenerator(Generator):

    def __init__(self, from_spec: Any, to_spec: Any = None, length: Any = None,
                 direction: int = 0, step: Any = None, allow_open_end: bool = False,
                 rng: RngLike = None) -> None:
        super().__init__(rng)
        self.direction = (direction > 0) - (direction < 0) if direction else 0
        self.allow_open_end = allow_open_end
        self.open_end = to_spec is None and allow_open_end
        self._from, from_domain = _endpoint_sampler(from_spec, "from_spec")
        if self.open_end:
            self._to, to_domain = None, None
        else:
            self._to, to_domain = _endpoint_sampler(from_spec if to_spec is None else to_spec, "to_spec")
        self._step, step_magnitudes = _step_sampler(step)
        self._window = _length_window(length)
        if self.open_end and self._window is not None:
            raise InvalidArgument("length", "open-ended ranges have no length to constrain")
        self._kind = from_domain.kind if from_domain is not None else None
        self._continuous = self._kind == FLOAT and step is None
        if from_domain is not None and to_domain is not None:
            self._check_feasible(from_domain, to_domain, step_magnitudes)
        self._attempts = get_settings().max_filter_attempts

    def _check_feasible(self, from_domain: Interval, to_domain: Interval,
                        step_magnitudes: Optional[Tuple[Number, Number]]) -> None:
        if (from_domain.kind == CHAR) != (to_domain.kind == CHAR):
            raise InvalidArgument("to_spec", "endpoints must both be characters or both be numbers")
        min_span, max_span = _span_window(from_domain, to_domain, self.direction)
        if self._window is None:
            return
        if step_magnitudes is None:
            min_len = _measure(min_span, None, self._continuous)
            max_len = _measure(max_span, None, self._continuous)
        else:
            min_len = _measure(min_span, step_magnitudes[1], False)
            max_len = _measure(max_span, step_magnitudes[0], False)
        low, high = self._window
        if high < min_len or low > max_len:
            raise InvalidArgument(
                "length",
                f"requested {low}..{high} but feasible lengths are {min_len}..{max_len}",
            )

    def _number(self, value: Any) -> Number:
        # endpoint generators reveal their kind only once pulled
        if isinstance(value, str):
            self._kind = CHAR
        return to_number(value)

    def _realize(self, value: Number) -> Any:
        if self._kind == CHAR:
            return from_number(CHAR, value)
        return value

    def draw(self) -> Interval:
        for attempt in range(self._attempts):
            start = self._number(self._from(self.rng))
            step = self._step(self.rng) if self._step is not None else None
            if step == 0:
                raise InvalidArgument("step", "drawn step is zero")
            if self.open_end:
                return Interval(self._realize(start), None, step)
            stop = self._number(self._to(self.rng))
            if self.direction > 0 and stop < start:
                continue
            if self.direction < 0 and stop > start:
                continue
            ascending = stop >= start
            if step is not None and not self.allow_open_end:
                step = abs(step) * (1 if ascending else -1)
            if step is not None and (step > 0) == ascending:
                stop = start + math.floor((stop - start) / step + 1e-9) * step
                size = _measure(abs(stop - start), step, False)
            elif step is not None:
                # a step pointing away from stop reaches only the start
                stop = start
                size = 1
            else:
                size = _measure(abs(stop - start), None, self._continuous)
            if self._window is not None and not self._window[0] <= size <= self._window[1]:
                continue
            if attempt > 100:
                logger.debug("random_ranges accepted after %d rejections", attempt)
            return Interval(self._realize(start), self._realize(stop), step)
        raise FilterUnsatisfiable("random_ranges", self._attempts)


def random_ranges(from_spec: Any, to_spec: Any = None, length: Any = None, direction: int = 0,
                  step: Any = None, allow_open_end: bool = False, rng: RngLike = None) -> RangeGenerator:
    """
    Generate random ``Interval`` values.

    Args:
        from_spec: interval spec (or generator) for the start endpoint.
        to_spec: interval spec (or generator) for the stop endpoint; defaults
            to *from_spec*. With ``allow_open_end`` and no *to_spec* the
            ranges are open-ended.
        length: element count (int or interval of counts) each range must have;
            for float ranges without a step, the span width.
        direction: ``> 0`` ascending only, ``< 0`` descending only, ``0`` both.
        step: step magnitude (number, interval or generator); its sign follows
            the realized direction unless ``allow_open_end`` is set.
        allow_open_end: permit open ranges and keep the drawn step sign.

    Raises:
        InvalidArgument: when *length* or *direction* cannot be satisfied by
            the endpoint domains.
    """
    return RangeGenerator(from_spec, to_spec, length, direction, step, allow_open_end, rng)
