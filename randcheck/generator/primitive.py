"""Primitive random generators: integers, floats, normals, booleans and characters."""

from __future__ import annotations

import logging
import math
import random
from statistics import NormalDist
from typing import Any, Callable, List

from randcheck.config.settings import RngLike, get_settings
from randcheck.constants import PRINTABLE_ASCII
from randcheck.errors import InvalidArgument
from randcheck.generator.interval import CHAR, FLOAT, INT, Interval, as_numbers
from randcheck.generator.lazy import FunctionGenerator, Generator

logger = logging.getLogger("randcheck.generator.primitive")

_STANDARD_NORMAL = NormalDist()


def number_sampler(interval: Interval) -> Callable[[random.Random], Any]:
    """
    Build the per-pull draw function for an integer or character interval.

    A point yields its constant. A stepped interval yields ``start + k*step``
    with ``k`` redrawn uniformly on every pull; a step pointing away from
    ``stop`` is turned around. Without a step every element between the two
    endpoints is equally likely.
    """
    kind = interval.kind
    convert = chr if kind == CHAR else (lambda n: n)
    if interval.is_point:
        constant = interval.start
        return lambda rng: constant
    start, stop = as_numbers(interval)
    if interval.step is None:
        low, high = min(start, stop), max(start, stop)
        return lambda rng: convert(rng.randint(low, high))
    step = abs(interval.step) * (1 if stop >= start else -1)
    count = int(math.floor((stop - start) / step)) + 1
    return lambda rng: convert(start + rng.randrange(count) * step)


def random_integers(interval: Any, rng: RngLike = None) -> FunctionGenerator:
    spec = Interval.of(interval, "interval")
    if spec.kind != INT or spec.is_open:
        raise InvalidArgument("interval", f"expected a closed integer interval, got {interval!r}")
    return FunctionGenerator(number_sampler(spec), rng)


def random_floats(interval: Any = (0.0, 1.0), rng: RngLike = None) -> FunctionGenerator:
    spec = Interval.of(interval, "interval")
    if spec.kind not in (INT, FLOAT) or spec.is_open:
        raise InvalidArgument("interval", f"expected a closed numeric interval, got {interval!r}")
    start, stop = float(spec.start), float(spec.stop)
    width = stop - start
    return FunctionGenerator(lambda r: start + r.random() * width, rng)


def random_normals(mean: float = 0.0, variance: float = 1.0, rng: RngLike = None) -> FunctionGenerator:
    if variance < 0:
        raise InvalidArgument("variance", f"must not be negative, got {variance!r}")
    sigma = math.sqrt(variance)

    def draw(r: random.Random) -> float:
        u = r.random()
        while u == 0.0:
            # inv_cdf is undefined at 0
            u = r.random()
        return mean + sigma * _STANDARD_NORMAL.inv_cdf(u)

    return FunctionGenerator(draw, rng)


def random_booleans(rng: RngLike = None) -> FunctionGenerator:
    return FunctionGenerator(lambda r: r.random() < 0.5, rng)


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

def _char_domain() -> range:
    return range(get_settings().max_char + 1)


def char_set(spec: Any, argument: str = "include") -> frozenset:
    """
    Expand a character spec into the set of characters it denotes.

    Specs: a single character; a string (its characters); an interval of
    characters (tuple, ``Interval``); a predicate over characters, evaluated
    on every code point up to the configured ``max_char`` (surrogates
    skipped); or a list/set of specs, whose union is taken.
    """
    if spec is None:
        return frozenset()
    if isinstance(spec, str):
        return frozenset(spec)
    if isinstance(spec, (Interval, tuple, range)):
        interval = Interval.of(spec, argument)
        if interval.kind != CHAR or interval.is_open:
            raise InvalidArgument(argument, f"expected a character interval, got {spec!r}")
        return frozenset(interval.values())
    if isinstance(spec, (list, set, frozenset)):
        result: frozenset = frozenset()
        for part in spec:
            result |= char_set(part, argument)
        return result
    if callable(spec):
        return frozenset(
            chr(code) for code in _char_domain()
            if not 0xD800 <= code <= 0xDFFF and spec(chr(code))
        )
    raise InvalidArgument(argument, f"not a character spec: {spec!r}")


def allowed_chars(include: Any = None, exclude: Any = None) -> List[str]:
    """Sorted ``include \\ exclude``; printable ASCII when *include* is None."""
    included = char_set(PRINTABLE_ASCII if include is None else include, "include")
    allowed = sorted(included - char_set(exclude, "exclude"))
    if not allowed:
        raise InvalidArgument("exclude", "no characters left after exclusion")
    return allowed


def random_chars(include: Any = None, exclude: Any = None, rng: RngLike = None) -> Generator:
    allowed = allowed_chars(include, exclude)
    logger.debug("random_chars over %d characters", len(allowed))
    return FunctionGenerator(lambda r: r.choice(allowed), rng)
