"""Element choice and list/vector generators."""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, List, Optional, Sequence

from randcheck.config.settings import RngLike, get_settings
from randcheck.errors import FilterUnsatisfiable, InvalidArgument
from randcheck.generator.interval import FLOAT, INT, Interval
from randcheck.generator.lazy import Generator, is_generator
from randcheck.generator.primitive import number_sampler

logger = logging.getLogger("randcheck.generator.elements")


def _member(value: Any, values: Sequence[Any]) -> bool:
    # list membership, so unhashable candidates work too
    return any(value is other or value == other for other in values)


def _as_list(collection: Any) -> List[Any]:
    if isinstance(collection, (set, frozenset)):
        # fixed order keeps seeded runs reproducible
        return sorted(collection, key=repr)
    return list(collection)


class ElementGenerator(Generator):
    """Uniform choice from ``candidates \\ excluded``; generator candidates are pulled."""

    def __init__(self, candidates: Any, excluded: Any = (), rng: RngLike = None) -> None:
        super().__init__(rng)
        self.excluded = _as_list(excluded)
        pool: List[Any] = []
        for candidate in _as_list(candidates):
            if is_generator(candidate):
                if not any(candidate is other for other in pool):
                    pool.append(candidate)
            elif not _member(candidate, self.excluded) and not _member(candidate, pool):
                pool.append(candidate)
        if not pool:
            raise InvalidArgument("candidates", "nothing left to choose from after exclusion")
        self.pool = pool
        self._attempts = get_settings().max_filter_attempts

    def draw(self) -> Any:
        choice = self.rng.choice(self.pool)
        if not is_generator(choice):
            return choice
        for _ in range(self._attempts):
            value = next(choice)
            if not _member(value, self.excluded):
                return value
        raise FilterUnsatisfiable("random_elements", self._attempts)


def random_elements(candidates: Any, excluded: Any = (), rng: RngLike = None) -> ElementGenerator:
    return ElementGenerator(candidates, excluded, rng)


# ---------------------------------------------------------------------------
# Lists and vectors
# ---------------------------------------------------------------------------

def _source_sampler(source: Any) -> Callable[[random.Random], Any]:
    if is_generator(source):
        return lambda rng: next(source)
    if isinstance(source, (Interval, range)):
        interval = Interval.of(source, "source")
        if interval.is_open:
            raise InvalidArgument("source", "open interval cannot be sampled")
        if interval.kind == FLOAT:
            low, high = float(interval.low), float(interval.high)
            return lambda rng: low + rng.random() * (high - low)
        return number_sampler(interval)
    if isinstance(source, (list, tuple, str, set, frozenset)):
        items = _as_list(source)
        if not items:
            raise InvalidArgument("source", "empty collection")
        return lambda rng: rng.choice(items)
    raise InvalidArgument("source", f"expected a generator, collection or interval, got {source!r}")


def length_sampler(length: Any, argument: str = "length") -> Callable[[random.Random], int]:
    """Draw function for a length given as an int, an interval or a generator."""
    if is_generator(length):
        return lambda rng: next(length)
    interval = Interval.of(length, argument)
    if interval.kind != INT or interval.is_open:
        raise InvalidArgument(argument, f"expected an integer or integer interval, got {length!r}")
    if interval.low < 0:
        raise InvalidArgument(argument, "lengths must not be negative")
    return number_sampler(interval)


def _min_length(length: Any) -> Optional[int]:
    if is_generator(length):
        return None
    return Interval.of(length, "length").low


class ListGenerator(Generator):

    def __init__(self, source: Any, length: Any, unique: bool = False,
                 factory: Callable[[List[Any]], Any] = list, rng: RngLike = None) -> None:
        super().__init__(rng)
        self._element = _source_sampler(source)
        self._length = length_sampler(length)
        self.unique = unique
        self._factory = factory
        self._attempts = get_settings().max_filter_attempts
        if unique and not is_generator(source):
            if isinstance(source, (Interval, range)):
                interval = Interval.of(source, "source")
                distinct = None if interval.kind == FLOAT else len(interval)
            else:
                distinct = len(set(map(repr, _as_list(source))))
            minimum = _min_length(length)
            if distinct is not None and minimum is not None and minimum > distinct:
                raise InvalidArgument(
                    "length", f"{minimum} unique elements requested from {distinct} distinct values"
                )

    def draw(self) -> Any:
        size = self._length(self.rng)
        if size < 0:
            raise InvalidArgument("length", f"drawn length {size} is negative")
        items: List[Any] = []
        misses = 0
        while len(items) < size:
            value = self._element(self.rng)
            if self.unique and _member(value, items):
                misses += 1
                if misses >= self._attempts:
                    raise FilterUnsatisfiable("random_lists (unique)", misses)
                continue
            items.append(value)
        if misses:
            logger.debug("unique list of %d needed %d redraws", size, misses)
        return self._factory(items)


def random_lists(source: Any, length: Any, unique: bool = False, rng: RngLike = None) -> ListGenerator:
    """
    Generate lists of random length.

    *length* is an int, an interval or a generator (pulled in order, so a
    generator of lengths gives a deterministic sequence of sizes). Elements
    are drawn at random from a collection or interval, or pulled in order
    from a generator, which is how generators of generators compose.
    """
    return ListGenerator(source, length, unique, list, rng)


def random_vectors(source: Any, length: Any, unique: bool = False, rng: RngLike = None) -> ListGenerator:
    """Like :func:`random_lists` but yields tuples."""
    return ListGenerator(source, length, unique, tuple, rng)
