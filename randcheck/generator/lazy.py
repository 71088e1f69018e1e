"""
Lazy sequence protocol.

Every generator in randcheck is a forward-only pull iterator: values are
produced on demand, never revisited, and a generator instance cannot be
restarted (build a new one from the same parameters and seed instead).
The plain iterator protocol carries the whole contract, so generators mix
freely with ``itertools`` and ``for`` loops.
"""

from __future__ import annotations

import itertools
import random
from typing import Any, Callable, Iterable, Iterator, List, Optional

from randcheck.config.settings import RngLike, make_rng


class _Exhausted:
    def __repr__(self) -> str:
        return "EXHAUSTED"


EXHAUSTED = _Exhausted()


class Generator:
    """Base class for pull-based value generators."""

    def __init__(self, rng: RngLike = None) -> None:
        self.rng: random.Random
        self.seed: Optional[int]
        self.rng, self.seed = make_rng(rng)

    def __iter__(self) -> "Generator":
        return self

    def __next__(self) -> Any:
        return self.draw()

    def draw(self) -> Any:
        raise NotImplementedError

    def next_value(self) -> Any:
        """Pull a single value."""
        return next(self)

    def lazy(self) -> Iterator[Any]:
        """Infinite lazy view over the remaining values of this generator."""
        return (value for value in self)

    def take(self, n: int) -> List[Any]:
        return list(itertools.islice(self, n))


class FunctionGenerator(Generator):
    """Generator whose values come from ``draw_fn(rng)``."""

    def __init__(self, draw_fn: Callable[[random.Random], Any], rng: RngLike = None) -> None:
        super().__init__(rng)
        self._draw_fn = draw_fn

    def draw(self) -> Any:
        return self._draw_fn(self.rng)


class SourceGenerator(Generator):
    """Wraps any iterable so it can be pulled like a generator."""

    def __init__(self, source: Iterable[Any]) -> None:
        # A source is deterministic; it needs no random state of its own.
        super().__init__(random.Random(0))
        self.seed = None
        self._it = iter(source)

    def draw(self) -> Any:
        return next(self._it)


class MappedGenerator(Generator):
    """Applies ``fn`` to values pulled in lockstep from several iterators."""

    def __init__(self, fn: Callable[..., Any], iterators: Iterable[Iterator[Any]]) -> None:
        super().__init__(random.Random(0))
        self.seed = None
        self._fn = fn
        self._iterators = [make_iter(it) for it in iterators]
        self._done = False

    def draw(self) -> Any:
        if self._done:
            raise StopIteration
        values = []
        for it in self._iterators:
            value = pull(it)
            if value is EXHAUSTED:
                self._done = True
                raise StopIteration
            values.append(value)
        return self._fn(*values)


def is_generator(value: Any) -> bool:
    return isinstance(value, Generator)


def make_iter(source: Any) -> Iterator[Any]:
    """Create a pull iterator over a finite or infinite *source*."""
    if isinstance(source, Generator):
        return source
    return SourceGenerator(source)


def pull(iterator: Iterator[Any], sentinel: Any = EXHAUSTED) -> Any:
    """Return the next value of *iterator*, or *sentinel* once it is exhausted."""
    return next(iterator, sentinel)


def lazy_map(fn: Callable[..., Any], *iterators: Any) -> MappedGenerator:
    return MappedGenerator(fn, iterators)
