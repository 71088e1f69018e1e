"""
Combinators that build new callables out of existing ones.

Each combinator returns a :class:`Combinator` object rather than a bare
closure, so :func:`randcheck.introspect.arity.describe_callable` can see what
it wraps and derive its arity without guessing.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Tuple


class CombinatorKind(enum.Enum):
    NEGATE = "negate"
    CONJOIN = "conjoin"
    DISJOIN = "disjoin"
    JUXT = "juxt"
    COMPOSE = "compose"
    PARTIAL = "partial"
    FLIP = "flip"
    DUP = "dup"
    CONSTANTLY = "constantly"
    SPREAD = "spread"


class Combinator:
    """A callable built by one of the functions below."""

    def __init__(self, kind: CombinatorKind, operands: Tuple[Any, ...],
                 impl: Callable[..., Any], bound: Tuple[Any, ...] = ()) -> None:
        self.kind = kind
        self.operands = operands
        self.bound = bound
        self._impl = impl

    def __call__(self, *args: Any) -> Any:
        return self._impl(*args)

    def __repr__(self) -> str:
        inner = ", ".join(repr(x) for x in self.operands + self.bound)
        return f"{self.kind.value}({inner})"


def negate(fn: Callable[..., Any]) -> Combinator:
    return Combinator(CombinatorKind.NEGATE, (fn,), lambda *args: not fn(*args))


def conjoin(*fns: Callable[..., Any]) -> Combinator:
    """Logical and of predicates; returns the first falsy result or the last result."""
    def impl(*args: Any) -> Any:
        result: Any = True
        for fn in fns:
            result = fn(*args)
            if not result:
                return result
        return result

    return Combinator(CombinatorKind.CONJOIN, fns, impl)


def disjoin(*fns: Callable[..., Any]) -> Combinator:
    def impl(*args: Any) -> Any:
        result: Any = False
        for fn in fns:
            result = fn(*args)
            if result:
                return result
        return result

    return Combinator(CombinatorKind.DISJOIN, fns, impl)


def juxt(*fns: Callable[..., Any]) -> Combinator:
    """Call every function with the same arguments and collect the results."""
    return Combinator(CombinatorKind.JUXT, fns, lambda *args: [fn(*args) for fn in fns])


def compose(*fns: Callable[..., Any]) -> Combinator:
    """
    Pipe the arguments through *fns* left to right.

    ``compose(f, g)(x) == g(f(x))``: the first function receives the
    arguments, every later one receives the previous result.
    """
    if not fns:
        raise TypeError("compose needs at least one function")

    def impl(*args: Any) -> Any:
        value = fns[0](*args)
        for fn in fns[1:]:
            value = fn(value)
        return value

    return Combinator(CombinatorKind.COMPOSE, fns, impl)


def partial(fn: Callable[..., Any], *bound: Any) -> Combinator:
    return Combinator(CombinatorKind.PARTIAL, (fn,), lambda *args: fn(*bound, *args), bound)


def flip(fn: Callable[..., Any]) -> Combinator:
    """Swap the first two arguments."""
    def impl(*args: Any) -> Any:
        if len(args) >= 2:
            args = (args[1], args[0]) + args[2:]
        return fn(*args)

    return Combinator(CombinatorKind.FLIP, (fn,), impl)


def dup(fn: Callable[..., Any]) -> Combinator:
    """Pass the first argument twice: ``dup(f)(x, *rest) == f(x, x, *rest)``."""
    return Combinator(CombinatorKind.DUP, (fn,), lambda x, *rest: fn(x, x, *rest))


def constantly(value: Any) -> Combinator:
    return Combinator(CombinatorKind.CONSTANTLY, (), lambda *args: value, (value,))


def spread(fn: Callable[..., Any]) -> Combinator:
    """Call *fn* with the elements of a single sequence argument."""
    return Combinator(CombinatorKind.SPREAD, (fn,), lambda seq: fn(*seq))
