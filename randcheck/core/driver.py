"""
QuickCheck driver.

``run_check`` calls a function under test with freshly generated arguments a
fixed number of times and stops at the first counterexample: an exception
raised by the function, or a falsy predicate verdict on its result. There is
no shrinking; the report carries the exact arguments and the seeds of the
generators that produced them, which is enough to replay the run.
"""

from __future__ import annotations

import enum
import functools
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, TextIO, Tuple

from randcheck.config.settings import get_settings
from randcheck.errors import FunctionUnderTestError, InvalidCallable, PropertyFailed
from randcheck.generator.lazy import Generator, is_generator
from randcheck.introspect.arity import CallableKind, describe_callable, resolve_symbol

# ---------------------------------------------------------------------------
# Debug infrastructure, switched on by ``--debug`` or RANDCHECK_DEBUG=true.
# ---------------------------------------------------------------------------
_DRIVER_DEBUG = False
_driver_logger = logging.getLogger("randcheck.driver")


def enable_debug() -> None:
    """Turn on verbose debug logging for every randcheck module."""
    global _DRIVER_DEBUG
    _DRIVER_DEBUG = True
    root = logging.getLogger("randcheck")
    root.setLevel(logging.DEBUG)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [DEBUG] %(name)s: %(message)s"))
        root.addHandler(handler)


def _debug_log(msg: str, *args) -> None:
    if _DRIVER_DEBUG:
        _driver_logger.debug(msg, *args)


if get_settings().debug:
    enable_debug()


class CheckStatus(enum.Enum):
    PASSED = "passed"
    EXCEPTION_FOUND = "exception-found"
    PREDICATE_FAILED = "predicate-failed"


@dataclass
class RunState:
    """Mutable state of one ``run_check`` call."""

    iteration: int = 0
    passed: bool = True
    last_args: Tuple[Any, ...] = ()
    last_result: Any = None
    last_exception: Optional[BaseException] = None


@dataclass(frozen=True)
class CheckResult:
    status: CheckStatus
    iterations: int
    args: Tuple[Any, ...] = ()
    result: Any = None
    exception: Optional[BaseException] = None
    seeds: Tuple[Optional[int], ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.PASSED

    def raise_for_failure(self) -> None:
        """Raise the failure as a :class:`~randcheck.errors.CheckFailure`; no-op when passed."""
        if self.status is CheckStatus.EXCEPTION_FOUND:
            raise FunctionUnderTestError(self.exception, self.args, self.seeds) from self.exception
        if self.status is CheckStatus.PREDICATE_FAILED:
            raise PropertyFailed(self.args, self.result, self.seeds)

    def __str__(self) -> str:
        if self.passed:
            return f"passed {self.iterations} iterations"
        detail = (f"{type(self.exception).__name__}: {self.exception}"
                  if self.exception is not None else f"result {self.result!r}")
        return (f"{self.status.value} on iteration {self.iterations}: "
                f"arguments {self.args!r}, {detail} (seeds {self.seeds!r})")


def resolve_args(spec: Any) -> Any:
    """
    Produce one concrete value from an argument spec.

    Generators are pulled, lists and tuples are resolved element-wise and
    keep their type, anything else is passed through unchanged.
    """
    if is_generator(spec):
        return next(spec)
    if isinstance(spec, list):
        return [resolve_args(item) for item in spec]
    if isinstance(spec, tuple):
        return tuple(resolve_args(item) for item in spec)
    return spec


def _collect_seeds(spec: Any, out: List[Optional[int]]) -> None:
    if isinstance(spec, Generator):
        out.append(spec.seed)
    elif isinstance(spec, (list, tuple)):
        for item in spec:
            _collect_seeds(item, out)


def _predicate_caller(predicate: Any) -> Callable[[Any, Tuple[Any, ...]], Any]:
    """Wrap *predicate* so it can always be called as ``check(result, args)``."""
    if isinstance(predicate, str):
        predicate = resolve_symbol(predicate)
    descriptor = describe_callable(predicate)
    if descriptor.kind is CallableKind.REGEX:
        return lambda result, args: predicate.fullmatch(result)
    if descriptor.kind is CallableKind.HASH_MAP:
        return lambda result, args: predicate.get(result)
    if descriptor.kind is CallableKind.SEQUENCE:
        return lambda result, args: result in predicate
    if descriptor.accepts(2) and (descriptor.required >= 2 or descriptor.variadic):
        return lambda result, args: predicate(result, args)
    if descriptor.accepts(1):
        return lambda result, args: predicate(result)
    if descriptor.accepts(2):
        return lambda result, args: predicate(result, args)
    raise InvalidCallable(predicate, "a predicate must accept (result) or (result, args)")


def run_check(iterations: Optional[int], fn: Callable[..., Any], arg_specs: Sequence[Any],
              predicate: Any = None, print_each: bool = False,
              stream: Optional[TextIO] = None) -> CheckResult:
    """
    Run *fn* against generated arguments until a counterexample or *iterations* runs.

    Args:
        iterations: number of calls; ``None`` uses the configured default.
        fn: the function under test.
        arg_specs: one spec per positional argument. Generators are pulled,
            lists and tuples are resolved element-wise, other values are
            passed as they are.
        predicate: optional check on the result, called as
            ``predicate(result)`` or ``predicate(result, args)`` depending on
            what it accepts. A compiled pattern must fully match the result,
            a mapping must map it to a truthy value, a sequence must contain it.
        print_each: write ``args -> result`` for every iteration to *stream*
            (``sys.stdout`` by default); a raising call is written as
            ``args -> <ExceptionType: message>``.

    Returns:
        A :class:`CheckResult`. Failures are reported, not raised; call
        ``raise_for_failure()`` to turn them into exceptions.

    Raises:
        InvalidCallable: the predicate's arity does not fit either calling form.
    """
    if iterations is None:
        iterations = get_settings().iterations
    check = _predicate_caller(predicate) if predicate is not None else None
    if stream is None:
        stream = sys.stdout
    seeds: List[Optional[int]] = []
    for spec in arg_specs:
        _collect_seeds(spec, seeds)
    state = RunState()
    _debug_log("run_check: %d iterations of %s, seeds %s",
               iterations, getattr(fn, "__name__", fn), seeds)

    while state.iteration < iterations:
        state.iteration += 1
        state.last_args = tuple(resolve_args(spec) for spec in arg_specs)
        try:
            state.last_result = fn(*state.last_args)
        except Exception as e:
            state.passed = False
            state.last_exception = e
            if print_each:
                print(f"{state.last_args!r} -> <{type(e).__name__}: {e}>", file=stream)
            _debug_log("run_check: iteration %d raised %r for %r", state.iteration, e, state.last_args)
            return CheckResult(CheckStatus.EXCEPTION_FOUND, state.iteration, state.last_args,
                               None, e, tuple(seeds))
        if print_each:
            print(f"{state.last_args!r} -> {state.last_result!r}", file=stream)
        if check is not None and not check(state.last_result, state.last_args):
            state.passed = False
            _debug_log("run_check: predicate failed on iteration %d for %r -> %r",
                       state.iteration, state.last_args, state.last_result)
            return CheckResult(CheckStatus.PREDICATE_FAILED, state.iteration, state.last_args,
                               state.last_result, None, tuple(seeds))

    _debug_log("run_check: passed %d iterations", state.iteration)
    return CheckResult(CheckStatus.PASSED, state.iteration, seeds=tuple(seeds))


def for_all(*arg_specs: Any, iterations: Optional[int] = None,
            predicate: Any = None) -> Callable[[Callable[..., Any]], Callable[[], None]]:
    """
    Decorator turning a function into a zero-argument property test.

    The wrapped test raises :class:`~randcheck.errors.CheckFailure` on the
    first counterexample, so it can be collected by pytest directly::

        @for_all(random_integers((0, 9)), random_integers((0, 9)))
        def test_addition_commutes(a, b):
            assert a + b == b + a
    """
    def decorator(fn: Callable[..., Any]) -> Callable[[], None]:
        @functools.wraps(fn)
        def wrapper() -> None:
            run_check(iterations, fn, arg_specs, predicate).raise_for_failure()

        # pytest inspects the signature for fixtures; the test takes none
        del wrapper.__wrapped__
        return wrapper

    return decorator
