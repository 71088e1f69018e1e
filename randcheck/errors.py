"""Exception hierarchy for randcheck."""

from __future__ import annotations

from typing import Any, Optional, Sequence


class RandcheckError(Exception):
    pass


class InvalidArgument(RandcheckError, ValueError):
    """A generator parameter is contradictory, malformed or out of domain."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"invalid argument '{argument}': {message}")


class UnsupportedOperator(InvalidArgument):
    """Pattern-mode string generation met an operator it cannot randomize."""

    def __init__(self, operator: str, argument: str = "pattern") -> None:
        self.operator = operator
        super().__init__(argument, f"unsupported regex operator {operator}")


class FilterUnsatisfiable(RandcheckError):
    """A rejection loop gave up before finding a conforming value."""

    def __init__(self, what: str, attempts: int) -> None:
        self.what = what
        self.attempts = attempts
        super().__init__(f"{what}: no conforming value after {attempts} attempts")


class InvalidCallable(RandcheckError):
    """The arity of a callable-like value cannot be determined or is contradictory."""

    def __init__(self, value: Any, message: str) -> None:
        self.value = value
        super().__init__(f"invalid callable {value!r}: {message}")


class CheckFailure(AssertionError):
    """Base class for failures reported by a quickcheck run."""

    def __init__(self, message: str, args: Sequence[Any], result: Any = None,
                 seeds: Optional[Sequence[Optional[int]]] = None) -> None:
        self.arguments = tuple(args)
        self.result = result
        self.seeds = tuple(seeds or ())
        super().__init__(message)


class FunctionUnderTestError(CheckFailure):
    """The function under test raised; the original exception is ``__cause__``."""

    def __init__(self, exception: BaseException, args: Sequence[Any],
                 seeds: Optional[Sequence[Optional[int]]] = None) -> None:
        self.exception = exception
        super().__init__(
            f"function raised {type(exception).__name__}: {exception} for arguments {tuple(args)!r}",
            args, None, seeds,
        )


class PropertyFailed(CheckFailure):
    def __init__(self, args: Sequence[Any], result: Any,
                 seeds: Optional[Sequence[Optional[int]]] = None) -> None:
        super().__init__(
            f"predicate failed for arguments {tuple(args)!r} with result {result!r}",
            args, result, seeds,
        )
