import io
import re

import pytest

from randcheck.core.driver import CheckStatus, for_all, resolve_args, run_check
from randcheck.errors import CheckFailure, FunctionUnderTestError, InvalidCallable, PropertyFailed
from randcheck.generator.elements import random_lists
from randcheck.generator.lazy import SourceGenerator
from randcheck.generator.primitive import random_integers
from randcheck.generator.strings import random_strings
from randcheck.introspect.combinators import conjoin


def add_one(x):
    return x + 1


def is_integer(result):
    return isinstance(result, int)


def divide(a, b):
    return a / b


def reverse_twice(items):
    return list(reversed(list(reversed(items))))


def equals_original(result, args):
    return result == args[0]


def test_scenario_passing_property(seed):
    result = run_check(100, add_one, [random_integers((0, 9), rng=seed)], is_integer)
    assert result.status is CheckStatus.PASSED
    assert result.passed
    assert result.iterations == 100
    assert result.exception is None


def test_scenario_exception_found(seed):
    result = run_check(50, divide, [random_integers((0, 9), rng=seed), random_integers((0, 0), rng=seed)])
    assert result.status is CheckStatus.EXCEPTION_FOUND
    assert result.iterations == 1
    assert isinstance(result.exception, ZeroDivisionError)
    x, zero = result.args
    assert 0 <= x <= 9 and zero == 0


def test_scenario_predicate_gets_arguments(seed):
    lists = random_lists(random_integers((0, 9), rng=seed), (1, 5), rng=seed + 1)
    result = run_check(20, reverse_twice, [lists], equals_original)
    assert result.status is CheckStatus.PASSED
    assert result.iterations == 20


def test_predicate_failure_stops_the_run():
    counter = SourceGenerator(range(100))
    result = run_check(50, add_one, [counter], lambda r: r < 5)
    assert result.status is CheckStatus.PREDICATE_FAILED
    assert result.iterations == 5
    assert result.args == (4,)
    assert result.result == 5


def test_plain_values_and_nested_specs_are_resolved(seed):
    spec = [random_integers((1, 3), rng=seed), ("k", random_integers(7, rng=seed))]
    value = resolve_args(spec)
    assert 1 <= value[0] <= 3
    assert value[1] == ("k", 7)
    assert resolve_args("plain") == "plain"


def test_print_each_writes_every_call():
    out = io.StringIO()
    run_check(3, add_one, [SourceGenerator([1, 2, 3])], print_each=True, stream=out)
    assert out.getvalue().splitlines() == ["(1,) -> 2", "(2,) -> 3", "(3,) -> 4"]


def test_print_each_writes_the_raising_call():
    out = io.StringIO()
    result = run_check(3, divide, [1, SourceGenerator([1, 0, 2])], print_each=True, stream=out)
    assert result.status is CheckStatus.EXCEPTION_FOUND
    assert out.getvalue().splitlines() == [
        "(1, 1) -> 1.0",
        "(1, 0) -> <ZeroDivisionError: division by zero>",
    ]


def test_regex_predicate(seed):
    upper = random_strings("[A-Z]{3}", rng=seed)
    assert run_check(30, str.lower, [upper], re.compile("[a-z]{3}")).passed


def test_combinator_predicate(seed):
    predicate = conjoin(lambda r, args: r > args[0], lambda r, args: r - args[0] == 1)
    assert run_check(30, add_one, [random_integers((0, 9), rng=seed)], predicate).passed


def test_symbol_predicate(seed):
    assert run_check(10, add_one, [random_integers((0, 9), rng=seed)], "operator.truth").passed


def test_predicate_with_unusable_arity_is_rejected():
    with pytest.raises(InvalidCallable):
        run_check(5, add_one, [1], lambda a, b, c: True)


def test_seeds_are_reported(seed):
    result = run_check(5, divide, [random_integers((1, 9), rng=seed), 0])
    assert result.seeds == (seed,)
    assert str(seed) in str(result)


def test_default_iterations_come_from_settings(configure):
    configure(RANDCHECK_ITERATIONS=7)
    assert run_check(None, add_one, [1]).iterations == 7


def test_raise_for_failure():
    failed = run_check(5, divide, [1, 0])
    with pytest.raises(FunctionUnderTestError) as info:
        failed.raise_for_failure()
    assert isinstance(info.value.__cause__, ZeroDivisionError)
    assert info.value.arguments == (1, 0)

    falsy = run_check(5, add_one, [1], lambda r: False)
    with pytest.raises(PropertyFailed) as info:
        falsy.raise_for_failure()
    assert info.value.result == 2

    run_check(5, add_one, [1]).raise_for_failure()


def test_for_all_passes(seed):
    @for_all(random_integers((0, 9), rng=seed), random_integers((0, 9), rng=seed + 1), iterations=50)
    def addition_commutes(a, b):
        assert a + b == b + a

    addition_commutes()


def test_for_all_raises_check_failure(seed):
    @for_all(random_integers((0, 9), rng=seed), iterations=200)
    def below_five(x):
        assert x < 5

    with pytest.raises(CheckFailure):
        below_five()
    assert below_five.__name__ == "below_five"
