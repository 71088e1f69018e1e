import random

import pytest

from randcheck.config.settings import Settings, load_settings, make_rng
from randcheck.errors import InvalidArgument


def test_defaults():
    assert load_settings({}) == Settings()


def test_hex_values_and_debug_flag():
    s = load_settings({"RANDCHECK_MAX_CHAR": "0x10FFFF", "RANDCHECK_DEBUG": "TRUE", "RANDCHECK_SEED": "7"})
    assert s.max_char == 0x10FFFF
    assert s.debug is True
    assert s.seed == 7


@pytest.mark.parametrize("env", [
    {"RANDCHECK_ITERATIONS": "-1"},
    {"RANDCHECK_MAX_FILTER_ATTEMPTS": "0"},
    {"RANDCHECK_MAX_CHAR": "0x110000"},
    {"RANDCHECK_SEED": "abc"},
])
def test_invalid_environment(env):
    with pytest.raises(InvalidArgument):
        load_settings(env)


def test_make_rng_with_int_seed_is_reproducible():
    a, seed_a = make_rng(42)
    b, seed_b = make_rng(42)
    assert seed_a == seed_b == 42
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def test_make_rng_passes_random_through():
    source = random.Random(1)
    rng, seed = make_rng(source)
    assert rng is source
    assert seed is None


@pytest.mark.parametrize("bad", [True, 1.5, "3"])
def test_make_rng_rejects_other_types(bad):
    with pytest.raises(InvalidArgument):
        make_rng(bad)


def test_master_seed_makes_fresh_generators_reproducible(configure):
    configure(RANDCHECK_SEED=99)
    first = [make_rng(None)[1] for _ in range(3)]
    configure(RANDCHECK_SEED=99)
    second = [make_rng(None)[1] for _ in range(3)]
    assert first == second
    assert len(set(first)) == 3
