import math
import string

import pytest

from randcheck.errors import InvalidArgument
from randcheck.generator.elements import random_elements, random_lists
from randcheck.generator.primitive import (
    allowed_chars,
    char_set,
    random_booleans,
    random_chars,
    random_floats,
    random_integers,
    random_normals,
)


@pytest.mark.parametrize("a, b, s", [(0, 30, 3), (-10, 10, 5), (7, 49, 7), (100, 0, -25)])
def test_stepped_integers_stay_on_the_lattice(a, b, s, seed):
    lattice = {a + k * s for k in range((b - a) // s + 1)}
    assert set(random_integers((a, b, s), rng=seed).take(300)) <= lattice


def test_step_pointing_away_is_turned_around(seed):
    values = set(random_integers((0, 10, -5), rng=seed).take(200))
    assert values == {0, 5, 10}


def test_point_interval_is_constant(seed):
    assert set(random_integers(4, rng=seed).take(20)) == {4}


def test_plain_integers_cover_bounds(seed):
    values = random_integers((3, 1), rng=seed).take(200)
    assert set(values) == {1, 2, 3}


def test_integers_need_integer_interval():
    with pytest.raises(InvalidArgument):
        random_integers((0.0, 1.0))


def test_floats_in_half_open_range(seed):
    values = random_floats((2.0, 4.0), rng=seed).take(500)
    assert all(2.0 <= v < 4.0 for v in values)


def test_normals_moments(seed):
    values = random_normals(10.0, 4.0, rng=seed).take(4000)
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    assert abs(mean - 10.0) < 0.2
    assert abs(math.sqrt(variance) - 2.0) < 0.2


def test_negative_variance_is_rejected():
    with pytest.raises(InvalidArgument) as info:
        random_normals(0, -1)
    assert info.value.argument == "variance"


def test_booleans(seed):
    values = random_booleans(rng=seed).take(400)
    assert set(values) == {True, False}


def test_char_set_forms():
    assert char_set("abc") == {"a", "b", "c"}
    assert char_set(("a", "d")) == {"a", "b", "c", "d"}
    assert char_set(["x", ("0", "2")]) == {"x", "0", "1", "2"}
    assert char_set(str.isdigit) >= set(string.digits)


def test_char_set_rejects_numeric_interval():
    with pytest.raises(InvalidArgument):
        char_set((1, 5))


def test_default_include_is_printable_ascii():
    chars = allowed_chars()
    assert chars[0] == " " and chars[-1] == "~"
    assert len(chars) == 95


def test_empty_allowed_set_fails_eagerly():
    with pytest.raises(InvalidArgument) as info:
        random_chars(include="ab", exclude=("a", "b"))
    assert info.value.argument == "exclude"


def test_chars_respect_include_and_exclude(seed):
    include = [("a", "z"), str.isdigit]
    values = random_chars(include=include, exclude="aeiou0", rng=seed).take(500)
    for c in values:
        assert (c.isdigit() or "a" <= c <= "z") and c not in "aeiou0"


def test_exclusion_holds_across_nested_generators(seed):
    chars = random_chars(include=("a", "f"), exclude="c", rng=seed)
    words = random_lists(random_elements([chars, "z"], excluded=["a"], rng=seed + 1), (1, 6), rng=seed + 2)
    for word in words.take(200):
        assert "c" not in word
        assert "a" not in word
