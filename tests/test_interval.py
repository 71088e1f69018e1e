import pytest

from randcheck.errors import InvalidArgument
from randcheck.generator.interval import CHAR, FLOAT, INT, Interval


@pytest.mark.parametrize("spec, expected", [
    (5, Interval(5, 5)),
    ((1, 10), Interval(1, 10)),
    ((1, 10, 3), Interval(1, 10, 3)),
    ((1, (10, 3)), Interval(1, 10, 3)),
    (range(0, 10, 2), Interval(0, 8, 2)),
    (("a", "z"), Interval("a", "z")),
])
def test_of_accepts_all_spec_forms(spec, expected):
    assert Interval.of(spec) == expected


@pytest.mark.parametrize("spec", [(1, "a"), (1, 5, 0), ("a", "c", 0.5), (1, 2, 3, 4), range(0), "ab", None])
def test_of_rejects_malformed_specs(spec):
    with pytest.raises(InvalidArgument):
        Interval.of(spec)


def test_mixed_numeric_endpoints_become_floats():
    interval = Interval.of((0, 2.5))
    assert interval.kind == FLOAT
    assert interval.start == 0.0


def test_properties():
    down = Interval.of((10, 1, 3))
    assert down.kind == INT
    assert not down.ascending
    assert (down.low, down.high, down.span) == (1, 10, 9)
    assert len(down) == 4
    assert list(down.values()) == [10, 7, 4, 1]
    assert 4 in down and 5 not in down


def test_character_interval():
    letters = Interval.of(("a", "e", 2))
    assert letters.kind == CHAR
    assert list(letters.values()) == ["a", "c", "e"]
    assert "c" in letters and "b" not in letters and 99 not in letters


def test_open_interval():
    open_up = Interval(3, None, 2)
    assert open_up.is_open
    assert 7 in open_up and 1 not in open_up and 4 not in open_up
    with pytest.raises(TypeError):
        len(open_up)


def test_continuous_interval_has_no_count():
    with pytest.raises(TypeError):
        len(Interval(0.0, 1.0))
