import re

import pytest

from randcheck.errors import FilterUnsatisfiable, InvalidArgument, UnsupportedOperator
from randcheck.generator.lazy import SourceGenerator
from randcheck.generator.regex_tree import RegexNode, RegexOp
from randcheck.generator.strings import random_strings


@pytest.mark.parametrize("pattern", [
    r"[a-c]{2,4}x?",
    r"(ab|cd)+e*",
    r"\d\s\w",
    r"[^a-y]z",
    r"(?:foo|ba[rz]){1,3}",
    r"a.b",
])
def test_pattern_mode_output_matches_pattern(pattern, seed):
    compiled = re.compile(pattern)
    for value in random_strings(pattern, rng=seed).take(200):
        assert compiled.fullmatch(value), value


def test_unbounded_repeats_are_capped(seed):
    for value in random_strings(r"(ab)+", max_repeat=3, rng=seed).take(200):
        assert 2 <= len(value) <= 6


def test_anchors_are_ignored(seed):
    assert set(random_strings(r"^abc$", rng=seed).take(5)) == {"abc"}


def test_compiled_pattern_with_dotall(seed):
    values = random_strings(re.compile(".", re.DOTALL), char_range="\n", rng=seed).take(5)
    assert values == ["\n"] * 5


def test_char_range_limits_classes(seed):
    for value in random_strings(r".\w", char_range=("a", "c"), rng=seed).take(100):
        assert set(value) <= set("abc")


@pytest.mark.parametrize("pattern, name", [
    (r"(a)\1", "backreference"),
    (r"(?=a)a", "lookaround"),
    (r"(?<!a)b", "negative lookaround"),
    (r"(a)?(?(1)b|c)", "conditional"),
    (r"\bword", "word boundary"),
])
def test_unsupported_operators(pattern, name):
    with pytest.raises(UnsupportedOperator) as info:
        random_strings(pattern)
    assert name in info.value.operator


def test_tree_patterns(seed):
    tree = RegexNode(RegexOp.CONCAT, (
        RegexNode.literal("a"),
        RegexNode(RegexOp.ZERO_OR_MORE, (RegexNode(RegexOp.CHAR_SET, (RegexNode.literal("b"), RegexNode.literal("c"))),)),
    ))
    for value in random_strings(tree, max_repeat=4, rng=seed).take(100):
        assert re.fullmatch(r"a[bc]{0,4}", value)


@pytest.mark.parametrize("op", [RegexOp.NEGATION, RegexOp.CONJUNCTION])
def test_tree_negation_and_conjunction_are_unsupported(op):
    children = (RegexNode.literal("a"),) if op is RegexOp.NEGATION else (RegexNode.literal("a"), RegexNode.literal("b"))
    with pytest.raises(UnsupportedOperator):
        random_strings(RegexNode(op, children))


@pytest.mark.parametrize("n", [0, 1, 7, 32])
def test_length_mode_exact_length_and_charset(n, seed):
    for value in random_strings(length=n, include="xyz", rng=seed).take(50):
        assert len(value) == n
        assert set(value) <= set("xyz")


def test_length_mode_exclude(seed):
    for value in random_strings(length=(1, 10), include=("a", "f"), exclude="bd", rng=seed).take(100):
        assert set(value) <= set("acef")


def test_length_generator_is_pulled_in_order(seed):
    assert random_strings(length=SourceGenerator([1, 2, 3]), include="q", rng=seed).take(3) == ["q", "qq", "qqq"]


@pytest.mark.parametrize("kwargs", [
    {},
    {"pattern": "a", "length": 2},
    {"pattern": "a", "include": "abc"},
    {"pattern": "a", "max_repeat": -1},
    {"pattern": "("},
])
def test_contradictory_parameters(kwargs):
    pattern = kwargs.pop("pattern", None)
    with pytest.raises(InvalidArgument):
        random_strings(pattern, **kwargs)


def test_filter_discards_non_matching(seed):
    for value in random_strings(r"[ab]{3}", filter_pattern="a.*", rng=seed).take(100):
        assert value.startswith("a")


def test_filter_in_length_mode(seed):
    for value in random_strings(length=4, include="01", filter_pattern=r"1.*1", rng=seed).take(100):
        assert value[0] == value[-1] == "1"


def test_contradictory_filter_is_detected_up_front():
    with pytest.raises(InvalidArgument) as info:
        random_strings(r"[ab]+", filter_pattern=r"c+")
    assert info.value.argument == "filter_pattern"


@pytest.mark.parametrize("pattern, filter_pattern", [
    ("\t", r"\s"),
    ("é", "[^a]"),
    ("é+", ".+"),
    ("x ", r"x\s"),
])
def test_filter_classes_cover_literals_outside_char_range(pattern, filter_pattern, seed):
    gen = random_strings(pattern, filter_pattern=filter_pattern, rng=seed)
    for value in gen.take(20):
        assert re.fullmatch(filter_pattern, value)


def test_contradictory_length_filter_is_detected_up_front():
    with pytest.raises(InvalidArgument):
        random_strings(length=3, include="ab", filter_pattern=r"a{5}")


def test_unprovable_filter_hits_the_attempt_cap(configure, seed):
    configure(RANDCHECK_MAX_FILTER_ATTEMPTS=20)
    gen = random_strings(r"[ab]+", filter_pattern=re.compile("C+", re.IGNORECASE), rng=seed)
    with pytest.raises(FilterUnsatisfiable):
        next(gen)
