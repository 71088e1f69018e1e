"""
Random string generation.

Pattern mode walks the abstract syntax of a regular expression (Python's own
regex parser for textual or compiled patterns, or a ``RegexNode`` tree) and
resolves each operator at random. Length mode concatenates random characters.
Both modes can discard strings that do not fully match a filter pattern.
"""

from __future__ import annotations

import logging
import random
import re
from re import _constants as sre
from re import _parser as sre_parser
from typing import Any, Callable, Dict, List, Optional, Sequence

from randcheck.config.settings import RngLike, get_settings
from randcheck.constants import DEFAULT_MAX_REPEAT, PRINTABLE_ASCII
from randcheck.errors import FilterUnsatisfiable, InvalidArgument, UnsupportedOperator
from randcheck.generator.elements import length_sampler
from randcheck.generator.interval import Interval
from randcheck.generator.lazy import Generator, is_generator
from randcheck.generator.primitive import allowed_chars, char_set
from randcheck.generator.regex_tree import RegexNode, RegexOp
from randcheck.utils.satisfiable import Plan, languages_intersect

logger = logging.getLogger("randcheck.generator.strings")

_CATEGORIES: Dict[Any, Callable[[str], bool]] = {
    sre.CATEGORY_DIGIT: str.isdecimal,
    sre.CATEGORY_NOT_DIGIT: lambda c: not c.isdecimal(),
    sre.CATEGORY_SPACE: str.isspace,
    sre.CATEGORY_NOT_SPACE: lambda c: not c.isspace(),
    sre.CATEGORY_WORD: lambda c: c.isalnum() or c == "_",
    sre.CATEGORY_NOT_WORD: lambda c: not (c.isalnum() or c == "_"),
}

_IGNORED_ANCHORS = frozenset({
    sre.AT_BEGINNING, sre.AT_BEGINNING_STRING, sre.AT_END, sre.AT_END_STRING,
})

_UNSUPPORTED = {
    sre.GROUPREF: "backreference",
    sre.GROUPREF_EXISTS: "conditional group",
    sre.ASSERT: "lookaround assertion",
    sre.ASSERT_NOT: "negative lookaround assertion",
}


class _Planner:
    """Compiles regex syntax into plan tuples (see :mod:`randcheck.utils.satisfiable`)."""

    def __init__(self, chars: Sequence[str], max_repeat: Optional[int]) -> None:
        self.chars = list(chars)
        # None keeps unbounded repeats unbounded (used for filters)
        self.max_repeat = max_repeat
        self.dotall = False

    def _repeat(self, lo: int, hi: Optional[int], child: Plan) -> Plan:
        if hi is None or hi == sre.MAXREPEAT:
            hi = None if self.max_repeat is None else max(lo, self.max_repeat)
        return ("rep", lo, hi, child)

    def _char_set(self, member: Callable[[str], bool], fallback: bool) -> Plan:
        candidates = [c for c in self.chars if member(c)]
        if not candidates and fallback:
            candidates = [chr(code) for code in range(get_settings().max_char + 1)
                          if not 0xD800 <= code <= 0xDFFF and member(chr(code))]
        if not candidates:
            raise InvalidArgument("char_range", "a character class admits none of the allowed characters")
        return ("set", tuple(candidates))

    # -- Python regex syntax ------------------------------------------------

    def from_pattern(self, pattern: re.Pattern) -> Plan:
        parsed = sre_parser.parse(pattern.pattern, pattern.flags)
        self.dotall = bool(parsed.state.flags & sre.SRE_FLAG_DOTALL)
        return self._sequence(parsed)

    def _sequence(self, items: Any) -> Plan:
        parts = [self._item(op, av) for op, av in items]
        return ("cat", [part for part in parts if part is not None])

    def _item(self, op: Any, av: Any) -> Optional[Plan]:
        if op is sre.LITERAL:
            return ("lit", chr(av))
        if op is sre.NOT_LITERAL:
            return self._char_set(lambda c: c != chr(av), fallback=False)
        if op is sre.ANY:
            return self._char_set(lambda c: self.dotall or c != "\n", fallback=False)
        if op is sre.IN:
            return self._class(av)
        if op is sre.BRANCH:
            return ("alt", [self._sequence(branch) for branch in av[1]])
        if op is sre.SUBPATTERN:
            return self._sequence(av[3])
        if op is sre.ATOMIC_GROUP:
            return self._sequence(av)
        if op in (sre.MAX_REPEAT, sre.MIN_REPEAT, sre.POSSESSIVE_REPEAT):
            lo, hi, item = av
            return self._repeat(lo, hi, self._sequence(item))
        if op is sre.AT:
            if av in _IGNORED_ANCHORS:
                return None
            raise UnsupportedOperator(f"word boundary ({av})")
        if op in _UNSUPPORTED:
            raise UnsupportedOperator(f"{_UNSUPPORTED[op]} ({op})")
        raise UnsupportedOperator(str(op))

    def _class(self, items: Any) -> Plan:
        negated = False
        tests: List[Callable[[str], bool]] = []
        for op, av in items:
            if op is sre.NEGATE:
                negated = True
            elif op is sre.LITERAL:
                tests.append(lambda c, ch=chr(av): c == ch)
            elif op is sre.RANGE:
                tests.append(lambda c, lo=av[0], hi=av[1]: lo <= ord(c) <= hi)
            elif op is sre.CATEGORY and av in _CATEGORIES:
                tests.append(_CATEGORIES[av])
            else:
                raise UnsupportedOperator(f"character class item {op}")

        def member(c: str) -> bool:
            return any(test(c) for test in tests) != negated

        return self._char_set(member, fallback=not negated)

    # -- RegexNode trees ----------------------------------------------------

    def from_tree(self, node: RegexNode) -> Plan:
        op = node.op
        if op is RegexOp.LITERAL:
            return ("lit", node.char)
        if op is RegexOp.CONCAT:
            return ("cat", [self.from_tree(child) for child in node.children])
        if op is RegexOp.ALTERNATION:
            return ("alt", [self.from_tree(child) for child in node.children])
        if op is RegexOp.OPTIONAL:
            return ("rep", 0, 1, self.from_tree(node.children[0]))
        if op is RegexOp.ZERO_OR_MORE:
            return self._repeat(0, None, self.from_tree(node.children[0]))
        if op is RegexOp.ONE_OR_MORE:
            return self._repeat(1, None, self.from_tree(node.children[0]))
        if op is RegexOp.CHAR_SET:
            return ("set", tuple(child.char for child in node.children))
        if op is RegexOp.NEGATED_CHAR_SET:
            excluded = {child.char for child in node.children}
            return self._char_set(lambda c: c not in excluded, fallback=False)
        raise UnsupportedOperator(op.value)


def _emit(plan: Plan, rng: random.Random, out: List[str]) -> None:
    tag = plan[0]
    if tag == "lit":
        out.append(plan[1])
    elif tag == "set":
        out.append(rng.choice(plan[1]))
    elif tag == "cat":
        for child in plan[1]:
            _emit(child, rng, out)
    elif tag == "alt":
        _emit(rng.choice(plan[1]), rng, out)
    else:
        for _ in range(rng.randint(plan[1], plan[2])):
            _emit(plan[3], rng, out)


def _alphabet(plan: Plan, out: set) -> set:
    """Every character a plan can emit."""
    tag = plan[0]
    if tag == "lit":
        out.add(plan[1])
    elif tag == "set":
        out.update(plan[1])
    elif tag in ("cat", "alt"):
        for child in plan[1]:
            _alphabet(child, out)
    else:
        _alphabet(plan[3], out)
    return out


def _compile_filter(filter_pattern: Any) -> re.Pattern:
    if isinstance(filter_pattern, RegexNode):
        return re.compile(filter_pattern.to_python())
    if isinstance(filter_pattern, re.Pattern):
        return filter_pattern
    if isinstance(filter_pattern, str):
        try:
            return re.compile(filter_pattern)
        except re.error as e:
            raise InvalidArgument("filter_pattern", str(e)) from e
    raise InvalidArgument("filter_pattern", f"expected a pattern, got {filter_pattern!r}")


class StringGenerator(Generator):

    def __init__(self, pattern: Any = None, length: Any = None, include: Any = None, exclude: Any = None,
                 max_repeat: int = DEFAULT_MAX_REPEAT, char_range: Any = None,
                 filter_pattern: Any = None, rng: RngLike = None) -> None:
        super().__init__(rng)
        if (pattern is None) == (length is None):
            raise InvalidArgument("pattern", "give either a pattern or a length")
        if max_repeat < 0:
            raise InvalidArgument("max_repeat", "must not be negative")
        self._filter = _compile_filter(filter_pattern) if filter_pattern is not None else None
        self._attempts = get_settings().max_filter_attempts
        if pattern is not None:
            if include is not None or exclude is not None:
                raise InvalidArgument("include", "include/exclude only apply in length mode; use char_range")
            chars = sorted(char_set(PRINTABLE_ASCII if char_range is None else char_range, "char_range"))
            if not chars:
                raise InvalidArgument("char_range", "no characters allowed")
            plan = self._plan_pattern(pattern, _Planner(chars, max_repeat))
            self._draw = lambda rng: self._from_plan(plan, rng)
        else:
            chars = allowed_chars(include, exclude)
            size = length_sampler(length)
            plan = None
            if not is_generator(length):
                window = Interval.of(length, "length")
                plan = ("rep", int(window.low), int(window.high), ("set", tuple(chars)))
            self._draw = lambda rng: "".join(rng.choice(chars) for _ in range(size(rng)))
        if self._filter is not None and plan is not None:
            self._check_filter(plan)

    @staticmethod
    def _plan_pattern(pattern: Any, planner: _Planner) -> Plan:
        if isinstance(pattern, RegexNode):
            return planner.from_tree(pattern)
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise InvalidArgument("pattern", str(e)) from e
        if not isinstance(pattern, re.Pattern) or not isinstance(pattern.pattern, str):
            raise InvalidArgument("pattern", f"expected a str pattern or RegexNode, got {pattern!r}")
        return planner.from_pattern(pattern)

    def _check_filter(self, plan: Plan) -> None:
        if self._filter.flags & (re.IGNORECASE | re.LOCALE):
            return
        try:
            # filter classes only need deciding over what the pattern can emit
            filter_plan = _Planner(sorted(_alphabet(plan, set())), None).from_pattern(self._filter)
        except (UnsupportedOperator, InvalidArgument) as e:
            logger.debug("filter not checked for satisfiability: %s", e)
            return
        if languages_intersect(plan, filter_plan) is False:
            raise InvalidArgument("filter_pattern", f"{self._filter.pattern!r} can never match a generated string")

    @staticmethod
    def _from_plan(plan: Plan, rng: random.Random) -> str:
        out: List[str] = []
        _emit(plan, rng, out)
        return "".join(out)

    def draw(self) -> str:
        if self._filter is None:
            return self._draw(self.rng)
        for attempt in range(self._attempts):
            value = self._draw(self.rng)
            if self._filter.fullmatch(value):
                if attempt >= 100:
                    logger.debug("string filter accepted after %d rejections", attempt)
                return value
        raise FilterUnsatisfiable("random_strings", self._attempts)


def random_strings(pattern: Any = None, *, length: Any = None, include: Any = None, exclude: Any = None,
                   max_repeat: int = DEFAULT_MAX_REPEAT, char_range: Any = None,
                   filter_pattern: Any = None, rng: RngLike = None) -> StringGenerator:
    """
    Generate random strings.

    Pattern mode (``pattern`` given): *pattern* is a regex string, a compiled
    pattern or a ``RegexNode``. Repeats without an upper bound are capped at
    *max_repeat*; ``.``, negated classes and categories draw from *char_range*
    (printable ASCII by default).

    Length mode (``length`` given): *length* is an int, interval or generator;
    characters come from ``include \\ exclude``.

    *filter_pattern* discards generated strings that do not fully match it.
    A filter that matches rarely slows generation down arbitrarily; after the
    configured number of attempts ``FilterUnsatisfiable`` is raised.

    Raises:
        UnsupportedOperator: backreferences, lookarounds, conditional groups,
            word boundaries, and tree negation/conjunction.
        InvalidArgument: contradictory parameters, including a filter proven
            never to match.
    """
    return StringGenerator(pattern, length, include, exclude, max_repeat, char_range, filter_pattern, rng)
