"""
Random regular-expression syntax trees.

Trees are built top-down. Every node receives a literal budget (how many
literal leaves its subtree must contain) and its depth. Operators are picked
from the caller's allowed set after filtering through a fixed legality table,
n-ary operators split their budget among their children, and leaves are
emitted once the depth limit is reached, so the realized literal count always
equals the target drawn from the length spec.

Rendered syntax::

    ab        concatenation         a|b    alternation
    a&b       conjunction           ~a     negation
    a?  a*  a+                      [ab]   [^ab]   character sets
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from randcheck.config.settings import RngLike
from randcheck.constants import (
    DEFAULT_LITERALS,
    DEFAULT_TREE_DEPTH,
    DEFAULT_TREE_LENGTH,
    MAX_NARY_ARITY,
    PLACEHOLDER,
    REGEX_METACHARACTERS,
)
from randcheck.errors import InvalidArgument, UnsupportedOperator
from randcheck.generator.interval import INT, Interval
from randcheck.generator.lazy import Generator
from randcheck.utils.coerce import pad_to

logger = logging.getLogger("randcheck.generator.regex_tree")


class RegexOp(enum.Enum):
    LITERAL = "literal"
    CONCAT = "concat"
    ALTERNATION = "alternation"
    CONJUNCTION = "conjunction"
    NEGATION = "negation"
    OPTIONAL = "optional"
    ZERO_OR_MORE = "zero_or_more"
    ONE_OR_MORE = "one_or_more"
    CHAR_SET = "char_set"
    NEGATED_CHAR_SET = "negated_char_set"


REPEATS: FrozenSet[RegexOp] = frozenset({RegexOp.OPTIONAL, RegexOp.ZERO_OR_MORE, RegexOp.ONE_OR_MORE})
UNARY: FrozenSet[RegexOp] = REPEATS | {RegexOp.NEGATION}
NARY: FrozenSet[RegexOp] = frozenset({RegexOp.CONCAT, RegexOp.ALTERNATION, RegexOp.CONJUNCTION})
SETS: FrozenSet[RegexOp] = frozenset({RegexOp.CHAR_SET, RegexOp.NEGATED_CHAR_SET})
ALL_OPERATORS: FrozenSet[RegexOp] = UNARY | NARY | SETS

_POSTFIX = {RegexOp.OPTIONAL: "?", RegexOp.ZERO_OR_MORE: "*", RegexOp.ONE_OR_MORE: "+"}
_INFIX = {RegexOp.CONCAT: "", RegexOp.ALTERNATION: "|", RegexOp.CONJUNCTION: "&"}
_SET_SPECIALS = frozenset("]^\\-[")


@dataclass(frozen=True)
class RegexNode:
    op: RegexOp
    children: Tuple["RegexNode", ...] = ()
    char: Optional[str] = None

    @classmethod
    def literal(cls, char: str) -> "RegexNode":
        return cls(RegexOp.LITERAL, (), char)

    @property
    def depth(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.depth for child in self.children)

    @property
    def length(self) -> int:
        """Number of literal leaves."""
        if self.op is RegexOp.LITERAL:
            return 1
        return sum(child.length for child in self.children)

    def walk(self) -> Iterable["RegexNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_pattern(self) -> str:
        op = self.op
        if op is RegexOp.LITERAL:
            return "\\" + self.char if self.char in REGEX_METACHARACTERS else self.char
        if op in SETS:
            body = "".join("\\" + c.char if c.char in _SET_SPECIALS else c.char for c in self.children)
            return ("[^" if op is RegexOp.NEGATED_CHAR_SET else "[") + body + "]"
        if op is RegexOp.NEGATION:
            return "~" + self.children[0].grouped()
        if op in REPEATS:
            return self.children[0].grouped() + _POSTFIX[op]
        return _INFIX[op].join(child._operand() for child in self.children)

    def to_python(self) -> str:
        """Render as a pattern for Python's ``re`` module."""
        op = self.op
        if op in (RegexOp.NEGATION, RegexOp.CONJUNCTION):
            raise UnsupportedOperator(op.value)
        if op is RegexOp.LITERAL:
            return re.escape(self.char)
        if op in SETS:
            body = "".join(re.escape(c.char) for c in self.children)
            return ("[^" if op is RegexOp.NEGATED_CHAR_SET else "[") + body + "]"
        if op in REPEATS:
            child = self.children[0]
            inner = child.to_python()
            if child.op not in (RegexOp.LITERAL,) and child.op not in SETS:
                inner = "(?:" + inner + ")"
            return inner + _POSTFIX[op]
        parts = [child.to_python() for child in self.children]
        if op is RegexOp.ALTERNATION:
            return "(?:" + "|".join(parts) + ")"
        return "".join(parts)

    def grouped(self) -> str:
        if self.op is RegexOp.LITERAL or self.op in SETS:
            return self.to_pattern()
        return "(" + self.to_pattern() + ")"

    def _operand(self) -> str:
        # operands of infix operators only need grouping when they are infix too
        if self.op in NARY:
            return "(" + self.to_pattern() + ")"
        return self.to_pattern()


# ---------------------------------------------------------------------------
# Legality table
# ---------------------------------------------------------------------------

UNIT = "unit"
MULTI = "multi"


def _legal_children(budget_class: str, parent: Optional[RegexOp]) -> FrozenSet[RegexOp]:
    ops = UNARY | SETS if budget_class == UNIT else ALL_OPERATORS
    if parent in REPEATS:
        ops -= REPEATS
    elif parent is RegexOp.NEGATION:
        ops -= {RegexOp.NEGATION}
    elif parent in NARY:
        ops -= {parent}
    elif parent in SETS:
        ops = frozenset()
    return frozenset(ops)


LEGALITY: Dict[Tuple[str, Optional[RegexOp]], FrozenSet[RegexOp]] = {
    (budget_class, parent): _legal_children(budget_class, parent)
    for budget_class in (UNIT, MULTI)
    for parent in [None] + list(RegexOp)
}


def is_legal(parent: Optional[RegexOp], child: RegexOp, budget: int) -> bool:
    if child is RegexOp.LITERAL:
        return True
    return child in LEGALITY[(UNIT if budget == 1 else MULTI, parent)]


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def _literal_alphabet(literal_chars: str, ok_after_escape: str) -> List[str]:
    escaped = set(ok_after_escape)
    unknown = escaped - REGEX_METACHARACTERS
    if unknown:
        raise InvalidArgument("ok_after_escape", f"not regex metacharacters: {''.join(sorted(unknown))!r}")
    alphabet = sorted((set(literal_chars) - REGEX_METACHARACTERS) | escaped)
    if not alphabet:
        raise InvalidArgument("literal_chars", "no usable literal characters")
    return alphabet


class RegexTreeGenerator(Generator):

    def __init__(self, length: Any = DEFAULT_TREE_LENGTH, max_depth: int = DEFAULT_TREE_DEPTH,
                 allowed: Iterable[RegexOp] = ALL_OPERATORS, ok_after_escape: str = "",
                 literal_chars: str = DEFAULT_LITERALS, rng: RngLike = None) -> None:
        super().__init__(rng)
        window = Interval.of(length, "length")
        if window.kind != INT or window.is_open or window.low < 1:
            raise InvalidArgument("length", f"expected a positive integer or interval, got {length!r}")
        if max_depth < 0:
            raise InvalidArgument("max_depth", "must not be negative")
        self.allowed = frozenset(RegexOp(op) for op in allowed) - {RegexOp.LITERAL}
        self.max_depth = max_depth
        self.alphabet = _literal_alphabet(literal_chars, ok_after_escape)
        self._feasible_cache: Dict[Tuple[int, Optional[RegexOp]], bool] = {}
        self.low, self.high = int(window.low), int(window.high)
        if self.high > 1 and not self._feasible(True, 0, None):
            if self.low > 1:
                raise InvalidArgument(
                    "length",
                    "trees with more than one literal need depth >= 1 and an n-ary or set operator",
                )
            logger.debug("no multi-literal tree fits depth %d, clamping length to 1", max_depth)
            self.high = 1

    def _feasible(self, multi: bool, depth: int, parent: Optional[RegexOp]) -> bool:
        """Whether a subtree with a budget above one fits below *depth*."""
        if not multi:
            return True
        key = (depth, parent)
        if key not in self._feasible_cache:
            self._feasible_cache[key] = depth < self.max_depth and any(
                op in SETS or op in NARY or self._feasible(True, depth + 1, op)
                for op in self._options(2, parent)
            )
        return self._feasible_cache[key]

    def _options(self, budget: int, parent: Optional[RegexOp]) -> List[RegexOp]:
        legal = LEGALITY[(UNIT if budget == 1 else MULTI, parent)]
        # sorted so seeded runs are stable across processes
        return sorted(legal & self.allowed, key=lambda op: op.value)

    def draw(self) -> RegexNode:
        target = self.rng.randint(self.low, self.high)
        return self._build(target, 0, None)

    def _build(self, budget: int, depth: int, parent: Optional[RegexOp]) -> RegexNode:
        if depth >= self.max_depth:
            return self._leaf()
        options = self._options(budget, parent)
        if budget > 1:
            # unary operators pass the whole budget one level down
            options = [op for op in options
                       if op not in UNARY or self._feasible(True, depth + 1, op)]
            if depth + 1 == self.max_depth:
                options = [op for op in options if op in NARY or op in SETS]
        elif not options or self.rng.random() < 0.5:
            return self._leaf()
        if not options:
            # only reachable when the constructor check was bypassed
            raise InvalidArgument("length", f"cannot place {budget} literals at depth {depth}")
        op = self.rng.choice(options)
        if op in SETS:
            return RegexNode(op, tuple(self._leaf() for _ in range(budget)))
        if op in UNARY:
            return RegexNode(op, (self._build(budget, depth + 1, op),))
        return RegexNode(op, tuple(
            self._build(part, depth + 1, op) for part in self._split(budget, depth + 1, op)
        ))

    def _split(self, budget: int, depth: int, parent: RegexOp) -> List[int]:
        if not self._feasible(True, depth, parent):
            return [1] * budget
        parts = self.rng.randint(2, max(2, min(budget, MAX_NARY_ARITY)))
        cuts = sorted(self.rng.sample(range(1, budget), parts - 1))
        return [b - a for a, b in zip([0] + cuts, cuts + [budget])]

    def _leaf(self) -> RegexNode:
        return RegexNode.literal(self.rng.choice(self.alphabet))


def random_regex_trees(length: Any = DEFAULT_TREE_LENGTH, max_depth: int = DEFAULT_TREE_DEPTH,
                       allowed: Iterable[RegexOp] = ALL_OPERATORS, ok_after_escape: str = "",
                       literal_chars: str = DEFAULT_LITERALS, rng: RngLike = None) -> RegexTreeGenerator:
    """
    Generate random regex syntax trees.

    Args:
        length: number of literal leaves, an int or an interval.
        max_depth: bound on the longest root-to-leaf path (a literal has depth 0).
        allowed: operators that may appear.
        ok_after_escape: metacharacters allowed to appear as escaped literals.
        literal_chars: alphabet for literals; metacharacters in it are dropped.
    """
    return RegexTreeGenerator(length, max_depth, allowed, ok_after_escape, literal_chars, rng)


def _shared_operators(allowed: Any) -> Any:
    # a flat list of operators is one set for every placeholder, not overrides
    if isinstance(allowed, list) and allowed and all(isinstance(op, (RegexOp, str)) for op in allowed):
        return frozenset(RegexOp(op) for op in allowed)
    return allowed


class RegexTemplateGenerator(Generator):
    """Fills every ``PLACEHOLDER`` in a template with a freshly generated tree."""

    def __init__(self, template: str, lengths: Any = DEFAULT_TREE_LENGTH, depths: Any = DEFAULT_TREE_DEPTH,
                 allowed: Any = ALL_OPERATORS, ok_after_escape: str = "",
                 literal_chars: str = DEFAULT_LITERALS, rng: RngLike = None) -> None:
        super().__init__(rng)
        self._pieces = template.split(PLACEHOLDER)
        count = len(self._pieces) - 1
        if count == 0:
            raise InvalidArgument("template", f"no {PLACEHOLDER} marker in {template!r}")
        self._trees = [
            RegexTreeGenerator(length, depth, allowed_ops, ok_after_escape, literal_chars,
                               self.rng.randrange(2 ** 32))
            for length, depth, allowed_ops in zip(
                pad_to(lengths, count, "lengths"),
                pad_to(depths, count, "depths"),
                pad_to(_shared_operators(allowed), count, "allowed"),
            )
        ]

    def draw(self) -> str:
        out = [self._pieces[0]]
        for tree_gen, piece in zip(self._trees, self._pieces[1:]):
            tree = next(tree_gen)
            out.append(tree.grouped() if tree.op is not RegexOp.LITERAL else tree.to_pattern())
            out.append(piece)
        return "".join(out)


def random_regex_templates(template: str, lengths: Any = DEFAULT_TREE_LENGTH, depths: Any = DEFAULT_TREE_DEPTH,
                           allowed: Any = ALL_OPERATORS, ok_after_escape: str = "",
                           literal_chars: str = DEFAULT_LITERALS, rng: RngLike = None) -> RegexTemplateGenerator:
    """
    Fill each placeholder in *template* with a random regex tree.

    *lengths* and *depths* take a per-placeholder list of overrides; shorter
    lists are padded with their last element. *allowed* is one operator
    collection shared by every placeholder (a set, or a flat list of
    ``RegexOp`` members); per-placeholder overrides are a list of such
    collections.
    """
    return RegexTemplateGenerator(template, lengths, depths, allowed, ok_after_escape, literal_chars, rng)
