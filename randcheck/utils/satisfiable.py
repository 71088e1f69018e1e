"""
Regex language emptiness checks via Z3.

String generators compile their patterns into small plan tuples::

    ("lit", text)              a fixed string
    ("set", chars)             one character out of ``chars``
    ("cat", [plan, ...])       concatenation
    ("alt", [plan, ...])       alternation
    ("rep", lo, hi, plan)      lo..hi repetitions, ``hi`` None for unbounded

This module turns plans into Z3 regular expressions so a generator can prove,
before generating anything, that no string satisfies both its pattern and its
filter.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

import z3

from randcheck.constants import SAT_CHECK_TIMEOUT_MS

logger = logging.getLogger("randcheck.utils.satisfiable")

Plan = Tuple[Any, ...]


def _char_runs(chars: Sequence[str]) -> List[Tuple[int, int]]:
    """Collapse characters into inclusive code-point runs."""
    runs: List[Tuple[int, int]] = []
    for code in sorted({ord(c) for c in chars}):
        if runs and runs[-1][1] == code - 1:
            runs[-1] = (runs[-1][0], code)
        else:
            runs.append((code, code))
    return runs


def _union(parts: List[z3.ReRef]) -> z3.ReRef:
    return parts[0] if len(parts) == 1 else z3.Union(*parts)


def _epsilon() -> z3.ReRef:
    return z3.Re(z3.StringVal(""))


def plan_to_z3(plan: Plan) -> z3.ReRef:
    tag = plan[0]
    if tag == "lit":
        return z3.Re(z3.StringVal(plan[1]))
    if tag == "set":
        return _union([z3.Range(chr(lo), chr(hi)) for lo, hi in _char_runs(plan[1])])
    if tag == "cat":
        parts = [plan_to_z3(child) for child in plan[1]]
        if not parts:
            return _epsilon()
        return parts[0] if len(parts) == 1 else z3.Concat(*parts)
    if tag == "alt":
        return _union([plan_to_z3(child) for child in plan[1]])
    if tag == "rep":
        lo, hi, child = plan[1], plan[2], plan_to_z3(plan[3])
        if hi is None:
            if lo == 0:
                return z3.Star(child)
            if lo == 1:
                return z3.Plus(child)
            return z3.Concat(z3.Loop(child, lo, lo), z3.Star(child))
        if hi == 0:
            # Z3 reads an upper bound of 0 as unbounded
            return _epsilon()
        return z3.Loop(child, lo, hi)
    raise ValueError(f"unknown plan node {tag!r}")


def languages_intersect(first: Plan, second: Plan,
                        timeout_ms: int = SAT_CHECK_TIMEOUT_MS) -> Optional[bool]:
    """
    Decide whether some string belongs to both plans' languages.

    Returns:
        True or False when Z3 reaches a verdict, None when it times out or
        cannot encode the plans (for example characters outside its range).
    """
    try:
        s = z3.String("s")
        solver = z3.Solver()
        solver.set("timeout", timeout_ms)
        solver.add(z3.InRe(s, plan_to_z3(first)), z3.InRe(s, plan_to_z3(second)))
        result = solver.check()
    except z3.Z3Exception as e:
        logger.debug("satisfiability check skipped: %s", e)
        return None
    if result == z3.sat:
        return True
    if result == z3.unsat:
        return False
    logger.debug("satisfiability check inconclusive: %s", solver.reason_unknown())
    return None
