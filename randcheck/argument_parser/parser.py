"""
Command-line argument parsing for run_check.

Uses a dataclass to hold parsed values, making the contract between the CLI
and the rest of the system explicit.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from randcheck.generator.registry import GENERATORS


@dataclass
class CheckArgs:
    """Container for parsed CLI arguments."""

    command: str = "sample"
    # sample
    kind: Optional[str] = None
    params: List[str] = field(default_factory=list)
    count: int = 10
    # check
    function: Optional[str] = None
    arg_specs: List[str] = field(default_factory=list)
    predicate: Optional[str] = None
    iterations: Optional[int] = None
    print_each: bool = False
    # shared
    seed: Optional[int] = None
    debug: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the ``ArgumentParser`` (no side-effects)."""
    parser = argparse.ArgumentParser(
        description="randcheck - random generators and property checks",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=int, default=None, help="seed for reproducible output")
    common.add_argument("--debug", action="store_true", help="enable verbose debug logging for diagnostics")
    sub = parser.add_subparsers(dest="command", required=True)

    sample = sub.add_parser("sample", parents=[common], help="print values from a generator")
    sample.add_argument("kind", choices=sorted(GENERATORS), help="generator kind")
    sample.add_argument(
        "params", nargs="*",
        help="constructor parameters as Python literals, positional or key=value",
    )
    sample.add_argument("-n", "--count", type=int, default=10, help="number of values (default: %(default)s)")

    check = sub.add_parser("check", parents=[common], help="run a property check against a function")
    check.add_argument("function", help="function under test as module:function")
    check.add_argument(
        "--arg", "-a", dest="arg_specs", action="append", default=[], metavar="KIND:PARAMS",
        help="one generated argument, e.g. 'ints:(0,9)'; repeat per argument",
    )
    check.add_argument("--predicate", "-p", default=None, help="result predicate as module:function")
    check.add_argument(
        "--iterations", "-i", type=int, default=None,
        help="number of calls (default: RANDCHECK_ITERATIONS or 100)",
    )
    check.add_argument("--print-each", action="store_true", help="print every call and its result")
    return parser


def parse_args(argv=None) -> CheckArgs:
    """Parse *argv* (or ``sys.argv``) and return a :class:`CheckArgs`."""
    ns = _build_parser().parse_args(argv)
    if ns.command == "sample":
        return CheckArgs(
            command="sample",
            kind=ns.kind,
            params=list(ns.params),
            count=ns.count,
            seed=ns.seed,
            debug=ns.debug,
        )
    return CheckArgs(
        command="check",
        function=ns.function,
        arg_specs=list(ns.arg_specs),
        predicate=ns.predicate,
        iterations=ns.iterations,
        print_each=ns.print_each,
        seed=ns.seed,
        debug=ns.debug,
    )
