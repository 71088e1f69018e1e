import random
import sys
from pathlib import Path

path = Path(__file__)
rootpath = str(path.parent.absolute())
sys.path.append(rootpath)

from randcheck.argument_parser.parser import CheckArgs, parse_args
from randcheck.core.driver import enable_debug, run_check
from randcheck.errors import RandcheckError
from randcheck.generator.regex_tree import RegexNode
from randcheck.generator.registry import build_generator, parse_arg_spec, parse_params
from randcheck.introspect.arity import resolve_symbol


def format_value(value):
    if isinstance(value, RegexNode):
        return value.to_pattern()
    if isinstance(value, str):
        return value
    return repr(value)


def sample(args: CheckArgs) -> int:
    positional, keywords = parse_params(args.params)
    generator = build_generator(args.kind, positional, keywords, rng=args.seed)
    for value in generator.take(args.count):
        print(format_value(value))
    print(f"# seed {generator.seed}", file=sys.stderr)
    return 0


def check(args: CheckArgs) -> int:
    fn = resolve_symbol(args.function)
    # one master seed fans out into one seed per argument generator
    seeds = random.Random(args.seed) if args.seed is not None else None
    generators = []
    for spec in args.arg_specs:
        kind, positional, keywords = parse_arg_spec(spec)
        rng = seeds.randrange(2 ** 32) if seeds is not None else None
        generators.append(build_generator(kind, positional, keywords, rng=rng))

    result = run_check(args.iterations, fn, generators, args.predicate, print_each=args.print_each)
    print(result)
    return 0 if result.passed else 1


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.debug:
        enable_debug()
    try:
        if args.command == "sample":
            return sample(args)
        return check(args)
    except RandcheckError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
