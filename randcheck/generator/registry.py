"""
Generator registry.

Maps the short kind names used on the command line (``ints``, ``strings``,
``regex`` ...) to generator constructors, and parses the textual parameter
lists that go with them.
"""

import ast
import inspect
import shlex
from typing import Any, Callable, Dict, List, Optional, Tuple

from randcheck.config.settings import RngLike
from randcheck.errors import InvalidArgument
from randcheck.generator.elements import random_elements, random_lists, random_vectors
from randcheck.generator.lazy import Generator
from randcheck.generator.primitive import (
    random_booleans,
    random_chars,
    random_floats,
    random_integers,
    random_normals,
)
from randcheck.generator.ranges import random_ranges
from randcheck.generator.regex_tree import random_regex_templates, random_regex_trees
from randcheck.generator.strings import random_strings

GENERATORS: Dict[str, Callable[..., Generator]] = {
    "ints": random_integers,
    "floats": random_floats,
    "normals": random_normals,
    "bools": random_booleans,
    "chars": random_chars,
    "strings": random_strings,
    "regex": random_regex_trees,
    "templates": random_regex_templates,
    "ranges": random_ranges,
    "elements": random_elements,
    "lists": random_lists,
    "vectors": random_vectors,
}


def get_generator_function(kind: str) -> Callable[..., Generator]:
    """Return the constructor registered under *kind*."""
    try:
        return GENERATORS[kind]
    except KeyError:
        raise InvalidArgument(
            "kind", f"unknown generator {kind!r}; choose from {', '.join(sorted(GENERATORS))}"
        ) from None


def _literal(text: str) -> Any:
    # anything that is not a Python literal is taken as a plain string
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text


def parse_params(tokens: List[str]) -> Tuple[List[Any], Dict[str, Any]]:
    """
    Split ``["(0, 9)", "step=2"]`` style tokens into positional and keyword values.

    >>> parse_params(["(0, 9)", "length=3", "include=abc"])
    ([(0, 9)], {'length': 3, 'include': 'abc'})
    """
    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if sep and key.isidentifier():
            kwargs[key] = _literal(value)
        else:
            if kwargs:
                raise InvalidArgument("params", f"positional parameter {token!r} after keyword parameters")
            args.append(_literal(token))
    return args, kwargs


def parse_arg_spec(text: str) -> Tuple[str, List[Any], Dict[str, Any]]:
    """
    Parse a ``KIND:PARAMS`` argument spec such as ``"ints:(0,9)"``.

    *PARAMS* is split with shell quoting rules, so tuples containing spaces
    need quotes; ``"strings:'[a-z]+' max_repeat=3"`` yields one positional
    and one keyword parameter.
    """
    kind, _, params = text.partition(":")
    args, kwargs = parse_params(shlex.split(params))
    return kind.strip(), args, kwargs


def build_generator(kind: str, args: Optional[List[Any]] = None, kwargs: Optional[Dict[str, Any]] = None,
                    rng: RngLike = None) -> Generator:
    constructor = get_generator_function(kind)
    kwargs = dict(kwargs or {})
    kwargs.setdefault("rng", rng)
    args = list(args or [])
    # only a mismatch with the constructor signature is a parameter error
    try:
        inspect.signature(constructor).bind(*args, **kwargs)
    except TypeError as e:
        raise InvalidArgument("params", f"{kind}: {e}") from e
    return constructor(*args, **kwargs)
