"""
Arity introspection for callable-like values.

:func:`describe_callable` reports how many positional arguments a value
requires, how many more it accepts, and whether it takes any number beyond
that. The quickcheck driver uses it to decide how to call a predicate.
"""

from __future__ import annotations

import builtins
import enum
import functools
import importlib
import inspect
import re
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Set

from randcheck.errors import InvalidCallable
from randcheck.introspect.combinators import Combinator, CombinatorKind


class CallableKind(enum.Enum):
    NAMED_FUNCTION = "named-function"
    LEXICAL_FUNCTION = "lexical-function"
    LEXICAL_VARIABLE = "lexical-variable"
    SYMBOL_MACRO = "symbol-macro"
    QUOTED_SYMBOL = "quoted-symbol"
    ANONYMOUS_FUNCTION = "anonymous-function"
    MACRO = "macro"
    SPECIAL_FORM = "special-form"
    SEQUENCE = "sequence"
    HASH_MAP = "hash-map"
    REGEX = "regex"
    OTHER = "other"


@dataclass(frozen=True)
class CallableDescriptor:
    kind: CallableKind
    required: int
    optional: int
    variadic: bool

    @property
    def max_args(self) -> Optional[int]:
        """Largest accepted argument count, None when variadic."""
        return None if self.variadic else self.required + self.optional

    def accepts(self, count: int) -> bool:
        return count >= self.required and (self.variadic or count <= self.required + self.optional)


def _descriptor(value: Any, kind: CallableKind, required: int, optional: int,
                variadic: bool) -> CallableDescriptor:
    if required < 0 or optional < 0:
        raise InvalidCallable(value, f"computed arity required={required} optional={optional}")
    return CallableDescriptor(kind, required, optional, variadic)


def _from_signature(value: Any, kind: CallableKind) -> CallableDescriptor:
    try:
        signature = inspect.signature(value)
    except (TypeError, ValueError) as e:
        raise InvalidCallable(value, f"no signature available: {e}") from e
    required = optional = 0
    variadic = False
    for param in signature.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            if param.default is param.empty:
                required += 1
            else:
                optional += 1
        elif param.kind is param.VAR_POSITIONAL:
            variadic = True
        # keyword-only and **kwargs parameters cannot be reached positionally
    return _descriptor(value, kind, required, optional, variadic)


def _function_kind(fn: Any) -> CallableKind:
    name = getattr(fn, "__name__", "")
    if name == "<lambda>":
        return CallableKind.ANONYMOUS_FUNCTION
    if "<locals>" in getattr(fn, "__qualname__", ""):
        return CallableKind.LEXICAL_FUNCTION
    return CallableKind.NAMED_FUNCTION


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------

def _bind_leading(value: Any, inner: CallableDescriptor, count: int) -> CallableDescriptor:
    """Arity left after *count* leading positional arguments are supplied."""
    required = inner.required - count
    optional = inner.optional
    if required < 0:
        optional += required
        required = 0
    if inner.variadic and optional < 0:
        optional = 0
    return _descriptor(value, CallableKind.MACRO, required, optional, inner.variadic)


def _describe_combinator(value: Combinator, context: Optional[Mapping[str, Any]],
                         seen: Set[str]) -> CallableDescriptor:
    kind = value.kind
    inner: List[CallableDescriptor] = [_describe(op, context, seen) for op in value.operands]

    if kind in (CombinatorKind.NEGATE, CombinatorKind.FLIP):
        d = inner[0]
        return _descriptor(value, CallableKind.MACRO, d.required, d.optional, d.variadic)
    if kind in (CombinatorKind.CONJOIN, CombinatorKind.DISJOIN, CombinatorKind.JUXT):
        if not inner:
            return _descriptor(value, CallableKind.MACRO, 0, 0, True)
        return _descriptor(
            value, CallableKind.MACRO,
            max(d.required for d in inner),
            min(d.optional for d in inner),
            all(d.variadic for d in inner),
        )
    if kind is CombinatorKind.COMPOSE:
        for later, d in zip(value.operands[1:], inner[1:]):
            if not d.accepts(1):
                raise InvalidCallable(value, f"{later!r} cannot take the single value piped into it")
        d = inner[0]
        return _descriptor(value, CallableKind.MACRO, d.required, d.optional, d.variadic)
    if kind is CombinatorKind.PARTIAL:
        return _bind_leading(value, inner[0], len(value.bound))
    if kind is CombinatorKind.DUP:
        d = inner[0]
        total = d.required + d.optional - 1
        required = max(1, d.required - 1)
        optional = max(0, total - required) if d.variadic else total - required
        return _descriptor(value, CallableKind.MACRO, required, optional, d.variadic)
    if kind is CombinatorKind.CONSTANTLY:
        return _descriptor(value, CallableKind.MACRO, 0, 0, True)
    if kind is CombinatorKind.SPREAD:
        return _descriptor(value, CallableKind.MACRO, 1, 0, False)
    raise InvalidCallable(value, f"unknown combinator {kind}")


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

def resolve_symbol(name: str) -> Any:
    """Import a dotted name such as ``os.path.join``; bare names come from builtins."""
    name = name.replace(":", ".")
    if "." not in name:
        if hasattr(builtins, name):
            return getattr(builtins, name)
        raise InvalidCallable(name, "unresolvable symbol")
    # walk back until a prefix imports, then resolve the rest as attributes
    parts = name.split(".")
    for cut in range(len(parts) - 1, 0, -1):
        try:
            target = importlib.import_module(".".join(parts[:cut]))
        except ImportError:
            continue
        try:
            for part in parts[cut:]:
                target = getattr(target, part)
        except AttributeError as e:
            raise InvalidCallable(name, "unresolvable symbol") from e
        return target
    raise InvalidCallable(name, "unresolvable symbol")


def _describe_symbol(name: str, context: Optional[Mapping[str, Any]], seen: Set[str]) -> CallableDescriptor:
    if name in seen:
        raise InvalidCallable(name, "symbol refers to itself")
    seen = seen | {name}
    if context is not None and name in context:
        target = context[name]
        if isinstance(target, str):
            return replace(_describe_symbol(target, context, seen), kind=CallableKind.SYMBOL_MACRO)
        return replace(_describe(target, context, seen), kind=CallableKind.LEXICAL_VARIABLE)
    target = resolve_symbol(name)
    return replace(_describe(target, context, seen), kind=CallableKind.QUOTED_SYMBOL)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _describe(value: Any, context: Optional[Mapping[str, Any]], seen: Set[str]) -> CallableDescriptor:
    if isinstance(value, Combinator):
        return _describe_combinator(value, context, seen)
    if isinstance(value, functools.partial):
        inner = _describe(value.func, context, seen)
        return _bind_leading(value, inner, len(value.args))
    if isinstance(value, str):
        return _describe_symbol(value, context, seen)
    if isinstance(value, re.Pattern):
        return CallableDescriptor(CallableKind.REGEX, 1, 1, False)
    if isinstance(value, Mapping):
        return CallableDescriptor(CallableKind.HASH_MAP, 1, 1, False)
    if isinstance(value, (list, tuple)):
        return CallableDescriptor(CallableKind.SEQUENCE, 1, 1, False)
    if isinstance(value, type):
        return _from_signature(value, CallableKind.SPECIAL_FORM)
    if inspect.isfunction(value) or inspect.ismethod(value) or inspect.isbuiltin(value):
        return _from_signature(value, _function_kind(value))
    if callable(value):
        return _from_signature(value, CallableKind.OTHER)
    raise InvalidCallable(value, "not callable")


def describe_callable(value: Any, lexical_context: Optional[Mapping[str, Any]] = None) -> CallableDescriptor:
    """
    Describe the positional arity of *value*.

    Args:
        value: a function, lambda, method, class, combinator, ``functools.partial``,
            symbol name, sequence, mapping or compiled pattern.
        lexical_context: mapping used to resolve symbol names (``locals()`` is
            a typical choice). A name bound to another name is a symbol macro
            and is followed; names not in the context are imported as dotted
            paths (bare names fall back to builtins).

    Raises:
        InvalidCallable: unresolvable symbols, values with no usable signature,
            and combinators whose operands cannot fit together.
    """
    return _describe(value, lexical_context, set())

