"""
Runtime configuration module.

Values are read from environment variables so a failing run can be replayed
without touching code: export ``RANDCHECK_SEED`` with the seed printed in the
failure report and run the same check again.
"""

from __future__ import annotations

import os
import random
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, Union

from randcheck.constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_MAX_CHAR,
    DEFAULT_MAX_FILTER_ATTEMPTS,
    ENV_DEBUG,
    ENV_ITERATIONS,
    ENV_MAX_CHAR,
    ENV_MAX_FILTER_ATTEMPTS,
    ENV_SEED,
)
from randcheck.errors import InvalidArgument

RngLike = Union[None, int, random.Random]


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the environment-driven configuration."""

    seed: Optional[int] = None
    iterations: int = DEFAULT_ITERATIONS
    max_filter_attempts: int = DEFAULT_MAX_FILTER_ATTEMPTS
    max_char: int = DEFAULT_MAX_CHAR
    debug: bool = False


def _int_from_env(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        # base 0 accepts hex code points such as 0x10FFFF
        return int(raw, 0)
    except ValueError:
        raise InvalidArgument(name, f"expected an integer, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build a :class:`Settings` from *environ* (default ``os.environ``)."""
    if environ is None:
        environ = os.environ
    settings = Settings(
        seed=_int_from_env(environ, ENV_SEED, None),
        iterations=_int_from_env(environ, ENV_ITERATIONS, DEFAULT_ITERATIONS),
        max_filter_attempts=_int_from_env(environ, ENV_MAX_FILTER_ATTEMPTS, DEFAULT_MAX_FILTER_ATTEMPTS),
        max_char=_int_from_env(environ, ENV_MAX_CHAR, DEFAULT_MAX_CHAR),
        debug=environ.get(ENV_DEBUG, "false").lower() == "true",
    )
    if settings.iterations < 0:
        raise InvalidArgument(ENV_ITERATIONS, "must not be negative")
    if settings.max_filter_attempts <= 0:
        raise InvalidArgument(ENV_MAX_FILTER_ATTEMPTS, "must be positive")
    if not 0 < settings.max_char <= 0x10FFFF:
        raise InvalidArgument(ENV_MAX_CHAR, "must be a code point in 1..0x10FFFF")
    return settings


_settings: Optional[Settings] = None
# Hands out per-generator seeds when a master seed is configured, so that two
# generators built from the same settings do not replay the same stream.
_seed_source: Optional[random.Random] = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings, _seed_source
    if _settings is None:
        _settings = load_settings()
        _seed_source = random.Random(_settings.seed) if _settings.seed is not None else None
    return _settings


def reload_settings() -> Settings:
    """Forget the cached settings and read the environment again."""
    global _settings
    _settings = None
    return get_settings()


def make_rng(rng: RngLike = None) -> Tuple[random.Random, Optional[int]]:
    """
    Turn an rng argument into a ``(Random, seed)`` pair.

    Args:
        rng: ``None`` for a seed derived from the configured master seed
            (or a fresh one when none is configured), an int seed,
            or an existing ``random.Random`` which is used as is.

    Returns:
        The random source and the seed it was built from; the seed is ``None``
        when the caller supplied a ready-made ``Random``.
    """
    if isinstance(rng, random.Random):
        return rng, None
    if rng is None:
        get_settings()
        if _seed_source is not None:
            rng = _seed_source.randrange(2 ** 32)
        else:
            rng = random.SystemRandom().randrange(2 ** 32)
    if isinstance(rng, bool) or not isinstance(rng, int):
        raise InvalidArgument("rng", f"expected None, an int seed or random.Random, got {rng!r}")
    return random.Random(rng), rng
