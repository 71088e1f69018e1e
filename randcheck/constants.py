"""
Global constants used across randcheck.

Guidelines
----------
* Every constant is typed and immutable (``Final`` / ``frozenset``).
* Anything a user may want to tune at runtime is read through
  :mod:`randcheck.config.settings`; the values here are the defaults.
"""

from __future__ import annotations

import string
from typing import Final, FrozenSet

# -- Driver & limits ---------------------------------------------------------

DEFAULT_ITERATIONS: Final[int] = 100
DEFAULT_MAX_REPEAT: Final[int] = 10
DEFAULT_MAX_FILTER_ATTEMPTS: Final[int] = 10000
DEFAULT_MAX_CHAR: Final[int] = 0xFFFF
SAT_CHECK_TIMEOUT_MS: Final[int] = 2000

# -- Character alphabets -----------------------------------------------------

PRINTABLE_ASCII: Final[str] = "".join(chr(c) for c in range(0x20, 0x7F))
DEFAULT_LITERALS: Final[str] = string.ascii_letters + string.digits

# Characters with a meaning in rendered regex trees. They only appear as
# literals when escaped, and only if the caller allows it.
REGEX_METACHARACTERS: Final[FrozenSet[str]] = frozenset("|&~?*+()[]^\\.")

# -- Regex tree templates ----------------------------------------------------

PLACEHOLDER: Final[str] = "<placeholder>"
DEFAULT_TREE_LENGTH: Final[tuple] = (1, 8)
DEFAULT_TREE_DEPTH: Final[int] = 4
MAX_NARY_ARITY: Final[int] = 4

# -- Environment variable names ----------------------------------------------

ENV_SEED: Final[str] = "RANDCHECK_SEED"
ENV_ITERATIONS: Final[str] = "RANDCHECK_ITERATIONS"
ENV_MAX_FILTER_ATTEMPTS: Final[str] = "RANDCHECK_MAX_FILTER_ATTEMPTS"
ENV_MAX_CHAR: Final[str] = "RANDCHECK_MAX_CHAR"
ENV_DEBUG: Final[str] = "RANDCHECK_DEBUG"
