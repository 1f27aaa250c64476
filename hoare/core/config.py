"""
Contract keywords, label strings and runtime settings
"""

import os
from typing import Optional

# Contract keywords accepted as decorator names
PRECOND = "precond"
POSTCOND = "postcond"
INVARIANT = "invariant"
DEBUG_PREFIX = "debug_"

CONTRACT_KEYWORDS = (PRECOND, POSTCOND, INVARIANT)
ALL_KEYWORDS = CONTRACT_KEYWORDS + tuple(DEBUG_PREFIX + k for k in CONTRACT_KEYWORDS)

# Token in predicate text that stands for the function's final value
RETURN_ALIAS = "return"

# Prefixes for synthesized identifiers; the rewrite instance number is appended
SLOT_PREFIX = "_hoare_slot_"
RESULT_PREFIX = "_hoare_result_"
REGION_PREFIX = "_hoare_region_"

INTERNAL_ERROR_MESSAGE = (
    "hoare internal error: {name} left its contract region without a result"
)

# Base classes / metaclasses that turn a class body into a trait
TRAIT_BASES = {"Protocol", "ABC"}
TRAIT_METACLASSES = {"ABCMeta"}
ABSTRACT_DECORATORS = {"abstractmethod"}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def parse_flag(value: Optional[str], default: bool) -> bool:
    """Interpret an environment flag, falling back to default when unset or unknown"""
    if value is None:
        return default
    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    return default


class HoareSettings:
    """Settings with environment variable support."""

    def __init__(self):
        # Mirrors the interpreter's own debug switch (False under python -O)
        self.debug_assertions: bool = parse_flag(
            os.getenv("HOARE_DEBUG_ASSERTIONS"), __debug__
        )
        self.log_level: str = os.getenv("HOARE_LOG_LEVEL", "INFO").upper()
        self.host: str = os.getenv("HOARE_HOST", "127.0.0.1")
        self.port: int = int(os.getenv("HOARE_PORT", "8000"))


def load_settings() -> HoareSettings:
    """Read settings from the current environment"""
    return HoareSettings()
