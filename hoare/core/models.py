"""
Data models for contracts, declarations and rewrite state
"""

import ast
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from .config import (
    PRECOND, POSTCOND, INVARIANT, DEBUG_PREFIX,
    SLOT_PREFIX, RESULT_PREFIX, REGION_PREFIX,
)


class ContractKind(str, Enum):
    """Which checks a contract injects"""
    PRECONDITION = PRECOND
    POSTCONDITION = POSTCOND
    INVARIANT = INVARIANT

    @classmethod
    def from_keyword(cls, keyword: str) -> Tuple["ContractKind", bool]:
        """
        Resolve a decorator keyword to (kind, debug_only).

        Raises:
            ValueError: If the keyword is not one of the six contract keywords
        """
        debug_only = keyword.startswith(DEBUG_PREFIX)
        base = keyword[len(DEBUG_PREFIX):] if debug_only else keyword
        return cls(base), debug_only

    @property
    def keyword(self) -> str:
        return self.value

    @property
    def long_name(self) -> str:
        return {
            ContractKind.PRECONDITION: "Precondition",
            ContractKind.POSTCONDITION: "Postcondition",
            ContractKind.INVARIANT: "Invariant",
        }[self]

    @property
    def has_precondition(self) -> bool:
        return self is not ContractKind.POSTCONDITION

    @property
    def has_postcondition(self) -> bool:
        return self is not ContractKind.PRECONDITION

    @property
    def entry_label(self) -> str:
        if self is ContractKind.POSTCONDITION:
            raise ValueError("postconditions have no entry check")
        return "Invariant entering" if self is ContractKind.INVARIANT else "Precondition"

    @property
    def exit_label(self) -> str:
        if self is ContractKind.PRECONDITION:
            raise ValueError("preconditions have no exit check")
        return "Invariant leaving" if self is ContractKind.INVARIANT else "Postcondition"


class DeclarationShape(str, Enum):
    """Where a function-like declaration lives"""
    FUNCTION = "function"
    METHOD = "method"
    TRAIT_METHOD = "trait_method"


class Container(str, Enum):
    """Kind of scope a statement belongs to"""
    MODULE = "module"
    FUNCTION = "function"
    CLASS = "class"
    TRAIT = "trait"


@dataclass
class MetadataEntry:
    """A contract decorator reduced to its name and value"""
    name: Optional[str]
    value: Optional[ast.expr]
    lineno: int = 0
    col_offset: int = 0
    node: Optional[ast.expr] = None
    # False when the decorator is not of the form name("...")
    well_formed: bool = True


@dataclass
class ContractTarget:
    """A statement carrying contract metadata and the scope it was found in"""
    node: ast.stmt
    container: Container
    qualname: str = ""


@dataclass(frozen=True)
class RewriteContext:
    """
    Naming state threaded through a rewrite pass.

    Each contract application advances the instance number once, so every
    synthesized identifier in a pass is unique.
    """
    instance: int = 0
    debug_assertions: bool = True

    def advance(self) -> "RewriteContext":
        return replace(self, instance=self.instance + 1)

    @property
    def slot_name(self) -> str:
        return f"{SLOT_PREFIX}{self.instance}"

    @property
    def result_name(self) -> str:
        return f"{RESULT_PREFIX}{self.instance}"

    @property
    def region_name(self) -> str:
        return f"{REGION_PREFIX}{self.instance}"


@dataclass
class Diagnostic:
    """A reported error condition"""
    kind: str
    message: str
    lineno: int = 0
    col_offset: int = 0
    filename: str = "<string>"

    def __str__(self):
        return f"{self.filename}:{self.lineno}:{self.col_offset}: {self.kind}: {self.message}"

    def to_dict(self):
        return {
            "kind": self.kind,
            "message": self.message,
            "lineno": self.lineno,
            "col_offset": self.col_offset,
            "filename": self.filename,
        }


@dataclass
class RewriteResult:
    """Output of a module rewrite"""
    source: str
    tree: ast.Module
    context: RewriteContext
    diagnostics: list = field(default_factory=list)
    rewritten: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics
