"""
hoare: Hoare-style contract injection for Python functions
"""

from .core.errors import ContractRewriteError, HoareError, MalformedContract, UnsupportedTarget
from .core.models import ContractKind, Diagnostic, RewriteContext, RewriteResult
from .core.transformer import rewrite_file, rewrite_source
from .decorators import (
    contracts_of, debug_invariant, debug_postcond, debug_precond,
    invariant, postcond, precond,
)
from .diagnostics import DiagnosticCollector
from .dispatcher import apply_contract
from .loader import load_file, load_source

__version__ = "0.1.0"
__all__ = [
    "rewrite_source",
    "rewrite_file",
    "load_source",
    "load_file",
    "apply_contract",
    "precond",
    "postcond",
    "invariant",
    "debug_precond",
    "debug_postcond",
    "debug_invariant",
    "contracts_of",
    "DiagnosticCollector",
    "ContractKind",
    "Diagnostic",
    "RewriteContext",
    "RewriteResult",
    "HoareError",
    "MalformedContract",
    "UnsupportedTarget",
    "ContractRewriteError",
]
