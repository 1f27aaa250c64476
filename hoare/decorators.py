"""
Contract decorators.

Usage:
    @precond("x >= -100")
    @postcond("return >= 0")
    def half(x: int) -> int:
        if x < 0:
            return 0
        return x // 2

The checks are injected by rewriting the module source (hoare.rewrite_source,
hoare.load_file or the hoare command). Rewriting consumes the decorators.
In a module imported without rewriting they only record the contract on the
function, which is then otherwise unchanged:

    contracts_of(half)  # [("postcond", "return >= 0"), ("precond", "x >= -100")]

Debug variants (debug_precond, debug_postcond, debug_invariant) are only
injected when debug assertions are enabled for the rewrite.
"""

from typing import Callable, List, Tuple

from .core.config import (
    PRECOND, POSTCOND, INVARIANT, DEBUG_PREFIX,
)


def _contract(keyword: str) -> Callable[[str], Callable]:
    def factory(predicate: str) -> Callable:
        if not isinstance(predicate, str):
            raise TypeError(f"{keyword} predicate must be a string, got {type(predicate).__name__}")

        def decorator(func: Callable) -> Callable:
            recorded = list(getattr(func, "__hoare_contracts__", []))
            recorded.append((keyword, predicate))
            func.__hoare_contracts__ = recorded
            return func
        return decorator

    factory.__name__ = keyword
    factory.__qualname__ = keyword
    factory.__doc__ = f"Attach a {keyword} contract to a function."
    return factory


precond = _contract(PRECOND)
postcond = _contract(POSTCOND)
invariant = _contract(INVARIANT)
debug_precond = _contract(DEBUG_PREFIX + PRECOND)
debug_postcond = _contract(DEBUG_PREFIX + POSTCOND)
debug_invariant = _contract(DEBUG_PREFIX + INVARIANT)


def contracts_of(func: Callable) -> List[Tuple[str, str]]:
    """Contracts recorded on a function, innermost first"""
    return list(getattr(func, "__hoare_contracts__", []))
