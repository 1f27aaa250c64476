"""
Example file demonstrating contract decorators.

Rewrite it with:
    hoare examples/contracts.py
"""

from typing import List, Protocol

from hoare import debug_invariant, invariant, postcond, precond


# Example 1: Early exit checked by the postcondition
@precond("x >= -100")
@postcond("return >= 0")
def half(x: int) -> int:
    """Half of x, or 0 for negative input"""
    if x < 0:
        return 0
    return x // 2


# Example 2: Clamp with nested conditionals
@precond("lo <= hi")
@postcond("lo <= return <= hi")
def clamp(x: int, lo: int, hi: int) -> int:
    """Clamp x to [lo, hi]"""
    t = x
    if t < lo:
        return lo
    else:
        if t > hi:
            return hi
        else:
            return t


# Example 3: Exit from inside a loop
@postcond("return == -1 or values[return] == target")
def index_of(values: List[int], target: int) -> int:
    for i, value in enumerate(values):
        if value == target:
            return i
    return -1


# Example 4: Invariant on a method
class Account:
    def __init__(self, balance: int = 0):
        self.balance = balance

    @invariant("self.balance >= 0")
    def withdraw(self, amount: int) -> int:
        self.balance -= amount
        return self.balance

    @debug_invariant("self.balance >= 0")
    def deposit(self, amount: int) -> None:
        self.balance += amount


# Example 5: Trait method with a default body
class Sized(Protocol):
    def items(self) -> List[int]:
        ...

    @postcond("return >= 0")
    def size(self) -> int:
        return len(self.items())
