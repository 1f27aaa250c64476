"""
Integration tests for module rewriting and loading
"""

import asyncio
import textwrap
import types
import warnings
import pytest
from hoare import ContractRewriteError, RewriteContext, load_source, rewrite_source


def load(source: str, **kwargs):
    return load_source(textwrap.dedent(source), **kwargs)


HALF = """
from hoare import precond, postcond

@precond("x >= -100")
@postcond("return >= 0")
def half(x: int) -> int:
    if x < 0:
        return 0
    return x // 2
"""


def test_half_example():
    """Test the early exit value flows through both contracts"""
    module = load(HALF)
    assert module.half(-5) == 0
    assert module.half(10) == 5
    with pytest.raises(AssertionError) as info:
        module.half(-200)
    assert str(info.value) == "Precondition of half (x >= -100)"


def test_rewritten_source_drops_consumed_decorators():
    """Test applied contract decorators are removed from the output"""
    result = rewrite_source(textwrap.dedent(HALF), debug_assertions=True)
    assert result.ok
    assert result.rewritten == ["half"]
    assert "@precond" not in result.source
    assert "@postcond" not in result.source
    assert "def half(x: int) -> int:" in result.source


def test_transparency():
    """Test always-true contracts do not change results or side effects"""
    source = """
        from hoare import invariant, postcond, precond

        log = []

        @precond("True")
        @invariant("len(log) >= 0")
        @postcond("return is not None or True")
        def classify(values):
            total = 0
            for v in values:
                log.append(v)
                if v is None:
                    return 'none'
                if v < 0:
                    continue
                total += v
                if total > 10:
                    break
            else:
                return 'small'
            return total
    """
    plain = types.ModuleType("plain")
    exec(textwrap.dedent(source), plain.__dict__)
    checked = load(source)

    for values in ([], [1, 2], [1, None, 5], [-1, 20, 3], [5, 6, 7]):
        assert checked.classify(values) == plain.classify(values)
    assert checked.log == plain.log


def test_exit_inside_conditionals_and_loop():
    """Test a doubly nested exit inside a loop is checked exactly once"""
    module = load("""
        from hoare import postcond

        seen = []

        def record(value):
            seen.append(value)
            return True

        @postcond("record(return)")
        def find(grid, target):
            for r, row in enumerate(grid):
                if row:
                    if target in row:
                        return (r, row.index(target))
            return None
    """)
    assert module.find([[1, 2], [], [3, 4]], 4) == (2, 1)
    assert module.seen == [(2, 1)]
    assert module.find([[1]], 9) is None
    assert module.seen == [(2, 1), None]


def test_precondition_runs_before_body():
    """Test the entry check observably precedes the first statement"""
    module = load("""
        from hoare import precond

        events = []

        def note(name):
            events.append(name)
            return True

        @precond("note('pre')")
        def work():
            note('body')
    """)
    module.work()
    assert module.events == ["pre", "body"]


def test_postcondition_sees_early_exit_value():
    """Test the exit check observes the early exit, not the fall-through value"""
    module = load("""
        from hoare import postcond

        @postcond("return == 0")
        def f(flag):
            if flag:
                return 0
            return 1
    """)
    assert module.f(True) == 0
    with pytest.raises(AssertionError, match=r"Postcondition of f \(return == 0\)"):
        module.f(False)


def test_void_function():
    """Test a body without return synthesizes a None result"""
    module = load("""
        from hoare import postcond

        @postcond("return is None and len(items) == 1")
        def push(items, item):
            items.append(item)
    """)
    items = []
    assert module.push(items, 1) is None
    with pytest.raises(AssertionError, match="Postcondition of push"):
        module.push(items, 2)


def test_sibling_declarations_get_distinct_names():
    """Test two contracts in one pass never share identifiers"""
    result = rewrite_source(textwrap.dedent("""
        from hoare import precond

        @precond("a > 0")
        def first(a):
            return a

        @precond("b > 0")
        def second(b):
            return b
    """))
    assert result.context.instance == 2
    for name in ("_hoare_slot_1", "_hoare_region_1", "_hoare_slot_2", "_hoare_region_2"):
        assert name in result.source


def test_numbering_continues_across_calls():
    """Test a returned context keeps identifiers unique across modules"""
    source = '@precond("True")\ndef f():\n    pass\n'
    first = rewrite_source(source, context=RewriteContext(debug_assertions=True))
    second = rewrite_source(source, context=first.context)
    assert "_hoare_slot_1" in first.source
    assert "_hoare_slot_2" in second.source
    assert second.context.instance == 2


def test_bodyless_trait_method_reported():
    """Test contracts on protocol stubs are rejected and left in place"""
    source = textwrap.dedent('''
        from typing import Protocol
        from hoare import postcond

        class Shape(Protocol):
            @postcond("return >= 0")
            def area(self) -> float:
                """Area of the shape"""
                ...

            @postcond("return >= 0")
            def half_area(self) -> float:
                return self.area() / 2
    ''')
    result = rewrite_source(source)
    assert [d.kind for d in result.diagnostics] == ["UnsupportedTarget"]
    assert result.diagnostics[0].message == "Postcondition on non-function trait item"
    assert result.rewritten == ["Shape.half_area"]
    assert result.source.count("@postcond('return >= 0')") == 1

    with pytest.raises(ContractRewriteError, match="non-function trait item"):
        load_source(source)


def test_methods_and_default_trait_methods():
    """Test methods and trait methods with default bodies are checked"""
    module = load("""
        from abc import ABC
        from hoare import invariant, postcond, precond

        class Counter(ABC):
            def __init__(self):
                self.count = 0

            @invariant("self.count >= 0")
            def step(self, n):
                self.count += n
                return self.count

            @postcond("return > 0")
            def describe(self):
                return len(type(self).__name__)

        class Bank:
            @precond("amount > 0")
            def deposit(self, amount):
                return amount
    """)
    counter = module.Counter()
    assert counter.step(2) == 2
    with pytest.raises(AssertionError, match=r"Invariant leaving of step \(self.count >= 0\)"):
        counter.step(-5)
    assert counter.describe() == 7
    with pytest.raises(AssertionError, match="Precondition of deposit"):
        module.Bank().deposit(0)


def test_nested_function_keeps_own_returns():
    """Test returns of nested functions are not captured by the outer contract"""
    module = load("""
        from hoare import postcond

        @postcond("return == [2, 4]")
        def doubled(values):
            def double(v):
                return v * 2
            return [double(v) for v in values]
    """)
    assert module.doubled([1, 2]) == [2, 4]


def test_nested_declarations_with_contracts():
    """Test contracts on nested functions are applied too"""
    result = rewrite_source(textwrap.dedent("""
        from hoare import precond

        def outer():
            @precond("x > 0")
            def inner(x):
                return x
            return inner
    """))
    assert result.rewritten == ["outer.<locals>.inner"]


def test_debug_contracts_follow_build_mode():
    """Test debug_ contracts only apply when debug assertions are on"""
    source = """
        from hoare import debug_precond

        @debug_precond("x > 0")
        def f(x):
            return x
    """
    released = load(source, debug_assertions=False)
    assert released.f(-1) == -1

    debug = load(source, debug_assertions=True)
    with pytest.raises(AssertionError, match=r"^Precondition of f \(x > 0\)$"):
        debug.f(-1)


def test_contract_on_class_reported():
    """Test a contract on a class is an unsupported target"""
    result = rewrite_source(textwrap.dedent("""
        from hoare import invariant

        @invariant("True")
        class Point:
            pass
    """))
    assert result.diagnostics[0].kind == "UnsupportedTarget"
    assert result.diagnostics[0].message == "Invariant on non-function item"


def test_malformed_contract_stops_loader():
    """Test the loader refuses modules with malformed contracts"""
    with pytest.raises(ContractRewriteError) as info:
        load("""
            from hoare import precond

            @precond(1)
            def f():
                pass
        """)
    assert info.value.diagnostics[0].kind == "MalformedContract"


def test_comma_list_contract_is_rejected():
    """Test a comma list predicate is reported instead of always passing"""
    result = rewrite_source(textwrap.dedent("""
        from hoare import precond

        @precond("x > 0, x < 10")
        def f(x):
            return x
    """))
    assert result.rewritten == []
    assert [d.kind for d in result.diagnostics] == ["MalformedContract"]
    assert "not a single expression" in result.diagnostics[0].message


def test_continue_in_finally_discards_return():
    """Test a return overridden by continue in finally is not reported as the result"""
    source = """
        from hoare import postcond

        @postcond("return is None")
        def last(items):
            for item in items:
                try:
                    return item
                finally:
                    continue
    """
    with warnings.catch_warnings():
        # continue in finally warns on recent interpreters
        warnings.simplefilter("ignore", SyntaxWarning)
        module = load(source)
    assert module.last([1, 2]) is None
    assert module.last([]) is None


def test_async_contract():
    """Test contracts on coroutines"""
    module = load("""
        from hoare import postcond

        @postcond("return >= 0")
        async def score(x):
            if x < 0:
                return -x
            return x
    """)
    assert asyncio.run(module.score(-3)) == 3


def test_syntax_error_propagates():
    """Test invalid Python is not swallowed"""
    with pytest.raises(SyntaxError):
        rewrite_source("def broken(:\n")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
