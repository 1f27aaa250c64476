"""
Tests for listing annotated declarations
"""

import textwrap
import pytest
from hoare.parser import ContractParser


SOURCE = textwrap.dedent('''
    from abc import ABC, abstractmethod
    from hoare import precond, postcond, debug_invariant

    @precond("n >= 0")
    @postcond("return >= 1")
    def factorial(n):
        return 1 if n == 0 else n * factorial(n - 1)

    def plain():
        pass

    class Stack:
        @debug_invariant("len(self.items) <= 10")
        def push(self, item):
            self.items.append(item)

    class Shape(ABC):
        @abstractmethod
        @postcond("return >= 0")
        def area(self):
            ...

    if True:
        @precond(42)
        def guarded():
            pass
''')


def test_parse_source_lists_annotated_declarations():
    """Test every annotated declaration is listed once"""
    declarations = ContractParser().parse_source(SOURCE)
    names = [d["qualname"] for d in declarations]
    assert names == ["factorial", "Stack.push", "Shape.area", "guarded"]


def test_contracts_and_shapes():
    """Test keywords, predicates and shapes are reported"""
    by_name = {d["qualname"]: d for d in ContractParser().parse_source(SOURCE)}

    assert by_name["factorial"]["shape"] == "function"
    assert by_name["factorial"]["contracts"] == [
        {"keyword": "precond", "predicate": "n >= 0"},
        {"keyword": "postcond", "predicate": "return >= 1"},
    ]
    assert by_name["Stack.push"]["shape"] == "method"
    assert by_name["Stack.push"]["contracts"][0]["keyword"] == "debug_invariant"
    assert by_name["Shape.area"]["shape"] == "trait_method"
    assert by_name["guarded"]["contracts"] == [{"keyword": "precond", "predicate": None}]


def test_generic_protocol_methods_are_trait_methods():
    """Test subscripted Protocol bases still mark their methods as trait methods"""
    declarations = ContractParser().parse_source(textwrap.dedent('''
        class Box(Protocol[T]):
            @postcond("return is not None")
            def get(self) -> T: ...
    '''))
    assert [(d["qualname"], d["shape"]) for d in declarations] == [("Box.get", "trait_method")]


def test_parse_file(tmp_path):
    """Test files are read and parsed"""
    path = tmp_path / "module.py"
    path.write_text(SOURCE, encoding="utf-8")
    declarations = ContractParser().parse_file(str(path))
    assert len(declarations) == 4
    assert declarations[0]["lineno"] == 7


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
