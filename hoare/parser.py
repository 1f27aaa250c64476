"""
Parser to list contract-annotated declarations in Python files.
"""

import ast
from typing import List, Dict, Any, Optional

from .core.config import ABSTRACT_DECORATORS
from .core.models import Container
from .dispatcher import FUNCTION_NODES, is_trait_class, terminal_name
from .predicate import decorator_keyword


class ContractParser:
    """Parse Python source to find declarations carrying contract decorators"""

    def parse_file(self, file_path: str) -> List[Dict[str, Any]]:
        """
        Parse a Python file and list its annotated declarations.

        Args:
            file_path: Path to Python file

        Returns:
            List of dicts with declaration info:
            {
                "name": str,
                "qualname": str,
                "lineno": int,
                "shape": "function" | "method" | "trait_method" | "class",
                "contracts": [{"keyword": str, "predicate": str or None}, ...]
            }
        """
        with open(file_path, 'r', encoding='utf-8') as f:
            source = f.read()
        return self.parse_source(source, filename=file_path)

    def parse_source(self, source: str, filename: str = "<string>") -> List[Dict[str, Any]]:
        tree = ast.parse(source, filename=filename)
        declarations = []
        self._collect(tree.body, Container.MODULE, "", declarations)
        return declarations

    def _collect(self, statements, container: Container, prefix: str, out: List[Dict[str, Any]]):
        for node in statements:
            if isinstance(node, FUNCTION_NODES):
                qualname = f"{prefix}.{node.name}" if prefix else node.name
                self._collect(node.body, Container.FUNCTION, f"{qualname}.<locals>", out)
            elif isinstance(node, ast.ClassDef):
                qualname = f"{prefix}.{node.name}" if prefix else node.name
                inner = Container.TRAIT if is_trait_class(node) else Container.CLASS
                self._collect(node.body, inner, qualname, out)
            else:
                # Compound statements (if/try/with...) may hold definitions too
                for field in ("body", "orelse", "finalbody", "handlers", "cases"):
                    children = getattr(node, field, None)
                    if children:
                        self._collect(children, container, prefix, out)
                continue

            info = self._extract_contracts(node, container, qualname)
            if info:
                out.append(info)

    def _extract_contracts(self, node, container: Container, qualname: str) -> Optional[Dict[str, Any]]:
        """
        Extract contract info if the declaration has contract decorators.

        Returns:
            Dict with declaration info or None if not annotated
        """
        contracts = []
        for decorator in node.decorator_list:
            keyword = decorator_keyword(decorator)
            if keyword is None:
                continue

            # Non-string or missing predicates are reported with predicate None
            predicate = None
            if isinstance(decorator, ast.Call) and decorator.args:
                arg = decorator.args[0]
                if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
                    predicate = arg.value

            contracts.append({"keyword": keyword, "predicate": predicate})

        if not contracts:
            return None

        return {
            "name": node.name,
            "qualname": qualname,
            "lineno": node.lineno,
            "shape": self._shape(node, container),
            "contracts": contracts,
        }

    def _shape(self, node, container: Container) -> str:
        if isinstance(node, ast.ClassDef):
            return "class"
        abstract = any(terminal_name(d) in ABSTRACT_DECORATORS for d in node.decorator_list)
        if container is Container.TRAIT or abstract:
            return "trait_method"
        if container is Container.CLASS:
            return "method"
        return "function"
