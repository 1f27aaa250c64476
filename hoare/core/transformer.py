"""
Module-wide contract rewriting pipeline
"""

import ast
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import load_settings
from .models import Container, ContractTarget, Diagnostic, RewriteContext, RewriteResult
from ..dispatcher import apply_contract, is_trait_class
from ..logging import get_logger
from ..logging_tags import REWRITE
from ..predicate import decorator_keyword, metadata_entry

logger = get_logger(__name__)


class ContractTransformer(ast.NodeTransformer):
    """
    Applies every contract decorator found in a module.

    Nested declarations are handled before the declaration containing them.
    On one declaration, contracts are applied bottom-up, nearest the def
    first, so the topmost contract's checks end up outermost.
    """

    def __init__(self, context: RewriteContext, sink=None, filename: str = "<string>"):
        self.context = context
        self.sink = sink
        self.filename = filename
        self.diagnostics: List[Diagnostic] = []
        self.rewritten: List[str] = []
        self.scopes: List[Tuple[Container, str]] = [(Container.MODULE, "")]

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.sink is not None:
            self.sink.report(diagnostic)

    def _qualname(self, name: str) -> str:
        prefix = self.scopes[-1][1]
        return f"{prefix}.{name}" if prefix else name

    def visit_ClassDef(self, node: ast.ClassDef):
        qualname = self._qualname(node.name)
        container = Container.TRAIT if is_trait_class(node) else Container.CLASS
        self.scopes.append((container, qualname))
        self.generic_visit(node)
        self.scopes.pop()
        return self._apply_contracts(node, qualname)

    def visit_FunctionDef(self, node):
        qualname = self._qualname(node.name)
        self.scopes.append((Container.FUNCTION, f"{qualname}.<locals>"))
        self.generic_visit(node)
        self.scopes.pop()
        return self._apply_contracts(node, qualname)

    visit_AsyncFunctionDef = visit_FunctionDef

    def _apply_contracts(self, node: ast.stmt, qualname: str) -> ast.stmt:
        container = self.scopes[-1][0]
        contracts = [d for d in node.decorator_list if decorator_keyword(d)]
        applied = False

        for decorator in reversed(contracts):
            entry = metadata_entry(decorator)
            target = ContractTarget(node=node, container=container, qualname=qualname)
            new_node, self.context = apply_contract(
                target, entry, entry.name, self.context, self, self.filename
            )
            applied = applied or new_node is not node
            node = new_node

        if applied:
            self.rewritten.append(qualname)
        return node


def rewrite_tree(tree: ast.Module,
                 context: RewriteContext,
                 sink=None,
                 filename: str = "<string>") -> Tuple[ast.Module, ContractTransformer]:
    """Rewrite a parsed module in place and return it with the transformer state"""
    transformer = ContractTransformer(context, sink, filename)
    tree = transformer.visit(tree)
    ast.fix_missing_locations(tree)
    return tree, transformer


def rewrite_source(source: str,
                   filename: str = "<string>",
                   debug_assertions: Optional[bool] = None,
                   context: Optional[RewriteContext] = None,
                   sink=None) -> RewriteResult:
    """
    Inject contract checks into every annotated declaration of a module.

    Args:
        source: Python module source
        filename: Name used for parsing and in diagnostics
        debug_assertions: Whether debug_* contracts apply; defaults to settings
        context: Rewrite context to continue numbering from
        sink: Optional extra diagnostics sink

    Returns:
        RewriteResult with the rewritten source, the final context, the
        qualified names of rewritten declarations and any diagnostics

    Raises:
        SyntaxError: If source is not valid Python
    """
    if context is None:
        if debug_assertions is None:
            debug_assertions = load_settings().debug_assertions
        context = RewriteContext(debug_assertions=debug_assertions)
    elif debug_assertions is not None and debug_assertions != context.debug_assertions:
        context = RewriteContext(instance=context.instance, debug_assertions=debug_assertions)

    tree = ast.parse(source, filename=filename)
    tree, transformer = rewrite_tree(tree, context, sink, filename)

    logger.info(
        f"{REWRITE} {filename}: {len(transformer.rewritten)} declarations rewritten, "
        f"{len(transformer.diagnostics)} diagnostics"
    )

    return RewriteResult(
        source=ast.unparse(tree) + "\n",
        tree=tree,
        context=transformer.context,
        diagnostics=transformer.diagnostics,
        rewritten=transformer.rewritten,
    )


def rewrite_file(path: Union[str, Path], **kwargs) -> RewriteResult:
    """Read a Python file and rewrite it with rewrite_source"""
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return rewrite_source(source, filename=str(path), **kwargs)
