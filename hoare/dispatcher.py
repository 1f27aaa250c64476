"""
Contract dispatch over function-like declarations.

A declaration is a free function, a method, or a trait method (a method of a
Protocol/ABC class, or any @abstractmethod). All three are rewritten the same
way; only the error wording differs when the target has no body.
"""

import ast
from typing import Tuple

from .core.config import (
    ABSTRACT_DECORATORS, TRAIT_BASES, TRAIT_METACLASSES,
)
from .core.errors import HoareError, UnsupportedTarget
from .core.models import (
    Container, ContractKind, ContractTarget, DeclarationShape, Diagnostic,
    MetadataEntry, RewriteContext,
)
from .logging import get_logger
from .logging_tags import DISPATCH
from .predicate import build_predicate, extract_predicate
from .rewriters.body import synthesize_body

logger = get_logger(__name__)

FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)


def terminal_name(node: ast.expr) -> str:
    """Last dotted component of a Name/Attribute/Call/Subscript expression"""
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Subscript):
        node = node.value
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return ""


def is_trait_class(node: ast.ClassDef) -> bool:
    """True for classes deriving Protocol/ABC or using ABCMeta"""
    if any(terminal_name(base) in TRAIT_BASES for base in node.bases):
        return True
    return any(
        kw.arg == "metaclass" and terminal_name(kw.value) in TRAIT_METACLASSES
        for kw in node.keywords
    )


def is_stub_body(body) -> bool:
    """A body made only of a docstring, ... and pass declares no behaviour"""
    for stmt in body:
        if isinstance(stmt, ast.Pass):
            continue
        if isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Constant):
            if stmt.value.value is Ellipsis or isinstance(stmt.value.value, str):
                continue
        return False
    return True


def classify(target: ContractTarget, kind: ContractKind) -> DeclarationShape:
    """
    Determine the declaration shape of a target.

    Raises:
        UnsupportedTarget: For non-function statements and bodyless trait methods
    """
    node = target.node
    lineno = getattr(node, "lineno", 0)
    col_offset = getattr(node, "col_offset", 0)

    if not isinstance(node, FUNCTION_NODES):
        where = {
            Container.CLASS: "impl item",
            Container.TRAIT: "trait item",
        }.get(target.container, "item")
        raise UnsupportedTarget(f"{kind.long_name} on non-function {where}", lineno, col_offset)

    abstract = any(terminal_name(d) in ABSTRACT_DECORATORS for d in node.decorator_list)
    if target.container is Container.TRAIT or abstract:
        if is_stub_body(node.body):
            raise UnsupportedTarget(
                f"{kind.long_name} on non-function trait item", lineno, col_offset
            )
        return DeclarationShape.TRAIT_METHOD

    if target.container is Container.CLASS:
        return DeclarationShape.METHOD
    return DeclarationShape.FUNCTION


def apply_contract(target: ContractTarget,
                   entry: MetadataEntry,
                   keyword: str,
                   context: RewriteContext,
                   sink,
                   filename: str = "<string>") -> Tuple[ast.stmt, RewriteContext]:
    """
    Apply one contract to a declaration.

    Args:
        target: Declaration and the scope it sits in
        entry: The decorator that triggered the rewrite
        keyword: Contract keyword being applied (precond, debug_postcond, ...)
        context: Rewrite context before this application
        sink: Diagnostics sink with a report(diagnostic) method
        filename: Source name used in diagnostics

    Returns:
        (declaration, context). On error the declaration is target.node
        itself, unmodified, and a diagnostic has been reported.
    """
    kind, debug_only = ContractKind.from_keyword(keyword)
    if debug_only and not context.debug_assertions:
        logger.debug(f"{DISPATCH} {keyword} on {target.qualname} skipped, debug assertions off")
        return target.node, context

    context = context.advance()
    node = target.node
    try:
        shape = classify(target, kind)
        text = extract_predicate(entry, keyword)
        predicate = build_predicate(
            text, kind, context.result_name, entry.lineno, entry.col_offset
        )
        body = synthesize_body(node, predicate, context)
    except HoareError as e:
        sink.report(Diagnostic(
            kind=e.kind,
            message=e.message,
            lineno=e.lineno,
            col_offset=e.col_offset,
            filename=filename,
        ))
        return node, context

    logger.debug(
        f"{DISPATCH} {kind.long_name} applied to {shape.value} {target.qualname} "
        f"(instance {context.instance})"
    )
    return rebuild(node, body, entry), context


def rebuild(node, body, entry: MetadataEntry):
    """Same declaration with a new body and without the consumed decorator"""
    fields = {name: getattr(node, name) for name in node._fields if hasattr(node, name)}
    fields["body"] = body
    fields["decorator_list"] = [d for d in node.decorator_list if d is not entry.node]
    rebuilt = ast.copy_location(type(node)(**fields), node)
    ast.fix_missing_locations(rebuilt)
    return rebuilt
