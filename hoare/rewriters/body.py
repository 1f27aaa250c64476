"""
Synthesis of the contract-checked function body.

The generated body has this shape (n is the rewrite instance):

    <docstring, global/nonlocal declarations>
    if not (<pre>):
        raise AssertionError("Precondition of f (<pre>)")
    _hoare_slot_n = None
    for _hoare_region_n in (None,):
        <original body, returns rewritten>
        _hoare_slot_n = (<trailing return value or None>,)
        break
    if _hoare_slot_n is None:
        raise RuntimeError("hoare internal error: ...")
    _hoare_result_n = _hoare_slot_n[0]
    if not (<post>):
        raise AssertionError("Postcondition of f (<post>)")
    return _hoare_result_n
"""

import ast
import copy
from typing import List, Tuple, Union

from ..core.config import INTERNAL_ERROR_MESSAGE
from ..core.models import RewriteContext
from ..predicate import Predicate, assertion_label
from .early_exit import EarlyExitRewriter, load, store_slot, walk_own_scope

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


class DeclarationHoister(ast.NodeTransformer):
    """Collects nested global/nonlocal statements, leaving pass in their place"""

    def __init__(self):
        self.declarations: List[ast.stmt] = []

    def visit_Global(self, node):
        self.declarations.append(node)
        return ast.copy_location(ast.Pass(), node)

    visit_Nonlocal = visit_Global

    def visit_FunctionDef(self, node):
        return node

    visit_AsyncFunctionDef = visit_FunctionDef
    visit_ClassDef = visit_FunctionDef
    visit_Lambda = visit_FunctionDef


def split_preamble(body: List[ast.stmt]) -> Tuple[List[ast.stmt], List[ast.stmt]]:
    """
    Separate the statements that must stay at the top of the function.

    The docstring keeps __doc__ intact; global and nonlocal declarations must
    precede any use of their names, including uses inside the checks, so
    those nested in compound statements are moved up as well. The returned
    statements are copies.
    """
    preamble, rest = [], []
    for index, stmt in enumerate(body):
        is_docstring = (
            index == 0
            and isinstance(stmt, ast.Expr)
            and isinstance(stmt.value, ast.Constant)
            and isinstance(stmt.value.value, str)
        )
        if is_docstring or isinstance(stmt, (ast.Global, ast.Nonlocal)):
            preamble.append(copy.deepcopy(stmt))
        else:
            rest.append(copy.deepcopy(stmt))

    hoister = DeclarationHoister()
    rest = [hoister.visit(stmt) for stmt in rest]
    return preamble + hoister.declarations, rest


def is_async_generator(decl: FunctionNode) -> bool:
    if not isinstance(decl, ast.AsyncFunctionDef):
        return False
    return any(
        isinstance(node, (ast.Yield, ast.YieldFrom))
        for node in walk_own_scope(decl.body)
    )


def make_check(test: ast.expr, label: str) -> ast.If:
    """if not (test): raise AssertionError(label)"""
    return ast.If(
        test=ast.UnaryOp(op=ast.Not(), operand=test),
        body=[ast.Raise(
            exc=ast.Call(
                func=load("AssertionError"),
                args=[ast.Constant(value=label)],
                keywords=[],
            ),
            cause=None,
        )],
        orelse=[],
    )


def make_region(statements: List[ast.stmt], context: RewriteContext) -> ast.For:
    """
    Wrap the original statements in the single-iteration escape region.

    A trailing return is the body's final value and becomes a plain slot
    assignment. A trailing raise never falls through. Anything else falls
    through to Python's implicit None.
    """
    slot = context.slot_name
    final = None
    if statements and isinstance(statements[-1], ast.Return):
        final = statements[-1]
        statements = statements[:-1]

    body = EarlyExitRewriter(slot).rewrite(statements)

    if final is not None:
        value = copy.deepcopy(final.value) if final.value is not None else ast.Constant(value=None)
        body.append(ast.copy_location(store_slot(slot, value), final))
    elif not (statements and isinstance(statements[-1], ast.Raise)):
        body.append(store_slot(slot, ast.Constant(value=None)))
    body.append(ast.Break())

    return ast.For(
        target=ast.Name(id=context.region_name, ctx=ast.Store()),
        iter=ast.Tuple(elts=[ast.Constant(value=None)], ctx=ast.Load()),
        body=body,
        orelse=[],
    )


def unwrap_result(decl_name: str, context: RewriteContext) -> List[ast.stmt]:
    """Move the slot's value into the result binding, failing loudly if unset"""
    slot = context.slot_name
    missing = ast.If(
        test=ast.Compare(left=load(slot), ops=[ast.Is()], comparators=[ast.Constant(value=None)]),
        body=[ast.Raise(
            exc=ast.Call(
                func=load("RuntimeError"),
                args=[ast.Constant(value=INTERNAL_ERROR_MESSAGE.format(name=decl_name))],
                keywords=[],
            ),
            cause=None,
        )],
        orelse=[],
    )
    bind = ast.Assign(
        targets=[ast.Name(id=context.result_name, ctx=ast.Store())],
        value=ast.Subscript(value=load(slot), slice=ast.Constant(value=0), ctx=ast.Load()),
    )
    return [missing, bind]


def synthesize_body(decl: FunctionNode,
                    predicate: Predicate,
                    context: RewriteContext) -> List[ast.stmt]:
    """
    Build the new body for decl with predicate's checks wired in.

    The original declaration is not modified.

    Returns:
        List of statements yielding the same value as the original body
    """
    kind = predicate.kind
    preamble, statements = split_preamble(decl.body)
    stmts = list(preamble)

    if predicate.entry is not None:
        label = assertion_label(kind.entry_label, decl.name, predicate.text)
        stmts.append(make_check(copy.deepcopy(predicate.entry), label))

    stmts.append(ast.Assign(
        targets=[ast.Name(id=context.slot_name, ctx=ast.Store())],
        value=ast.Constant(value=None),
    ))
    stmts.append(make_region(statements, context))
    stmts.extend(unwrap_result(decl.name, context))

    if predicate.exit is not None:
        label = assertion_label(kind.exit_label, decl.name, predicate.text)
        stmts.append(make_check(copy.deepcopy(predicate.exit), label))

    # An async generator cannot return a value; its result is always None
    if not is_async_generator(decl):
        stmts.append(ast.Return(value=load(context.result_name)))

    return stmts
