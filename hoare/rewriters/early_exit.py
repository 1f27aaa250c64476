"""
Rewriting of a function's own return statements into region exits
"""

import ast
import copy
from typing import Iterator, List


def load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def store_slot(slot_name: str, value: ast.expr) -> ast.Assign:
    """slot = (value,)"""
    return ast.Assign(
        targets=[ast.Name(id=slot_name, ctx=ast.Store())],
        value=ast.Tuple(elts=[value], ctx=ast.Load()),
    )


def slot_is_set(slot_name: str) -> ast.Compare:
    """slot is not None"""
    return ast.Compare(
        left=load(slot_name),
        ops=[ast.IsNot()],
        comparators=[ast.Constant(value=None)],
    )


def reset_slot(slot_name: str) -> ast.Assign:
    """slot = None"""
    return ast.Assign(
        targets=[ast.Name(id=slot_name, ctx=ast.Store())],
        value=ast.Constant(value=None),
    )


SCOPE_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)
LOOP_NODES = (ast.For, ast.AsyncFor, ast.While)


def clear_before_jumps(statements: List[ast.stmt], slot_name: str) -> List[ast.stmt]:
    """
    Reset the slot ahead of every break/continue that leaves a finally block.

    Such a jump discards a return pending in the try body, so the value
    stored for it must not reach the propagation check after the loop.
    """
    result = []
    for stmt in statements:
        if isinstance(stmt, (ast.Break, ast.Continue)):
            result.append(ast.copy_location(reset_slot(slot_name), stmt))
        elif isinstance(stmt, LOOP_NODES):
            # break/continue in the loop body target the loop itself
            stmt.orelse = clear_before_jumps(stmt.orelse, slot_name)
        elif not isinstance(stmt, SCOPE_NODES):
            for field, value in ast.iter_fields(stmt):
                if field in ("handlers", "cases"):
                    for clause in value:
                        clause.body = clear_before_jumps(clause.body, slot_name)
                elif isinstance(value, list) and value and isinstance(value[0], ast.stmt):
                    setattr(stmt, field, clear_before_jumps(value, slot_name))
        result.append(stmt)
    return result


def walk_own_scope(statements: List[ast.stmt]) -> Iterator[ast.AST]:
    """Walk statements without entering nested functions, lambdas or classes"""
    stack = list(reversed(statements))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, SCOPE_NODES):
            continue
        stack.extend(reversed(list(ast.iter_child_nodes(node))))


class EarlyExitRewriter(ast.NodeTransformer):
    """
    Replaces every return owned by the enclosing function with
    `slot = (value,)` followed by `break`.

    Python has no labeled break, so a loop whose body contained such an exit
    is followed by `if slot is not None: break`. The exit then travels one
    loop at a time until it leaves the single-iteration region the body runs
    in. User break/continue statements and loops without exits are left as
    they are.
    """

    def __init__(self, slot_name: str):
        self.slot_name = slot_name
        self.exits = 0

    def rewrite(self, statements: List[ast.stmt]) -> List[ast.stmt]:
        """Return a rewritten deep copy of statements"""
        return self.visit_block(copy.deepcopy(statements))

    def visit_block(self, statements: List[ast.stmt]) -> List[ast.stmt]:
        result = []
        for stmt in statements:
            new = self.visit(stmt)
            if new is None:
                continue
            if isinstance(new, list):
                result.extend(new)
            else:
                result.append(new)
        return result

    # Nested scopes own their returns
    def visit_FunctionDef(self, node):
        return node

    visit_AsyncFunctionDef = visit_FunctionDef
    visit_ClassDef = visit_FunctionDef
    visit_Lambda = visit_FunctionDef

    def visit_Try(self, node):
        node.finalbody = clear_before_jumps(node.finalbody, self.slot_name)
        return self.generic_visit(node)

    visit_TryStar = visit_Try

    def visit_Return(self, node: ast.Return) -> List[ast.stmt]:
        self.exits += 1
        value = node.value if node.value is not None else ast.Constant(value=None)
        assign = ast.copy_location(store_slot(self.slot_name, value), node)
        return [assign, ast.copy_location(ast.Break(), node)]

    def _visit_loop(self, node):
        before = self.exits
        node.body = self.visit_block(node.body)
        escaped = self.exits > before
        # break in an else clause already targets the enclosing loop
        node.orelse = self.visit_block(node.orelse)
        if not escaped:
            return node

        propagate = ast.If(
            test=slot_is_set(self.slot_name),
            body=[ast.Break()],
            orelse=[],
        )
        ast.copy_location(propagate, node)
        return [node, propagate]

    visit_For = _visit_loop
    visit_AsyncFor = _visit_loop
    visit_While = _visit_loop
