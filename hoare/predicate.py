"""
Extraction and parsing of contract predicates from decorator metadata.
"""

import ast
from dataclasses import dataclass
from typing import Optional

from .core.config import ALL_KEYWORDS, DEBUG_PREFIX, RETURN_ALIAS
from .core.errors import MalformedContract
from .core.models import ContractKind, MetadataEntry
from .logging import get_logger
from .logging_tags import PREDICATE

logger = get_logger(__name__)


def decorator_keyword(decorator: ast.expr) -> Optional[str]:
    """
    Return the contract keyword a decorator refers to, or None.

    Accepts precond, hoare.precond, precond("...") and hoare.precond("...").
    """
    target = decorator.func if isinstance(decorator, ast.Call) else decorator
    if isinstance(target, ast.Name):
        name = target.id
    elif isinstance(target, ast.Attribute):
        name = target.attr
    else:
        return None
    return name if name in ALL_KEYWORDS else None


def metadata_entry(decorator: ast.expr) -> MetadataEntry:
    """Reduce a decorator expression to a name/value metadata entry"""
    entry = MetadataEntry(
        name=decorator_keyword(decorator),
        value=None,
        lineno=getattr(decorator, "lineno", 0),
        col_offset=getattr(decorator, "col_offset", 0),
        node=decorator,
    )
    if isinstance(decorator, ast.Call) and len(decorator.args) == 1 and not decorator.keywords:
        entry.value = decorator.args[0]
    else:
        entry.well_formed = False
    return entry


def extract_predicate(entry: MetadataEntry, keyword: str) -> str:
    """
    Validate a metadata entry against the expected keyword and return its text.

    Both the plain keyword and its debug_ form are accepted.

    Raises:
        MalformedContract: On a malformed entry, a name mismatch or a
            non-string value
    """
    if not entry.well_formed or entry.value is None:
        raise MalformedContract(
            "unexpected format of condition", entry.lineno, entry.col_offset
        )

    base = keyword[len(DEBUG_PREFIX):] if keyword.startswith(DEBUG_PREFIX) else keyword
    if entry.name not in (base, DEBUG_PREFIX + base):
        raise MalformedContract(
            f"unexpected name in condition: {entry.name}", entry.lineno, entry.col_offset
        )

    value = entry.value
    if not (isinstance(value, ast.Constant) and isinstance(value.value, str)):
        raise MalformedContract(
            "unexpected kind of predicate for condition", entry.lineno, entry.col_offset
        )

    return value.value


@dataclass
class Predicate:
    """Parsed predicate checks for one contract application"""
    text: str
    kind: ContractKind
    entry: Optional[ast.expr]
    exit: Optional[ast.expr]


def parse_expression(text: str, lineno: int = 0, col_offset: int = 0) -> ast.expr:
    """
    Parse predicate text as a single Python expression.

    The text is wrapped in parentheses so that it may span several lines.
    A bare comma list would then parse as an always-true tuple, so a tuple
    starting on the wrapper's own line is rejected.
    """
    try:
        tree = ast.parse("(\n" + text + "\n)", mode="eval")
    except SyntaxError as e:
        raise MalformedContract(
            f"predicate is not a valid expression ({e.msg}): {text}", lineno, col_offset
        ) from e
    if isinstance(tree.body, ast.Tuple) and tree.body.lineno == 1:
        raise MalformedContract(
            f"predicate is not a single expression: {text}", lineno, col_offset
        )
    return relocate(tree.body, lineno, col_offset)


def relocate(expr: ast.expr, lineno: int, col_offset: int) -> ast.expr:
    """Point every node of a parsed predicate at the decorator it came from"""
    if lineno <= 0:
        return expr
    for node in ast.walk(expr):
        if "lineno" in node._attributes:
            node.lineno = node.end_lineno = lineno
            node.col_offset = node.end_col_offset = col_offset
    return expr


def bind_return_alias(text: str, result_name: str) -> str:
    """
    Replace the return alias with the result binding.

    This is a plain substring replacement, so identifiers that merely contain
    the alias (e.g. returned) are rewritten as well.
    """
    return text.replace(RETURN_ALIAS, result_name)


def build_predicate(text: str,
                    kind: ContractKind,
                    result_name: str,
                    lineno: int = 0,
                    col_offset: int = 0) -> Predicate:
    """
    Parse the entry and exit checks a contract kind needs.

    Only exit checks see the return alias bound to result_name; an entry
    check using it fails to parse.

    Raises:
        MalformedContract: If either check is not a valid expression
    """
    entry = exit_ = None
    if kind.has_precondition:
        entry = parse_expression(text, lineno, col_offset)
    if kind.has_postcondition:
        exit_ = parse_expression(bind_return_alias(text, result_name), lineno, col_offset)

    logger.debug(f"{PREDICATE} parsed {kind.keyword} predicate: {text}")
    return Predicate(text=text, kind=kind, entry=entry, exit=exit_)


def assertion_label(check_label: str, function_name: str, text: str) -> str:
    """Failure message for a contract check"""
    escaped = text.replace('"', '\\"')
    return f"{check_label} of {function_name} ({escaped})"
