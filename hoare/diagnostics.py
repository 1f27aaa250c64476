"""
Diagnostics channel for rewrite errors.

The core never prints. It hands Diagnostic objects to a sink, which is any
object with a report(diagnostic) method.
"""

from typing import List

from .core.models import Diagnostic
from .logging import get_logger
from .logging_tags import DISPATCH

logger = get_logger(__name__)


class DiagnosticCollector:
    """Sink that keeps every reported diagnostic in order"""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        logger.debug(f"{DISPATCH} {diagnostic}")
        self.diagnostics.append(diagnostic)

    def __len__(self):
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)
