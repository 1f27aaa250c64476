"""
Error conditions raised while injecting contracts
"""

from typing import List


class HoareError(Exception):
    """Base class for recoverable rewrite errors"""

    kind = "HoareError"

    def __init__(self, message: str, lineno: int = 0, col_offset: int = 0):
        super().__init__(message)
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset


class MalformedContract(HoareError):
    """Contract metadata has the wrong name, shape or value"""

    kind = "MalformedContract"


class UnsupportedTarget(HoareError):
    """Contract metadata is attached to something without a rewritable body"""

    kind = "UnsupportedTarget"


class ContractRewriteError(Exception):
    """Raised by the loader when a module could not be rewritten cleanly"""

    def __init__(self, filename: str, diagnostics: List):
        self.filename = filename
        self.diagnostics = list(diagnostics)
        lines = "\n".join(f"  {d}" for d in self.diagnostics)
        super().__init__(f"contract rewrite of {filename} failed:\n{lines}")
