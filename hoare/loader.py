"""
Loading rewritten modules for execution.
"""

import sys
import types
from pathlib import Path
from typing import Optional, Union

from .core.errors import ContractRewriteError
from .core.models import RewriteContext
from .core.transformer import rewrite_source
from .logging import get_logger
from .logging_tags import LOADER

logger = get_logger(__name__)


def load_source(source: str,
                module_name: str = "__hoare__",
                filename: str = "<string>",
                debug_assertions: Optional[bool] = None,
                context: Optional[RewriteContext] = None,
                register: bool = False) -> types.ModuleType:
    """
    Rewrite source and execute it as a fresh module.

    Args:
        source: Python module source with contract decorators
        module_name: __name__ of the new module
        filename: Name used in tracebacks and diagnostics
        debug_assertions: Whether debug_* contracts apply; defaults to settings
        context: Rewrite context to continue numbering from
        register: Also insert the module into sys.modules

    Returns:
        The executed module

    Raises:
        ContractRewriteError: If any contract could not be applied
        SyntaxError: If source is not valid Python
    """
    result = rewrite_source(source, filename, debug_assertions=debug_assertions, context=context)
    if result.diagnostics:
        raise ContractRewriteError(filename, result.diagnostics)

    module = types.ModuleType(module_name)
    module.__file__ = filename
    if register:
        sys.modules[module_name] = module

    code = compile(result.tree, filename, "exec")
    exec(code, module.__dict__)

    logger.debug(f"{LOADER} loaded {module_name} from {filename} ({len(result.rewritten)} rewritten)")
    return module


def load_file(path: Union[str, Path], module_name: Optional[str] = None, **kwargs) -> types.ModuleType:
    """Rewrite and execute a Python file; module name defaults to the file stem"""
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return load_source(source, module_name or path.stem, filename=str(path), **kwargs)
