"""
Logging setup for hoare.

Modules use:
    from hoare.logging import get_logger
    logger = get_logger(__name__)

Handlers are only installed by configure_logging(), called from the CLI and
server entry points.
"""

import logging
import sys


DEFAULT_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def configure_logging(level=logging.INFO, fmt: str = DEFAULT_FORMAT, stream=sys.stderr):
    """
    Configure the root logging handler.

    Calling it again only changes the level; handlers are not duplicated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
