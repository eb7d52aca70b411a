"""
Logging for module-atlas.

Library modules log through ``get_logger(__name__)``; nothing is printed until
``setup_logging`` installs a RichHandler on stderr, which keeps stdout free for
JSON output. Per-file diagnostics carry their error code in the message
(``[MA300] './x' from ./a.js matched no file``).
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "module_atlas"

# Verbosity name -> level of the module_atlas logger
LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal") -> logging.Logger:
    """
    Route module_atlas logging to a rich stderr handler.

    Safe to call once per analysis run; earlier handlers are replaced.

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings) or "verbose" (debug)

    Returns:
        The module_atlas logger
    """
    level = LEVELS.get(verbosity, logging.WARNING)
    verbose = level == logging.DEBUG

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
    )

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the module_atlas namespace (``module_atlas.graph.walker``)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
