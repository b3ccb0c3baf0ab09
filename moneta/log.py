"""Diagnostic logging for moneta.

The "moneta" logger writes to stderr through Rich, so diagnostics never mix
with command output on stdout. The handler is attached once.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from moneta.config import get_log_level

LOGGER_NAME = "moneta"

_configured = False


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a Rich handler to the moneta logger.

    Args:
        level: Level name. If None, MONETA_LOG_LEVEL or the config file decides.

    Returns:
        The configured logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    level_name = (level or get_log_level()).upper()
    logger.setLevel(logging.getLevelNamesMapping().get(level_name, logging.WARNING))

    if not _configured:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the moneta logger, or one of its children.

    Handlers are attached by configure_logging, which the CLI calls at startup.

    Args:
        name: Optional child name, e.g. "store".
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
