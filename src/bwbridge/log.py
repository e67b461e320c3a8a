"""Logging setup for the bwbridge command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "bwbridge"


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Route bwbridge log records to stderr through Rich.

    Library code only creates module loggers; handlers are installed here,
    by the CLI entry point.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
