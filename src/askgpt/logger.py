"""Diagnostic logging for askgpt.

Log records go to stderr through Rich so that stdout carries nothing but
assistant output and can be piped.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_stderr = Console(stderr=True)


def create_logger(name: str, debug: bool = False) -> logging.Logger:
    """Create (or fetch) a logger that renders on stderr."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = RichHandler(console=_stderr, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger


def set_debug(debug: bool) -> None:
    """Switch the package logger between DEBUG and WARNING."""
    create_logger("askgpt", debug=debug)
