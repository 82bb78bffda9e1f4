"""Logging setup, invoked explicitly from the CLI entry point."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Route the ``capella_cli`` loggers to stderr through Rich."""
    logger = logging.getLogger("capella_cli")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
