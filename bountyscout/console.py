"""Shared rich console and logging setup."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from bountyscout.config import get_config

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich output.

    Args:
        verbose: Force DEBUG level regardless of configuration.
    """
    config = get_config()
    level = "DEBUG" if verbose else config.logging.level.upper()

    handlers: list[logging.Handler] = [RichHandler(console=console, rich_tracebacks=True)]
    if config.logging.file:
        file_handler = logging.FileHandler(config.logging.file)
        file_handler.setFormatter(logging.Formatter(config.logging.format))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level),
        format=config.logging.format,
        handlers=handlers,
        force=True,
    )
