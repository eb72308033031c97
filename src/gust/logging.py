"""Logging configuration for the gust CLI."""

from __future__ import annotations

import logging
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)

Verbosity = Literal["quiet", "normal", "verbose"]

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

HANDLER_NAME = "gust-console"


def setup_logging(verbosity: Verbosity = "normal") -> logging.Logger:
    """Route records from the ``gust`` logger tree to stderr.

    Calling it again swaps the console handler for a new one at the new
    level; handlers installed by anyone else are left alone. Entry paths
    show up in messages as-is, so rich markup is off.
    """
    logger = logging.getLogger("gust")
    logger.setLevel(LEVELS[verbosity])
    for old in [h for h in logger.handlers if h.get_name() == HANDLER_NAME]:
        logger.removeHandler(old)

    verbose = verbosity == "verbose"
    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.set_name(HANDLER_NAME)
    logger.addHandler(handler)
    return logger


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True)


def print_success(message: str) -> None:
    """Print a success message to stdout."""
    console.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True)
