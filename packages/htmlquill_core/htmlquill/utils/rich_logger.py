"""
Rich logging for HtmlQuill.

Console logging through the rich library; used by the command-line interface.
Library modules only create ``logging.getLogger(__name__)`` loggers and never
configure handlers themselves.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOGGER_NAME = "htmlquill"


def _level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


class RichLogger:
    """
    Console reporter with rich formatting and colors.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Args:
            console: Console to print to (stderr by default)
        """
        self.console = console or Console(stderr=True)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓ {message}[/green]")

    def failure(self, message: str) -> None:
        self.console.print(f"[red]✗ {message}[/red]")


def setup_logging(level: str = "INFO", use_rich: bool = True, console: Optional[Console] = None) -> logging.Logger:
    """
    Setup logging for the application.

    Args:
        level: Log level name
        use_rich: Use a :class:`RichHandler`; otherwise a plain stream handler on stderr
        console: Console for the rich handler

    Returns:
        The package logger
    """
    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    logger.setLevel(_level(level))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
