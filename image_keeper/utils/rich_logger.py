"""
Rich console logging for the command line.

Provides colourful logging and report tables using the rich library.
"""

import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table


class RichLogger:
    """
    Console logger with rich formatting and colors.
    """

    def __init__(self, name: str = "image_keeper", level: str = "INFO",
                 console: Optional[Console] = None):
        """
        Initialize rich logger.

        Args:
            name: Logger name
            level: Log level
            console: Console to write to (a new one if omitted)
        """
        self.name = name
        self.level = level
        self.console = console or Console()

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.handlers.clear()
        self.logger.addHandler(_make_handler(self.console))
        self.logger.propagate = False

    def success(self, message: str):
        """Print success message."""
        self.console.print(f"[green]✓ {message}[/green]")

    def failure(self, message: str):
        """Log failure message."""
        self.logger.error(f"✗ {message}")

    def table(self, title: str, data: Dict[str, Any]):
        """Display data in a two-column table."""
        table = Table(title=title)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="magenta")

        for key, value in data.items():
            table.add_row(str(key), str(value))

        self.console.print(table)


def _make_handler(console: Console) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def setup_rich_logging(level: str = "INFO", console: Optional[Console] = None) -> Console:
    """
    Route the root logger through a rich handler.

    Args:
        level: Log level
        console: Console to write to (a new stderr console if omitted)

    Returns:
        The console used by the handler
    """
    console = console or Console(stderr=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(_make_handler(console))

    return console
