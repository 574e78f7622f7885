"""Console output for the xdir command line.

Thin wrapper around a Rich console with a couple of terminal themes and
status-prefixed print helpers.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme


class StatusType(Enum):
    """Standard status types with associated symbols."""
    SUCCESS = ("[✓]", "success")
    ERROR = ("[x]", "error")
    WARNING = ("[!]", "warning")
    INFO = ("[i]", "info")


@dataclass
class ThemeColors:
    """Color definitions for a theme."""
    info: str
    warning: str
    error: str
    success: str
    highlight: str
    path: str
    number: str
    dim: str


THEMES = {
    'manhattan': ThemeColors(
        info='cyan',
        warning='yellow',
        error='red',
        success='green',
        highlight='bright_cyan',
        path='white',
        number='bright_blue',
        dim='bright_black',
    ),
    'green': ThemeColors(
        info='green',
        warning='yellow',
        error='red',
        success='bright_green',
        highlight='bold green',
        path='bright_green',
        number='green',
        dim='green',
    ),
    'sunset': ThemeColors(
        info='orange3',
        warning='yellow',
        error='red3',
        success='green',
        highlight='bold orange1',
        path='wheat1',
        number='orange1',
        dim='grey50',
    ),
}


class ConsoleManager:
    """Themed console for user-facing output."""

    def __init__(self, theme: str = "manhattan", file: Optional[Any] = None):
        """Initialize console.

        Args:
            theme: Theme name from THEMES
            file: Output file (defaults to sys.stdout)
        """
        self.theme_name = theme if theme in THEMES else "manhattan"
        self.colors = THEMES[self.theme_name]
        self.console = Console(
            file=file or sys.stdout,
            theme=Theme({
                "info": self.colors.info,
                "warning": self.colors.warning,
                "error": self.colors.error,
                "success": self.colors.success,
                "highlight": self.colors.highlight,
                "path": self.colors.path,
                "number": self.colors.number,
                "dim": self.colors.dim,
            }),
            highlight=False,
        )

    def print(self, *args, **kwargs):
        self.console.print(*args, **kwargs)

    def print_status(self, status: StatusType, message: str):
        symbol, style = status.value
        self.console.print(f"[{style}]{escape(symbol)}[/{style}] {message}")

    def print_error(self, message: str):
        self.print_status(StatusType.ERROR, message)

    def print_success(self, message: str):
        self.print_status(StatusType.SUCCESS, message)

    def print_info(self, message: str):
        self.print_status(StatusType.INFO, message)

    def print_warning(self, message: str):
        self.print_status(StatusType.WARNING, message)

    def print_separator(self, char: str = "═", width: int = 60):
        self.console.print(char * width, style="dim")
