# src/tabula/core/logging.py
"""Console logging built on rich."""

from contextlib import contextmanager
from typing import Callable, Dict, Iterator

from rich.console import Console
from rich.markup import escape

# --- Global Console ---
# All modules log through this single console instance.
console = Console(stderr=True)

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _style(style: str) -> Callable[[str], str]:
    return lambda text: f"[{style}]{escape(str(text))}[/{style}]"


# Markup helpers for database object names
color_palette: Dict[str, Callable[[str], str]] = {
    "schema": _style("blue"),
    "table": _style("cyan"),
    "column": _style("green"),
    "sql": _style("dim"),
    "operation": _style("magenta"),
}


class Logger:
    """Small leveled logger writing rich markup to the console."""

    def __init__(self, level: str = "INFO"):
        self.level = LEVELS.get(level.upper(), 20)
        self.indent = 0

    def set_level(self, level: str) -> None:
        self.level = LEVELS.get(level.upper(), self.level)

    def _emit(self, level: int, prefix: str, message: str) -> None:
        if level < self.level:
            return
        console.print(f"{'  ' * self.indent}{prefix} {message}", highlight=False)

    def debug(self, message: str) -> None:
        self._emit(10, "[dim]·[/dim]", message)

    def info(self, message: str) -> None:
        self._emit(20, "[blue]i[/blue]", message)

    def success(self, message: str) -> None:
        self._emit(20, "[green]✓[/green]", message)

    def warn(self, message: str) -> None:
        self._emit(30, "[yellow]![/yellow]", message)

    def error(self, message: str) -> None:
        self._emit(40, "[bold red]✗[/bold red]", message)

    def section(self, title: str) -> None:
        if self.level <= 20:
            console.rule(f"[bold]{title}[/bold]")

    @contextmanager
    def indented(self, steps: int = 1) -> Iterator[None]:
        """Indent every message emitted inside the block."""
        self.indent += steps
        try:
            yield
        finally:
            self.indent -= steps


log = Logger()
