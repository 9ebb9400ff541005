"""
Console output

Every line goes to stderr with a colored severity tag. INFO and WARNING
lines only show up with --verbose; SUCCESS and ERROR always do.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console(stderr=True)


class Reporter:
    """Severity-tagged progress output for a sync run"""

    def __init__(self, verbose: bool = False, out: Optional[Console] = None):
        self.verbose = verbose
        self.console = out or console

    def info(self, message: str):
        if self.verbose:
            self.console.print(f"[blue]\\[INFO][/blue] {escape(message)}")

    def success(self, message: str):
        self.console.print(f"[green]\\[SUCCESS][/green] {escape(message)}")

    def warning(self, message: str):
        if self.verbose:
            self.console.print(f"[yellow]\\[WARNING][/yellow] {escape(message)}")

    def error(self, message: str):
        self.console.print(f"[red]\\[ERROR][/red] {escape(message)}")


def setup_logging(verbose: bool):
    """Route library logging through rich; debug detail only when verbose"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
