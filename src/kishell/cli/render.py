"""Console rendering for the interactive shell."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


class ShellRenderer:
    """Writes shell output, errors and notices to a rich console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def welcome(self, *, version: str) -> None:
        self.console.print(Text(f"kishell {version}", style="bold"))
        self.console.print(Text("Type :help for commands, :quit to exit", style="dim"))

    def info(self, message: str) -> None:
        self.console.print(Text(message, style="dim"))

    def output(self, text: str) -> None:
        if text:
            self.console.print(Text(text), soft_wrap=True)

    def error(self, text: str) -> None:
        self.console.print(Text(text.rstrip(), style="red"), soft_wrap=True)
