"""Shell command model and built-in commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass

COMMAND_PREFIX = ":"


@dataclass(frozen=True)
class DetectedCommand:
    """Command word and argument text parsed from a line."""

    raw: str
    name: str
    args: str = ""


@dataclass(frozen=True)
class CommandResult:
    """Result of one command execution."""

    status: str
    output: str = ""
    exit_requested: bool = False

    @classmethod
    def ok(cls, output: str = "", *, exit_requested: bool = False) -> CommandResult:
        return cls(status="ok", output=output, exit_requested=exit_requested)

    @classmethod
    def error(cls, output: str) -> CommandResult:
        return cls(status="error", output=output)

    @property
    def failed(self) -> bool:
        return self.status != "ok"


def parse_command(line: str) -> DetectedCommand | None:
    """Parse ``:name args`` into a DetectedCommand, or None for code."""
    stripped = line.strip()
    if not stripped.startswith(COMMAND_PREFIX) or stripped in (":{", ":}"):
        return None
    word, _, args = stripped[len(COMMAND_PREFIX) :].partition(" ")
    if not word:
        return None
    return DetectedCommand(raw=stripped, name=word, args=args.strip())


class BaseCommand(ABC):
    """A ``:``-prefixed shell command."""

    name: str
    short: str | None = None
    description: str = ""
    params: str = ""

    def matches(self, word: str) -> bool:
        return word == self.name or (self.short is not None and word == self.short)

    def words(self) -> list[str]:
        words = [f"{COMMAND_PREFIX}{self.name}"]
        if self.short:
            words.append(f"{COMMAND_PREFIX}{self.short}")
        return words

    def usage(self) -> str:
        usage = ", ".join(self.words())
        return f"{usage} {self.params}".rstrip()

    @abstractmethod
    def execute(self, line: str) -> CommandResult:
        """Run the command with the text following the command word."""


class HelpCommand(BaseCommand):
    name = "help"
    short = "h"
    description = "show this help"

    def __init__(self, commands: Callable[[], Sequence[BaseCommand]]) -> None:
        self._commands = commands

    def execute(self, line: str) -> CommandResult:
        commands = self._commands()
        width = max(len(command.usage()) for command in commands)
        lines = ["Commands:"]
        lines.extend(f"  {command.usage():<{width}}  {command.description}" for command in commands)
        lines.append("")
        lines.append("Use :{ to start multiline input, :} to finish")
        return CommandResult.ok("\n".join(lines))


class QuitCommand(BaseCommand):
    name = "quit"
    short = "q"
    description = "exit the shell"

    def execute(self, line: str) -> CommandResult:
        return CommandResult.ok("exit", exit_requested=True)
