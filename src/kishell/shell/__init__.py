"""Shell core: command routing and plugin loading."""

from kishell.shell.commands import BaseCommand, CommandResult, DetectedCommand, parse_command
from kishell.shell.plugin import Plugin
from kishell.shell.shell import LineResult, Shell

__all__ = [
    "BaseCommand",
    "CommandResult",
    "DetectedCommand",
    "LineResult",
    "Plugin",
    "Shell",
    "parse_command",
]
