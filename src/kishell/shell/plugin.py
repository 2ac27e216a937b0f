"""Plugin protocol for the shell."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from kishell.config import Settings
    from kishell.shell.shell import Shell


class Plugin(Protocol):
    """A shell extension: registers commands and event handlers on init."""

    def init(self, shell: Shell, settings: Settings) -> None: ...

    def clean_up(self) -> None: ...
