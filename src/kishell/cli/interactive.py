"""Interactive prompt loop."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich import get_console

from kishell import __version__
from kishell.cli.render import ShellRenderer
from kishell.shell import LineResult, Shell

MULTILINE_START = ":{"
MULTILINE_END = ":}"


class InteractiveShell:
    """Reads lines with prompt_toolkit and feeds them to a Shell."""

    def __init__(self, shell: Shell, *, renderer: ShellRenderer | None = None) -> None:
        self._shell = shell
        self._renderer = renderer or ShellRenderer(get_console())
        self._buffer: list[str] = []
        self._in_multiline = False
        self._prompt = self._build_prompt()

    def run(self) -> None:
        self._renderer.welcome(version=__version__)
        try:
            while True:
                try:
                    raw = self._prompt.prompt(self._prompt_message())
                except KeyboardInterrupt:
                    if self._in_multiline:
                        self._renderer.info("Cancelled multiline input")
                        self._reset_multiline()
                    else:
                        self._renderer.info("Interrupted. Use :quit to exit.")
                    continue
                except EOFError:
                    break

                source = self.feed(raw)
                if source is None:
                    continue
                result = self._shell.handle_line(source)
                self.show(result)
                if result.exit_requested:
                    break
        finally:
            self._shell.close()
        self._renderer.info("Bye.")

    def feed(self, raw: str) -> str | None:
        """Accumulate multiline input; return a complete source chunk or None."""
        if self._in_multiline:
            if raw.strip() == MULTILINE_END:
                source = "\n".join(self._buffer)
                self._reset_multiline()
                return source if source.strip() else None
            self._buffer.append(raw)
            return None
        if raw.strip() == MULTILINE_START:
            self._in_multiline = True
            self._buffer = []
            return None
        if raw.strip() == MULTILINE_END:
            self._renderer.error("Error: Not in multiline mode (use :{ first)")
            return None
        return raw if raw.strip() else None

    def show(self, result: LineResult) -> None:
        if result.error:
            self._renderer.error(result.error)
        self._renderer.output(result.output)

    def _reset_multiline(self) -> None:
        self._in_multiline = False
        self._buffer = []

    def _completion_words(self) -> list[str]:
        words = [word for command in self._shell.commands for word in command.words()]
        words.extend(name for name in self._shell.evaluator.namespace if not name.startswith("__"))
        return words

    def _build_prompt(self) -> PromptSession[str]:
        settings = self._shell.settings.shell
        if settings.persist_history:
            history_file = settings.history_file
            history_file.parent.mkdir(parents=True, exist_ok=True)
            history: FileHistory | InMemoryHistory = FileHistory(str(history_file))
        else:
            history = InMemoryHistory()
        completer = WordCompleter(self._completion_words, sentence=True)
        return PromptSession(completer=completer, history=history)

    def _prompt_message(self) -> FormattedText:
        if self._in_multiline:
            return FormattedText([("", "... ")])
        return FormattedText([("bold", self._shell.settings.shell.prompt)])
