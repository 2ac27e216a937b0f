"""Line routing: commands to their handlers, code to the evaluator."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from kishell.config import Settings, load_settings
from kishell.errors import CompilationError, KishellError, UnknownCommandError
from kishell.host import Analyzer, EventManager, Evaluator, ResultError, ResultValue, SnippetCompiler
from kishell.shell.commands import BaseCommand, DetectedCommand, HelpCommand, QuitCommand, parse_command
from kishell.shell.plugin import Plugin


@dataclass(frozen=True)
class LineResult:
    """Outcome of handling one line."""

    output: str = ""
    error: str | None = None
    exit_requested: bool = False


class Shell:
    """Owns the evaluator, the command set and the loaded plugins."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or load_settings()
        host = self.settings.host
        self.events = EventManager()
        self.evaluator = Evaluator(
            compiler=SnippetCompiler(result_prefix=host.result_prefix, class_prefix=host.class_prefix),
            events=self.events,
            module_name=host.module_name,
        )
        self.analyzer = Analyzer(self.evaluator)
        self._commands: list[BaseCommand] = []
        self._plugins: list[Plugin] = []

        self.register_command(HelpCommand(lambda: self.commands))
        self.register_command(QuitCommand())

    @property
    def commands(self) -> list[BaseCommand]:
        return list(self._commands)

    def register_command(self, command: BaseCommand) -> None:
        for word in (command.name, command.short):
            if word is not None and self.find_command(word) is not None:
                raise ValueError(f"command word already registered: {word}")
        self._commands.append(command)
        logger.debug("shell.register_command name={} short={}", command.name, command.short)

    def find_command(self, word: str) -> BaseCommand | None:
        for command in self._commands:
            if command.matches(word):
                return command
        return None

    def load_plugin(self, plugin: Plugin) -> None:
        plugin.init(self, self.settings)
        self._plugins.append(plugin)
        logger.debug("shell.load_plugin plugin={}", type(plugin).__name__)

    def close(self) -> None:
        while self._plugins:
            self._plugins.pop().clean_up()

    def handle_line(self, line: str) -> LineResult:
        if not line.strip():
            return LineResult()
        command = parse_command(line)
        if command is not None:
            return self._run_command(command)
        return self._evaluate(line)

    def _run_command(self, detected: DetectedCommand) -> LineResult:
        command = self.find_command(detected.name)
        if command is None:
            return LineResult(error=str(UnknownCommandError(detected.raw.split()[0])))
        result = command.execute(detected.args)
        logger.debug("shell.command name={} status={}", command.name, result.status)
        if result.failed:
            return LineResult(error=result.output)
        if result.exit_requested:
            return LineResult(exit_requested=True)
        return LineResult(output=result.output)

    def _evaluate(self, source: str) -> LineResult:
        try:
            snippet = self.evaluator.eval(source)
        except CompilationError as e:
            return LineResult(error=f"SyntaxError: {e}")
        except KishellError as e:
            logger.warning("shell.eval.handler_failed error={}", e)
            return LineResult(error=f"{type(e).__name__}: {e}")

        match snippet.result:
            case ResultValue() as value:
                return LineResult(output=value.render())
            case ResultError() as failure:
                return LineResult(error=failure.traceback or failure.render())
            case _:
                return LineResult()
