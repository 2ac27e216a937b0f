"""Runtime plugin: keeps the symbol catalog and exposes :list and :type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from kishell.catalog import SnippetIntrospector, SymbolsTable
from kishell.errors import AnalysisError
from kishell.host import Analyzer, OnEval, Snapshot
from kishell.shell.commands import BaseCommand, CommandResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from kishell.config import CatalogSettings, Settings
    from kishell.shell import Shell


class InferType(BaseCommand):
    description = "display the type of an expression without evaluating it"
    params = "<expr>"

    def __init__(self, analyzer: Analyzer, settings: CatalogSettings) -> None:
        self.name = settings.type_command
        self.short = settings.type_short
        self._analyzer = analyzer

    def execute(self, line: str) -> CommandResult:
        try:
            result = self._analyzer.analyze(line)
        except AnalysisError as e:
            return CommandResult.error(f"error: {e.diagnostic}")
        return CommandResult.ok(result.rendered_type)


class ListSymbols(BaseCommand):
    description = "list defined symbols"

    def __init__(self, table: SymbolsTable, settings: CatalogSettings) -> None:
        self.name = settings.list_command
        self.short = settings.list_short
        self._table = table

    def execute(self, line: str) -> CommandResult:
        if self._table.is_empty():
            return CommandResult.ok()
        return CommandResult.ok(str(self._table))


class RuntimePlugin:
    """Feeds every successful evaluation into the symbols table."""

    def __init__(self) -> None:
        self.table = SymbolsTable()
        self.introspector: SnippetIntrospector | None = None
        self._unregister: Callable[[], None] | None = None

    def init(self, shell: Shell, settings: Settings) -> None:
        self.introspector = SnippetIntrospector(
            self.table,
            ownership=settings.catalog.ownership,
            marker=settings.line_marker,
            host_base=Snapshot,
        )
        self._unregister = shell.events.register(OnEval, self._on_eval)
        shell.register_command(InferType(shell.analyzer, settings.catalog))
        shell.register_command(ListSymbols(self.table, settings.catalog))

    def _on_eval(self, event: OnEval) -> None:
        if self.introspector is None:
            return
        if event.snippet.succeeded:
            self.introspector.absorb(event.snippet)
        else:
            logger.debug("runtime.skip_failed_snippet no={}", event.snippet.compiled.no)

    def clean_up(self) -> None:
        if self._unregister is not None:
            self._unregister()
            self._unregister = None
