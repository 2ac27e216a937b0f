"""Typer CLI entrypoints."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from kishell.catalog import ALL_KINDS, SymbolKind
from kishell.cli.interactive import InteractiveShell
from kishell.config import Ownership, Settings, load_settings
from kishell.errors import CompilationError
from kishell.host.compiler import split_source
from kishell.logging_utils import configure_logging
from kishell.plugins import RuntimePlugin
from kishell.shell import Shell

app = typer.Typer(name="kishell", help="Python REPL with a live symbol catalog", add_completion=False)


def build_shell(settings: Settings) -> tuple[Shell, RuntimePlugin]:
    """Build a shell with the runtime plugin loaded."""
    shell = Shell(settings)
    plugin = RuntimePlugin()
    shell.load_plugin(plugin)
    return shell, plugin


def _settings(home: Path | None, ownership: Ownership | None) -> Settings:
    if ownership is None:
        return load_settings(home)
    return load_settings(home, ownership=ownership)


@app.callback(invoke_without_command=True)
def _default(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        repl()


@app.command()
def repl(
    home: Annotated[Path | None, typer.Option("--home", help="Directory for shell history.")] = None,
    ownership: Annotated[Ownership | None, typer.Option("--ownership")] = None,
) -> None:
    """Run the interactive shell."""

    configure_logging(profile="repl")
    settings = _settings(home, ownership)
    logger.info("repl.start home={} ownership={}", str(settings.shell.resolve_home()), settings.catalog.ownership)
    shell, _ = build_shell(settings)
    InteractiveShell(shell).run()


@app.command()
def run(
    script: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True)],
    kinds: Annotated[list[SymbolKind] | None, typer.Option("--kind", "-k", help="Symbol kinds to list.")] = None,
    pattern: Annotated[str | None, typer.Option("--pattern", "-p", help="Regex matched against names.")] = None,
    ownership: Annotated[Ownership | None, typer.Option("--ownership")] = None,
    echo: Annotated[bool, typer.Option("--echo/--no-echo", help="Print each line's result.")] = False,
) -> None:
    """Evaluate a script statement by statement, then print its symbols."""

    configure_logging()
    settings = _settings(None, ownership)
    try:
        chunks = split_source(script.read_text(encoding="utf-8"))
    except CompilationError as e:
        typer.echo(f"SyntaxError: {e}", err=True)
        raise typer.Exit(1) from e

    shell, plugin = build_shell(settings)
    try:
        for chunk in chunks:
            result = shell.handle_line(chunk)
            if result.error:
                typer.echo(result.error, err=True)
                raise typer.Exit(1)
            if echo and result.output:
                typer.echo(result.output)
    finally:
        shell.close()

    for line in plugin.table.list(pattern, set(kinds) if kinds else ALL_KINDS):
        typer.echo(line)


def main() -> None:
    app()
