import io

import pytest
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich.console import Console

from kishell.cli.app import build_shell
from kishell.cli.interactive import InteractiveShell
from kishell.cli.render import ShellRenderer
from kishell.config import Settings, ShellSettings


class _ScriptedPrompt:
    def __init__(self, inputs: list[object]) -> None:
        self._inputs = list(inputs)
        self.messages: list[str] = []

    def prompt(self, message) -> str:
        self.messages.append("".join(text for _style, text in message))
        if not self._inputs:
            raise EOFError
        item = self._inputs.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def runtime(tmp_path):
    settings = Settings(shell=ShellSettings(home=str(tmp_path), persist_history=False))
    return build_shell(settings)


def _interactive(runtime, console: Console, monkeypatch, inputs: list[object]) -> tuple[InteractiveShell, _ScriptedPrompt]:
    prompt = _ScriptedPrompt(inputs)
    monkeypatch.setattr(InteractiveShell, "_build_prompt", lambda self: prompt)
    shell, _plugin = runtime
    return InteractiveShell(shell, renderer=ShellRenderer(console)), prompt


class TestFeed:
    def test_single_line_passes_through(self, runtime, console, monkeypatch) -> None:
        cli, _ = _interactive(runtime, console, monkeypatch, [])
        assert cli.feed("x = 1") == "x = 1"
        assert cli.feed("   ") is None

    def test_multiline_block_is_joined(self, runtime, console, monkeypatch) -> None:
        cli, _ = _interactive(runtime, console, monkeypatch, [])

        assert cli.feed(":{") is None
        assert cli.feed("def f():") is None
        assert cli.feed("    return 1") is None
        assert cli.feed(":}") == "def f():\n    return 1"

    def test_empty_multiline_block_yields_nothing(self, runtime, console, monkeypatch) -> None:
        cli, _ = _interactive(runtime, console, monkeypatch, [])

        cli.feed(":{")
        assert cli.feed(":}") is None

    def test_close_marker_outside_multiline_is_an_error(self, runtime, console, monkeypatch) -> None:
        cli, _ = _interactive(runtime, console, monkeypatch, [])

        assert cli.feed(":}") is None
        assert "Not in multiline mode (use :{ first)" in console.file.getvalue()


def test_run_evaluates_lines_until_quit(runtime, console, monkeypatch) -> None:
    cli, prompt = _interactive(runtime, console, monkeypatch, ["1 + 2", "x = 5", ":ls", ":q", "never = 1"])

    cli.run()

    out = console.file.getvalue()
    assert "res0: int = 3" in out
    assert "var x: int" in out
    assert out.rstrip().endswith("Bye.")
    shell, _ = runtime
    assert "never" not in shell.evaluator.namespace
    assert prompt.messages == [">>> "] * 4


def test_run_handles_multiline_and_interrupts(runtime, console, monkeypatch) -> None:
    inputs = [":{", "class A:", KeyboardInterrupt(), KeyboardInterrupt(), ":{", "class B:", "    pass", ":}", ":list"]
    cli, prompt = _interactive(runtime, console, monkeypatch, inputs)

    cli.run()

    out = console.file.getvalue()
    assert "Cancelled multiline input" in out
    assert "Interrupted. Use :quit to exit." in out
    assert "class B" in out
    assert "class A" not in out
    assert prompt.messages[1] == "... "


def test_run_reports_errors_and_continues(runtime, console, monkeypatch) -> None:
    cli, _ = _interactive(runtime, console, monkeypatch, ["1 / 0", ":nope", "2"])

    cli.run()

    out = console.file.getvalue()
    assert "ZeroDivisionError" in out
    assert "Unknown command: :nope" in out
    assert "res1: int = 2" in out


def test_run_closes_shell_plugins(runtime, console, monkeypatch) -> None:
    cli, _ = _interactive(runtime, console, monkeypatch, [])
    shell, plugin = runtime

    cli.run()
    shell.handle_line("late = 1")

    assert plugin.table.is_empty()


def test_completion_words_include_commands_and_session_names(runtime, console, monkeypatch) -> None:
    cli, _ = _interactive(runtime, console, monkeypatch, [])
    shell, _ = runtime
    shell.handle_line("answer = 42")

    words = cli._completion_words()

    assert {":help", ":h", ":quit", ":list", ":ls", ":type", ":t", "answer"} <= set(words)
    assert "__builtins__" not in words


class TestPromptHistory:
    def test_in_memory_history_when_not_persisting(self, runtime, console) -> None:
        shell, _ = runtime
        cli = InteractiveShell(shell, renderer=ShellRenderer(console))
        assert isinstance(cli._prompt.history, InMemoryHistory)

    def test_file_history_under_home(self, tmp_path, console) -> None:
        home = tmp_path / "home"
        shell, _ = build_shell(Settings(shell=ShellSettings(home=str(home))))

        cli = InteractiveShell(shell, renderer=ShellRenderer(console))

        assert isinstance(cli._prompt.history, FileHistory)
        assert home.is_dir()
