import pytest

from kishell.catalog import SymbolKind
from kishell.config import CatalogSettings, Ownership, Settings, ShellSettings
from kishell.plugins import RuntimePlugin
from kishell.shell import Shell


def _shell(tmp_path, **catalog) -> tuple[Shell, RuntimePlugin]:
    settings = Settings(catalog=CatalogSettings(**catalog), shell=ShellSettings(home=str(tmp_path)))
    shell = Shell(settings)
    plugin = RuntimePlugin()
    shell.load_plugin(plugin)
    return shell, plugin


def _run(shell: Shell, *lines: str) -> None:
    for line in lines:
        result = shell.handle_line(line)
        assert result.error is None, result.error


@pytest.fixture
def session(tmp_path) -> tuple[Shell, RuntimePlugin]:
    return _shell(tmp_path)


def test_redeclared_value_keeps_latest_type(session) -> None:
    shell, plugin = session
    _run(shell, "from typing import Final", "a: Final = 1", 'a: Final = "x"')

    assert plugin.table.list() == ["val a: str"]


def test_function_declaration(session) -> None:
    shell, plugin = session
    _run(shell, "def f(n: int) -> int:\n    return n + 1")

    assert plugin.table.list(kinds={SymbolKind.FUNCTION}) == ["fun f(n: int): int"]
    assert plugin.table.list() == ["fun f(n: int): int"]


def test_data_class_declaration(session) -> None:
    shell, plugin = session
    _run(shell, "from dataclasses import dataclass", "@dataclass\nclass Point:\n    x: int\n    y: int")

    assert plugin.table.list() == ["data class Point(x: int, y: int)"]


def test_mutable_binding_and_redefined_class(session) -> None:
    shell, plugin = session
    _run(
        shell,
        "count = 0",
        "class A:\n    pass",
        "class A:\n    def __init__(self, v: int) -> None:\n        self.v = v",
    )

    assert plugin.table.list() == ["var count: int", "class A(v: int)"]


def test_result_bindings_are_not_listed(session) -> None:
    shell, plugin = session
    _run(shell, "1 + 2", "x = 1", "x * 2")

    assert plugin.table.list() == ["var x: int"]


def test_failed_lines_are_not_absorbed(session) -> None:
    shell, plugin = session
    result = shell.handle_line("y = 1 / 0")

    assert "ZeroDivisionError" in result.error
    assert plugin.table.is_empty()


def test_table_listing_by_kind(session) -> None:
    shell, plugin = session
    _run(shell, "LIMIT = 10", "def g():\n    pass", "class B:\n    pass")

    assert plugin.table.list(kinds={SymbolKind.FUNCTION}) == ["fun g(): Any"]
    assert plugin.table.list(pattern="^[A-Z]") == ["var LIMIT: int", "class B"]


class TestCommands:
    def test_list_on_empty_table_prints_nothing(self, session) -> None:
        shell, _ = session
        result = shell.handle_line(":list")
        assert result.output == ""
        assert result.error is None

    def test_list_and_short_form(self, session) -> None:
        shell, _ = session
        _run(shell, "from typing import Final", "a: Final = 1", "def f(n: int) -> int:\n    return n")

        expected = "val a: int\nfun f(n: int): int"
        assert shell.handle_line(":list").output == expected
        assert shell.handle_line(":ls").output == expected

    def test_type_command(self, session) -> None:
        shell, _ = session
        _run(shell, 'a = "x"')

        assert shell.handle_line(":type a").output == "str"
        assert shell.handle_line(":t [a, 1]").output == "list[str | int]"

    def test_type_command_reports_diagnostics(self, session) -> None:
        shell, _ = session
        _run(shell, 'a = "x"')

        result = shell.handle_line(":t a - 1")
        assert result.error == "error: unsupported operand types for -: 'str' and 'int'"
        assert shell.handle_line(":type").error == "error: expected an expression"

    def test_type_command_does_not_evaluate(self, session) -> None:
        shell, plugin = session
        shell.handle_line(":type 1 + 1")

        assert shell.evaluator.history == []
        assert plugin.table.is_empty()

    def test_configured_command_words(self, tmp_path) -> None:
        shell, _ = _shell(tmp_path, list_command="symbols", list_short=None)
        _run(shell, "x = 1")

        assert shell.handle_line(":symbols").output == "var x: int"
        assert shell.handle_line(":ls").error == "Unknown command: :ls"


def test_marker_ownership_lists_the_same_symbols(tmp_path) -> None:
    shell, plugin = _shell(tmp_path, ownership=Ownership.MARKER)
    _run(shell, "from typing import Final", "a: Final = 1", 'a: Final = "x"', "def f(n: int) -> int:\n    return n")

    assert plugin.table.list() == ["val a: str", "fun f(n: int): int"]


def test_clean_up_stops_absorbing(session) -> None:
    shell, plugin = session
    _run(shell, "x = 1")
    shell.close()
    _run(shell, "y = 2")

    assert plugin.table.list() == ["var x: int"]


def test_string_annotation_lists_without_quotes(session) -> None:
    shell, plugin = session
    _run(shell, 'a: "int" = 1')

    assert plugin.table.list() == ["var a: int"]


def test_dunder_lines_keep_the_session_usable(session) -> None:
    shell, plugin = session
    _run(shell, "__slots__ = ()", "def __init__(self):\n    pass", "x = 1")

    assert plugin.table.list() == ["var x: int"]
