from pathlib import Path

import pytest
from pydantic import ValidationError

from kishell.config import CatalogSettings, HostSettings, Ownership, Settings, ShellSettings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for prefix in ("KISHELL_HOST_", "KISHELL_CATALOG_", "KISHELL_SHELL_"):
        for name in ("MODULE_NAME", "RESULT_PREFIX", "CLASS_PREFIX", "OWNERSHIP", "LINE_MARKER", "HOME", "PROMPT"):
            monkeypatch.delenv(prefix + name, raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.host.module_name == "__session__"
    assert settings.host.result_prefix == "res"
    assert settings.catalog.ownership is Ownership.STRUCTURAL
    assert settings.catalog.list_command == "list"
    assert settings.catalog.list_short == "ls"
    assert settings.catalog.type_command == "type"
    assert settings.catalog.type_short == "t"
    assert settings.shell.persist_history is True
    assert settings.shell.prompt == ">>> "


def test_each_section_reads_its_own_env_prefix(monkeypatch) -> None:
    monkeypatch.setenv("KISHELL_HOST_RESULT_PREFIX", "out")
    monkeypatch.setenv("KISHELL_CATALOG_OWNERSHIP", "marker")
    monkeypatch.setenv("KISHELL_CATALOG_LIST_SHORT", "null")
    monkeypatch.setenv("KISHELL_SHELL_PROMPT", "kishell> ")

    settings = Settings()

    assert settings.host.result_prefix == "out"
    assert settings.catalog.ownership is Ownership.MARKER
    assert settings.catalog.list_short is None
    assert settings.shell.prompt == "kishell> "


def test_prefixes_must_be_identifiers() -> None:
    with pytest.raises(ValidationError):
        HostSettings(class_prefix="1st")
    with pytest.raises(ValidationError):
        HostSettings(result_prefix="res-")


def test_line_marker_must_compile() -> None:
    with pytest.raises(ValidationError):
        CatalogSettings(line_marker="Line_(")


def test_line_marker_follows_class_prefix() -> None:
    assert Settings().line_marker == r"Line_\d+\b"
    assert Settings(host=HostSettings(class_prefix="Cell")).line_marker == r"Cell\d+\b"


def test_custom_line_marker_wins() -> None:
    settings = Settings(catalog=CatalogSettings(line_marker=r"L\d+"))
    assert settings.line_marker == r"L\d+"


def test_home_and_history_file(tmp_path: Path) -> None:
    shell = ShellSettings(home=str(tmp_path))

    assert shell.resolve_home() == tmp_path.resolve()
    assert shell.history_file == tmp_path.resolve() / "history"


def test_default_home_is_under_user_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert ShellSettings().resolve_home() == (tmp_path / ".kishell").resolve()


def test_load_settings_overrides(tmp_path: Path) -> None:
    settings = load_settings(tmp_path, ownership="marker")

    assert settings.shell.resolve_home() == tmp_path.resolve()
    assert settings.catalog.ownership is Ownership.MARKER
