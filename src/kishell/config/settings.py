"""Application settings."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Ownership(str, Enum):
    """How the catalog decides a member was declared by the current line."""

    STRUCTURAL = "structural"
    MARKER = "marker"


class HostSettings(BaseSettings):
    """Evaluation host settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KISHELL_HOST_",
        case_sensitive=False,
        extra="ignore",
    )

    module_name: str = Field(default="__session__")
    result_prefix: str = Field(default="res")
    class_prefix: str = Field(default="Line_")

    @field_validator("result_prefix", "class_prefix")
    @classmethod
    def _must_be_identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"{value!r} is not a valid identifier prefix")
        return value


class CatalogSettings(BaseSettings):
    """Symbol catalog settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KISHELL_CATALOG_",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    ownership: Ownership = Field(default=Ownership.STRUCTURAL)
    line_marker: str | None = Field(default=None)
    list_command: str = Field(default="list")
    list_short: str | None = Field(default="ls")
    type_command: str = Field(default="type")
    type_short: str | None = Field(default="t")

    @field_validator("line_marker")
    @classmethod
    def _must_compile(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid line marker pattern: {e}") from e
        return value


class ShellSettings(BaseSettings):
    """Interactive shell settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KISHELL_SHELL_",
        case_sensitive=False,
        extra="ignore",
    )

    home: str | None = Field(default=None)
    persist_history: bool = Field(default=True)
    prompt: str = Field(default=">>> ")

    def resolve_home(self) -> Path:
        if self.home:
            return Path(self.home).expanduser().resolve()
        return (Path.home() / ".kishell").resolve()

    @property
    def history_file(self) -> Path:
        return self.resolve_home() / "history"


class Settings(BaseModel):
    """Unified settings - composition of all component settings.

    Each section keeps its own env prefix, so they are held as fields rather
    than mixed into one class.
    """

    host: HostSettings = Field(default_factory=HostSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    shell: ShellSettings = Field(default_factory=ShellSettings)

    @property
    def line_marker(self) -> str:
        if self.catalog.line_marker:
            return self.catalog.line_marker
        return rf"{re.escape(self.host.class_prefix)}\d+\b"


def load_settings(home: Path | None = None, **catalog_overrides: Any) -> Settings:
    """Load unified settings with an optional home override."""
    shell = ShellSettings() if home is None else ShellSettings(home=str(home))
    catalog = CatalogSettings(**catalog_overrides)
    return Settings(shell=shell, catalog=catalog)
