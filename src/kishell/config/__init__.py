"""Configuration package."""

from kishell.config.settings import (
    CatalogSettings,
    HostSettings,
    Ownership,
    Settings,
    ShellSettings,
    load_settings,
)

__all__ = [
    "CatalogSettings",
    "HostSettings",
    "Ownership",
    "Settings",
    "ShellSettings",
    "load_settings",
]
