"""Built-in shell plugins."""

from kishell.plugins.runtime import InferType, ListSymbols, RuntimePlugin

__all__ = ["InferType", "ListSymbols", "RuntimePlugin"]
