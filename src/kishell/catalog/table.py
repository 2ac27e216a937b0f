"""The symbols table: current view of every declaration in a session."""

from __future__ import annotations

import re
from collections.abc import Iterable

from loguru import logger

from kishell.catalog.symbols import ALL_KINDS, Symbol, SymbolKind, show


class SymbolsTable:
    """Ordered store holding at most one symbol per (kind, name)."""

    def __init__(self) -> None:
        self._symbols: list[Symbol] = []

    def add(self, symbol: Symbol) -> None:
        """Replace any symbol with the same kind and name, then append."""
        before = len(self._symbols)
        self._symbols = [s for s in self._symbols if not (s.kind == symbol.kind and s.name == symbol.name)]
        self._symbols.append(symbol)
        logger.debug(
            "catalog.table.add kind={} name={} replaced={}",
            symbol.kind.value,
            symbol.name,
            before == len(self._symbols),
        )

    def is_empty(self) -> bool:
        return not self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def list(
        self,
        pattern: str | re.Pattern[str] | None = None,
        kinds: Iterable[SymbolKind] = ALL_KINDS,
    ) -> list[str]:
        """Render matching symbols in table order.

        Args:
            pattern: Regular expression matched against the start of each
                name, case-sensitively. This is a prefix match: ``foo`` also
                selects ``food``, ``foo$`` selects only ``foo``. ``None``
                selects every name.
            kinds: Symbol kinds to include.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        selected = frozenset(kinds)
        return [
            show(symbol)
            for symbol in self._symbols
            if symbol.kind in selected and (regex is None or regex.match(symbol.name))
        ]

    def __str__(self) -> str:
        return "\n".join(self.list())
