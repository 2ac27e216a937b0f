"""Catalog symbol values."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kishell.catalog import render


class SymbolKind(Enum):
    CLASS = "class"
    INSTANCE = "instance"
    FUNCTION = "function"


ALL_KINDS: frozenset[SymbolKind] = frozenset(SymbolKind)


@dataclass(frozen=True)
class ClassSymbol:
    """A class declared by a line."""

    namespace: str
    name: str
    cls: type
    kind: SymbolKind = field(default=SymbolKind.CLASS, init=False)


@dataclass(frozen=True)
class InstanceSymbol:
    """A stored value; ``prop`` is the snapshot's binding descriptor."""

    namespace: str
    name: str
    prop: property
    kind: SymbolKind = field(default=SymbolKind.INSTANCE, init=False)


@dataclass(frozen=True)
class FunctionSymbol:
    """A function declared by a line."""

    namespace: str
    name: str
    func: Callable[..., Any]
    kind: SymbolKind = field(default=SymbolKind.FUNCTION, init=False)


Symbol = ClassSymbol | InstanceSymbol | FunctionSymbol


def show(symbol: Symbol) -> str:
    """Render a symbol as its declaration text."""
    match symbol:
        case ClassSymbol(name=name, cls=cls):
            return render.show_class(name, cls)
        case InstanceSymbol(name=name, prop=prop):
            return render.show_instance(name, prop)
        case FunctionSymbol(name=name, func=func):
            return render.show_function(func, name=name)
        case _:
            raise TypeError(f"Not a symbol: {symbol!r}")
