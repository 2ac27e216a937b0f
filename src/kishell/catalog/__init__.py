"""Live symbol catalog for REPL sessions."""

from kishell.catalog.descriptor import Member, ReflectedType, TypeDescriptor
from kishell.catalog.introspector import DEFAULT_LINE_MARKER, EvaluationSnapshot, SnippetIntrospector
from kishell.catalog.symbols import (
    ALL_KINDS,
    ClassSymbol,
    FunctionSymbol,
    InstanceSymbol,
    Symbol,
    SymbolKind,
    show,
)
from kishell.catalog.table import SymbolsTable

__all__ = [
    "ALL_KINDS",
    "DEFAULT_LINE_MARKER",
    "ClassSymbol",
    "EvaluationSnapshot",
    "FunctionSymbol",
    "InstanceSymbol",
    "Member",
    "ReflectedType",
    "SnippetIntrospector",
    "Symbol",
    "SymbolKind",
    "SymbolsTable",
    "TypeDescriptor",
    "show",
]
