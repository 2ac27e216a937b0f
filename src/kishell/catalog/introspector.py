"""Turns evaluated snippets into catalog symbols."""

from __future__ import annotations

import re
import types
from typing import Protocol

from loguru import logger

from kishell.catalog.descriptor import Member, ReflectedType, TypeDescriptor, marked_by, owned_by
from kishell.catalog.symbols import ClassSymbol, FunctionSymbol, InstanceSymbol, Symbol
from kishell.catalog.table import SymbolsTable
from kishell.config import Ownership
from kishell.errors import MalformedMemberError

DEFAULT_LINE_MARKER = r"Line_\d+\b"


class EvaluationSnapshot(Protocol):
    """The parts of an evaluated snippet the introspector reads."""

    @property
    def instance(self) -> object | None: ...

    @property
    def result_field(self) -> str | None: ...


class SnippetIntrospector:
    """Absorbs the declarations of each evaluated snippet into a table."""

    def __init__(
        self,
        table: SymbolsTable,
        *,
        ownership: Ownership = Ownership.STRUCTURAL,
        marker: str | re.Pattern[str] = DEFAULT_LINE_MARKER,
        host_base: type = object,
    ) -> None:
        self.table = table
        self._ownership = ownership
        self._marker = re.compile(marker) if isinstance(marker, str) else marker
        self._host_base = host_base

    def absorb(self, snippet: EvaluationSnapshot) -> None:
        """Record every symbol declared by ``snippet``.

        Raises:
            MalformedMemberError: If a member is neither a binding nor a
                callable. Symbols added before the offending member stay.
        """
        if snippet.instance is None:
            raise ValueError("cannot absorb a snippet without a snapshot instance")

        descriptor = ReflectedType(type(snippet.instance), stop_at=self._host_base)
        namespace = descriptor.name
        classes = members = 0

        for name, cls in descriptor.nested_types():
            self.table.add(ClassSymbol(namespace, name, cls))
            classes += 1

        for member in descriptor.declared_members():
            if not self._declared_here(descriptor, member):
                continue
            try:
                symbol = self._to_symbol(namespace, member, snippet.result_field)
            except MalformedMemberError:
                logger.warning("catalog.absorb.malformed namespace={} member={}", namespace, member.name)
                raise
            if symbol is not None:
                self.table.add(symbol)
                members += 1

        logger.debug("catalog.absorb namespace={} classes={} members={}", namespace, classes, members)

    def _declared_here(self, descriptor: TypeDescriptor, member: Member) -> bool:
        if self._ownership == Ownership.MARKER:
            return marked_by(descriptor, member, self._marker)
        return owned_by(descriptor, member)

    @staticmethod
    def _to_symbol(namespace: str, member: Member, result_field: str | None) -> Symbol | None:
        match member.attr:
            case property() as prop:
                if member.name == result_field:
                    return None
                return InstanceSymbol(namespace, member.name, prop)
            case staticmethod() as method:
                return FunctionSymbol(namespace, member.name, method.__func__)
            case types.FunctionType() | types.BuiltinFunctionType() as func:
                return FunctionSymbol(namespace, member.name, func)
            case _:
                raise MalformedMemberError(namespace, member.name, member.attr)
