"""Reflection over snapshot classes."""

from __future__ import annotations

import re
import types
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class Member:
    """One attribute found on a snapshot class.

    ``attr`` is the raw class-dict entry, before descriptor binding.
    """

    name: str
    owner: type
    attr: Any

    def __str__(self) -> str:
        match self.attr:
            case property():
                prefix = "var" if self.attr.fset is not None else "val"
            case staticmethod() | types.FunctionType() | types.BuiltinFunctionType():
                prefix = "fun"
            case _:
                prefix = type(self.attr).__name__
        return f"{prefix} {self.owner.__qualname__}.{self.name}"


class TypeDescriptor(Protocol):
    """What the introspector needs to know about a snapshot's type."""

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> type: ...

    def nested_types(self) -> Iterator[tuple[str, type]]: ...

    def declared_members(self) -> Iterator[Member]: ...


def is_internal(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


class ReflectedType:
    """TypeDescriptor backed by Python class reflection.

    Members are gathered along the MRO, nearest owner first, and the walk
    stops before ``stop_at`` so the host's base machinery is never reported.
    """

    def __init__(self, cls: type, *, stop_at: type = object) -> None:
        self._cls = cls
        self._stop_at = stop_at

    @property
    def name(self) -> str:
        return self._cls.__name__

    @property
    def type(self) -> type:
        return self._cls

    def _owners(self) -> Iterator[type]:
        for klass in self._cls.__mro__:
            if klass is self._stop_at or klass is object:
                return
            yield klass

    def nested_types(self) -> Iterator[tuple[str, type]]:
        for name, attr in vars(self._cls).items():
            if isinstance(attr, type) and not is_internal(name):
                yield name, attr

    def declared_members(self) -> Iterator[Member]:
        seen: set[str] = set()
        for owner in self._owners():
            for name, attr in vars(owner).items():
                if name in seen or is_internal(name) or isinstance(attr, type):
                    continue
                seen.add(name)
                yield Member(name, owner, attr)


def owned_by(descriptor: TypeDescriptor, member: Member) -> bool:
    """Structural ownership: the member sits on the snapshot class itself."""
    return member.owner is descriptor.type


def marked_by(descriptor: TypeDescriptor, member: Member, marker: re.Pattern[str]) -> bool:
    """Textual ownership: the member's descriptor names this snapshot's line."""
    found = marker.search(str(member))
    return found is not None and found.group(0) == descriptor.name
