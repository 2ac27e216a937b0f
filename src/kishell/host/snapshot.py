"""Snapshot and evaluation result types produced by the evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import CodeType
from typing import Any


class DeclarationKind(Enum):
    CLASS = "class"
    FUNCTION = "function"
    VALUE = "value"


@dataclass(frozen=True)
class Declaration:
    """A module-scope name bound by one line.

    ``annotation`` is the declared type as source text, ``None`` when the
    runtime type of the value should be used instead.
    """

    name: str
    kind: DeclarationKind
    final: bool = False
    annotation: str | None = None


@dataclass(frozen=True)
class CompiledSnippet:
    """One line, compiled and ready to execute."""

    no: int
    source: str
    class_name: str
    code: CodeType
    declarations: tuple[Declaration, ...] = ()
    result_field: str | None = None


@dataclass(frozen=True)
class ResultValue:
    """The line ended in an expression with a value."""

    name: str
    value: Any

    def render(self) -> str:
        return f"{self.name}: {type(self.value).__name__} = {self.value!r}"


@dataclass(frozen=True)
class ResultUnit:
    """The line completed without producing a value."""


@dataclass(frozen=True)
class ResultError:
    """The line raised while executing."""

    error: BaseException
    traceback: str = ""

    def render(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


EvalResult = ResultValue | ResultUnit | ResultError


class Snapshot:
    """Base machinery shared by every ``Line_<n>`` snapshot class.

    Each line's snapshot class subclasses the previous one, so an instance
    exposes every binding declared so far in the session.
    """

    __result_field__: str | None = None

    def __repr__(self) -> str:
        return f"<snapshot {type(self).__qualname__}>"


@dataclass(frozen=True)
class EvaluatedSnippet:
    """A compiled snippet with its result and, on success, its snapshot."""

    compiled: CompiledSnippet
    result: EvalResult
    instance: Snapshot | None = field(default=None)

    @property
    def result_field(self) -> str | None:
        return self.compiled.result_field

    @property
    def succeeded(self) -> bool:
        return isinstance(self.result, (ResultValue, ResultUnit))
