"""Executes snippets and builds the per-line snapshot classes."""

from __future__ import annotations

import traceback
import types
from typing import Any

from loguru import logger

from kishell.catalog.descriptor import is_internal
from kishell.host.compiler import SnippetCompiler
from kishell.host.events import EventManager, OnEval
from kishell.host.snapshot import (
    CompiledSnippet,
    Declaration,
    DeclarationKind,
    EvalResult,
    EvaluatedSnippet,
    ResultError,
    ResultUnit,
    ResultValue,
    Snapshot,
)


class Evaluator:
    """Evaluates lines in one persistent session namespace.

    After each successful line a ``Line_<n>`` class is created on top of the
    previous line's class. Classes declared by the line become nested types,
    functions become static methods and values become properties reading the
    live namespace; a property has a setter only when the value is
    reassignable.
    """

    def __init__(
        self,
        *,
        compiler: SnippetCompiler | None = None,
        events: EventManager | None = None,
        module_name: str = "__session__",
    ) -> None:
        self.compiler = compiler or SnippetCompiler()
        self.events = events or EventManager()
        self.module_name = module_name
        self.module = types.ModuleType(module_name)
        self.namespace: dict[str, Any] = self.module.__dict__
        self.history: list[EvaluatedSnippet] = []
        self._line_no = 0
        self._snapshot_class: type[Snapshot] = Snapshot
        self._declared_types: dict[str, Any] = {}

    @property
    def snapshot_class(self) -> type[Snapshot]:
        return self._snapshot_class

    def eval(self, source: str) -> EvaluatedSnippet:
        """Compile and execute one line.

        Raises:
            CompilationError: If the line does not parse. No line number is used up.
        """
        compiled = self.compiler.compile(source, self._line_no)
        self._line_no += 1

        try:
            exec(compiled.code, self.namespace)
        except Exception as e:
            tb = "".join(traceback.format_exception(type(e), e, e.__traceback__.tb_next if e.__traceback__ else None))
            result: EvalResult = ResultError(e, tb)
            snippet = EvaluatedSnippet(compiled, result)
            logger.debug("host.eval.error no={} error={}", compiled.no, type(e).__name__)
        else:
            snapshot_class = self._build_snapshot(compiled)
            instance = snapshot_class()
            self._snapshot_class = snapshot_class
            snippet = EvaluatedSnippet(compiled, self._result(compiled), instance)
            logger.debug("host.eval no={} class={} result={}", compiled.no, compiled.class_name, type(snippet.result).__name__)

        self.history.append(snippet)
        self.events.emit(OnEval(snippet))
        return snippet

    def lookup(self, name: str) -> Any:
        """Current value bound to ``name`` in the session."""
        return self.namespace[name]

    def declared_type(self, name: str) -> Any | None:
        """Type recorded for a value binding when its line was evaluated.

        Names deleted from the session since then have no declared type.
        """
        if name not in self.namespace:
            return None
        return self._declared_types.get(name)

    def _result(self, compiled: CompiledSnippet) -> EvalResult:
        if compiled.result_field is None:
            return ResultUnit()
        value = self.namespace.get(compiled.result_field)
        if value is None:
            return ResultUnit()
        return ResultValue(compiled.result_field, value)

    def _build_snapshot(self, compiled: CompiledSnippet) -> type[Snapshot]:
        attrs: dict[str, Any] = {
            "__module__": self.module_name,
            "__qualname__": compiled.class_name,
            "__result_field__": compiled.result_field,
        }
        for declaration in compiled.declarations:
            # dunder names would reconfigure the snapshot class itself
            if is_internal(declaration.name) or declaration.name not in self.namespace:
                continue
            value = self.namespace[declaration.name]
            match declaration.kind:
                case DeclarationKind.CLASS if isinstance(value, type):
                    attrs[declaration.name] = value
                    self._declared_types.pop(declaration.name, None)
                case DeclarationKind.FUNCTION if callable(value):
                    attrs[declaration.name] = staticmethod(value)
                    self._declared_types.pop(declaration.name, None)
                case _:
                    attrs[declaration.name] = self._binding(compiled.class_name, declaration, value)
        return type(compiled.class_name, (self._snapshot_class,), attrs)

    def _binding(self, owner: str, declaration: Declaration, value: Any) -> property:
        namespace = self.namespace
        name = declaration.name
        declared: Any = declaration.annotation if declaration.annotation is not None else type(value)
        self._declared_types[name] = declared

        def fget(_self: Any) -> Any:
            return namespace[name]

        fget.__name__ = name
        fget.__qualname__ = f"{owner}.{name}"
        fget.__annotations__ = {"return": declared}

        if declaration.final:
            return property(fget)

        def fset(_self: Any, new_value: Any) -> None:
            namespace[name] = new_value

        fset.__name__ = name
        fset.__qualname__ = f"{owner}.{name}"
        return property(fget, fset)
