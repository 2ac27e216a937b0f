"""Error types for the kishell host and symbol catalog."""

from __future__ import annotations

from typing import Any


class KishellError(Exception):
    """Base class for kishell errors."""


class CompilationError(KishellError):
    """A line could not be compiled into a snippet."""

    def __init__(self, message: str, *, lineno: int | None = None, offset: int | None = None):
        self.lineno = lineno
        self.offset = offset
        location = f" (line {lineno}, column {offset})" if lineno is not None else ""
        super().__init__(f"{message}{location}")


class IntrospectionError(KishellError):
    """Base class for failures while reading a snapshot."""


class MalformedMemberError(IntrospectionError):
    """A snapshot member is neither a binding nor a callable."""

    def __init__(self, namespace: str, name: str, member: Any):
        self.namespace = namespace
        self.name = name
        self.member = member
        super().__init__(f"Unknown symbol: {namespace}.{name} of {type(member).__name__}")


class AnalysisError(KishellError):
    """The static analyzer could not type an expression."""

    def __init__(self, diagnostic: str, expr: str = ""):
        self.diagnostic = diagnostic
        self.expr = expr
        super().__init__(diagnostic)


class UnknownCommandError(KishellError):
    """No registered command matches the given word."""

    def __init__(self, word: str):
        self.word = word
        super().__init__(f"Unknown command: {word}")
