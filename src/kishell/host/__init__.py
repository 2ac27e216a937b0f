"""Evaluation host: compiles lines, runs them and publishes snapshots."""

from kishell.host.analyzer import AnalysisResult, Analyzer
from kishell.host.compiler import SnippetCompiler
from kishell.host.evaluator import Evaluator
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

__all__ = [
    "AnalysisResult",
    "Analyzer",
    "CompiledSnippet",
    "Declaration",
    "DeclarationKind",
    "EvalResult",
    "EvaluatedSnippet",
    "EventManager",
    "Evaluator",
    "OnEval",
    "ResultError",
    "ResultUnit",
    "ResultValue",
    "SnippetCompiler",
    "Snapshot",
]
