"""Static type inference for the ``:type`` command.

Types are inferred from the expression's syntax and the session's recorded
declarations. Nothing is evaluated: names are resolved by reading the session
namespace, calls by reading signatures.
"""

from __future__ import annotations

import ast
import builtins
import inspect
from dataclasses import dataclass
from typing import Any

from loguru import logger

from kishell.catalog.render import show_type
from kishell.errors import AnalysisError
from kishell.host.evaluator import Evaluator

_NUMERIC_RANK = {"bool": 0, "int": 1, "float": 2, "complex": 3}

_BUILTIN_RESULTS = {
    "len": "int",
    "hash": "int",
    "id": "int",
    "ord": "int",
    "chr": "str",
    "repr": "str",
    "ascii": "str",
    "format": "str",
    "input": "str",
    "print": "None",
    "callable": "bool",
    "isinstance": "bool",
    "issubclass": "bool",
    "hasattr": "bool",
    "all": "bool",
    "any": "bool",
    "sorted": "list[Any]",
    "dir": "list[str]",
}

_OPERATORS = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
    ast.FloorDiv: "//",
    ast.Mod: "%",
    ast.Pow: "**",
    ast.BitOr: "|",
    ast.BitAnd: "&",
    ast.BitXor: "^",
    ast.LShift: "<<",
    ast.RShift: ">>",
    ast.MatMult: "@",
}

_MISSING = object()


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one expression."""

    expr: str
    rendered_type: str


def _union(types: list[str]) -> str:
    unique = list(dict.fromkeys(types))
    if not unique:
        return "Any"
    return " | ".join(unique)


class Analyzer:
    """Infers expression types against a live session without evaluating."""

    def __init__(self, evaluator: Evaluator) -> None:
        self._evaluator = evaluator

    def analyze(self, expr: str) -> AnalysisResult:
        """Infer the type of ``expr``.

        Raises:
            AnalysisError: If the expression does not parse or cannot be typed.
        """
        source = expr.strip()
        if not source:
            raise AnalysisError("expected an expression", expr)
        try:
            tree = ast.parse(source, filename="<type>", mode="eval")
        except SyntaxError as e:
            raise AnalysisError(f"syntax error: {e.msg}", expr) from e

        rendered = self.infer(tree.body)
        logger.debug("host.analyze expr={} type={}", source, rendered)
        return AnalysisResult(source, rendered)

    def infer(self, node: ast.expr) -> str:
        match node:
            case ast.Constant(value=value):
                return show_type(type(value))
            case ast.JoinedStr():
                return "str"
            case ast.Name(id=name):
                return self._name_type(name)
            case ast.List(elts=elts):
                return f"list[{self._elements(elts)}]"
            case ast.Set(elts=elts):
                return f"set[{self._elements(elts)}]"
            case ast.Tuple(elts=elts):
                if not elts:
                    return "tuple[()]"
                return "tuple[" + ", ".join(self.infer(elt) for elt in elts) + "]"
            case ast.Dict(keys=keys, values=values):
                if any(key is None for key in keys):
                    raise AnalysisError("cannot infer the type of a dict display with ** unpacking")
                return f"dict[{self._elements(keys)}, {self._elements(values)}]"
            case ast.ListComp():
                return "list[Any]"
            case ast.SetComp():
                return "set[Any]"
            case ast.DictComp():
                return "dict[Any, Any]"
            case ast.GeneratorExp():
                return "Generator[Any, None, None]"
            case ast.Compare():
                return "bool"
            case ast.UnaryOp(op=ast.Not()):
                return "bool"
            case ast.UnaryOp(operand=operand):
                operand_type = self.infer(operand)
                return "int" if operand_type == "bool" else operand_type
            case ast.BoolOp(values=values):
                return _union([self.infer(value) for value in values])
            case ast.IfExp(body=body, orelse=orelse):
                return _union([self.infer(body), self.infer(orelse)])
            case ast.BinOp(left=left, op=op, right=right):
                return self._binop(self.infer(left), op, self.infer(right))
            case ast.Lambda(args=args):
                params = ", ".join("Any" for _ in args.posonlyargs + args.args)
                return f"Callable[[{params}], Any]"
            case ast.Call(func=ast.Name(id=name)):
                return self._call(name)
            case _:
                raise AnalysisError(f"cannot infer the type of {type(node).__name__} expression")

    def _elements(self, elts: list[Any]) -> str:
        if not elts:
            return "Any"
        return _union([self.infer(elt) for elt in elts])

    def _resolve(self, name: str) -> Any:
        if name in self._evaluator.namespace:
            return self._evaluator.lookup(name)
        return getattr(builtins, name, _MISSING)

    def _name_type(self, name: str) -> str:
        declared = self._evaluator.declared_type(name)
        if declared is not None:
            return show_type(declared)
        target = self._resolve(name)
        if target is _MISSING:
            raise AnalysisError(f"unresolved reference: {name}")
        if isinstance(target, type):
            return f"type[{show_type(target)}]"
        if callable(target):
            return self._callable_type(target)
        return show_type(type(target))

    @staticmethod
    def _callable_type(target: Any) -> str:
        try:
            sig = inspect.signature(target)
        except (TypeError, ValueError):
            return "Callable[..., Any]"
        params = ", ".join(show_type(p.annotation) for p in sig.parameters.values())
        return f"Callable[[{params}], {show_type(sig.return_annotation)}]"

    def _call(self, name: str) -> str:
        target = self._resolve(name)
        if target is _MISSING:
            raise AnalysisError(f"unresolved reference: {name}")
        if isinstance(target, type):
            return show_type(target)
        if target is getattr(builtins, name, None) and name in _BUILTIN_RESULTS:
            return _BUILTIN_RESULTS[name]
        if not callable(target):
            raise AnalysisError(f"'{name}' of type {show_type(type(target))} is not callable")
        try:
            sig = inspect.signature(target)
        except (TypeError, ValueError):
            return "Any"
        return show_type(sig.return_annotation)

    @staticmethod
    def _binop(left: str, op: ast.operator, right: str) -> str:
        symbol = _OPERATORS.get(type(op), "?")
        if left in _NUMERIC_RANK and right in _NUMERIC_RANK:
            if isinstance(op, ast.Div):
                return "complex" if "complex" in (left, right) else "float"
            if left == right == "bool" and isinstance(op, (ast.BitOr, ast.BitAnd, ast.BitXor)):
                return "bool"
            widest = max(left, right, key=_NUMERIC_RANK.__getitem__)
            return "int" if widest == "bool" else widest

        match op:
            case ast.Add() if left == right and (left in ("str", "bytes") or left.startswith(("list[", "tuple["))):
                return left
            case ast.Mult() if {left, right} in ({"str", "int"}, {"bytes", "int"}):
                return left if left != "int" else right
            case ast.Mult() if right == "int" and left.startswith("list["):
                return left
            case ast.Mod() if left in ("str", "bytes"):
                return left
            case ast.BitOr() if left == right and left.startswith(("set[", "dict[")):
                return left
            case ast.BitAnd() | ast.BitXor() | ast.Sub() if left == right and left.startswith("set["):
                return left
            case _:
                raise AnalysisError(f"unsupported operand types for {symbol}: '{left}' and '{right}'")
