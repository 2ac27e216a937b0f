"""Compiles REPL lines into snippets."""

from __future__ import annotations

import ast

from loguru import logger

from kishell.errors import CompilationError
from kishell.host.snapshot import CompiledSnippet, Declaration, DeclarationKind


def _annotation_text(annotation: ast.expr) -> str:
    # string annotations are forward references, shown without quotes
    match annotation:
        case ast.Constant(value=str() as text):
            return text
        case _:
            return ast.unparse(annotation)


def _final_annotation(annotation: ast.expr) -> tuple[bool, str | None]:
    """Split ``Final``/``Final[T]`` into (final, declared type text)."""
    match annotation:
        case ast.Name(id="Final") | ast.Attribute(attr="Final"):
            return True, None
        case ast.Subscript(value=ast.Name(id="Final") | ast.Attribute(attr="Final"), slice=inner):
            return True, _annotation_text(inner)
        case _:
            return False, _annotation_text(annotation)


def split_source(source: str) -> list[str]:
    """Split a script into REPL lines, one per top-level statement.

    Statements sharing a physical line stay together; decorators stay with
    the definition they decorate.
    """
    try:
        tree = ast.parse(source, filename="<script>", mode="exec")
    except SyntaxError as e:
        raise CompilationError(e.msg, lineno=e.lineno, offset=e.offset) from e

    lines = source.splitlines()
    spans: list[list[int]] = []
    for stmt in tree.body:
        decorators = getattr(stmt, "decorator_list", [])
        start = min([stmt.lineno, *(d.lineno for d in decorators)])
        end = stmt.end_lineno or stmt.lineno
        if spans and start <= spans[-1][1]:
            spans[-1][1] = max(spans[-1][1], end)
        else:
            spans.append([start, end])
    return ["\n".join(lines[start - 1 : end]) for start, end in spans]


class SnippetCompiler:
    """Turns one line of source into a CompiledSnippet.

    A trailing bare expression is rewritten into an assignment to the
    line's result field (``res<n>``) so the snapshot can expose its value.
    """

    def __init__(self, *, result_prefix: str = "res", class_prefix: str = "Line_") -> None:
        self.result_prefix = result_prefix
        self.class_prefix = class_prefix

    def class_name(self, no: int) -> str:
        return f"{self.class_prefix}{no}"

    def compile(self, source: str, no: int) -> CompiledSnippet:
        class_name = self.class_name(no)
        filename = f"<{class_name}>"
        try:
            tree = ast.parse(source, filename=filename, mode="exec")
        except SyntaxError as e:
            raise CompilationError(e.msg, lineno=e.lineno, offset=e.offset) from e

        declarations: dict[str, Declaration] = {}
        self._collect(tree.body, declarations)

        result_field = None
        if tree.body and isinstance(tree.body[-1], ast.Expr):
            result_field = f"{self.result_prefix}{no}"
            last = tree.body[-1]
            assign = ast.Assign(targets=[ast.Name(id=result_field, ctx=ast.Store())], value=last.value)
            tree.body[-1] = ast.copy_location(assign, last)
            ast.fix_missing_locations(tree)
            self._declare(declarations, Declaration(result_field, DeclarationKind.VALUE, final=True))

        try:
            code = compile(tree, filename, "exec")
        except SyntaxError as e:
            raise CompilationError(e.msg, lineno=e.lineno, offset=e.offset) from e

        logger.debug(
            "host.compile no={} declarations={} result_field={}",
            no,
            ",".join(declarations),
            result_field,
        )
        return CompiledSnippet(
            no=no,
            source=source,
            class_name=class_name,
            code=code,
            declarations=tuple(declarations.values()),
            result_field=result_field,
        )

    @staticmethod
    def _declare(out: dict[str, Declaration], declaration: Declaration) -> None:
        out.pop(declaration.name, None)
        out[declaration.name] = declaration

    def _targets(self, target: ast.expr, out: dict[str, Declaration]) -> None:
        match target:
            case ast.Name(id=name):
                self._declare(out, Declaration(name, DeclarationKind.VALUE))
            case ast.Tuple(elts=elts) | ast.List(elts=elts):
                for elt in elts:
                    self._targets(elt, out)
            case ast.Starred(value=value):
                self._targets(value, out)
            case _:
                # attribute and subscript targets bind no new name
                pass

    def _collect(self, body: list[ast.stmt], out: dict[str, Declaration]) -> None:
        for stmt in body:
            match stmt:
                case ast.ClassDef(name=name):
                    self._declare(out, Declaration(name, DeclarationKind.CLASS))
                case ast.FunctionDef(name=name) | ast.AsyncFunctionDef(name=name):
                    self._declare(out, Declaration(name, DeclarationKind.FUNCTION))
                case ast.Assign(targets=targets):
                    for target in targets:
                        self._targets(target, out)
                case ast.AugAssign(target=target):
                    self._targets(target, out)
                case ast.AnnAssign(target=ast.Name(id=name), annotation=annotation, value=value) if value is not None:
                    final, declared = _final_annotation(annotation)
                    self._declare(out, Declaration(name, DeclarationKind.VALUE, final=final, annotation=declared))
                case ast.Expr(value=ast.NamedExpr(target=target)):
                    self._targets(target, out)
                case ast.For(target=target) | ast.AsyncFor(target=target):
                    self._targets(target, out)
                    self._collect(stmt.body, out)
                    self._collect(stmt.orelse, out)
                case ast.While() | ast.If():
                    self._collect(stmt.body, out)
                    self._collect(stmt.orelse, out)
                case ast.With(items=items) | ast.AsyncWith(items=items):
                    for item in items:
                        if item.optional_vars is not None:
                            self._targets(item.optional_vars, out)
                    self._collect(stmt.body, out)
                case ast.Try() | ast.TryStar():
                    self._collect(stmt.body, out)
                    for handler in stmt.handlers:
                        self._collect(handler.body, out)
                    self._collect(stmt.orelse, out)
                    self._collect(stmt.finalbody, out)
                case ast.Match(cases=cases):
                    for case in cases:
                        self._collect(case.body, out)
                case _:
                    pass
