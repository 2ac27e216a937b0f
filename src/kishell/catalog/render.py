"""Declaration rendering for catalog symbols.

Every function here is pure: it reads reflection data off a live class,
property or function and returns the declaration text shown by ``:list``:

    class Point(x: int, y: int)
    data class Pair<A, B>(first: A, second: B)
    val limit: int
    fun <T: Number> first(items: list[T]): T
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import types
import typing
from collections.abc import Callable, Sequence
from typing import Any

ANY = "Any"


def show_type(tp: Any) -> str:
    """Render an annotation or runtime type as readable text."""
    if tp is inspect.Parameter.empty or tp is typing.Any:
        return ANY
    if tp is None or tp is type(None):
        return "None"
    if tp is Ellipsis:
        return "..."
    if isinstance(tp, str):
        return tp
    if isinstance(tp, typing.ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, (typing.TypeVar, typing.ParamSpec, typing.TypeVarTuple)):
        return tp.__name__
    if isinstance(tp, list):
        return "[" + ", ".join(show_type(arg) for arg in tp) + "]"

    origin = typing.get_origin(tp)
    if origin is not None:
        args = typing.get_args(tp)
        if origin is typing.Union or origin is types.UnionType:
            return " | ".join(show_type(arg) for arg in args)
        if origin is typing.Literal:
            return "Literal[" + ", ".join(repr(arg) for arg in args) + "]"
        if origin is typing.Annotated:
            return show_type(args[0])
        if origin is collections.abc.Callable and args:
            params, ret = args[0], args[-1]
            return f"Callable[{show_type(params)}, {show_type(ret)}]"
        if not args:
            return _type_name(origin)
        return f"{_type_name(origin)}[{', '.join(show_type(arg) for arg in args)}]"

    if isinstance(tp, type):
        return _type_name(tp)
    return repr(tp).replace("typing.", "")


def _type_name(tp: Any) -> str:
    qualname = getattr(tp, "__qualname__", None)
    if qualname and "<locals>" not in qualname:
        return qualname
    return getattr(tp, "__name__", repr(tp))


def _show_type_param(param: Any) -> str:
    if isinstance(param, typing.ParamSpec):
        return f"**{param.__name__}"
    if isinstance(param, typing.TypeVarTuple):
        return f"*{param.__name__}"

    name = param.__name__
    if getattr(param, "__covariant__", False):
        name = f"out {name}"
    elif getattr(param, "__contravariant__", False):
        name = f"in {name}"

    bound = getattr(param, "__bound__", None)
    bounds = [bound] if bound is not None else list(getattr(param, "__constraints__", ()))
    if bounds:
        name += ": " + ",".join(show_type(b) for b in bounds)
    return name


def show_type_params(params: Sequence[Any]) -> str:
    """Render generic parameters as ``<T, out U: Base> `` (empty when none)."""
    if not params:
        return ""
    return "<" + ", ".join(_show_type_param(p) for p in params) + "> "


def _show_parameter(param: inspect.Parameter) -> str:
    prefix = ""
    if param.kind is inspect.Parameter.VAR_POSITIONAL:
        prefix = "*"
    elif param.kind is inspect.Parameter.VAR_KEYWORD:
        prefix = "**"
    return f"{prefix}{param.name}: {show_type(param.annotation)}"


def _signature(func: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def show_function(
    func: Callable[..., Any],
    *,
    name: str | None = None,
    constructor: bool = False,
    type_params: Sequence[Any] | None = None,
) -> str:
    """Render a callable as ``fun <generics> name(params): Ret``.

    With ``constructor`` set only the generics and the parameter list are
    rendered, which is the shape used for a class's primary constructor.
    """
    if type_params is None:
        type_params = getattr(func, "__type_params__", ())
    tp = show_type_params(type_params)

    sig = _signature(func)
    params = sig.parameters.values() if sig is not None else ()
    vp = ", ".join(_show_parameter(p) for p in params)

    if constructor:
        return f"{tp.strip()}({vp})"

    ret = show_type(sig.return_annotation if sig is not None else inspect.Parameter.empty)
    fname = name or getattr(func, "__name__", "<anonymous>")
    return f"fun {tp}{fname}({vp}): {ret}"


def has_primary_constructor(cls: type) -> bool:
    return cls.__init__ is not object.__init__ or cls.__new__ is not object.__new__


def is_record(cls: type) -> bool:
    """Dataclasses and named tuples are the record-style ("data") classes."""
    if dataclasses.is_dataclass(cls):
        return True
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _class_type_params(cls: type) -> Sequence[Any]:
    params = getattr(cls, "__type_params__", ())
    if params:
        return params
    return getattr(cls, "__parameters__", ())


def show_class(name: str, cls: type) -> str:
    """Render a class as ``[data ]class Name<ctor>``."""
    constructor = ""
    if has_primary_constructor(cls):
        constructor = show_function(cls, constructor=True, type_params=_class_type_params(cls))
    data = "data " if is_record(cls) else ""
    return f"{data}class {name}{constructor}"


def is_reassignable(prop: property) -> bool:
    return prop.fset is not None


def binding_type(prop: property) -> Any:
    """Declared type of a binding: the getter's return annotation."""
    if prop.fget is None:
        return inspect.Parameter.empty
    return inspect.get_annotations(prop.fget).get("return", inspect.Parameter.empty)


def show_instance(name: str, prop: property) -> str:
    """Render a stored binding as ``val|var name: Type``."""
    keyword = "var" if is_reassignable(prop) else "val"
    return f"{keyword} {name}: {show_type(binding_type(prop))}"
