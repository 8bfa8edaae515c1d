"""Type introspection provider.

Reports declared field, parameter and return types of class members. It reads
annotations through ``typing.get_type_hints`` so string annotations (PEP 563)
resolve to real types; when resolution fails the raw annotations are used and
unresolvable strings are reported as unknown (None).
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass, field
from typing import Any, ClassVar

_RESOLUTION_ERRORS = (NameError, TypeError, AttributeError, SyntaxError)


@dataclass
class SignatureTypes:
    """Declared parameter and return types of a callable."""

    parameters: list[tuple[str, Any]] = field(default_factory=list)  # (name, type or None)
    returns: Any = None


def unwrap(member: Any) -> Any:
    """Underlying function of a staticmethod/classmethod, else the member."""
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    return member


def type_handle(hint: Any) -> Any:
    """Keep a hint only if it is usable as a type handle."""
    if hint is None or hint is inspect.Parameter.empty or isinstance(hint, str):
        return None
    if inspect.isclass(hint) or typing.get_origin(hint) is not None or callable(hint):
        return hint
    return None


def own_annotations(cls: type) -> dict[str, Any]:
    """Annotations declared on ``cls`` itself (not on its bases)."""
    try:
        return dict(inspect.get_annotations(cls))
    except _RESOLUTION_ERRORS:
        return {}


def class_hints(cls: type) -> dict[str, Any]:
    """Resolved annotations for ``cls``, falling back to the raw ones."""
    raw = own_annotations(cls)
    try:
        resolved = typing.get_type_hints(cls, include_extras=False)
    except _RESOLUTION_ERRORS:
        return raw
    return {name: resolved.get(name, hint) for name, hint in raw.items()}


def is_class_var(hint: Any) -> bool:
    if isinstance(hint, str):
        return hint.startswith(("ClassVar", "typing.ClassVar"))
    return hint is ClassVar or typing.get_origin(hint) is ClassVar


def _function_hints(func: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except _RESOLUTION_ERRORS:
        return dict(getattr(func, "__annotations__", {}) or {})


def signature_types(func: Any, skip_first: bool = False) -> SignatureTypes | None:
    """Parameter and return types of ``func``, or None without a signature.

    ``skip_first`` drops the bound ``self``/``cls`` parameter.
    """
    func = unwrap(func)
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    hints = _function_hints(func)
    params = list(signature.parameters.values())
    if skip_first and params:
        params = params[1:]
    return SignatureTypes(
        parameters=[(p.name, type_handle(hints.get(p.name))) for p in params],
        returns=type_handle(hints.get("return")),
    )


def arity(func: Any, skip_first: bool = False) -> int:
    """Declared positional arity from the code object."""
    code = getattr(unwrap(func), "__code__", None)
    if code is None:
        return 0
    count = code.co_argcount + code.co_kwonlyargcount
    if skip_first and count:
        count -= 1
    return count


def type_of(owner: Any, member: str) -> Any:
    """Declared type of ``member`` on ``owner`` (a class or an instance of one).

    Fields report their annotation (or a property getter's return type);
    methods report their return type. Unknown members yield None.
    """
    cls = owner if inspect.isclass(owner) else type(owner)
    for klass in cls.__mro__:
        if member in klass.__dict__:
            value = klass.__dict__[member]
            if isinstance(value, property):
                return signature_types(value.fget).returns if value.fget else None
            if callable(unwrap(value)) and not inspect.isclass(value):
                types = signature_types(value)
                return types.returns if types else None
        hint = class_hints(klass).get(member)
        if hint is not None:
            if is_class_var(hint):
                args = typing.get_args(hint) if not isinstance(hint, str) else ()
                return type_handle(args[0]) if args else None
            return type_handle(hint)
    return None
