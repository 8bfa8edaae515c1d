"""Declaration helpers — Python decorators over identify / attach / set.

Usage::

    @annotation(clazz=True, single="name")
    def table(): ...

    @annotation(method=True, field=True, parameter=True)
    def column(): ...

    @table({"name": "users"})
    @column.field("email", {"length": 120})
    class User:
        email: str

        @column({"computed": True})
        def display(self, fmt: str) -> str: ...

        @column.param(0, {"required": True})
        def rename(self, name: str): ...

Method, property and parameter marks are kept on the function until the class
exists. Any annotation applied to the class flushes them; classes that carry
only member annotations call ``apply_marks`` themselves.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from reflectpool.deco.identifier import Identifier
from reflectpool.introspect import unwrap
from reflectpool.models import Kind
from reflectpool.registry import reflect_pool
from reflectpool.registry.pool import Registry

logger = logging.getLogger(__name__)

MARKS_ATTR = "__reflect_marks__"


@dataclass
class PendingMark:
    """An attachment waiting for its owning class."""

    identifier: Identifier
    value: Any = None
    index: int | None = None  # Parameter index; None for the member itself


def _mark_holder(member: Any) -> Any:
    if isinstance(member, property):
        return member.fget
    return unwrap(member)


def _stash(member: Any, mark: PendingMark) -> Any:
    holder = _mark_holder(member)
    if not inspect.isfunction(holder):
        raise TypeError(f"Cannot annotate {type(member).__name__} outside a class decorator")
    marks = holder.__dict__.setdefault(MARKS_ATTR, [])
    marks.append(mark)
    return member


def apply_marks(cls: type) -> type:
    """Attach every pending member and parameter mark declared on ``cls``."""
    for name, member in list(vars(cls).items()):
        holder = _mark_holder(member)
        if not inspect.isfunction(holder):
            continue
        marks = holder.__dict__.pop(MARKS_ATTR, None)
        if not marks:
            continue
        kind = Kind.FIELD if isinstance(member, property) else Kind.METHOD
        for mark in marks:
            if mark.index is not None:
                instance = mark.identifier.attach_to_parameter(cls, name, mark.index)
            else:
                instance = mark.identifier.attach_to_member(cls, name, kind, callable_=member)
            instance.set(mark.value)
        logger.debug(f"applied {len(marks)} mark(s) on {cls.__qualname__}.{name}")
    return cls


class Annotation:
    """Call-site handle for an identifier.

    ``annotation(value)`` decorates a class or a method/property;
    ``.field(name, value)`` decorates a class to annotate one of its fields;
    ``.param(index, value)`` decorates a method to annotate a parameter.
    """

    def __init__(self, identifier: Identifier):
        self._identifier = identifier

    def __repr__(self) -> str:
        return f"Annotation({self._identifier.name})"

    @property
    def identifier(self) -> Identifier:
        return self._identifier

    @property
    def name(self) -> str:
        return self._identifier.name

    def __call__(self, value: Any = None) -> Callable[[Any], Any]:
        def decorate(target: Any) -> Any:
            if inspect.isclass(target):
                apply_marks(target)
                self._identifier.attach_to_class(target).set(value)
                return target
            return _stash(target, PendingMark(self._identifier, value))

        return decorate

    def field(self, name: str, value: Any = None) -> Callable[[type], type]:
        def decorate(cls: type) -> type:
            apply_marks(cls)
            self._identifier.attach_to_member(cls, name, Kind.FIELD).set(value)
            return cls

        return decorate

    def param(self, index: int, value: Any = None) -> Callable[[Any], Any]:
        def decorate(method: Any) -> Any:
            return _stash(method, PendingMark(self._identifier, value, index))

        return decorate


def annotation(
    fn: Callable | None = None,
    *,
    registry: Registry | None = None,
    **options: Any,
) -> Any:
    """Declare the decorated function as an annotation identifier.

    Works bare (``@annotation``) or with identifier options
    (``@annotation(single="name", not_multiple=True)``).
    """
    pool = registry or reflect_pool

    def declare(func: Callable) -> Annotation:
        return Annotation(pool.identify(func, **options))

    if fn is not None:
        return declare(fn)
    return declare


def alias_of(
    target: Annotation | Callable,
    *,
    condition: Callable[[Any], bool] | None = None,
    registry: Registry | None = None,
) -> Callable[[Callable], Annotation]:
    """Declare the decorated function as an alias of ``target``."""
    pool = registry or reflect_pool
    identifier_fn = target.identifier.fn if isinstance(target, Annotation) else target

    def declare(func: Callable) -> Annotation:
        return Annotation(pool.alias(func, identifier_fn, condition))

    return declare
