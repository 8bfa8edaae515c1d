"""Stable fully-qualified names for functions, classes and values."""

from __future__ import annotations

import inspect
from typing import Any


def name_of(entity: Any) -> str:
    """Fully-qualified ``module.QualName`` of a function, class or value.

    Strings are returned unchanged so callers can pass either a name or the
    named thing. Other values are named by their class.
    """
    if entity is None:
        return "None"
    if isinstance(entity, str):
        return entity
    if isinstance(entity, (staticmethod, classmethod)):
        entity = entity.__func__
    qualname = getattr(entity, "__qualname__", None)
    if qualname is None or not (inspect.isclass(entity) or callable(entity)):
        return name_of(type(entity))
    module = getattr(entity, "__module__", None)
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def signed_name(entity: Any, with_signature: bool = False) -> str | None:
    """Name used in ``info()`` payloads, optionally with the call signature."""
    if entity is None:
        return None
    name = name_of(entity)
    if not with_signature:
        return name
    if isinstance(entity, (staticmethod, classmethod)):
        entity = entity.__func__
    if inspect.isclass(entity):
        return f"<class>{name}"
    if callable(entity):
        try:
            return f"{name}{inspect.signature(entity)}"
        except (TypeError, ValueError):
            return name
    return name
