"""Reflection data models — targets, filters, and identifier options.

These are the small value types shared by the reflection graph
(class/property/parameter reflects) and the decorator model
(identifiers, instances, aliases).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


class Target(Enum):
    """Structural site an annotation is attached to."""

    CLASS = "class"
    METHOD = "method"
    FIELD = "field"
    PARAMETER = "parameter"


class Keyword(Enum):
    """Static vs. instance membership of a property."""

    STATIC = "static"
    INSTANCE = "instance"


class Kind(Enum):
    """Field vs. method classification of a property."""

    FIELD = "field"
    METHOD = "method"


class Scope(Enum):
    """Owned-only or inherited-only properties of a class."""

    OWNED = "owned"
    INHERITED = "inherited"


class Belongs(Enum):
    """Self-only or parent-only decorator values."""

    SELF = "self"
    PARENT = "parent"


_FILTER_ENUMS: dict[str, type[Enum]] = {
    "belongs": Belongs,
    "scope": Scope,
    "keyword": Keyword,
    "kind": Kind,
}


def _coerce_enum(enum_cls: type[Enum], value: Any) -> Enum | None:
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        # Unknown filter values are ignored, not rejected
        return None


@dataclass(frozen=True)
class DecoFilter:
    """Decorator and reflection filter.

    Every dimension is optional; an unset dimension always passes.
    """

    belongs: Belongs | None = None
    scope: Scope | None = None
    keyword: Keyword | None = None
    kind: Kind | None = None

    @classmethod
    def coerce(cls, value: DecoFilter | Mapping[str, Any] | None) -> DecoFilter:
        """Build a filter from None, a DecoFilter or a plain mapping.

        String values are converted to their enum; unknown values are dropped.
        """
        if value is None:
            return cls()
        if isinstance(value, DecoFilter):
            return value
        if isinstance(value, Mapping):
            return cls(
                **{
                    name: _coerce_enum(enum_cls, value.get(name))
                    for name, enum_cls in _FILTER_ENUMS.items()
                }
            )
        raise TypeError(f"Unsupported filter type: {type(value).__name__}")

    def but(self, **changes: Any) -> DecoFilter:
        """Copy of this filter with some dimensions replaced."""
        return replace(self, **changes)

    @property
    def cache_key(self) -> tuple[str, str]:
        return (
            self.scope.value if self.scope else "",
            self.kind.value if self.kind else "",
        )


@dataclass(frozen=True)
class IdentifierOptions:
    """Rules an annotation identifier enforces on its attachments."""

    single: str | None = None  # Record key for scalar extraction
    clazz: bool = False
    method: bool = False
    field: bool = False
    parameter: bool = False
    not_instance: bool = False
    not_static: bool = False
    not_persistent: bool = False  # Advisory only
    not_multiple: bool = False
    not_inheritor: bool = False

    @classmethod
    def normalize(
        cls, options: IdentifierOptions | Mapping[str, Any] | None = None, **flags: Any
    ) -> IdentifierOptions:
        """Coerce booleans, blank ``single`` to None, and default the targets.

        When none of the four target flags is set, all of them are enabled.
        """
        raw: dict[str, Any] = {}
        if isinstance(options, IdentifierOptions):
            raw.update({f.name: getattr(options, f.name) for f in fields(options)})
        elif isinstance(options, Mapping):
            raw.update(options)
        elif options is not None:
            raise TypeError(f"Unsupported options type: {type(options).__name__}")
        raw.update(flags)

        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise TypeError(f"Unknown identifier option(s): {', '.join(sorted(unknown))}")

        values = {name: bool(raw.get(name)) for name in known if name != "single"}
        single = raw.get("single")
        values["single"] = str(single) if single not in (None, "") else None

        if not any(values[t] for t in ("clazz", "method", "field", "parameter")):
            for t in ("clazz", "method", "field", "parameter"):
                values[t] = True
        return cls(**values)

    def allows(self, target: Target) -> bool:
        return {
            Target.CLASS: self.clazz,
            Target.METHOD: self.method,
            Target.FIELD: self.field,
            Target.PARAMETER: self.parameter,
        }[target]

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
