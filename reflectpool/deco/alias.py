"""Annotation alias — a second declaring function bound to an identifier."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from reflectpool.naming import name_of

if TYPE_CHECKING:
    from reflectpool.deco.identifier import Identifier

AliasCondition = Callable[[Any], bool]


class Alias:
    """Forwards to an identifier; stores no values of its own.

    ``condition`` discriminates between aliases of the same identifier.
    Nothing in the registry evaluates it; consumers call ``matches``.
    """

    def __init__(self, fn: Callable, identifier: Identifier, condition: AliasCondition | None = None):
        self._fn = fn
        self._identifier = identifier
        self._condition = condition

    def __repr__(self) -> str:
        return self.description

    @property
    def fn(self) -> Callable:
        return self._fn

    @property
    def name(self) -> str:
        return name_of(self._fn)

    @property
    def description(self) -> str:
        return f"<alias>{self.name}"

    @property
    def identifier(self) -> Identifier:
        return self._identifier

    @property
    def condition(self) -> AliasCondition | None:
        return self._condition

    def matches(self, value: Any) -> bool:
        return self._condition is None or bool(self._condition(value))

    def info(self, detailed: bool = False) -> dict[str, Any]:
        return {
            "name": self.name,
            "identifier": {"$ref": self._identifier.description},
        }
