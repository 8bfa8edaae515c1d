"""Parameter reflect — one per formal parameter of a reflected method."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from reflectpool.introspect import type_handle
from reflectpool.models import Target
from reflectpool.naming import signed_name
from reflectpool.reflect.element import ReflectedElement

if TYPE_CHECKING:
    from reflectpool.reflect.property_reflect import PropertyReflect


class ParameterReflect(ReflectedElement):
    """Reflection of a method parameter, addressed by zero-based index.

    Parameters do not inherit decorator values from the overridden method.
    """

    target_type = Target.PARAMETER

    def __init__(self, prop: PropertyReflect, index: int, type_: Any = None, name: str | None = None):
        super().__init__(prop.pool, prop.current_instance)
        self._property = prop
        self._index = index
        self._type = type_handle(type_)
        self._name = name

    @property
    def index(self) -> int:
        return self._index

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def type(self) -> Any:
        return self._type

    @property
    def description(self) -> str:
        return f"<parameter>{self._property.qualified_name}#{self._index} [{self._property.keyword.value}]"

    # Keep last: shadows the builtin ``property`` for the rest of the class body
    @property
    def property(self) -> PropertyReflect:
        return self._property

    def info(self, detailed: bool = False) -> dict[str, Any]:
        rec: dict[str, Any] = {
            "index": self._index,
            "name": self._name,
            "type": signed_name(self._type, True),
        }
        if detailed:
            rec["description"] = self.description
            rec["property"] = {"$ref": self._property.description}
        rec.update(super().info(detailed))
        return rec
