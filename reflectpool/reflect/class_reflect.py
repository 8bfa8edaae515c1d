"""Class reflect — one per class, memoized by the registry.

Discovers the members a class declares itself, links to the reflect of its
first base class, and answers property listings with owned/inherited
resolution. Listings are cached per (keyword, scope, kind).
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from reflectpool.errors import InvalidKeyword
from reflectpool.introspect import class_hints, is_class_var
from reflectpool.models import Belongs, DecoFilter, Keyword, Kind, Scope, Target
from reflectpool.naming import name_of, signed_name
from reflectpool.reflect.element import DecoratorMap, ReflectedElement
from reflectpool.reflect.property_reflect import PropertyReflect

if TYPE_CHECKING:
    from reflectpool.deco.instance import Instance
    from reflectpool.registry.pool import Registry


def classify_member(name: str, value: Any, hints: Mapping[str, Any]) -> tuple[Keyword, Kind]:
    """Keyword and kind of a class ``__dict__`` entry."""
    if isinstance(value, (staticmethod, classmethod)):
        return Keyword.STATIC, Kind.METHOD
    if isinstance(value, property) or inspect.ismemberdescriptor(value):
        return Keyword.INSTANCE, Kind.FIELD
    if inspect.isfunction(value):
        return Keyword.INSTANCE, Kind.METHOD
    if name in hints:
        return (Keyword.STATIC if is_class_var(hints[name]) else Keyword.INSTANCE), Kind.FIELD
    if inspect.isclass(value) or not callable(value):
        return Keyword.STATIC, Kind.FIELD
    return Keyword.STATIC, Kind.METHOD


class ClassReflect(ReflectedElement):
    """Reflection of a single class."""

    target_type = Target.CLASS

    def __init__(
        self,
        pool: Registry,
        creator: type,
        body: Any = None,
        current_instance: Instance | None = None,
    ):
        super().__init__(pool, current_instance)
        self._creator = creator
        self._body = body
        self._instance_map: dict[str, PropertyReflect] = {}
        self._static_map: dict[str, PropertyReflect] = {}
        self._prop_cache: dict[tuple[str, str, str], list[PropertyReflect]] = {}
        self._cache_revision = -1

        # Parent is held as a class key and resolved through the registry
        self._parent_key: type | None = None
        bases = creator.__bases__
        if bases and bases[0].__module__ not in pool.config.root_modules:
            self._parent_key = bases[0]
            pool.reflect_class(bases[0])

        self._discover_members()

    def _discover_members(self):
        cls = self._creator
        hints = class_hints(cls)
        members = vars(cls)
        for name, value in members.items():
            if not self._reflectable(name):
                continue
            keyword, kind = classify_member(name, value, hints)
            self.register_property(name, keyword, kind, value if kind == Kind.METHOD else None)
        for name, hint in hints.items():
            if name in members or not self._reflectable(name):
                continue
            keyword = Keyword.STATIC if is_class_var(hint) else Keyword.INSTANCE
            self.register_property(name, keyword, Kind.FIELD)

    def _reflectable(self, name: str) -> bool:
        if name.startswith("__") and name.endswith("__"):
            return self._pool.config.include_dunder
        return True

    def create(self, *args: Any, **kwargs: Any) -> Any:
        return self._creator(*args, **kwargs)

    # --- Identity ---

    @property
    def name(self) -> str:
        return name_of(self._creator)

    @property
    def description(self) -> str:
        return f"<class>{self.name}"

    @property
    def creator(self) -> type:
        return self._creator

    @property
    def body(self) -> Any:
        return self._body

    @property
    def parent(self) -> ClassReflect | None:
        if self._parent_key is None:
            return None
        return self._pool.get_class(self._parent_key)

    def own_members(self, keyword: Keyword) -> dict[str, PropertyReflect]:
        return self._instance_map if keyword == Keyword.INSTANCE else self._static_map

    # --- Property listings ---

    def _list_properties(
        self, keyword: Keyword, criteria: DecoFilter | Mapping | None = None
    ) -> list[PropertyReflect]:
        criteria = DecoFilter.coerce(criteria)
        if self._cache_revision != self._pool.revision:
            self._prop_cache.clear()
            self._cache_revision = self._pool.revision
        key = (keyword.value, *criteria.cache_key)
        if key in self._prop_cache:
            return list(self._prop_cache[key])

        own_map = self.own_members(keyword)
        props = [p for p in own_map.values() if p.filter_by_kind(criteria)]
        parent = self.parent
        if criteria.scope == Scope.INHERITED:
            props = parent._list_properties(keyword, criteria.but(scope=None)) if parent else []
        elif criteria.scope is None and parent is not None:
            # Own members shadow same-named inherited ones
            props += [
                p for p in parent._list_properties(keyword, criteria) if p.name not in own_map
            ]

        self._prop_cache[key] = props
        return list(props)

    def list_instance_properties(self, criteria: DecoFilter | Mapping | None = None) -> list[PropertyReflect]:
        return self._list_properties(Keyword.INSTANCE, criteria)

    def list_instance_property_names(self, criteria: DecoFilter | Mapping | None = None) -> list[str]:
        return [p.name for p in self.list_instance_properties(criteria)]

    def get_instance_property(
        self, name: str, criteria: DecoFilter | Mapping | None = None
    ) -> PropertyReflect | None:
        return next((p for p in self.list_instance_properties(criteria) if p.name == name), None)

    def has_instance_property(self, name: str, criteria: DecoFilter | Mapping | None = None) -> bool:
        return self.get_instance_property(name, criteria) is not None

    def list_static_properties(self, criteria: DecoFilter | Mapping | None = None) -> list[PropertyReflect]:
        return self._list_properties(Keyword.STATIC, criteria)

    def list_static_property_names(self, criteria: DecoFilter | Mapping | None = None) -> list[str]:
        return [p.name for p in self.list_static_properties(criteria)]

    def get_static_property(
        self, name: str, criteria: DecoFilter | Mapping | None = None
    ) -> PropertyReflect | None:
        return next((p for p in self.list_static_properties(criteria) if p.name == name), None)

    def has_static_property(self, name: str, criteria: DecoFilter | Mapping | None = None) -> bool:
        return self.get_static_property(name, criteria) is not None

    def list_any_properties(
        self, criteria: DecoFilter | Mapping | None = None, identifier=None
    ) -> list[PropertyReflect]:
        """Instance and static properties, optionally only those carrying ``identifier``."""
        criteria = DecoFilter.coerce(criteria)
        if criteria.keyword == Keyword.INSTANCE:
            props = self.list_instance_properties(criteria)
        elif criteria.keyword == Keyword.STATIC:
            props = self.list_static_properties(criteria)
        else:
            props = self.list_instance_properties(criteria) + self.list_static_properties(criteria)
        if identifier is None:
            return props
        ident = self._pool.resolve_identifier(identifier, throwable=False)
        if ident is None:
            return []
        return [p for p in props if p.filter_by_belongs(ident, criteria)]

    def get_any_property(
        self, name: str, criteria: DecoFilter | Mapping | None = None
    ) -> PropertyReflect | None:
        criteria = DecoFilter.coerce(criteria)
        if criteria.keyword == Keyword.INSTANCE:
            return self.get_instance_property(name, criteria)
        if criteria.keyword == Keyword.STATIC:
            return self.get_static_property(name, criteria)
        prop = self.get_instance_property(name, criteria)
        return prop if prop is not None else self.get_static_property(name, criteria)

    def has_any_property(self, name: str, criteria: DecoFilter | Mapping | None = None) -> bool:
        return self.get_any_property(name, criteria) is not None

    # --- Build phase ---

    def register_property(
        self,
        name: str,
        keyword: Keyword | str,
        kind: Kind | str,
        callable_: Any = None,
    ) -> PropertyReflect:
        """Create-or-fetch the property reflect for ``(name, keyword)``."""
        try:
            keyword = Keyword(keyword)
            kind = Kind(kind)
        except ValueError:
            raise InvalidKeyword(clazz=self.name, property=name, keyword=keyword) from None
        members = self.own_members(keyword)
        if name not in members:
            members[name] = PropertyReflect(self, name, keyword, kind, callable_)
            self._pool.structure_changed()
        return members[name]

    # --- Decorators ---

    def resolve_decorators(self, criteria: DecoFilter | Mapping | None = None) -> DecoratorMap:
        criteria = DecoFilter.coerce(criteria)
        if criteria.belongs == Belongs.SELF:
            return self._decorators
        parent = self.parent
        if criteria.belongs == Belongs.PARENT:
            return parent.resolve_decorators(criteria.but(belongs=None)) if parent else {}
        if parent is None:
            return self._decorators
        return self._merge_inherited(parent.resolve_decorators(criteria))

    def info(self, detailed: bool = False) -> dict[str, Any]:
        rec: dict[str, Any] = {
            "name": self.name,
            "creator": signed_name(self._creator, True),
        }
        if detailed and self._body is not None:
            rec["body"] = signed_name(self._body, True)
        rec["instances"] = [p.info(detailed) for p in self._instance_map.values()]
        rec["statics"] = [p.info(detailed) for p in self._static_map.values()]
        rec.update(super().info(detailed))
        if self._parent_key is not None:
            rec["parent"] = {"$ref": self.parent.description}
        return rec
