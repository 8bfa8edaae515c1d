"""Property reflect — one per (class, member name, keyword).

A property is either a field or a method. Methods own one parameter reflect
per declared parameter. ``proto`` points at the same-named property visible on
the parent class, which is what the property overrides and inherits
decorator values from.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from reflectpool.introspect import arity, signature_types, type_of, unwrap
from reflectpool.models import Belongs, DecoFilter, Keyword, Kind, Scope, Target
from reflectpool.naming import signed_name
from reflectpool.reflect.element import DecoratorMap, ReflectedElement
from reflectpool.reflect.parameter_reflect import ParameterReflect

if TYPE_CHECKING:
    from reflectpool.reflect.class_reflect import ClassReflect


class PropertyReflect(ReflectedElement):
    """Reflection of a field or method of a class."""

    def __init__(
        self,
        clazz: ClassReflect,
        name: str,
        keyword: Keyword,
        kind: Kind,
        callable_: Any = None,
    ):
        super().__init__(clazz.pool, clazz.current_instance)
        self._clazz = clazz
        self._name = name
        self._keyword = keyword
        self._kind = kind
        self._parameters: list[ParameterReflect] = []
        self._callable = None
        self._type = None

        if kind == Kind.METHOD:
            self.target_type = Target.METHOD
            self._init_method(callable_)
        else:
            self.target_type = Target.FIELD
            self._type = type_of(clazz.body if clazz.body is not None else clazz.creator, name)

        # (owner class, keyword, name) of the overridden property, refreshed per registry revision
        self._proto_key: tuple[type, Keyword, str] | None = None
        self._proto_revision = -1

    def _resolve_proto_key(self) -> tuple[type, Keyword, str] | None:
        if self._proto_revision != self._pool.revision:
            self._proto_revision = self._pool.revision
            self._proto_key = None
            parent = self._clazz.parent
            if parent is not None:
                if self._keyword == Keyword.INSTANCE:
                    proto = parent.get_instance_property(self._name)
                else:
                    proto = parent.get_static_property(self._name)
                if proto is not None:
                    self._proto_key = (proto.clazz.creator, proto.keyword, proto.name)
        return self._proto_key

    def _init_method(self, callable_: Any):
        if callable_ is None:
            callable_ = inspect.getattr_static(self._clazz.creator, self._name, None)
        if callable_ is None or not callable(unwrap(callable_)):
            return
        self._callable = callable_
        skip_first = isinstance(callable_, classmethod) or (
            self._keyword == Keyword.INSTANCE and inspect.isfunction(callable_)
        )
        types = signature_types(callable_, skip_first)
        if types is not None:
            self._type = types.returns
            for index, (param_name, param_type) in enumerate(types.parameters):
                self._parameters.append(ParameterReflect(self, index, param_type, param_name))
        else:
            for index in range(arity(callable_, skip_first)):
                self._parameters.append(ParameterReflect(self, index, None))

    # --- Identity ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def qualified_name(self) -> str:
        return f"{self._clazz.name}.{self._name}"

    @property
    def description(self) -> str:
        return f"<{self._kind.value}>{self.qualified_name} [{self._keyword.value}]"

    @property
    def clazz(self) -> ClassReflect:
        return self._clazz

    @property
    def proto(self) -> PropertyReflect | None:
        key = self._resolve_proto_key()
        if key is None:
            return None
        owner, keyword, name = key
        return self._pool.get_class(owner).own_members(keyword)[name]

    @property
    def has_proto(self) -> bool:
        return self._resolve_proto_key() is not None

    @property
    def type(self) -> Any:
        return self._type

    @property
    def callable(self) -> Any:
        return self._callable

    @property
    def keyword(self) -> Keyword:
        return self._keyword

    @property
    def kind(self) -> Kind:
        return self._kind

    # --- Parameters ---

    def list_parameters(self, criteria: DecoFilter | Mapping | None = None) -> list[ParameterReflect]:
        return list(self._parameters)

    def has_parameter(self, index: int, criteria: DecoFilter | Mapping | None = None) -> bool:
        return 0 <= index < len(self._parameters)

    def get_parameter(self, index: int, criteria: DecoFilter | Mapping | None = None) -> ParameterReflect | None:
        return self._parameters[index] if self.has_parameter(index) else None

    def parameters_by(self, identifier, criteria: DecoFilter | Mapping | None = None) -> list[ParameterReflect]:
        ident = self._pool.resolve_identifier(identifier, throwable=False)
        if ident is None:
            return []
        return [p for p in self._parameters if p.filter_by_belongs(ident, criteria)]

    # --- Filters ---

    def filter_by_keyword(self, criteria: DecoFilter | Mapping | None = None) -> bool:
        criteria = DecoFilter.coerce(criteria)
        return criteria.keyword is None or criteria.keyword == self._keyword

    def filter_by_kind(self, criteria: DecoFilter | Mapping | None = None) -> bool:
        criteria = DecoFilter.coerce(criteria)
        return criteria.kind is None or criteria.kind == self._kind

    def filter_by_scope(self, clazz: ClassReflect, criteria: DecoFilter | Mapping | None = None) -> bool:
        criteria = DecoFilter.coerce(criteria)
        if criteria.scope == Scope.OWNED:
            return self._clazz is clazz
        if criteria.scope == Scope.INHERITED:
            return self._clazz is not clazz
        return True

    # --- Decorators ---

    def resolve_decorators(self, criteria: DecoFilter | Mapping | None = None) -> DecoratorMap:
        criteria = DecoFilter.coerce(criteria)
        if criteria.belongs == Belongs.SELF:
            return self._decorators
        proto = self.proto
        if criteria.belongs == Belongs.PARENT:
            return proto.resolve_decorators(criteria.but(belongs=None)) if proto else {}
        if proto is None:
            return self._decorators
        return self._merge_inherited(proto.resolve_decorators(criteria))

    def info(self, detailed: bool = False) -> dict[str, Any]:
        rec: dict[str, Any] = {
            "name": self._name,
            "description": self.description,
            "clazz": {"$ref": self._clazz.description},
        }
        if detailed:
            rec["type"] = signed_name(self._type, True)
            rec["keyword"] = self._keyword.value
            rec["kind"] = self._kind.value
            if self._kind == Kind.METHOD:
                rec["callable"] = signed_name(self._callable, True)
                rec["parameters"] = [p.info(detailed) for p in self._parameters]
        if self.has_proto:
            rec["proto"] = {"$ref": self.proto.description}
        rec.update(super().info(detailed))
        return rec
