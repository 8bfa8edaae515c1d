"""Annotation identifier — a declared kind of annotation.

An identifier carries the rules its attachments must follow (allowed
targets, static/instance exclusivity, multiplicity, inheritance) and keeps
every instance forked from it. The query methods read values back from the
reflection graph for this identifier only.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from reflectpool.deco.instance import Instance, split_owner
from reflectpool.introspect import unwrap
from reflectpool.models import DecoFilter, IdentifierOptions, Keyword, Kind, Target
from reflectpool.naming import name_of
from reflectpool.reflect.element import pick

if TYPE_CHECKING:
    from reflectpool.deco.alias import Alias
    from reflectpool.reflect.class_reflect import ClassReflect
    from reflectpool.reflect.element import ReflectedElement
    from reflectpool.reflect.parameter_reflect import ParameterReflect
    from reflectpool.reflect.property_reflect import PropertyReflect
    from reflectpool.registry.pool import Registry

_MISSING = object()


class Identifier:
    """A declared annotation kind bound to its declaring function."""

    def __init__(self, pool: Registry, fn: Callable, options: IdentifierOptions):
        self._pool = pool
        self._fn = fn
        self._options = options
        self._instances: list[Instance] = []
        self._aliases: list[Alias] = []

    def __repr__(self) -> str:
        return self.description

    # --- Getters ---

    @property
    def pool(self) -> Registry:
        return self._pool

    @property
    def name(self) -> str:
        return name_of(self._fn)

    @property
    def fn(self) -> Callable:
        return self._fn

    @property
    def description(self) -> str:
        return f"<identifier>{self.name}"

    @property
    def options(self) -> IdentifierOptions:
        return self._options

    @property
    def single(self) -> str | None:
        return self._options.single

    @property
    def for_class(self) -> bool:
        return self._options.clazz

    @property
    def for_method(self) -> bool:
        return self._options.method

    @property
    def for_field(self) -> bool:
        return self._options.field

    @property
    def for_parameter(self) -> bool:
        return self._options.parameter

    @property
    def not_instance(self) -> bool:
        return self._options.not_instance

    @property
    def not_static(self) -> bool:
        return self._options.not_static

    @property
    def not_persistent(self) -> bool:
        return self._options.not_persistent

    @property
    def not_multiple(self) -> bool:
        return self._options.not_multiple

    @property
    def not_inheritor(self) -> bool:
        return self._options.not_inheritor

    @property
    def instances(self) -> list[Instance]:
        return list(self._instances)

    @property
    def aliases(self) -> list[Alias]:
        return list(self._aliases)

    def record(self, instance: Instance):
        self._instances.append(instance)

    def bind_alias(self, alias: Alias):
        self._aliases.append(alias)

    def info(self, detailed: bool = False) -> dict[str, Any]:
        rec: dict[str, Any] = {"name": self.name}
        if detailed:
            rec["options"] = self._options.as_dict()
            rec["aliases"] = [a.name for a in self._aliases]
            rec["instances"] = len(self._instances)
        return rec

    # --- Attachment ---

    def fork(
        self,
        target: Any,
        member: str | None = None,
        descriptor: Any = None,
        *,
        keyword: Keyword | str | None = None,
    ) -> Instance:
        """Attach this identifier, inferring the target kind from the arguments.

        ``fork(cls)`` targets the class, ``fork(owner, name)`` a field,
        ``fork(owner, name, callable)`` a method and ``fork(owner, name, index)``
        a parameter. ``owner`` is a class or an instance of it.
        """
        if member is None:
            return self.attach_to_class(target)
        if isinstance(descriptor, int) and not isinstance(descriptor, bool):
            return self.attach_to_parameter(target, member, descriptor, keyword=keyword)
        if descriptor is not None and callable(unwrap(descriptor)):
            return self.attach_to_member(target, member, Kind.METHOD, keyword=keyword, callable_=descriptor)
        return self.attach_to_member(target, member, Kind.FIELD, keyword=keyword)

    def attach_to_class(self, cls: Any) -> Instance:
        if not inspect.isclass(cls):
            cls = split_owner(cls)[0]
        return Instance(self, Target.CLASS, cls)

    def attach_to_member(
        self,
        owner: Any,
        name: str,
        kind: Kind | str = Kind.FIELD,
        *,
        keyword: Keyword | str | None = None,
        callable_: Any = None,
    ) -> Instance:
        target = Target.METHOD if Kind(kind) == Kind.METHOD else Target.FIELD
        return Instance(self, target, owner, name, keyword=keyword, callable_=callable_)

    def attach_to_parameter(
        self,
        owner: Any,
        name: str,
        index: int,
        *,
        keyword: Keyword | str | None = None,
    ) -> Instance:
        return Instance(self, Target.PARAMETER, owner, name, keyword=keyword, index=index)

    def assign(self, element: ReflectedElement, value: Any = None):
        element.set_value(self, value)

    # --- Extraction helpers ---

    def _single_of(self, value: Any) -> Any:
        if value is None:
            return None
        return pick(value, self._options.single)

    def _singles_of(self, values: list[Any]) -> list[Any]:
        result = []
        for value in values:
            item = pick(value, self._options.single, _MISSING) if value is not None else _MISSING
            if item is not _MISSING:
                result.append(item)
        return result

    # --- Class queries ---

    def assigned_classes(self, criteria: DecoFilter | Mapping | None = None) -> list[ClassReflect]:
        return self._assigned_of((Target.CLASS,), criteria)

    def value_by_class(self, cls: Any, criteria: DecoFilter | Mapping | None = None) -> Any:
        return self._pool.reflect_class(cls).get_value(self, criteria)

    def values_by_class(self, cls: Any, criteria: DecoFilter | Mapping | None = None) -> list[Any]:
        return self._pool.reflect_class(cls).list_values(self, criteria)

    def single_by_class(self, cls: Any, criteria: DecoFilter | Mapping | None = None) -> Any:
        if not self.single:
            return None
        return self._single_of(self.value_by_class(cls, criteria))

    def singles_by_class(self, cls: Any, criteria: DecoFilter | Mapping | None = None) -> list[Any]:
        if not self.single:
            return []
        return self._singles_of(self.values_by_class(cls, criteria))

    # --- Property queries ---

    def assigned_properties(self, criteria: DecoFilter | Mapping | None = None) -> list[PropertyReflect]:
        criteria = DecoFilter.coerce(criteria)
        return [
            p
            for p in self._assigned_of((Target.METHOD, Target.FIELD), criteria)
            if p.filter_by_kind(criteria) and p.filter_by_keyword(criteria)
        ]

    def _property(self, cls: Any, name: str, criteria: DecoFilter) -> PropertyReflect | None:
        return self._pool.reflect_class(cls).get_any_property(name, criteria)

    def value_by_property(self, cls: Any, name: str, criteria: DecoFilter | Mapping | None = None) -> Any:
        criteria = DecoFilter.coerce(criteria)
        prop = self._property(cls, name, criteria)
        return prop.get_value(self, criteria) if prop is not None else None

    def values_by_property(self, cls: Any, name: str, criteria: DecoFilter | Mapping | None = None) -> list[Any]:
        criteria = DecoFilter.coerce(criteria)
        prop = self._property(cls, name, criteria)
        return prop.list_values(self, criteria) if prop is not None else []

    def single_by_property(self, cls: Any, name: str, criteria: DecoFilter | Mapping | None = None) -> Any:
        if not self.single:
            return None
        return self._single_of(self.value_by_property(cls, name, criteria))

    def singles_by_property(self, cls: Any, name: str, criteria: DecoFilter | Mapping | None = None) -> list[Any]:
        if not self.single:
            return []
        return self._singles_of(self.values_by_property(cls, name, criteria))

    # --- Parameter queries ---

    def assigned_parameters(self, criteria: DecoFilter | Mapping | None = None) -> list[ParameterReflect]:
        return self._assigned_of((Target.PARAMETER,), criteria)

    def _parameter(self, cls: Any, name: str, index: int, criteria: DecoFilter | Mapping | None) -> ParameterReflect | None:
        criteria = DecoFilter.coerce(criteria).but(kind=Kind.METHOD)
        prop = self._property(cls, name, criteria)
        if prop is None:
            return None
        return prop.get_parameter(index)

    def value_by_parameter(
        self, cls: Any, name: str, index: int, criteria: DecoFilter | Mapping | None = None
    ) -> Any:
        param = self._parameter(cls, name, index, criteria)
        return param.get_value(self) if param is not None else None

    def values_by_parameter(
        self, cls: Any, name: str, index: int, criteria: DecoFilter | Mapping | None = None
    ) -> list[Any]:
        param = self._parameter(cls, name, index, criteria)
        return param.list_values(self) if param is not None else []

    def single_by_parameter(
        self, cls: Any, name: str, index: int, criteria: DecoFilter | Mapping | None = None
    ) -> Any:
        if not self.single:
            return None
        return self._single_of(self.value_by_parameter(cls, name, index, criteria))

    def singles_by_parameter(
        self, cls: Any, name: str, index: int, criteria: DecoFilter | Mapping | None = None
    ) -> list[Any]:
        if not self.single:
            return []
        return self._singles_of(self.values_by_parameter(cls, name, index, criteria))

    def _assigned_of(self, targets: tuple[Target, ...], criteria: DecoFilter | Mapping | None) -> list:
        seen: list = []
        for instance in self._instances:
            element = instance.assigned
            if element in seen or not element.filter_by_target(*targets):
                continue
            if element.filter_by_belongs(self, criteria):
                seen.append(element)
        return seen

    # --- Diagnostics ---

    def usage_name(self, field: str, target: Any, member: str | None = None, index_or_callable: Any = None) -> str:
        """Human-readable location of a usage, for error messages."""
        if inspect.isclass(target):
            cls, keyword = target, Keyword.STATIC.value
        elif target is not None and not inspect.isroutine(target):
            cls, keyword = type(target), Keyword.INSTANCE.value
        else:
            return f"{self.name}.{field} on <unknown>{name_of(target)}"
        if not member:
            return f"{self.name}.{field} on <class>{name_of(cls)}"
        if isinstance(index_or_callable, int) and not isinstance(index_or_callable, bool):
            return f"{self.name}.{field} on <parameter>{name_of(cls)}::{member}[{keyword}] #{index_or_callable}"
        if index_or_callable is not None and callable(unwrap(index_or_callable)):
            return f"{self.name}.{field} on <method>{name_of(cls)}::{member}[{keyword}]"
        return f"{self.name}.{field} on <field>{name_of(cls)}::{member}[{keyword}]"
