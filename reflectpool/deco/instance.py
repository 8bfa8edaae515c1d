"""Annotation instance — one concrete attachment of an identifier.

An instance validates the identifier's rules against the attachment site,
creates or locates the reflect it targets and records itself on the
identifier. Values are written through ``set``.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from reflectpool.errors import (
    InvalidClassReference,
    InvalidKeyword,
    InvalidTarget,
    MethodBodyEmpty,
    NotUsedForInstanceMember,
    NotUsedForStaticMember,
    PropertyNameEmpty,
    TargetNotAllowed,
)
from reflectpool.introspect import class_hints, unwrap
from reflectpool.models import Keyword, Kind, Target
from reflectpool.naming import name_of
from reflectpool.reflect.class_reflect import classify_member

if TYPE_CHECKING:
    from reflectpool.deco.identifier import Identifier
    from reflectpool.reflect.class_reflect import ClassReflect
    from reflectpool.reflect.element import ReflectedElement
    from reflectpool.reflect.parameter_reflect import ParameterReflect
    from reflectpool.reflect.property_reflect import PropertyReflect


def split_owner(owner: Any) -> tuple[type, Any, Keyword]:
    """Class, body snapshot and shape keyword of an attachment owner.

    A class defaults to static membership; an instance means an instance
    member and becomes the class body snapshot.
    """
    if inspect.isclass(owner):
        return owner, None, Keyword.STATIC
    if owner is None or inspect.isroutine(owner) or inspect.ismodule(owner):
        raise InvalidClassReference(owner=repr(owner))
    return type(owner), owner, Keyword.INSTANCE


def detect_keyword(cls: type, name: str) -> Keyword | None:
    """Keyword of ``name`` as declared somewhere in the class hierarchy."""
    for klass in cls.__mro__:
        members = vars(klass)
        hints = class_hints(klass)
        if name in members or name in hints:
            return classify_member(name, members.get(name), hints)[0]
    return None


class Instance:
    """A single attachment of an identifier to a class, member or parameter."""

    def __init__(
        self,
        identifier: Identifier,
        target: Target,
        owner: Any,
        member: str | None = None,
        keyword: Keyword | str | None = None,
        callable_: Any = None,
        index: int | None = None,
    ):
        self._identifier = identifier
        self._target = target
        cls, body, shape_keyword = split_owner(owner)
        if keyword is not None:
            try:
                self._keyword = Keyword(keyword)
            except ValueError:
                raise InvalidKeyword(keyword=keyword, clazz=name_of(cls)) from None
        elif body is None and member:
            self._keyword = detect_keyword(cls, member) or shape_keyword
        else:
            self._keyword = shape_keyword
        context = {"target": target.value, "clazz": name_of(cls)}

        if not identifier.options.allows(target):
            raise TargetNotAllowed(decorator=identifier.name, **context)
        if target != Target.CLASS and not member:
            raise PropertyNameEmpty(decorator=identifier.name, **context)
        if target == Target.METHOD:
            if callable_ is None:
                callable_ = inspect.getattr_static(cls, member, None)
            if callable_ is None or not callable(unwrap(callable_)):
                raise MethodBodyEmpty(decorator=identifier.name, property=member, **context)
        if target in (Target.METHOD, Target.FIELD):
            if identifier.not_static and self._keyword == Keyword.STATIC:
                raise NotUsedForStaticMember(decorator=identifier.name, property=member, **context)
            if identifier.not_instance and self._keyword == Keyword.INSTANCE:
                raise NotUsedForInstanceMember(decorator=identifier.name, property=member, **context)

        clazz = identifier.pool.reflect_class(cls, body, self)
        self._assigned = self._locate(clazz, member, callable_, index)
        self._assigned.touch(self)
        identifier.record(self)

    def _locate(self, clazz: ClassReflect, member: str | None, callable_: Any, index: int | None) -> ReflectedElement:
        if self._target == Target.CLASS:
            return clazz
        if self._target == Target.METHOD:
            return clazz.register_property(member, self._keyword, Kind.METHOD, callable_)
        if self._target == Target.FIELD:
            return clazz.register_property(member, self._keyword, Kind.FIELD)
        prop = clazz.register_property(member, self._keyword, Kind.METHOD)
        param = prop.get_parameter(index)
        if param is None:
            raise InvalidTarget(
                decorator=self._identifier.name,
                target=self._target.value,
                description=prop.description,
                index=index,
            )
        return param

    # --- Getters ---

    @property
    def identifier(self) -> Identifier:
        return self._identifier

    @property
    def name(self) -> str:
        return self._identifier.name

    @property
    def target(self) -> Target:
        return self._target

    @property
    def keyword(self) -> Keyword:
        return self._keyword

    @property
    def assigned(self) -> ReflectedElement:
        return self._assigned

    def set(self, value: Any = None) -> ReflectedElement:
        """Store ``value`` under this instance's identifier; returns the element."""
        self._assigned.touch(self)
        self._assigned.set_value(self._identifier, value)
        return self._assigned

    def info(self, detailed: bool = False) -> dict[str, Any]:
        rec = self._identifier.info(detailed)
        rec["target"] = self._target.value
        rec["assigned"] = {"$ref": self._assigned.description}
        return rec

    # --- Target checks ---

    def is_of_class(self) -> bool:
        return self._target == Target.CLASS

    def is_of_method(self) -> bool:
        return self._target == Target.METHOD

    def is_of_field(self) -> bool:
        return self._target == Target.FIELD

    def is_of_parameter(self) -> bool:
        return self._target == Target.PARAMETER

    def _as(self, expected: Target):
        if self._target != expected:
            raise InvalidTarget(
                target=self._target.value,
                expected=expected.value,
                description=self._assigned.description,
            )
        return self._assigned.touch(self)

    def as_class(self) -> ClassReflect:
        return self._as(Target.CLASS)

    def as_method(self) -> PropertyReflect:
        return self._as(Target.METHOD)

    def as_field(self) -> PropertyReflect:
        return self._as(Target.FIELD)

    def as_parameter(self) -> ParameterReflect:
        return self._as(Target.PARAMETER)
