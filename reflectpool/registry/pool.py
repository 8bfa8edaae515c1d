"""In-memory registry of identifiers, aliases and class reflects.

The registry is the directory every other component resolves through:
identifiers and aliases by declaring function or name, class reflects by
class, name or instance. Class reflects are created on first use and kept
for the registry's lifetime.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from reflectpool.config import ReflectConfig
from reflectpool.deco.alias import Alias, AliasCondition
from reflectpool.deco.identifier import Identifier
from reflectpool.errors import (
    AliasNotFound,
    AliasShouldBeFunction,
    ClassNotFound,
    ConditionShouldBeFunction,
    IdentifierNotFound,
    IdentifierShouldBeFunction,
    InvalidClassReference,
    InvalidDecoratorReference,
    ReferencedFunctionShouldBeDecorator,
)
from reflectpool.models import DecoFilter, IdentifierOptions
from reflectpool.naming import name_of
from reflectpool.reflect.class_reflect import ClassReflect
from reflectpool.registry.models import DirectoryEntry, EntryType

logger = logging.getLogger(__name__)


class Registry:
    """Directory of identifiers, aliases and class reflects."""

    def __init__(self, config: ReflectConfig | None = None):
        self.config = config or ReflectConfig()
        self._class_map: dict[type, ClassReflect] = {}
        self._name_map: dict[str, type] = {}
        self._names: dict[str, DirectoryEntry] = {}
        self._identifier_map: dict[Callable, Identifier] = {}
        self._alias_map: dict[Callable, Alias] = {}
        self._revision = 0

    @property
    def description(self) -> str:
        return "<reflect>"

    @property
    def revision(self) -> int:
        """Bumped whenever a property is added anywhere in the graph."""
        return self._revision

    def structure_changed(self):
        self._revision += 1

    # --- Classes ---

    def _class_key(self, ref: Any) -> type:
        if inspect.isclass(ref):
            return ref
        if isinstance(ref, str):
            if ref not in self._name_map:
                raise InvalidClassReference("Unknown class name", clazz=ref)
            return self._name_map[ref]
        if ref is None or inspect.isroutine(ref) or inspect.ismodule(ref):
            raise InvalidClassReference(clazz=repr(ref))
        return type(ref)

    def reflect_class(self, ref: Any, body: Any = None, instance: Any = None) -> ClassReflect:
        """Create-or-fetch the reflect of a class, class name or instance."""
        cls = self._class_key(ref)
        if cls not in self._class_map:
            clazz = ClassReflect(self, cls, body, instance)
            self._class_map[cls] = clazz
            self._name_map[clazz.name] = cls
            logger.debug(f"class registered: {clazz.name}")
        return self._class_map[cls]

    def get_class(self, ref: Any) -> ClassReflect:
        """Strict lookup of an already reflected class."""
        try:
            cls = self._class_key(ref)
        except InvalidClassReference:
            raise ClassNotFound(clazz=name_of(ref)) from None
        if cls not in self._class_map:
            raise ClassNotFound(clazz=name_of(cls))
        return self._class_map[cls]

    def has_class(self, ref: Any) -> bool:
        try:
            self.get_class(ref)
        except ClassNotFound:
            return False
        return True

    def classes(self) -> list[ClassReflect]:
        return list(self._class_map.values())

    def classes_by(self, identifier: Any, criteria: DecoFilter | Mapping | None = None) -> list[ClassReflect]:
        """Reflected classes whose resolved decorators include ``identifier``."""
        ident = self.resolve_identifier(identifier, throwable=False)
        if ident is None:
            return []
        return [c for c in self._class_map.values() if c.has_decorator(ident, criteria)]

    # --- Identifiers and aliases ---

    def _lookup(self, ref: Any) -> DirectoryEntry:
        if isinstance(ref, Identifier):
            return DirectoryEntry(type=EntryType.IDENTIFIER, identifier=ref)
        if isinstance(ref, Alias):
            return DirectoryEntry(type=EntryType.ALIAS, alias=ref)
        if isinstance(ref, str):
            return self._names.get(ref, DirectoryEntry())
        if callable(ref):
            if ref in self._identifier_map:
                return DirectoryEntry(type=EntryType.IDENTIFIER, identifier=self._identifier_map[ref])
            if ref in self._alias_map:
                return DirectoryEntry(type=EntryType.ALIAS, alias=self._alias_map[ref])
        return DirectoryEntry()

    def _register_name(self, name: str, entry: DirectoryEntry):
        if name in self._names and self.config.warn_on_rename:
            logger.warning(
                f"decorator name already registered: {name} "
                f"({self._names[name].description} replaced by {entry.description})"
            )
        self._names[name] = entry

    def identify(
        self,
        fn: Callable,
        options: IdentifierOptions | Mapping[str, Any] | None = None,
        **flags: Any,
    ) -> Identifier:
        """Declare ``fn`` as an annotation identifier (create-or-fetch).

        Options may be given as an IdentifierOptions, a mapping, or keyword
        flags such as ``single="name"``, ``clazz=True`` or ``not_multiple=True``.
        """
        if not callable(fn):
            raise IdentifierShouldBeFunction(type=type(fn).__name__)
        existing = self._lookup(fn).canonical
        if existing is not None:
            return existing

        identifier = Identifier(self, fn, IdentifierOptions.normalize(options, **flags))
        self._identifier_map[fn] = identifier
        self._register_name(identifier.name, DirectoryEntry(type=EntryType.IDENTIFIER, identifier=identifier))
        logger.info(f"identified: {identifier.name}")
        return identifier

    def alias(self, fn: Callable, identifier: Callable, condition: AliasCondition | None = None) -> Identifier:
        """Bind ``fn`` as an alias of the identifier declared by ``identifier``."""
        if not callable(fn):
            raise AliasShouldBeFunction(type=type(fn).__name__)
        if not callable(identifier):
            raise IdentifierShouldBeFunction(type=type(identifier).__name__)
        existing = self._lookup(fn).canonical
        if existing is not None:
            return existing
        if condition is not None and not callable(condition):
            raise ConditionShouldBeFunction(condition=repr(condition))
        target = self._lookup(identifier).canonical
        if target is None:
            raise ReferencedFunctionShouldBeDecorator(identifier=name_of(identifier))

        alias = Alias(fn, target, condition)
        self._alias_map[fn] = alias
        target.bind_alias(alias)
        self._register_name(alias.name, DirectoryEntry(type=EntryType.ALIAS, alias=alias))
        logger.info(f"aliased: {alias.name} -> {target.name}")
        return target

    def get(self, ref: Any, throwable: bool = True) -> Identifier | None:
        """Identifier for an identifier or alias function/name."""
        identifier = self._lookup(ref).canonical
        if identifier is None and throwable:
            raise IdentifierNotFound(fn=name_of(ref))
        return identifier

    def resolve_identifier(self, ref: Any, throwable: bool = True) -> Identifier | None:
        """Like ``get`` but rejects values that cannot name an identifier."""
        if ref is None or not (isinstance(ref, (Identifier, Alias, str)) or callable(ref)):
            if throwable:
                raise InvalidDecoratorReference(fn=repr(ref))
            return None
        return self.get(ref, throwable)

    def get_identifier(self, ref: Any) -> Identifier:
        entry = self._lookup(ref)
        if entry.type != EntryType.IDENTIFIER:
            raise IdentifierNotFound(fn=name_of(ref))
        return entry.identifier

    def get_alias(self, ref: Any) -> Alias:
        entry = self._lookup(ref)
        if entry.type != EntryType.ALIAS:
            raise AliasNotFound(fn=name_of(ref))
        return entry.alias

    def is_registered(self, ref: Any) -> bool:
        return self._lookup(ref).found

    def is_identifier(self, ref: Any) -> bool:
        return self._lookup(ref).type == EntryType.IDENTIFIER

    def is_alias(self, ref: Any) -> bool:
        return self._lookup(ref).type == EntryType.ALIAS

    def identifiers(self) -> dict[str, Identifier]:
        return {name: e.identifier for name, e in self._names.items() if e.type == EntryType.IDENTIFIER}

    def aliases(self) -> dict[str, Alias]:
        return {name: e.alias for name, e in self._names.items() if e.type == EntryType.ALIAS}

    def info(self, detailed: bool = False) -> dict[str, Any]:
        return {
            "classes": [c.info(detailed) for c in self._class_map.values()],
            "identifiers": [i.info(detailed) for i in self._identifier_map.values()],
            "aliases": [a.info(detailed) for a in self._alias_map.values()],
        }
