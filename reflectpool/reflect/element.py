"""Reflected element — the decorator map shared by class, property and
parameter reflects.

Each element maps an identifier to the ordered list of values attached to it.
Subclasses decide how a parent's map is merged in (``resolve_decorators``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from reflectpool.errors import SingleNotSupported
from reflectpool.models import Belongs, DecoFilter, Target

if TYPE_CHECKING:
    from reflectpool.deco.identifier import Identifier
    from reflectpool.deco.instance import Instance
    from reflectpool.registry.pool import Registry

DecoratorMap = dict["Identifier", list[Any]]


def cast_value(value: Any) -> Any:
    """Stored form of an attached value: mappings are copied, None becomes {}."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    return value


def pick(record: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from a stored record (mapping key or attribute)."""
    if isinstance(record, Mapping):
        return record.get(key, default)
    return getattr(record, key, default)


class ReflectedElement:
    """Base for every reflect that can carry decorator values."""

    target_type: Target

    def __init__(self, pool: Registry, current_instance: Instance | None = None):
        self._pool = pool
        self._current_instance = current_instance
        self._decorators: DecoratorMap = {}

    # --- Identity ---

    @property
    def description(self) -> str:
        raise NotImplementedError

    @property
    def pool(self) -> Registry:
        return self._pool

    @property
    def current_instance(self) -> Instance | None:
        return self._current_instance

    @property
    def current_identifier(self) -> Identifier | None:
        if self._current_instance is None:
            return None
        return self._current_instance.identifier

    def __repr__(self) -> str:
        return self.description

    # --- Build phase ---

    def touch(self, instance: Instance):
        """Record ``instance`` as the latest attachment made on this element."""
        self._current_instance = instance
        return self

    def set_to_last_identifier(self, value: Any = None):
        """Store ``value`` under the identifier of the latest attachment."""
        return self.set_value(self.current_identifier, value)

    def set_value(self, identifier, value: Any = None):
        ident = self._pool.resolve_identifier(identifier)
        if ident.not_multiple:
            self._decorators[ident] = [cast_value(value)]
        else:
            self._decorators.setdefault(ident, []).append(cast_value(value))
        return self

    # --- Read phase ---

    def resolve_decorators(self, criteria: DecoFilter | Mapping | None = None) -> DecoratorMap:
        """Decorator map visible from this element for the belongs filter."""
        criteria = DecoFilter.coerce(criteria)
        if criteria.belongs == Belongs.PARENT:
            return {}
        return self._decorators

    def _merge_inherited(self, inherited: DecoratorMap) -> DecoratorMap:
        # Own values win; non-inheritor identifiers stay with their owner
        merged = dict(self._decorators)
        for ident, values in inherited.items():
            if ident in merged or ident.not_inheritor:
                continue
            merged[ident] = values
        return merged

    def decorators(self, criteria: DecoFilter | Mapping | None = None) -> dict[str, list[Any]]:
        return {ident.name: list(values) for ident, values in self.resolve_decorators(criteria).items()}

    def has_decorator(self, identifier, criteria: DecoFilter | Mapping | None = None) -> bool:
        ident = self._pool.resolve_identifier(identifier, throwable=False)
        return ident is not None and ident in self.resolve_decorators(criteria)

    def list_values(self, identifier, criteria: DecoFilter | Mapping | None = None) -> list[Any]:
        ident = self._pool.resolve_identifier(identifier, throwable=False)
        if ident is None:
            return []
        return list(self.resolve_decorators(criteria).get(ident, []))

    def get_value(self, identifier, criteria: DecoFilter | Mapping | None = None) -> Any:
        values = self.list_values(identifier, criteria)
        return values[0] if values else None

    def list_singles(self, identifier, criteria: DecoFilter | Mapping | None = None) -> list[Any]:
        ident = self._pool.resolve_identifier(identifier)
        if not ident.single:
            raise SingleNotSupported(decorator=ident.name, owner=self.description)
        return [pick(record, ident.single) for record in self.list_values(ident, criteria)]

    def get_single(self, identifier, criteria: DecoFilter | Mapping | None = None) -> Any:
        singles = self.list_singles(identifier, criteria)
        return singles[0] if singles else None

    # --- Filters ---

    def filter_by_belongs(self, identifier, criteria: DecoFilter | Mapping | None = None) -> bool:
        return self.has_decorator(identifier, criteria)

    def filter_by_target(self, *targets: Target) -> bool:
        return not targets or self.target_type in targets

    def info(self, detailed: bool = False) -> dict[str, Any]:
        return {
            "identifiers": [
                {"identifier": {"$ref": ident.description}, "values": list(values)}
                for ident, values in self._decorators.items()
            ]
        }
