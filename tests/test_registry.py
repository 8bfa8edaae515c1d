"""Tests for the registry: identifiers, aliases and class lookup."""

import logging

import pytest

from reflectpool.config import ReflectConfig
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
from reflectpool.naming import name_of
from reflectpool.registry import Registry, reflect_pool
from reflectpool.registry.models import DirectoryEntry, EntryType


def _declaring_function():
    def tag(): ...

    return tag


def test_default_registry_exists():
    assert isinstance(reflect_pool, Registry)
    assert isinstance(reflect_pool.config, ReflectConfig)


def test_get_by_function_and_name(registry):
    def tag(): ...

    ident = registry.identify(tag)
    assert registry.get(tag) is ident
    assert registry.get(name_of(tag)) is ident
    assert registry.get(ident) is ident
    assert registry.get_identifier(tag) is ident
    assert registry.is_registered(tag)
    assert registry.is_identifier(tag)
    assert not registry.is_alias(tag)
    assert registry.identifiers() == {ident.name: ident}


def test_get_unknown(registry):
    def tag(): ...

    with pytest.raises(IdentifierNotFound):
        registry.get(tag)
    assert registry.get(tag, throwable=False) is None
    assert registry.get("no.such.name", throwable=False) is None
    assert not registry.is_registered(tag)


def test_identify_rejects_non_callable(registry):
    with pytest.raises(IdentifierShouldBeFunction):
        registry.identify("not-a-function")


def test_identify_rejects_unknown_option(registry):
    def tag(): ...

    with pytest.raises(TypeError):
        registry.identify(tag, bogus=True)
    assert not registry.is_registered(tag)


def test_resolve_identifier_rejects_bad_reference(registry):
    with pytest.raises(InvalidDecoratorReference):
        registry.resolve_identifier(42)
    with pytest.raises(InvalidDecoratorReference):
        registry.resolve_identifier(None)
    assert registry.resolve_identifier(42, throwable=False) is None


def test_name_collision_last_wins(registry, caplog):
    first, second = _declaring_function(), _declaring_function()
    assert name_of(first) == name_of(second)

    registry.identify(first)
    with caplog.at_level(logging.WARNING, logger="reflectpool.registry.pool"):
        replacement = registry.identify(second)

    assert registry.get(name_of(first)) is replacement
    assert registry.get(first) is not replacement
    assert "already registered" in caplog.text


def test_name_collision_warning_can_be_disabled(caplog):
    registry = Registry(ReflectConfig(warn_on_rename=False))
    registry.identify(_declaring_function())
    with caplog.at_level(logging.WARNING, logger="reflectpool.registry.pool"):
        registry.identify(_declaring_function())
    assert "already registered" not in caplog.text


# ── Aliases ─────────────────────────────────────────────────────────


def test_alias_forwards_to_identifier(registry):
    def column(): ...

    def col(): ...

    ident = registry.identify(column)
    assert registry.alias(col, column) is ident
    assert registry.get(col) is ident
    assert registry.get(name_of(col)) is ident
    assert registry.is_alias(col)
    assert registry.get_alias(col).identifier is ident
    assert [a.name for a in ident.aliases] == [name_of(col)]
    assert list(registry.aliases()) == [name_of(col)]
    with pytest.raises(IdentifierNotFound):
        registry.get_identifier(col)
    with pytest.raises(AliasNotFound):
        registry.get_alias(column)


def test_alias_values_land_on_identifier(registry):
    def column(): ...

    def col(): ...

    class Model:
        pass

    ident = registry.identify(column)
    registry.alias(col, column)
    registry.get(col).fork(Model).set({"via": "alias"})
    assert ident.values_by_class(Model) == [{"via": "alias"}]
    assert registry.get_class(Model).list_values(col) == [{"via": "alias"}]


def test_alias_is_idempotent(registry):
    def column(): ...

    def col(): ...

    ident = registry.identify(column)
    registry.alias(col, column)
    assert registry.alias(col, column) is ident
    assert len(ident.aliases) == 1


def test_alias_of_alias_resolves_to_identifier(registry):
    def column(): ...

    def col(): ...

    def c(): ...

    ident = registry.identify(column)
    registry.alias(col, column)
    assert registry.alias(c, col) is ident


def test_alias_condition_is_stored(registry):
    def column(): ...

    def col(): ...

    registry.identify(column)
    registry.alias(col, column, condition=lambda value: value.get("kind") == "text")
    alias = registry.get_alias(col)
    assert alias.matches({"kind": "text"})
    assert not alias.matches({"kind": "int"})


def test_alias_validation(registry):
    def column(): ...

    def col(): ...

    def unknown(): ...

    registry.identify(column)
    with pytest.raises(AliasShouldBeFunction):
        registry.alias("col", column)
    with pytest.raises(IdentifierShouldBeFunction):
        registry.alias(col, "column")
    with pytest.raises(ConditionShouldBeFunction):
        registry.alias(col, column, condition="yes")
    with pytest.raises(ReferencedFunctionShouldBeDecorator):
        registry.alias(col, unknown)
    assert not registry.is_registered(col)


# ── Classes ─────────────────────────────────────────────────────────


def test_reflect_class_is_memoized(registry):
    class Model:
        pass

    clazz = registry.reflect_class(Model)
    assert registry.reflect_class(Model) is clazz
    assert registry.reflect_class(Model()) is clazz
    assert registry.reflect_class(name_of(Model)) is clazz
    assert registry.get_class(Model) is clazz
    assert registry.has_class(Model)
    assert registry.classes() == [clazz]


def test_reflect_class_rejects_bad_references(registry):
    def func(): ...

    with pytest.raises(InvalidClassReference):
        registry.reflect_class(None)
    with pytest.raises(InvalidClassReference):
        registry.reflect_class(func)
    with pytest.raises(InvalidClassReference):
        registry.reflect_class("no.such.Class")


def test_get_class_is_strict(registry):
    class Model:
        pass

    with pytest.raises(ClassNotFound):
        registry.get_class(Model)
    assert not registry.has_class(Model)
    assert not registry.has_class(None)


def test_classes_by_identifier(registry):
    def entity(): ...

    def hidden(): ...

    class Base:
        pass

    class Child(Base):
        pass

    class Other:
        pass

    ident = registry.identify(entity)
    local = registry.identify(hidden, not_inheritor=True)
    ident.fork(Base).set()
    local.fork(Base).set()
    registry.reflect_class(Child)
    registry.reflect_class(Other)

    assert registry.classes_by(entity) == [registry.get_class(Base), registry.get_class(Child)]
    assert registry.classes_by(entity, {"belongs": "self"}) == [registry.get_class(Base)]
    assert registry.classes_by(hidden) == [registry.get_class(Base)]
    assert registry.classes_by("no.such.identifier") == []


def test_revision_tracks_new_members(registry):
    def tag(): ...

    class Model:
        pass

    registry.reflect_class(Model)
    before = registry.revision
    registry.identify(tag).fork(Model, "late").set()
    assert registry.revision == before + 1


def test_registry_info(registry):
    def tag(): ...

    def alias(): ...

    class Model:
        pass

    registry.identify(tag).fork(Model).set({"v": 1})
    registry.alias(alias, tag)
    info = registry.info()
    assert [c["name"] for c in info["classes"]] == [name_of(Model)]
    assert info["identifiers"] == [{"name": name_of(tag)}]
    assert info["aliases"][0]["identifier"] == {"$ref": f"<identifier>{name_of(tag)}"}


def test_directory_entry():
    missing = DirectoryEntry()
    assert not missing.found
    assert missing.canonical is None
    assert missing.description == "<missing>"
    assert DirectoryEntry(type=EntryType.IDENTIFIER).found
