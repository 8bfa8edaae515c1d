"""Tests for property and parameter reflects."""

from reflectpool.models import Keyword, Kind, Target


class Base:
    def save(self, item: str, force: bool = False) -> bool:
        return force

    @staticmethod
    def load(key):
        return key


class Derived(Base):
    def save(self, item: str, force: bool = False) -> bool:
        return not force

    @staticmethod
    def load(key):
        return key


def test_method_property(registry):
    prop = registry.reflect_class(Base).get_instance_property("save")
    assert prop.name == "save"
    assert prop.kind == Kind.METHOD
    assert prop.keyword == Keyword.INSTANCE
    assert prop.callable is Base.__dict__["save"]
    assert prop.type is bool
    assert prop.qualified_name == f"{prop.clazz.name}.save"
    assert prop.description == f"<method>{prop.clazz.name}.save [instance]"
    assert prop.filter_by_target(Target.METHOD)
    assert not prop.filter_by_target(Target.FIELD)


def test_parameters(registry):
    prop = registry.reflect_class(Base).get_instance_property("save")
    params = prop.list_parameters()
    assert [(p.index, p.name, p.type) for p in params] == [(0, "item", str), (1, "force", bool)]
    assert prop.has_parameter(1)
    assert not prop.has_parameter(2)
    assert prop.get_parameter(2) is None
    assert params[0].property is prop
    assert params[0].description == f"<parameter>{prop.qualified_name}#0 [instance]"


def test_parameters_by_identifier(registry):
    def required(): ...

    ident = registry.identify(required, parameter=True)
    ident.fork(Base, "save", 1).set()
    prop = registry.get_class(Base).get_instance_property("save")
    assert [p.index for p in prop.parameters_by(required)] == [1]
    assert prop.parameters_by("no.such.identifier") == []


def test_proto_links_same_keyword(registry):
    derived = registry.reflect_class(Derived)
    base = registry.get_class(Base)
    assert derived.get_instance_property("save").proto is base.get_instance_property("save")
    assert derived.get_static_property("load").proto is base.get_static_property("load")


def test_method_values_inherit_through_proto(registry):
    def action(): ...

    ident = registry.identify(action)
    ident.fork(Base, "save", Base.save).set({"name": "save"})
    save = registry.reflect_class(Derived).get_instance_property("save")

    assert save.get_value(ident) == {"name": "save"}
    assert save.list_values(ident, {"belongs": "self"}) == []
    assert save.list_values(ident, {"belongs": "parent"}) == [{"name": "save"}]

    ident.fork(Derived, "save", Derived.save).set({"name": "override"})
    assert save.list_values(ident) == [{"name": "override"}]


def test_parameter_values_do_not_inherit(registry):
    def required(): ...

    ident = registry.identify(required)
    ident.fork(Base, "save", 0).set()
    derived_param = registry.reflect_class(Derived).get_instance_property("save").get_parameter(0)
    assert derived_param.list_values(ident) == []
    assert derived_param.list_values(ident, {"belongs": "parent"}) == []


def test_filters(registry):
    derived = registry.reflect_class(Derived)
    base = registry.get_class(Base)
    save = derived.get_instance_property("save")
    assert save.filter_by_keyword({"keyword": "instance"})
    assert not save.filter_by_keyword({"keyword": "static"})
    assert save.filter_by_kind({"kind": "method"})
    assert not save.filter_by_kind({"kind": "field"})
    assert save.filter_by_kind()
    assert save.filter_by_scope(derived, {"scope": "owned"})
    assert not save.filter_by_scope(base, {"scope": "owned"})
    assert save.filter_by_scope(base, {"scope": "inherited"})
    assert save.filter_by_scope(base)


def test_builtin_static_method(registry):
    class Model:
        pass

    Model.lookup = staticmethod(len)
    prop = registry.reflect_class(Model).get_static_property("lookup")
    assert prop.kind == Kind.METHOD
    assert prop.callable is Model.__dict__["lookup"]


def test_property_info(registry):
    save = registry.reflect_class(Derived).get_instance_property("save")
    info = save.info()
    assert info["name"] == "save"
    assert info["proto"] == {"$ref": registry.get_class(Base).get_instance_property("save").description}
    assert info["identifiers"] == []

    detailed = save.info(detailed=True)
    assert detailed["keyword"] == "instance"
    assert detailed["kind"] == "method"
    assert detailed["type"] == "<class>bool"
    assert [p["name"] for p in detailed["parameters"]] == ["item", "force"]
