"""Tests for naming and type introspection helpers."""

from typing import ClassVar, Optional

from reflectpool.introspect import (
    arity,
    class_hints,
    is_class_var,
    own_annotations,
    signature_types,
    type_handle,
    type_of,
    unwrap,
)
from reflectpool.naming import name_of, signed_name


class Sample:
    name: str
    tags: ClassVar[list] = []
    maybe: "Missing"  # noqa: F821

    def greet(self, who: str, times: int = 1) -> str:
        return who * times

    @staticmethod
    def helper(a, b):
        return a + b

    @property
    def size(self) -> int:
        return 0


class SampleChild(Sample):
    extra: float


def test_name_of():
    assert name_of("already.a.name") == "already.a.name"
    assert name_of(str) == "str"
    assert name_of(Sample) == f"{__name__}.Sample"
    assert name_of(Sample.greet) == f"{__name__}.Sample.greet"
    assert name_of(Sample.__dict__["helper"]) == f"{__name__}.Sample.helper"
    assert name_of(42) == "int"
    assert name_of(None) == "None"


def test_signed_name():
    assert signed_name(None) is None
    assert signed_name(Sample) == name_of(Sample)
    assert signed_name(Sample, True) == f"<class>{name_of(Sample)}"
    assert signed_name(Sample.helper, True) == f"{name_of(Sample.helper)}(a, b)"


def test_unwrap_and_type_handle():
    raw = Sample.__dict__["helper"]
    assert unwrap(raw) is Sample.helper
    assert unwrap(Sample.greet) is Sample.greet
    assert type_handle(int) is int
    assert type_handle(list[int]) == list[int]
    assert type_handle("int") is None
    assert type_handle(None) is None
    assert type_handle(3) is None


def test_annotations():
    assert set(own_annotations(SampleChild)) == {"extra"}
    hints = class_hints(Sample)
    assert hints["name"] is str
    assert is_class_var(hints["tags"])
    assert not is_class_var(hints["name"])
    assert is_class_var("ClassVar[int]")


def test_signature_types():
    types = signature_types(Sample.greet, skip_first=True)
    assert types.parameters == [("who", str), ("times", int)]
    assert types.returns is str
    untyped = signature_types(Sample.__dict__["helper"])
    assert untyped.parameters == [("a", None), ("b", None)]
    assert untyped.returns is None


def test_optional_hint_is_kept():
    def find(key: Optional[str]) -> Optional[int]:
        return None

    types = signature_types(find)
    assert types.parameters == [("key", Optional[str])]


def test_arity():
    assert arity(Sample.greet) == 3
    assert arity(Sample.greet, skip_first=True) == 2
    assert arity(len) == 0


def test_type_of():
    assert type_of(Sample, "name") is str
    assert type_of(Sample, "tags") is list
    assert type_of(Sample, "size") is int
    assert type_of(Sample, "greet") is str
    assert type_of(Sample, "missing") is None
    assert type_of(SampleChild(), "name") is str
    assert type_of(SampleChild, "extra") is float
