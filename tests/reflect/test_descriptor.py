"""Tests for reflect/descriptor.py module."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import namedtuple
from dataclasses import dataclass
from typing import ClassVar, Protocol

import pytest

from fixtureforge.reflect.descriptor import (
    OperationKind,
    TypeKind,
    accepts_no_arguments,
    classify,
    declared_field,
    demangle,
    describe,
    has_stub_body,
    instance_fields,
    is_protocol,
    mangle,
    tuple_field_names,
)


class Shape(ABC):
    sides: int
    registry: ClassVar[dict[str, int]] = {}

    @abstractmethod
    def area(self) -> float: ...

    @property
    @abstractmethod
    def label(self) -> str: ...

    @classmethod
    @abstractmethod
    def unit(cls) -> str: ...

    def describe(self) -> str:
        return f"{self.label}: {self.area()}"


class Polygon(Shape):
    def area(self) -> float:
        return 1.0


class Square(Polygon):
    side: float = 1.0

    @property
    def label(self) -> str:
        return "square"

    @classmethod
    def unit(cls) -> str:
        return "m2"


class Greeter(Protocol):
    name: str

    def greet(self, other: str) -> str:
        """Say hello."""
        ...

    async def wait(self) -> int:
        raise NotImplementedError

    def shout(self) -> str:
        return self.greet("everyone").upper()


class Account:
    __slots__ = ("__balance", "owner")

    def __init__(self, owner: str) -> None:
        self.owner = owner
        self.__balance = 0


class Ledger:
    __entries: list[int]
    version = 3

    def __init__(self) -> None:
        self.__entries = []

    @property
    def size(self) -> int:
        return len(self.__entries)


@dataclass
class Point:
    x: int
    y: int = 0


class TestClassify:
    """Concrete, abstract and interface kinds."""

    @pytest.mark.parametrize(
        ("cls", "kind"),
        [
            (Shape, TypeKind.ABSTRACT),
            (Polygon, TypeKind.ABSTRACT),
            (Square, TypeKind.CONCRETE),
            (Greeter, TypeKind.INTERFACE),
            (Point, TypeKind.CONCRETE),
            (int, TypeKind.CONCRETE),
        ],
    )
    def test_kinds(self, cls: type, kind: TypeKind) -> None:
        assert classify(cls) is kind

    def test_protocol_implementation_is_not_protocol(self) -> None:
        """An explicit subclass of a protocol is an ordinary class."""

        class Impl(Greeter):
            pass

        assert is_protocol(Greeter)
        assert not is_protocol(Impl)


class TestMangling:
    """Private name storage."""

    def test_mangle_private(self) -> None:
        assert mangle("__balance", Account) == "_Account__balance"

    @pytest.mark.parametrize("name", ["owner", "_soft", "__dunder__"])
    def test_mangle_leaves_other_names(self, name: str) -> None:
        assert mangle(name, Account) == name

    def test_mangle_strips_leading_underscores_of_owner(self) -> None:
        class _Hidden:
            pass

        assert mangle("__x", _Hidden) == "_Hidden__x"

    def test_demangle_roundtrip(self) -> None:
        assert demangle("_Account__balance", Account) == "__balance"
        assert demangle("owner", Account) == "owner"


class TestAcceptsNoArguments:
    """Zero-argument call detection."""

    def test_no_parameters(self) -> None:
        assert accepts_no_arguments(Ledger)

    def test_all_defaults(self) -> None:
        class Defaults:
            def __init__(self, a: int = 1, *args: int, **kwargs: int) -> None:
                pass

        assert accepts_no_arguments(Defaults)

    def test_required_parameter(self) -> None:
        assert not accepts_no_arguments(Account)
        assert not accepts_no_arguments(Point)

    def test_builtin_class(self) -> None:
        assert accepts_no_arguments(object)


class TestFields:
    """Field declarations."""

    def test_annotations_exclude_class_vars(self) -> None:
        names = [f.name for f in instance_fields(Shape)]
        assert names == ["sides"]

    def test_fields_along_mro_most_derived_first(self) -> None:
        names = [f.name for f in instance_fields(Square)]
        assert names == ["side", "sides"]

    def test_slots_are_mangled(self) -> None:
        fields = {f.name: f.storage_name for f in instance_fields(Account)}
        assert fields == {"__balance": "_Account__balance", "owner": "owner"}

    def test_private_annotation(self) -> None:
        (info,) = instance_fields(Ledger)
        assert info.name == "__entries"
        assert info.storage_name == "_Ledger__entries"
        assert info.annotation == list[int]

    def test_declared_field_plain_class_attribute(self) -> None:
        info = declared_field(Ledger, "version")
        assert info is not None
        assert info.declaring_type is Ledger

    def test_declared_field_skips_properties_and_methods(self) -> None:
        assert declared_field(Ledger, "size") is None
        assert declared_field(Ledger, "__init__") is None

    def test_declared_field_skips_nested_classes(self) -> None:
        class Holder:
            class Nested:
                pass

        assert declared_field(Holder, "Nested") is None

    def test_namedtuple_positions(self) -> None:
        Pair = namedtuple("Pair", "left right")

        assert [f.name for f in instance_fields(Pair)] == ["left", "right"]
        assert tuple_field_names(Pair) == ("left", "right")
        assert tuple_field_names(Ledger) == ()

    def test_declared_field_only_own_class(self) -> None:
        assert declared_field(Square, "sides") is None
        assert declared_field(Shape, "sides") is not None


class TestHasStubBody:
    """Protocol body detection."""

    def test_ellipsis_with_docstring(self) -> None:
        assert has_stub_body(Greeter.greet)

    def test_raise_not_implemented(self) -> None:
        assert has_stub_body(Greeter.wait)

    def test_real_body(self) -> None:
        assert not has_stub_body(Greeter.shout)

    def test_pass(self) -> None:
        def nothing() -> None:
            pass

        assert has_stub_body(nothing)

    def test_no_source(self) -> None:
        assert not has_stub_body(len)


class TestDescribe:
    """Type descriptors."""

    def test_abstract_operations(self) -> None:
        descriptor = describe(Shape)

        assert descriptor.is_abstract
        abstract = {op.name: op.kind for op in descriptor.abstract_operations}
        assert abstract == {
            "area": OperationKind.METHOD,
            "label": OperationKind.PROPERTY,
            "unit": OperationKind.CLASSMETHOD,
        }

    def test_concrete_operations_are_not_abstract(self) -> None:
        ops = {op.name: op for op in describe(Shape).operations}
        assert not ops["describe"].is_abstract

    def test_override_resolved_nearest_first(self) -> None:
        descriptor = describe(Polygon)

        area = next(op for op in descriptor.operations if op.name == "area")
        assert not area.is_abstract
        assert area.declaring_type is Polygon
        assert {op.name for op in descriptor.abstract_operations} == {"label", "unit"}

    def test_return_annotations_resolved(self) -> None:
        ops = {op.name: op for op in describe(Shape).operations}
        assert ops["area"].return_annotation is float
        assert ops["label"].return_annotation is str

    def test_protocol_stub_members_are_abstract(self) -> None:
        descriptor = describe(Greeter)

        assert descriptor.is_interface
        ops = {op.name: op for op in descriptor.operations}
        assert ops["greet"].is_abstract
        assert ops["wait"].is_abstract
        assert ops["wait"].is_async
        assert not ops["shout"].is_abstract

    def test_constructor_flags(self) -> None:
        assert describe(Ledger).zero_arg_constructor
        assert describe(Ledger).declares_constructor
        assert not describe(Account).zero_arg_constructor
        assert not describe(Shape).declares_constructor

    def test_qualified_name(self) -> None:
        assert describe(Point).qualified_name.endswith(".Point")
