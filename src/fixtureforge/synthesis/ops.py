"""Synthesis of concrete implementations for abstract classes and protocols.

``synthesize(Shape)`` returns a class ``Shape_implementation`` that:
- has ``Shape`` as its only base (protocols are implemented by subclassing)
- overrides every abstract operation with a stub that returns the
  type-appropriate default for its declared return type
- inherits every concrete operation unchanged
- gets a zero-argument ``__init__`` unless ``Shape`` already declares one
- is published in the synthetic namespace module, so it can be imported and
  resolved by name like any other class

One class is realized per derived name for the lifetime of the cache.
"""

from __future__ import annotations

import importlib
import inspect
import sys
import types
from collections.abc import Callable
from typing import Any

import structlog

from fixtureforge.config.models import SynthesisConfig
from fixtureforge.core.errors import SynthesisError
from fixtureforge.reflect.defaults import default_value_for
from fixtureforge.reflect.descriptor import (
    OperationInfo,
    OperationKind,
    TypeDescriptor,
    TypeKind,
    classify,
    describe,
)
from fixtureforge.reflect.fields import fill_default_fields
from fixtureforge.reflect.names import qualified_name, short_name
from fixtureforge.synthesis.cache import SynthesisCache, get_default_cache

log = structlog.get_logger(__name__)

# Results the interpreter checks when it calls these hooks (len, iter, hash,
# bool, str, ...). They win over the declared return annotation.
_PROTOCOL_RESULTS: dict[str, Callable[[], Any]] = {
    "__len__": lambda: 0,
    "__length_hint__": lambda: 0,
    "__hash__": lambda: 0,
    "__index__": lambda: 0,
    "__int__": lambda: 0,
    "__float__": lambda: 0.0,
    "__complex__": lambda: 0j,
    "__bool__": lambda: False,
    "__contains__": lambda: False,
    "__iter__": lambda: iter(()),
    "__reversed__": lambda: iter(()),
    "__await__": lambda: iter(()),
    "__str__": lambda: "",
    "__repr__": lambda: "",
    "__format__": lambda: "",
    "__fspath__": lambda: "",
    "__bytes__": lambda: b"",
}

# Iterator hooks end iteration instead of producing values forever.
_EXHAUSTED: dict[str, type[Exception]] = {
    "__next__": StopIteration,
    "__anext__": StopAsyncIteration,
}


def synthetic_name(abstract_type: type, config: SynthesisConfig | None = None) -> str:
    """Derived name: ``<namespace>.<short name><suffix>``."""
    config = config or SynthesisConfig()
    return f"{config.namespace}.{short_name(qualified_name(abstract_type))}{config.suffix}"


def synthesize(
    abstract_type: type,
    *,
    cache: SynthesisCache | None = None,
    config: SynthesisConfig | None = None,
) -> type:
    """Return the concrete implementation of ``abstract_type``, creating it once.

    Raises:
        SynthesisError: If the type is concrete, the derived name is taken by an
            implementation of an unrelated type, or no concrete subclass can
            be realized.
    """
    if classify(abstract_type) is TypeKind.CONCRETE:
        raise SynthesisError.not_abstract(qualified_name(abstract_type))

    cache = cache if cache is not None else get_default_cache()
    name = synthetic_name(abstract_type, config)
    realized = cache.get_or_create(name, lambda: _realize(abstract_type, name))

    if abstract_type not in realized.__mro__:
        raise SynthesisError.name_collision(
            name,
            qualified_name(abstract_type),
            qualified_name(getattr(realized, "__synthesized_from__", realized)),
        )
    return realized


def _realize(abstract_type: type, name: str) -> type:
    descriptor = describe(abstract_type)
    namespace_name, _, type_name = name.rpartition(".")
    namespace = _namespace_module(namespace_name)

    existing = namespace.__dict__.get(type_name)
    if existing is not None and getattr(existing, "__synthesized_from__", None) is None:
        raise SynthesisError.name_collision(name, descriptor.qualified_name, repr(existing))

    members: dict[str, Any] = {}
    generate_constructor = _needs_constructor(descriptor)
    if generate_constructor:
        members["__init__"] = _make_constructor(type_name)
    stubbed = []
    for op in descriptor.abstract_operations:
        members[op.name] = _make_stub(op, type_name)
        stubbed.append(op.name)

    def exec_body(ns: dict[str, Any]) -> None:
        ns.update(members)
        ns["__module__"] = namespace_name
        ns["__qualname__"] = type_name
        ns["__doc__"] = f"Synthetic implementation of {descriptor.qualified_name}."
        ns["__synthesized_from__"] = abstract_type

    try:
        realized = types.new_class(type_name, (abstract_type,), exec_body=exec_body)
    except Exception as e:  # noqa: BLE001 - metaclass conflicts, __init_subclass__ guards
        raise SynthesisError.cannot_subclass(descriptor.qualified_name, str(e)) from e

    if inspect.isabstract(realized):
        raise SynthesisError.incomplete(
            descriptor.qualified_name, sorted(realized.__abstractmethods__)
        )

    setattr(namespace, type_name, realized)
    exported = namespace.__dict__.setdefault("__all__", [])
    if type_name not in exported:
        exported.append(type_name)

    log.info(
        "implementation_synthesized",
        abstract=descriptor.qualified_name,
        kind=descriptor.kind.value,
        synthetic=name,
        stubs=stubbed,
        constructor=generate_constructor,
    )
    return realized


def _namespace_module(name: str) -> types.ModuleType:
    module = sys.modules.get(name)
    if module is not None:
        return module
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError:
        module = types.ModuleType(name, "Synthetic implementation types.")
        module.__all__ = []  # type: ignore[attr-defined]
        sys.modules[name] = module
        return module


def _needs_constructor(descriptor: TypeDescriptor) -> bool:
    """Protocols never lend a constructor; classes do when callable with no args."""
    if descriptor.is_interface:
        return True
    return not (descriptor.declares_constructor and descriptor.zero_arg_constructor)


def _make_constructor(owner_name: str) -> Callable[..., None]:
    def __init__(self: Any) -> None:
        fill_default_fields(self)

    __init__.__qualname__ = f"{owner_name}.__init__"
    return __init__


def _make_stub(op: OperationInfo, owner_name: str) -> Any:
    if op.kind is OperationKind.PROPERTY:
        prop: property = op.member
        fset = prop.fset
        if fset is not None and getattr(fset, "__isabstractmethod__", False):
            fset = _stub_function(op.name, None, False, owner_name, fset)
        fdel = prop.fdel
        if fdel is not None and getattr(fdel, "__isabstractmethod__", False):
            fdel = _stub_function(op.name, None, False, owner_name, fdel)
        fget = _stub_function(op.name, op.return_annotation, False, owner_name, prop.fget)
        return property(fget, fset, fdel, prop.__doc__)

    original = op.member.__func__ if isinstance(op.member, (classmethod, staticmethod)) else op.member
    stub = _stub_function(op.name, op.return_annotation, op.is_async, owner_name, original)
    if op.kind is OperationKind.CLASSMETHOD:
        return classmethod(stub)
    if op.kind is OperationKind.STATICMETHOD:
        return staticmethod(stub)
    return stub


def _result_factory(name: str, return_annotation: Any) -> Callable[[], Any]:
    protocol_default = _PROTOCOL_RESULTS.get(name)
    if protocol_default is not None:
        return protocol_default
    return lambda: default_value_for(return_annotation)


def _stub_function(
    name: str,
    return_annotation: Any,
    is_async: bool,
    owner_name: str,
    original: Any,
) -> Callable[..., Any]:
    """A function accepting anything and returning a fresh default value.

    Not built with functools.wraps: that would copy ``__isabstractmethod__``
    from the original and leave the class abstract.
    """
    exhausted = _EXHAUSTED.get(name)
    make_result = _result_factory(name, return_annotation)
    stub: Callable[..., Any]
    if is_async:

        async def stub(*args: Any, **kwargs: Any) -> Any:  # noqa: ARG001
            if exhausted is not None:
                raise exhausted
            return make_result()

    else:

        def stub(*args: Any, **kwargs: Any) -> Any:  # noqa: ARG001
            if exhausted is not None:
                raise exhausted
            return make_result()

    stub.__name__ = name
    stub.__qualname__ = f"{owner_name}.{name}"
    if original is not None:
        stub.__doc__ = original.__doc__
        try:
            stub.__signature__ = inspect.signature(original)  # type: ignore[attr-defined]
        except (TypeError, ValueError):
            pass
    return stub
