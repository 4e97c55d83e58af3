"""Read-only type metadata.

A ``TypeDescriptor`` is a snapshot of what the engine needs to know about a
class: whether it is concrete, abstract or a protocol, which fields it declares,
which operations it declares (and which of them lack a body), and whether it
can be called without arguments.

Per-instance fields are non-ClassVar annotations and ``__slots__`` entries.
A plain class attribute (anything that is not a descriptor) also counts as a
field for lookups, with class-wide storage. Properties are operations, not
fields.
"""

from __future__ import annotations

import ast
import inspect
import textwrap
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from types import MemberDescriptorType
from typing import Any, ClassVar, Generic, Protocol, get_origin, get_type_hints

from fixtureforge.reflect.names import qualified_name

# Bases whose members are plumbing, never operations of the described type.
_PLUMBING_BASES: frozenset[type] = frozenset({object, ABC, Generic, Protocol})  # type: ignore[arg-type]

# Never stubbed: construction hooks and typing/abc machinery.
_NON_OPERATIONS = frozenset(
    {
        "__init__",
        "__new__",
        "__init_subclass__",
        "__class_getitem__",
        "__subclasshook__",
        "__getattr__",
        "__getattribute__",
        "__setattr__",
        "__delattr__",
    }
)


class TypeKind(Enum):
    CONCRETE = "concrete"
    ABSTRACT = "abstract"
    INTERFACE = "interface"


class OperationKind(Enum):
    METHOD = "method"
    CLASSMETHOD = "classmethod"
    STATICMETHOD = "staticmethod"
    PROPERTY = "property"


@dataclass(frozen=True, slots=True)
class FieldInfo:
    """A field as declared by one class.

    ``storage_name`` differs from ``name`` only for ``__private`` names,
    which Python stores mangled (``_Owner__private``).
    """

    name: str
    storage_name: str
    declaring_type: type
    annotation: Any = inspect.Parameter.empty


@dataclass(frozen=True, slots=True)
class OperationInfo:
    """A callable member (method, classmethod, staticmethod or property)."""

    name: str
    kind: OperationKind
    declaring_type: type
    member: Any
    is_abstract: bool
    is_async: bool
    return_annotation: Any


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    type: type
    qualified_name: str
    kind: TypeKind
    fields: tuple[FieldInfo, ...]
    operations: tuple[OperationInfo, ...]
    zero_arg_constructor: bool
    declares_constructor: bool

    @property
    def is_abstract(self) -> bool:
        return self.kind is TypeKind.ABSTRACT

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def abstract_operations(self) -> tuple[OperationInfo, ...]:
        return tuple(op for op in self.operations if op.is_abstract)


def mangle(name: str, owner: type) -> str:
    """Storage name of ``name`` as written inside the body of ``owner``."""
    if not name.startswith("__") or name.endswith("__"):
        return name
    stripped = owner.__name__.lstrip("_")
    if not stripped:
        return name
    return f"_{stripped}{name}"


def demangle(storage_name: str, owner: type) -> str:
    """Inverse of ``mangle``: ``_Owner__x`` -> ``__x``."""
    prefix = f"_{owner.__name__.lstrip('_')}__"
    if storage_name.startswith(prefix) and not storage_name.endswith("__"):
        return storage_name[len(prefix) - 2 :]
    return storage_name


def is_protocol(cls: type) -> bool:
    return bool(cls.__dict__.get("_is_protocol", False))


def classify(cls: type) -> TypeKind:
    if is_protocol(cls):
        return TypeKind.INTERFACE
    if inspect.isabstract(cls):
        return TypeKind.ABSTRACT
    return TypeKind.CONCRETE


def accepts_no_arguments(target: Any) -> bool:
    """True when ``target()`` is a valid call signature.

    Callables without introspectable signatures (most builtins) are assumed
    to accept it; the caller finds out when it tries.
    """
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return True
    variadic = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    return all(
        param.default is not inspect.Parameter.empty or param.kind in variadic
        for param in signature.parameters.values()
    )


def own_annotations(klass: type) -> dict[str, Any]:
    """Annotations declared in ``klass``'s own body, evaluated when possible."""
    try:
        return inspect.get_annotations(klass, eval_str=True)
    except Exception:  # noqa: BLE001 - unresolvable forward references
        pass
    try:
        return inspect.get_annotations(klass)
    except NameError:
        return {}


def _is_class_var(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _slot_names(klass: type) -> tuple[str, ...]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return tuple(s for s in slots if s not in ("__dict__", "__weakref__"))


_EMPTY = inspect.Parameter.empty


def tuple_field_names(klass: type) -> tuple[str, ...]:
    """Positional fields a namedtuple class declares (its ``_fields``)."""
    if not issubclass(klass, tuple):
        return ()
    fields = klass.__dict__.get("_fields", ())
    return tuple(fields) if isinstance(fields, tuple) else ()


def declared_field(klass: type, storage_name: str) -> FieldInfo | None:
    """The field ``klass`` itself declares under ``storage_name``, if any."""
    name = demangle(storage_name, klass)
    annotations = own_annotations(klass)
    if storage_name in annotations and not _is_class_var(annotations[storage_name]):
        return FieldInfo(name, storage_name, klass, annotations[storage_name])

    if storage_name not in klass.__dict__:
        return None
    member = klass.__dict__[storage_name]
    if isinstance(member, MemberDescriptorType) or storage_name in tuple_field_names(klass):
        return FieldInfo(name, storage_name, klass, annotations.get(storage_name, _EMPTY))
    if hasattr(type(member), "__get__"):
        # properties, functions, classmethods and other computed members
        return None
    if isinstance(member, type):
        # nested classes
        return None
    return FieldInfo(name, storage_name, klass, annotations.get(storage_name, _EMPTY))


def declared_fields(klass: type) -> list[FieldInfo]:
    """Per-instance fields declared by ``klass`` alone: annotations, slots, then
    namedtuple positions."""
    found: dict[str, FieldInfo] = {}
    for storage_name, annotation in own_annotations(klass).items():
        if not _is_class_var(annotation):
            found[storage_name] = FieldInfo(
                demangle(storage_name, klass), storage_name, klass, annotation
            )
    for slot in _slot_names(klass):
        storage_name = mangle(slot, klass)
        found.setdefault(storage_name, FieldInfo(slot, storage_name, klass))
    for positional in tuple_field_names(klass):
        found.setdefault(positional, FieldInfo(positional, positional, klass))
    return list(found.values())


def instance_fields(cls: type) -> list[FieldInfo]:
    """Per-instance fields along the whole MRO, most-derived declaration first."""
    seen: set[str] = set()
    result: list[FieldInfo] = []
    for klass in cls.__mro__:
        if klass in _PLUMBING_BASES:
            continue
        for info in declared_fields(klass):
            if info.storage_name not in seen:
                seen.add(info.storage_name)
                result.append(info)
    return result


def has_stub_body(func: Any) -> bool:
    """True if the function body is only a docstring, ``...``, ``pass`` or
    ``raise NotImplementedError``. Used for protocol members, which carry no
    abstract flag."""
    try:
        source = textwrap.dedent(inspect.getsource(func))
        tree = ast.parse(source)
    except (OSError, TypeError, SyntaxError):
        return False
    if not tree.body or not isinstance(tree.body[0], (ast.FunctionDef, ast.AsyncFunctionDef)):
        return False

    body = tree.body[0].body
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
        if isinstance(body[0].value.value, str):
            body = body[1:]
    return all(_is_stub_statement(stmt) for stmt in body)


def _is_stub_statement(stmt: ast.stmt) -> bool:
    if isinstance(stmt, ast.Pass):
        return True
    if isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Constant):
        return stmt.value.value is Ellipsis
    if isinstance(stmt, ast.Raise) and stmt.exc is not None:
        exc = stmt.exc.func if isinstance(stmt.exc, ast.Call) else stmt.exc
        return isinstance(exc, ast.Name) and exc.id == "NotImplementedError"
    return False


def _unwrap_member(member: Any) -> tuple[OperationKind, Any] | None:
    if isinstance(member, staticmethod):
        return OperationKind.STATICMETHOD, member.__func__
    if isinstance(member, classmethod):
        return OperationKind.CLASSMETHOD, member.__func__
    if isinstance(member, property):
        return OperationKind.PROPERTY, member.fget
    if inspect.isfunction(member):
        return OperationKind.METHOD, member
    return None


def _return_annotation(func: Any) -> Any:
    if func is None:
        return None
    try:
        return get_type_hints(func).get("return", inspect.Signature.empty)
    except Exception:  # noqa: BLE001 - unresolvable forward references
        return getattr(func, "__annotations__", {}).get("return", inspect.Signature.empty)


def _is_abstract_member(member: Any, func: Any, declared_on_protocol: bool) -> bool:
    if getattr(member, "__isabstractmethod__", False):
        return True
    return declared_on_protocol and func is not None and has_stub_body(func)


def declared_operations(klass: type) -> list[OperationInfo]:
    """Operations declared by ``klass`` alone."""
    on_protocol = is_protocol(klass)
    result = []
    for name, member in klass.__dict__.items():
        if name in _NON_OPERATIONS:
            continue
        unwrapped = _unwrap_member(member)
        if unwrapped is None:
            continue
        kind, func = unwrapped
        result.append(
            OperationInfo(
                name=name,
                kind=kind,
                declaring_type=klass,
                member=member,
                is_abstract=_is_abstract_member(member, func, on_protocol),
                is_async=inspect.iscoroutinefunction(func),
                return_annotation=_return_annotation(func),
            )
        )
    return result


def describe(cls: type) -> TypeDescriptor:
    """Build a descriptor for ``cls``.

    Operations are resolved nearest-first along the MRO, so an abstract
    method overridden by a subclass shows up as the concrete override.
    """
    seen: set[str] = set()
    operations: list[OperationInfo] = []
    for klass in cls.__mro__:
        if klass in _PLUMBING_BASES:
            continue
        for op in declared_operations(klass):
            if op.name not in seen:
                seen.add(op.name)
                operations.append(op)

    return TypeDescriptor(
        type=cls,
        qualified_name=qualified_name(cls),
        kind=classify(cls),
        fields=tuple(instance_fields(cls)),
        operations=tuple(operations),
        zero_arg_constructor=accepts_no_arguments(cls),
        declares_constructor=any(
            "__init__" in klass.__dict__
            for klass in cls.__mro__
            if klass not in _PLUMBING_BASES and not is_protocol(klass)
        ),
    )

