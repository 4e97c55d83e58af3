"""Type resolution by name.

Primitive names (``int``, ``long``, ``char`` ...) map to fixed-width ctypes
types. Bare names are looked up in ``builtins``; dotted names import the
longest importable module prefix and walk the remaining attributes, so nested
classes (``pkg.mod.Outer.Inner``) resolve too.
"""

from __future__ import annotations

import builtins
import ctypes
import importlib
from types import MappingProxyType
from typing import Any

from fixtureforge.core.errors import TypeNotFoundError

PRIMITIVE_TYPES: MappingProxyType[str, type] = MappingProxyType(
    {
        "float": ctypes.c_float,
        "byte": ctypes.c_byte,
        "char": ctypes.c_wchar,
        "short": ctypes.c_short,
        "double": ctypes.c_double,
        "int": ctypes.c_int32,
        "long": ctypes.c_int64,
        "boolean": ctypes.c_bool,
    }
)


def qualified_name(cls: type) -> str:
    """``module.QualName`` for a class, e.g. ``shapes.Circle``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def short_name(name: str) -> str:
    """Strip everything up to the last dot: ``a.b.Circle`` -> ``Circle``."""
    return name.rpartition(".")[2]


def resolve_type_by_name(name: str) -> type:
    """Resolve a (possibly dotted) type name to a class.

    Raises:
        TypeNotFoundError: If nothing is found, or the name resolves to
            something that is not a class.
    """
    primitive = PRIMITIVE_TYPES.get(name)
    if primitive is not None:
        return primitive

    parts = name.split(".")
    if not name or not all(part.isidentifier() for part in parts):
        raise TypeNotFoundError.not_found(name, "not a dotted identifier")

    if len(parts) == 1:
        found = getattr(builtins, name, None)
        if found is None:
            raise TypeNotFoundError.not_found(name, "no such builtin")
        return _require_class(name, found)

    module, remaining = _import_longest_prefix(name, parts)
    obj: Any = module
    for attr in remaining:
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise TypeNotFoundError.not_found(
                name, f"{type(obj).__name__} {getattr(obj, '__name__', obj)!s} has no '{attr}'"
            ) from e
    return _require_class(name, obj)


def _import_longest_prefix(name: str, parts: list[str]) -> tuple[Any, list[str]]:
    for i in range(len(parts), 0, -1):
        module_name = ".".join(parts[:i])
        try:
            return importlib.import_module(module_name), parts[i:]
        except ModuleNotFoundError as e:
            # Only keep shortening when the prefix itself is missing, not when
            # an existing module fails on one of its own imports.
            if e.name is None or not (
                module_name == e.name or module_name.startswith(f"{e.name}.")
            ):
                raise TypeNotFoundError.not_found(name, f"importing {module_name}: {e}") from e
        except ImportError as e:
            raise TypeNotFoundError.not_found(name, f"importing {module_name}: {e}") from e
    raise TypeNotFoundError.not_found(name, f"no importable module prefix in '{name}'")


def _require_class(name: str, obj: Any) -> type:
    if not isinstance(obj, type):
        raise TypeNotFoundError.not_a_class(name, type(obj).__name__)
    return obj
