"""Type-appropriate default values and a lenient runtime type check.

``default_value_for`` is the Python reading of "zeroed storage": ``0`` for
numbers, ``False`` for bools, empty strings and containers, ``None`` for
everything else (including ``Optional[...]`` and arbitrary classes).

``conforms_to`` answers "could this value live in a field declared as
``hint``?". It only rejects values it can prove wrong; unresolved string
annotations, type variables and non-runtime protocols are accepted.
"""

from __future__ import annotations

import collections.abc as cabc
import ctypes
import inspect
import types
from collections.abc import Callable
from typing import (
    Annotated,
    Any,
    ClassVar,
    Final,
    ForwardRef,
    Literal,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

_SCALARS: dict[Any, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
}

# Fresh object per call for mutable containers.
_EMPTY_FACTORIES: dict[Any, Callable[[], Any]] = {
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    bytearray: bytearray,
    cabc.MutableSequence: list,
    cabc.Sequence: tuple,
    cabc.MutableMapping: dict,
    cabc.Mapping: dict,
    cabc.MutableSet: set,
    cabc.Set: frozenset,
    cabc.Collection: tuple,
    cabc.Iterable: tuple,
    cabc.Iterator: lambda: iter(()),
    cabc.Generator: lambda: (_ for _ in ()),
}

_WRAPPERS = (Annotated, Final, ClassVar)


def _unwrap(hint: Any) -> Any:
    """Strip Annotated[...], Final[...] and ClassVar[...]."""
    while get_origin(hint) in _WRAPPERS:
        hint = get_args(hint)[0]
    return hint


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def default_value_for(hint: Any) -> Any:
    """Return the zero/empty/false/None value for a declared type."""
    hint = _unwrap(hint)
    if hint is None or hint is type(None) or hint is Any or hint is inspect.Signature.empty:
        return None

    origin = get_origin(hint)
    if _is_union(origin):
        args = get_args(hint)
        if type(None) in args:
            return None
        return default_value_for(args[0])
    if origin is Literal:
        return get_args(hint)[0]
    if origin is not None:
        hint = origin

    if hint in _SCALARS:
        return _SCALARS[hint]
    factory = _EMPTY_FACTORIES.get(hint)
    if factory is not None:
        return factory()
    if isinstance(hint, type) and issubclass(hint, ctypes._SimpleCData):
        return hint()
    return None


def conforms_to(value: Any, hint: Any) -> bool:
    """Check ``value`` against a declared annotation."""
    if hint in (Final, ClassVar):
        return True
    hint = _unwrap(hint)
    if hint is Any or hint is object or hint is inspect.Parameter.empty:
        return True
    if isinstance(hint, (str, ForwardRef, TypeVar)):
        return True
    if hint is None or hint is type(None):
        return value is None

    origin = get_origin(hint)
    if _is_union(origin):
        return any(conforms_to(value, arg) for arg in get_args(hint))
    if origin is Literal:
        return value in get_args(hint)
    if origin is not None:
        hint = origin

    # int is acceptable where float or complex is declared
    if hint is float:
        return isinstance(value, (int, float))
    if hint is complex:
        return isinstance(value, (int, float, complex))
    if not isinstance(hint, type):
        return True
    try:
        return isinstance(value, hint)
    except TypeError:
        # Protocols without @runtime_checkable and similar
        return True
