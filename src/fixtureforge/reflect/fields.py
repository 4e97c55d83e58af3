"""Read and overwrite fields regardless of privacy or immutability.

Lookup walks ``type(instance).__mro__`` most-derived first. At each class the
field name is mangled the way that class's body would mangle it, so
``get_field(obj, "__token")`` finds ``_Child__token`` before ``_Base__token``.

Writes never go through ``__setattr__``: slot storage is written through the
slot's member descriptor and everything else straight into ``__dict__``. That
is what lets frozen dataclasses and guarded classes be forced into arbitrary
states. Nothing about a field is remembered between calls.
"""

from __future__ import annotations

from types import MemberDescriptorType
from typing import Any

import structlog

from fixtureforge.core.errors import FieldNotFoundError, TypeMismatchError
from fixtureforge.reflect.defaults import conforms_to, default_value_for
from fixtureforge.reflect.descriptor import (
    FieldInfo,
    declared_field,
    instance_fields,
    mangle,
    tuple_field_names,
)
from fixtureforge.reflect.names import qualified_name

log = structlog.get_logger(__name__)


def _instance_dict(instance: Any) -> dict[str, Any] | None:
    try:
        state = object.__getattribute__(instance, "__dict__")
    except AttributeError:
        return None
    return state if isinstance(state, dict) else None


def _locate(instance: Any, field_name: str) -> FieldInfo:
    cls = type(instance)
    state = _instance_dict(instance)
    for klass in cls.__mro__:
        storage_name = mangle(field_name, klass)
        info = declared_field(klass, storage_name)
        if info is not None:
            return info
        if state is not None and storage_name in state:
            # undeclared attribute assigned in __init__ or later
            return FieldInfo(field_name, storage_name, klass)
    raise FieldNotFoundError.missing(qualified_name(cls), field_name)


def get_field(instance: Any, field_name: str) -> Any:
    """Read ``field_name`` from ``instance``.

    A declared field with no value yet (unset slot, annotation only) reads
    as ``None``.

    Raises:
        FieldNotFoundError: If no class in the MRO declares the field and the
            instance does not hold it.
    """
    info = _locate(instance, field_name)
    state = _instance_dict(instance)
    if state is not None and info.storage_name in state:
        return state[info.storage_name]

    member = info.declaring_type.__dict__.get(info.storage_name)
    if isinstance(member, MemberDescriptorType) or _is_tuple_field(info):
        try:
            return member.__get__(instance, type(instance))
        except (AttributeError, IndexError):
            return None
    if info.storage_name in info.declaring_type.__dict__:
        return member
    return None


def set_field(instance: Any, field_name: str, value: Any) -> None:
    """Overwrite ``field_name`` on ``instance`` with ``value``.

    Raises:
        FieldNotFoundError: If the field cannot be located, or it only exists
            as a class attribute of a class that refuses assignment.
        TypeMismatchError: If the declaring class annotates the field with a
            type ``value`` does not conform to.
    """
    cls = type(instance)
    info = _locate(instance, field_name)
    if not conforms_to(value, info.annotation):
        raise TypeMismatchError.for_field(qualified_name(cls), field_name, info.annotation, value)

    _write(instance, info, value)
    log.debug(
        "field_written",
        type=qualified_name(cls),
        field=field_name,
        storage=info.storage_name,
        declared_on=qualified_name(info.declaring_type),
    )


def _is_tuple_field(info: FieldInfo) -> bool:
    return info.storage_name in tuple_field_names(info.declaring_type)


def _write(instance: Any, info: FieldInfo, value: Any) -> None:
    if _is_tuple_field(info):
        raise FieldNotFoundError.read_only(
            qualified_name(type(instance)), info.name, "namedtuple positions are immutable"
        )
    member = info.declaring_type.__dict__.get(info.storage_name)
    if isinstance(member, MemberDescriptorType):
        member.__set__(instance, value)
        return

    state = _instance_dict(instance)
    if state is not None:
        state[info.storage_name] = value
        return

    # No per-instance storage: a plain class attribute shared by all instances.
    try:
        type.__setattr__(info.declaring_type, info.storage_name, value)
    except (AttributeError, TypeError) as e:
        raise FieldNotFoundError.read_only(
            qualified_name(type(instance)), info.name, str(e)
        ) from e


def fill_default_fields(instance: Any) -> list[str]:
    """Give every unbound per-instance field its type-appropriate default.

    Fields that already hold a value are left alone. Returns the storage
    names that were filled.
    """
    state = _instance_dict(instance)
    filled = []
    for info in instance_fields(type(instance)):
        owner_dict = info.declaring_type.__dict__
        member = owner_dict.get(info.storage_name)
        if isinstance(member, MemberDescriptorType):
            try:
                member.__get__(instance, type(instance))
                continue
            except AttributeError:
                member.__set__(instance, default_value_for(info.annotation))
        elif info.storage_name in owner_dict:
            # class-level default is already readable through the instance
            continue
        elif state is not None and info.storage_name not in state:
            state[info.storage_name] = default_value_for(info.annotation)
        else:
            continue
        filled.append(info.storage_name)
    return filled
