"""Force an instance of any class into existence.

Per call:

    resolve -> classify -> [synthesize] -> construct -> [bypass allocate]

- resolve: names go through ``resolve_type_by_name``
- classify: abstract classes and protocols are replaced by their synthetic
  implementation; construction then runs on that class directly
- construct: call the class with no arguments if its signature allows it.
  Any exception (or a timeout, if configured) is logged and falls through
- bypass allocate: run the nearest native ``__new__`` only, never ``__init__``
  or a Python-level ``__new__``, then zero-fill declared fields
"""

from __future__ import annotations

import inspect
import threading
from enum import EnumMeta
from typing import Any

import structlog

from fixtureforge.config.models import ForcingConfig, ForgeConfig
from fixtureforge.core.errors import InstantiationError, TypeNotFoundError
from fixtureforge.reflect.defaults import default_value_for
from fixtureforge.reflect.descriptor import (
    TypeKind,
    accepts_no_arguments,
    classify,
    own_annotations,
)
from fixtureforge.reflect.fields import fill_default_fields
from fixtureforge.reflect.names import qualified_name, resolve_type_by_name
from fixtureforge.synthesis.cache import SynthesisCache
from fixtureforge.synthesis.ops import synthesize

log = structlog.get_logger(__name__)


def force_instance(
    target: str | type,
    *,
    cache: SynthesisCache | None = None,
    config: ForgeConfig | None = None,
) -> Any:
    """Return an instance of ``target`` (a class or a dotted class name).

    For abstract classes and protocols the instance belongs to a synthetic
    subclass. The caller owns the result; nothing is retained.

    Raises:
        TypeNotFoundError: If the name does not resolve, or ``target`` is not a class.
        SynthesisError: If an abstract target cannot be implemented.
        InstantiationError: If even bypass allocation fails.
    """
    config = config or ForgeConfig()
    if isinstance(target, str):
        cls = resolve_type_by_name(target)
    elif isinstance(target, type):
        cls = target
    else:
        raise TypeNotFoundError.not_a_class(repr(target), type(target).__name__)

    if classify(cls) is not TypeKind.CONCRETE:
        cls = synthesize(cls, cache=cache, config=config.synthesis)
    return construct(cls, config=config.forcing)


def construct(cls: type, *, config: ForcingConfig | None = None) -> Any:
    """Instantiate a concrete class, preferring its zero-argument constructor."""
    config = config or ForcingConfig()
    name = qualified_name(cls)

    if accepts_no_arguments(cls):
        try:
            return _call_constructor(cls, config.construct_timeout_sec)
        except Exception as e:  # noqa: BLE001 - any constructor failure means bypass
            log.warning(
                "construction_fell_back",
                type=name,
                error=type(e).__name__,
                reason=str(e),
            )
    else:
        log.debug("no_zero_arg_constructor", type=name)

    return allocate_without_constructor(cls, populate_defaults=config.populate_defaults)


def _call_constructor(cls: type, timeout: float | None) -> Any:
    if timeout is None:
        return cls()

    outcome: dict[str, Any] = {}

    def run() -> None:
        try:
            outcome["instance"] = cls()
        except BaseException as e:  # noqa: BLE001 - re-raised on the caller's thread
            outcome["error"] = e

    worker = threading.Thread(target=run, name=f"construct-{cls.__name__}", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        log.warning("construction_timed_out", type=qualified_name(cls), timeout_sec=timeout)
        raise TimeoutError(f"{qualified_name(cls)}() did not return within {timeout}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["instance"]


def _native_new(cls: type) -> Any:
    """Nearest ``__new__`` implemented in C. Python-level ``__new__`` is
    stored as a staticmethod and skipped."""
    for klass in cls.__mro__:
        new = klass.__dict__.get("__new__")
        if new is not None and not isinstance(new, staticmethod):
            return new
    return object.__new__


def _tuple_positions(cls: type, populate_defaults: bool) -> list[Any]:
    """One value per namedtuple position: declared default, else type default."""
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        hints.update(own_annotations(klass))
    field_defaults = getattr(cls, "_field_defaults", {})
    values = []
    for name in cls._fields:  # type: ignore[attr-defined]
        if name in field_defaults:
            values.append(field_defaults[name])
        elif populate_defaults:
            values.append(default_value_for(hints.get(name, inspect.Parameter.empty)))
        else:
            values.append(None)
    return values


def allocate_without_constructor(cls: type, *, populate_defaults: bool = True) -> Any:
    """Create an instance of ``cls`` without running any constructor.

    Enums cannot have instances beyond their members, so the first member is
    returned. Namedtuples are allocated with one value per position.

    Raises:
        InstantiationError: If the native allocator refuses ``cls`` (abstract
            classes, types that cannot be created from Python, enums without
            members).
    """
    name = qualified_name(cls)
    if isinstance(cls, EnumMeta):
        member = next(iter(cls), None)
        if member is None:
            raise InstantiationError.impossible(name, "enum has no members")
        log.debug("enum_member_selected", type=name, member=member.name)
        return member

    try:
        if issubclass(cls, tuple) and hasattr(cls, "_fields"):
            instance = tuple.__new__(cls, _tuple_positions(cls, populate_defaults))
        else:
            instance = _native_new(cls)(cls)
    except Exception as e:  # noqa: BLE001 - reported as InstantiationError
        raise InstantiationError.impossible(name, str(e)) from e

    filled = fill_default_fields(instance) if populate_defaults else []
    log.debug("bypass_allocated", type=name, filled=filled)
    return instance
