"""fixtureforge: fabricate instances of arbitrary classes for generated tests.

Public API:
    force_instance(name_or_class)         -> instance, even for ABCs and protocols
    get_field(obj, name) / set_field(obj, name, value)
                                          -> read/write any field, frozen or private
    resolve_type_by_name(name)            -> class (primitive names map to ctypes)
    synthesize(abstract_class)            -> cached concrete implementation
"""

from fixtureforge.core.errors import (
    ErrorCode,
    FieldNotFoundError,
    ForgeError,
    InstantiationError,
    SynthesisError,
    TypeMismatchError,
    TypeNotFoundError,
)
from fixtureforge.forcing import allocate_without_constructor, construct, force_instance
from fixtureforge.reflect import (
    classify,
    describe,
    get_field,
    qualified_name,
    resolve_type_by_name,
    set_field,
    short_name,
)
from fixtureforge.synthesis import SynthesisCache, reset_default_cache, synthesize

__all__ = [
    "ErrorCode",
    "FieldNotFoundError",
    "ForgeError",
    "InstantiationError",
    "SynthesisCache",
    "SynthesisError",
    "TypeMismatchError",
    "TypeNotFoundError",
    "allocate_without_constructor",
    "classify",
    "construct",
    "describe",
    "force_instance",
    "get_field",
    "qualified_name",
    "reset_default_cache",
    "resolve_type_by_name",
    "set_field",
    "short_name",
    "synthesize",
]
