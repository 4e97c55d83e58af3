"""Reflection helpers: type resolution, type metadata and field access."""

from fixtureforge.reflect.defaults import conforms_to, default_value_for
from fixtureforge.reflect.descriptor import (
    FieldInfo,
    OperationInfo,
    OperationKind,
    TypeDescriptor,
    TypeKind,
    accepts_no_arguments,
    classify,
    describe,
)
from fixtureforge.reflect.fields import fill_default_fields, get_field, set_field
from fixtureforge.reflect.names import (
    PRIMITIVE_TYPES,
    qualified_name,
    resolve_type_by_name,
    short_name,
)

__all__ = [
    # Names
    "PRIMITIVE_TYPES",
    "qualified_name",
    "resolve_type_by_name",
    "short_name",
    # Metadata
    "FieldInfo",
    "OperationInfo",
    "OperationKind",
    "TypeDescriptor",
    "TypeKind",
    "accepts_no_arguments",
    "classify",
    "describe",
    # Values
    "conforms_to",
    "default_value_for",
    # Fields
    "fill_default_fields",
    "get_field",
    "set_field",
]
