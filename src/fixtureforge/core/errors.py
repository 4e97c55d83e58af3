"""fixtureforge error types with typed error codes.

Error code ranges:
- 1xxx: Type resolution
- 2xxx: Config
- 3xxx: Field access
- 4xxx: Synthesis
- 5xxx: Instantiation
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Resolution (1xxx)
    TYPE_NOT_FOUND = 1001
    TYPE_NOT_A_CLASS = 1002

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Fields (3xxx)
    FIELD_NOT_FOUND = 3001
    FIELD_TYPE_MISMATCH = 3002
    FIELD_READ_ONLY = 3003

    # Synthesis (4xxx)
    SYNTHESIS_NOT_ABSTRACT = 4001
    SYNTHESIS_NAME_COLLISION = 4002
    SYNTHESIS_INCOMPLETE = 4003
    SYNTHESIS_CANNOT_SUBCLASS = 4004

    # Instantiation (5xxx)
    INSTANTIATION_IMPOSSIBLE = 5001


@dataclass(eq=False)
class ForgeError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'FIELD_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs and reports."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class TypeNotFoundError(ForgeError):
    """A requested type name does not resolve to a class."""

    @classmethod
    def not_found(cls, name: str, reason: str) -> "TypeNotFoundError":
        return cls(
            code=ErrorCode.TYPE_NOT_FOUND,
            message=f"Type not found: {name} ({reason})",
            details={"name": name, "reason": reason},
        )

    @classmethod
    def not_a_class(cls, name: str, kind: str) -> "TypeNotFoundError":
        return cls(
            code=ErrorCode.TYPE_NOT_A_CLASS,
            message=f"'{name}' resolves to a {kind}, not a class",
            details={"name": name, "kind": kind},
        )


class ConfigError(ForgeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class FieldNotFoundError(ForgeError):
    """A field is absent from an instance's type and all of its ancestors."""

    @classmethod
    def missing(cls, type_name: str, field_name: str) -> "FieldNotFoundError":
        return cls(
            code=ErrorCode.FIELD_NOT_FOUND,
            message=f"Field '{field_name}' not found on {type_name} or its ancestors",
            details={"type": type_name, "field": field_name},
        )

    @classmethod
    def read_only(cls, type_name: str, field_name: str, reason: str) -> "FieldNotFoundError":
        return cls(
            code=ErrorCode.FIELD_READ_ONLY,
            message=f"Field '{field_name}' on {type_name} has no writable storage: {reason}",
            details={"type": type_name, "field": field_name, "reason": reason},
        )


class TypeMismatchError(ForgeError):
    """A value is incompatible with a field's declared type."""

    @classmethod
    def for_field(
        cls, type_name: str, field_name: str, expected: Any, value: Any
    ) -> "TypeMismatchError":
        return cls(
            code=ErrorCode.FIELD_TYPE_MISMATCH,
            message=(
                f"Cannot assign {type(value).__name__} to '{field_name}' on {type_name}: "
                f"declared as {expected!r}"
            ),
            details={
                "type": type_name,
                "field": field_name,
                "expected": repr(expected),
                "actual": type(value).__name__,
            },
        )


class SynthesisError(ForgeError):
    """A synthetic implementation type could not be realized."""

    @classmethod
    def not_abstract(cls, type_name: str) -> "SynthesisError":
        return cls(
            code=ErrorCode.SYNTHESIS_NOT_ABSTRACT,
            message=f"{type_name} is neither abstract nor a protocol",
            details={"type": type_name},
        )

    @classmethod
    def name_collision(
        cls, synthetic_name: str, requested: str, existing: str
    ) -> "SynthesisError":
        return cls(
            code=ErrorCode.SYNTHESIS_NAME_COLLISION,
            message=(
                f"Synthetic name {synthetic_name} for {requested} is already bound "
                f"to an implementation of {existing}"
            ),
            details={"name": synthetic_name, "requested": requested, "existing": existing},
        )

    @classmethod
    def incomplete(cls, type_name: str, remaining: list[str]) -> "SynthesisError":
        return cls(
            code=ErrorCode.SYNTHESIS_INCOMPLETE,
            message=f"Synthetic implementation of {type_name} is still abstract: {remaining}",
            details={"type": type_name, "remaining": remaining},
        )

    @classmethod
    def cannot_subclass(cls, type_name: str, reason: str) -> "SynthesisError":
        return cls(
            code=ErrorCode.SYNTHESIS_CANNOT_SUBCLASS,
            message=f"Cannot subclass {type_name}: {reason}",
            details={"type": type_name, "reason": reason},
        )


class InstantiationError(ForgeError):
    """Neither construction nor bypass allocation produced an instance."""

    @classmethod
    def impossible(cls, type_name: str, reason: str) -> "InstantiationError":
        return cls(
            code=ErrorCode.INSTANTIATION_IMPOSSIBLE,
            message=f"Cannot instantiate {type_name}: {reason}",
            details={"type": type_name, "reason": reason},
        )
