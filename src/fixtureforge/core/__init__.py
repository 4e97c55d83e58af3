"""Core module exports."""

from fixtureforge.core.errors import (
    ConfigError,
    ErrorCode,
    FieldNotFoundError,
    ForgeError,
    InstantiationError,
    SynthesisError,
    TypeMismatchError,
    TypeNotFoundError,
)
from fixtureforge.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "FieldNotFoundError",
    "ForgeError",
    "InstantiationError",
    "SynthesisError",
    "TypeMismatchError",
    "TypeNotFoundError",
    # Logging
    "configure_logging",
    "get_logger",
]
