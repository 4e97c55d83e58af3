"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (FIXTUREFORGE__SECTION__KEY)
3. Project YAML (.fixtureforge.yaml)
4. Global YAML (~/.config/fixtureforge/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    FIXTUREFORGE__<SECTION>__<KEY>=<VALUE>

Examples:
    FIXTUREFORGE__LOGGING__LEVEL=DEBUG
    FIXTUREFORGE__SYNTHESIS__NAMESPACE=tests.stubs
    FIXTUREFORGE__FORCING__CONSTRUCT_TIMEOUT_SEC=2.5
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from fixtureforge.config.constants import DEFAULT_SYNTHETIC_NAMESPACE, DEFAULT_SYNTHETIC_SUFFIX

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        FIXTUREFORGE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache hit and field write.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SynthesisConfig(BaseModel):
    """Naming of synthetic implementation types.

    Env vars:
        FIXTUREFORGE__SYNTHESIS__NAMESPACE: Module synthetic types are published in
        FIXTUREFORGE__SYNTHESIS__SUFFIX: Suffix appended to the abstract type's short name
    """

    namespace: str = Field(
        default=DEFAULT_SYNTHETIC_NAMESPACE,
        description="Dotted module name. Created on demand if it does not exist.",
    )
    suffix: str = Field(
        default=DEFAULT_SYNTHETIC_SUFFIX,
        description="Appended to the short name, e.g. Shape -> Shape_implementation.",
    )

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        if not v or not all(part.isidentifier() for part in v.split(".")):
            raise ValueError(f"Namespace must be a dotted module name, got {v!r}")
        return v

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if v and not f"X{v}".isidentifier():
            raise ValueError(f"Suffix must only contain identifier characters, got {v!r}")
        return v


class ForcingConfig(BaseModel):
    """Instance forcing behaviour.

    Env vars:
        FIXTUREFORGE__FORCING__CONSTRUCT_TIMEOUT_SEC: Give up on a constructor after this long
        FIXTUREFORGE__FORCING__POPULATE_DEFAULTS: Zero-fill declared fields after bypass allocation
    """

    construct_timeout_sec: float | None = Field(
        default=None,
        description="Wait at most this long for a zero-argument constructor before "
        "falling back to bypass allocation. None waits indefinitely. "
        "RISK: a timed-out constructor keeps running on a daemon thread.",
    )
    populate_defaults: bool = Field(
        default=True,
        description="Assign type-appropriate defaults to declared fields of bypass-allocated "
        "instances, so they read like zeroed storage instead of missing attributes.",
    )

    @field_validator("construct_timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class ForgeConfig(BaseModel):
    """Root config. Env vars: FIXTUREFORGE__LOGGING__LEVEL, etc."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)
    forcing: ForcingConfig = Field(default_factory=ForcingConfig)
