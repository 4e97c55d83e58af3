"""Config module exports."""

from fixtureforge.config.loader import load_config
from fixtureforge.config.models import (
    ForcingConfig,
    ForgeConfig,
    LoggingConfig,
    LogOutputConfig,
    SynthesisConfig,
)

__all__ = [
    "load_config",
    "ForgeConfig",
    "ForcingConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SynthesisConfig",
]
