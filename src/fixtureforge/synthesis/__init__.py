"""Synthesis of concrete implementations for abstract types."""

from fixtureforge.synthesis.cache import SynthesisCache, get_default_cache, reset_default_cache
from fixtureforge.synthesis.ops import synthesize, synthetic_name

__all__ = [
    "SynthesisCache",
    "get_default_cache",
    "reset_default_cache",
    "synthesize",
    "synthetic_name",
]
