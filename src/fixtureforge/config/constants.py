"""Configuration constants.

This module contains values that are NOT user-configurable, plus the defaults
that configurable fields fall back to.

For configurable values, see models.py (SynthesisConfig, ForcingConfig).
"""

# =============================================================================
# Synthesis Naming
# =============================================================================

DEFAULT_SYNTHETIC_NAMESPACE = "fixtureforge.synthetic"
"""Module that synthetic implementation types are published in."""

DEFAULT_SYNTHETIC_SUFFIX = "_implementation"
"""Appended to the short name of the abstract type."""

# =============================================================================
# Config Files
# =============================================================================

PROJECT_CONFIG_FILENAME = ".fixtureforge.yaml"
"""Per-project YAML config, looked up in the project root."""

ENV_PREFIX = "FIXTUREFORGE__"
"""Environment variable prefix (FIXTUREFORGE__SECTION__KEY)."""
