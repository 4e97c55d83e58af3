"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
gives every test an empty process-wide synthesis cache.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local fixtureforge package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of fixtureforge modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("fixtureforge"):
        del sys.modules[module_name]

from fixtureforge.synthesis import SynthesisCache, reset_default_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_default_cache() -> None:
    """Synthetic names derive from short class names; isolate them per test."""
    reset_default_cache()


@pytest.fixture
def cache() -> SynthesisCache:
    return SynthesisCache()
