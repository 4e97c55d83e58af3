"""Memo of realized synthetic implementation types.

Design:
- Keyed by derived synthetic name (``fixtureforge.synthetic.Shape_implementation``)
- Entries are added on first request and never evicted
- Lookups are plain dict reads; creation is double-checked under an RLock so
  concurrent first requests for a name realize exactly one class
- ``clear()`` exists for test isolation only
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator

import structlog

log = structlog.get_logger(__name__)


class SynthesisCache:
    """Thread-safe name -> synthetic type mapping with get-or-create."""

    def __init__(self) -> None:
        self._types: dict[str, type] = {}
        # Reentrant: class creation can run user __init_subclass__ hooks that
        # force other abstract types.
        self._lock = threading.RLock()

    def get(self, name: str) -> type | None:
        return self._types.get(name)

    def get_or_create(self, name: str, factory: Callable[[], type]) -> type:
        """Return the cached type for ``name``, calling ``factory`` at most once."""
        cached = self._types.get(name)
        if cached is not None:
            log.debug("synthesis_cache_hit", name=name)
            return cached

        with self._lock:
            cached = self._types.get(name)
            if cached is not None:
                log.debug("synthesis_cache_hit", name=name, contended=True)
                return cached
            created = factory()
            self._types[name] = created
            return created

    def clear(self) -> None:
        with self._lock:
            self._types.clear()

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


_default_cache: SynthesisCache | None = None
_default_cache_lock = threading.Lock()


def get_default_cache() -> SynthesisCache:
    """The process-wide cache, created on first use."""
    global _default_cache  # noqa: PLW0603
    if _default_cache is None:
        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = SynthesisCache()
    return _default_cache


def reset_default_cache() -> SynthesisCache:
    """Replace the process-wide cache with an empty one and return it."""
    global _default_cache  # noqa: PLW0603
    with _default_cache_lock:
        _default_cache = SynthesisCache()
        return _default_cache
