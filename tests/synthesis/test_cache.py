"""Tests for synthesis/cache.py module."""

import threading
import time

from fixtureforge.synthesis.cache import (
    SynthesisCache,
    get_default_cache,
    reset_default_cache,
)


class TestGetOrCreate:
    """Get-or-create semantics."""

    def test_factory_called_once(self, cache: SynthesisCache) -> None:
        """Given repeated lookups, the factory runs only for the first."""
        # Given
        calls: list[int] = []

        def factory() -> type:
            calls.append(1)
            return type("Made", (), {})

        # When
        first = cache.get_or_create("pkg.Made", factory)
        second = cache.get_or_create("pkg.Made", factory)

        # Then
        assert first is second
        assert len(calls) == 1
        assert cache.get("pkg.Made") is first

    def test_factory_error_leaves_no_entry(self, cache: SynthesisCache) -> None:
        def factory() -> type:
            raise RuntimeError("boom")

        try:
            cache.get_or_create("pkg.Broken", factory)
        except RuntimeError:
            pass

        assert "pkg.Broken" not in cache
        assert cache.get("pkg.Broken") is None

    def test_concurrent_first_requests(self, cache: SynthesisCache) -> None:
        """Threads racing on an empty name all observe one class."""
        calls: list[int] = []
        start = threading.Barrier(8)
        results: list[type] = []
        results_lock = threading.Lock()

        def factory() -> type:
            calls.append(1)
            time.sleep(0.01)
            return type("Raced", (), {})

        def worker() -> None:
            start.wait()
            made = cache.get_or_create("pkg.Raced", factory)
            with results_lock:
                results.append(made)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_reentrant_creation(self, cache: SynthesisCache) -> None:
        """A factory may create other entries on the same thread."""

        def inner() -> type:
            return type("Inner", (), {})

        def outer() -> type:
            cache.get_or_create("pkg.Inner", inner)
            return type("Outer", (), {})

        cache.get_or_create("pkg.Outer", outer)

        assert cache.names() == ["pkg.Inner", "pkg.Outer"]


class TestContainer:
    """Container protocol and clearing."""

    def test_len_iter_contains(self, cache: SynthesisCache) -> None:
        cache.get_or_create("b.B", lambda: type("B", (), {}))
        cache.get_or_create("a.A", lambda: type("A", (), {}))

        assert len(cache) == 2
        assert list(cache) == ["a.A", "b.B"]
        assert "a.A" in cache
        assert "c.C" not in cache

    def test_clear(self, cache: SynthesisCache) -> None:
        cache.get_or_create("a.A", lambda: type("A", (), {}))

        cache.clear()

        assert len(cache) == 0
        assert cache.get("a.A") is None


class TestDefaultCache:
    """Process-wide cache."""

    def test_same_instance(self) -> None:
        assert get_default_cache() is get_default_cache()

    def test_reset_replaces(self) -> None:
        before = get_default_cache()
        before.get_or_create("a.A", lambda: type("A", (), {}))

        after = reset_default_cache()

        assert after is not before
        assert get_default_cache() is after
        assert len(after) == 0
