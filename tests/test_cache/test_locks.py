"""Tests for KeyedLock and CacheStats."""

import threading
import time

from croppy.cache.locks import KeyedLock
from croppy.cache.stats import CacheStats


class TestKeyedLock:
    def test_released_locks_are_dropped(self):
        locks = KeyedLock()
        with locks.hold("a"):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_same_key_serializes(self):
        locks = KeyedLock()
        active = 0
        peak = 0
        guard = threading.Lock()

        def worker():
            nonlocal active, peak
            with locks.hold("same"):
                with guard:
                    active += 1
                    peak = max(peak, active)
                time.sleep(0.01)
                with guard:
                    active -= 1

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert peak == 1
        assert len(locks) == 0

    def test_different_keys_independent(self):
        locks = KeyedLock()
        with locks.hold("a"):
            acquired = threading.Event()

            def other():
                with locks.hold("b"):
                    acquired.set()

            t = threading.Thread(target=other)
            t.start()
            assert acquired.wait(timeout=1)
            t.join()

    def test_released_on_error(self):
        locks = KeyedLock()
        try:
            with locks.hold("a"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        with locks.hold("a"):
            assert len(locks) == 1


class TestCacheStats:
    def test_defaults(self):
        stats = CacheStats()
        assert stats.hits == 0
        assert stats.hit_rate == 0.0

    def test_hit_rate(self):
        assert CacheStats(hits=3, misses=1).hit_rate == 0.75
