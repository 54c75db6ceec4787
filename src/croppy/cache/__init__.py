"""Derivative cache: read-through population with per-key locking."""

from croppy.cache.locks import KeyedLock
from croppy.cache.manager import DerivativeCache
from croppy.cache.stats import CacheStats

__all__ = ["CacheStats", "DerivativeCache", "KeyedLock"]
