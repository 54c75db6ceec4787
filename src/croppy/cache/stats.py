"""Derivative cache statistics."""

from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Counters since the cache manager was created."""

    hits: int = 0
    misses: int = 0
    generated: int = 0
    denied: int = 0
    failures: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
