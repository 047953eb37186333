"""
CacheManager - Async-compatible in-memory cache with a fixed TTL per entry.

Features:
- Memory-based cache with oldest-first eviction at capacity
- TTL (Time To Live); expired entries are treated as absent
- Lock-guarded map access for concurrent tasks
- Injectable clock for deterministic expiry
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Generic, TypeVar

from loguru import logger

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cache entry with metadata."""

    data: T
    timestamp: datetime
    ttl: timedelta

    def is_expired(self, now: datetime) -> bool:
        """Check if entry is past its TTL."""
        return now > self.timestamp + self.ttl


class CacheManager:
    """
    Async-compatible TTL cache.

    Usage:
        cache = CacheManager(default_ttl=timedelta(minutes=60))

        entry = await cache.get("genres_en")
        if entry:
            return entry.data

        data = await fetch_data()
        await cache.set("genres_en", data)
    """

    def __init__(
        self,
        max_size: int = 100,
        default_ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = datetime.now,
        debug: bool = False,
    ):
        self._memory: dict[str, CacheEntry[Any]] = {}
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._clock = clock
        self._debug = debug
        self._lock = asyncio.Lock()
        self._stats = CacheStats()

    async def get(self, key: str) -> CacheEntry[Any] | None:
        """
        Get entry from cache.

        Returns the entry if present and within its TTL, None otherwise.
        """
        async with self._lock:
            entry = self._memory.get(key)
            if entry is None:
                self._stats.misses += 1
                self._log(f"MISS: {key}")
                return None

            if entry.is_expired(self._clock()):
                del self._memory[key]
                self._stats.misses += 1
                self._log(f"EXPIRED: {key}")
                return None

            self._stats.hits += 1
            self._log(f"HIT: {key}")
            return entry

    async def set(self, key: str, data: Any, ttl: timedelta | None = None) -> None:
        """
        Set value in cache, replacing any previous entry for the key.

        Args:
            key: Cache key
            data: Data to cache
            ttl: Time to live (uses default if not specified)
        """
        ttl = ttl or self._default_ttl
        entry = CacheEntry(data=data, timestamp=self._clock(), ttl=ttl)

        async with self._lock:
            if len(self._memory) >= self._max_size and key not in self._memory:
                self._evict_oldest()

            self._memory[key] = entry
            self._log(f"SET: {key} (TTL: {ttl.total_seconds()}s)")

    def _evict_oldest(self) -> None:
        """Evict the oldest entry."""
        if not self._memory:
            return

        oldest_key = min(
            self._memory.keys(),
            key=lambda k: self._memory[k].timestamp,
        )
        del self._memory[oldest_key]
        self._stats.evictions += 1
        self._log(f"EVICT: {oldest_key}")

    def __len__(self) -> int:
        return len(self._memory)

    def get_stats(self) -> "CacheStats":
        """Get cache statistics."""
        self._stats.size = len(self._memory)
        self._stats.max_size = self._max_size
        return self._stats

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[CacheManager] {message}")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0
    max_size: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "size": self.size,
            "max_size": self.max_size,
            "hit_rate": f"{self.hit_rate:.2%}",
        }
