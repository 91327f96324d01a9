"""In-process TTL caches for computed trip results and vehicle menus.

Entries expire against an injected clock so tests can move time forward
without sleeping. ``get_or_compute`` serializes computations per key: callers
that miss on the same key while a computation is running wait for it and
read its result instead of repeating the upstream calls.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Generic, TypeVar

from django.conf import settings

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ResultCache(Generic[T]):
    def __init__(
        self,
        ttl_seconds: float,
        *,
        name: str = "results",
        max_size: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.name = name
        self.max_size = max_size
        self._clock = clock
        self._store: dict[str, tuple[T, float]] = {}
        self._lock = threading.RLock()
        self._inflight: dict[str, threading.Lock] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> T | None:
        with self._lock:
            value = self._lookup(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        effective_ttl = self.ttl_seconds if ttl is None else ttl
        with self._lock:
            self._purge_expired()
            # Re-inserting keeps the store ordered by write time for FIFO eviction.
            self._store.pop(key, None)
            if self.max_size is not None:
                while self._store and len(self._store) >= self.max_size:
                    oldest_key = next(iter(self._store))
                    del self._store[oldest_key]
                    logger.debug("Cache %s evicted entry: %s (max_size)", self.name, oldest_key)
            self._store[key] = (value, self._clock() + effective_ttl)
        logger.debug("Cache %s entry set: %s (ttl=%ss)", self.name, key, effective_ttl)

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value or compute, store and return it.

        A computation that raises stores nothing.
        """
        value = self.get(key)
        if value is not None:
            return value

        with self._lock:
            key_lock = self._inflight.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                value = self._lookup(key)
            if value is not None:
                logger.debug("Cache %s filled by concurrent computation: %s", self.name, key)
                return value
            try:
                value = compute()
                self.set(key, value)
                return value
            finally:
                with self._lock:
                    if self._inflight.get(key) is key_lock:
                        del self._inflight[key]

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self.hits = 0
            self.misses = 0
        return count

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for _, expires_at in self._store.values() if now < expires_at)

    @property
    def stored(self) -> int:
        """Entries held in memory, including expired ones not yet purged."""
        with self._lock:
            return len(self._store)

    def _lookup(self, key: str) -> T | None:
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[key]
            logger.debug("Cache %s entry expired: %s", self.name, key)
            return None
        return value

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._store.items() if now >= expires_at]
        for key in expired:
            del self._store[key]
        if expired:
            logger.debug("Cache %s purged %d expired entries", self.name, len(expired))


_trip_cache: ResultCache | None = None
_vehicle_models_cache: ResultCache | None = None
_factory_lock = threading.Lock()


def get_trip_cache() -> ResultCache:
    global _trip_cache
    with _factory_lock:
        if _trip_cache is None:
            _trip_cache = ResultCache(
                settings.TRIP_CACHE_TTL_SECONDS,
                name="trips",
                max_size=settings.TRIP_CACHE_MAX_ENTRIES,
            )
        return _trip_cache


def get_vehicle_models_cache() -> ResultCache:
    global _vehicle_models_cache
    with _factory_lock:
        if _vehicle_models_cache is None:
            _vehicle_models_cache = ResultCache(
                settings.VEHICLE_MODELS_CACHE_TTL_SECONDS, name="vehicle-models"
            )
        return _vehicle_models_cache
