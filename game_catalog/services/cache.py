"""In-process key/value cache with per-entry expiry."""

from __future__ import annotations

import inspect
import logging
import sys
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


@dataclass(slots=True)
class CacheEntry:
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """Bounded-lifetime cache shared by every caller in the process.

    Expired entries are dropped lazily when read and swept whenever
    introspection helpers run. All access goes through a re-entrant lock so
    the cache can be shared between the event loop and worker threads.
    """

    def __init__(
        self,
        default_ttl: float = 300,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for ``key`` or ``default``."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return default
            logger.debug("Cache hit for %s", key)
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Insert or replace ``key``, resetting its expiry."""
        ttl_seconds = self._default_ttl if ttl is None else ttl
        if ttl_seconds <= 0:
            raise ValueError("ttl must be positive")
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, expires_at=self._clock() + ttl_seconds
            )
        logger.debug("Cache set for %s (ttl=%ss)", key, ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        logger.debug("Cache deleted %s", key)

    def delete_many(self, keys: Iterable[str]) -> None:
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Cache flushed")

    async def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Union[T, Awaitable[T]]],
        ttl: float | None = None,
    ) -> T:
        """Return the cached value or compute, store and return it.

        Failures raised by ``fetcher`` propagate and leave the cache untouched.
        """
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        result = fetcher()
        if inspect.isawaitable(result):
            result = await result
        self.set(key, result, ttl)
        return result

    def get_keys(self) -> List[str]:
        with self._lock:
            self._sweep()
            return list(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Return key count, approximate value size in bytes and live keys."""
        with self._lock:
            self._sweep()
            keys = list(self._entries)
            approx_size = sum(
                sys.getsizeof(entry.value) for entry in self._entries.values()
            )
        return {"key_count": len(keys), "approx_value_size": approx_size, "keys": keys}

    def _sweep(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self.get_keys())


__all__ = ["CacheEntry", "TTLCache"]
