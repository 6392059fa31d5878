try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from game_catalog.services.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_get_returns_default_for_missing_and_expired_entries() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=300, clock=clock)

    assert cache.get("missing") is None
    cache.set("k", "v")
    assert cache.get("k") == "v"

    clock.advance(299)
    assert cache.get("k") == "v"
    clock.advance(1)
    assert cache.get("k", "absent") == "absent"
    # an expired entry is gone for good, not resurrected
    clock.now -= 100
    assert cache.get("k") is None


def test_set_overwrites_value_and_expiry() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)

    cache.set("k", 1, ttl=5)
    clock.advance(4)
    cache.set("k", 2, ttl=5)
    clock.advance(4)

    assert cache.get("k") == 2


def test_delete_and_flush_are_idempotent() -> None:
    cache = TTLCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)

    cache.delete("a")
    cache.delete("a")
    cache.delete_many(["b", "nope"])
    assert cache.get_keys() == ["c"]

    cache.flush()
    cache.flush()
    assert cache.get_keys() == []


def test_stats_report_live_entries_only() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=60, clock=clock)
    cache.set("short", "x", ttl=1)
    cache.set("long", "y" * 100)

    clock.advance(2)
    stats = cache.get_stats()

    assert stats["key_count"] == 1
    assert stats["keys"] == ["long"]
    assert stats["approx_value_size"] > 100
    assert "long" in cache
    assert len(cache) == 1


def test_non_positive_ttl_is_rejected() -> None:
    with pytest.raises(ValueError):
        TTLCache(default_ttl=0)
    with pytest.raises(ValueError):
        TTLCache().set("k", "v", ttl=-1)


@pytest.mark.asyncio
async def test_get_or_fetch_calls_fetcher_once_while_fresh() -> None:
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    calls: list[str] = []

    async def fetcher() -> list[str]:
        calls.append("fetch")
        return ["result"]

    assert await cache.get_or_fetch("k", fetcher, 30) == ["result"]
    assert await cache.get_or_fetch("k", fetcher, 30) == ["result"]
    assert calls == ["fetch"]

    clock.advance(31)
    await cache.get_or_fetch("k", fetcher, 30)
    assert calls == ["fetch", "fetch"]


@pytest.mark.asyncio
async def test_get_or_fetch_accepts_sync_fetchers_and_cached_none() -> None:
    cache = TTLCache()
    calls = []

    def fetcher():
        calls.append(1)
        return None

    assert await cache.get_or_fetch("k", fetcher) is None
    assert await cache.get_or_fetch("k", fetcher) is None
    assert calls == [1]


@pytest.mark.asyncio
async def test_get_or_fetch_does_not_cache_failures() -> None:
    cache = TTLCache()

    async def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await cache.get_or_fetch("k", failing)

    assert cache.get_keys() == []

    async def succeeding():
        return 42

    assert await cache.get_or_fetch("k", succeeding) == 42
