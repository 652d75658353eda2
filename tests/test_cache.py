from tutoring.core.cache import MISSING, CacheEntry, EvictionCache


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def test_get_miss_returns_sentinel():
    cache = EvictionCache(ttl_ms=1000)
    assert cache.get("x") is MISSING
    assert "x" not in cache


def test_cached_none_is_a_hit():
    cache = EvictionCache(ttl_ms=1000)
    cache.set("unknown-code", None)
    assert cache.get("unknown-code") is None
    assert "unknown-code" in cache


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = EvictionCache(ttl_ms=1000, clock=clock)
    cache.set("a", 1)
    clock.now = 999
    assert cache.get("a") == 1
    clock.now = 1000
    assert cache.get("a") is MISSING
    assert len(cache) == 0


def test_is_valid():
    entry = CacheEntry(value=1, timestamp=100)
    assert EvictionCache.is_valid(entry, now=150, ttl_ms=100)
    assert not EvictionCache.is_valid(entry, now=200, ttl_ms=100)


def test_size_cap_keeps_newest_writes():
    clock = FakeClock()
    cache = EvictionCache(ttl_ms=60_000, max_size=100, clock=clock)
    for i in range(101):
        clock.now = i
        cache.set(i, f"v{i}")
    assert len(cache) == 100
    assert cache.get(0) is MISSING
    assert all(cache.get(i) == f"v{i}" for i in range(1, 101))


def test_rewrite_refreshes_position():
    cache = EvictionCache(ttl_ms=60_000, max_size=2, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 3)
    cache.set("c", 4)
    assert cache.get("b") is MISSING
    assert cache.get("a") == 3
    assert cache.get("c") == 4


def test_cleanup_removes_expired_and_reports_count():
    clock = FakeClock()
    cache = EvictionCache(ttl_ms=100, clock=clock)
    cache.set("old", 1)
    clock.now = 50
    cache.set("new", 2)
    assert cache.cleanup(now=120) == 1
    assert cache.get("new") == 2


def test_invalidate_and_clear():
    cache = EvictionCache(ttl_ms=1000)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.invalidate("a")
    cache.invalidate("missing")
    assert cache.get("a") is MISSING
    cache.clear()
    assert len(cache) == 0


def test_ten_minute_ttl_boundary():
    clock = FakeClock(0)
    cache = EvictionCache(ttl_ms=600_000, clock=clock)
    cache.set("student", {"id": 1})
    clock.now = 599_999
    assert cache.get("student") == {"id": 1}
    clock.now = 600_001
    assert cache.get("student") is MISSING


def test_uncapped_cache_never_trims_live_entries():
    clock = FakeClock(0)
    cache = EvictionCache(ttl_ms=60_000, max_size=None, clock=clock)
    for i in range(1000):
        cache.set(i, True)
    assert cache.cleanup() == 0
    assert len(cache) == 1000
    assert cache.get(0) is True

    clock.now = 60_000
    assert cache.cleanup() == 1000
