import pytest

from kgms.ui.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = TTLCache(10, clock)
    cache.put("n1", {"id": "n1"})

    clock.now += 9.9
    assert cache.get("n1") == {"id": "n1"}

    clock.now += 0.1
    assert cache.get("n1") is None
    assert len(cache) == 0


def test_put_refreshes_timestamp():
    clock = FakeClock()
    cache = TTLCache(5, clock)
    cache.put("k", 1)
    clock.now += 4
    cache.put("k", 2)
    clock.now += 4
    assert cache.get("k") == 2


def test_invalidate_and_clear():
    cache = TTLCache(60)
    cache.put("a", 1)
    cache.put("b", 2)

    cache.invalidate("a")
    cache.invalidate("missing")
    assert "a" not in cache
    assert "b" in cache

    cache.clear()
    assert len(cache) == 0


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        TTLCache(0)
