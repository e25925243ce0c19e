from app.clients.cache import TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache: TTLCache[str] = TTLCache(300, clock=clock)
    cache.set("ozempic", "data")

    clock.now += 299.9
    assert cache.get("ozempic") == "data"

    clock.now += 0.1
    assert cache.get("ozempic") is None
    assert len(cache) == 0


def test_set_refreshes_timestamp_and_clear_empties():
    clock = FakeClock()
    cache: TTLCache[int] = TTLCache(10, clock=clock)
    cache.set("a", 1)
    clock.now += 8
    cache.set("a", 2)
    clock.now += 8
    assert cache.get("a") == 2

    cache.set("b", 3)
    cache.clear()
    assert cache.get("a") is None
    assert cache.get("b") is None
