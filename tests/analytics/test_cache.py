from src.attendance_tracker.attendance_tracker.analytics.cache import AnalyticsCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = AnalyticsCache(300, clock=clock)
    cache.put("attendance-{}", {"totalRecords": 1})

    clock.now += 299
    assert cache.get("attendance-{}") == {"totalRecords": 1}

    clock.now += 1
    assert cache.get("attendance-{}") is None
    assert len(cache) == 0


def test_key_ignores_option_order():
    assert AnalyticsCache.make_key("trends", {"days": 7, "window": "weekly"}) == AnalyticsCache.make_key(
        "trends", {"window": "weekly", "days": 7}
    )
    assert AnalyticsCache.make_key("users", None) == "users-{}"


def test_clear_drops_everything():
    cache = AnalyticsCache()
    cache.put("a", 1)
    cache.put("b", 2)

    cache.clear()

    assert cache.get("a") is None
    assert len(cache) == 0


def test_put_drops_expired_entries():
    clock = FakeClock()
    cache = AnalyticsCache(300, clock=clock)
    for i in range(50):
        cache.put(f"attendance-{{\"top_n\": {i}}}", i)

    clock.now += 300
    cache.put("users-{}", "fresh")

    assert len(cache) == 1
    assert cache.get("users-{}") == "fresh"


def test_put_keeps_entries_still_within_ttl():
    clock = FakeClock()
    cache = AnalyticsCache(300, clock=clock)
    cache.put("a", 1)
    clock.now += 200
    cache.put("b", 2)
    clock.now += 150

    cache.put("c", 3)

    assert len(cache) == 2
    assert cache.get("a") is None
    assert cache.get("b") == 2
