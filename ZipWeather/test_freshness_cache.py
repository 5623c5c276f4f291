"""Tests for the freshness cache."""
from freshness_cache import FreshnessCache, DEFAULT_FRESHNESS_WINDOW_SECONDS
from weather_data import Snapshot


def snapshot(observed_at, temperature="290.000000"):
    return Snapshot(temperature=temperature, humidity="50", wind_speed="1.000000", observed_at=observed_at)


def test_default_window_is_29_minutes():
    assert FreshnessCache().freshness_window_seconds == DEFAULT_FRESHNESS_WINDOW_SECONDS == 1740


def test_lookup_missing_key():
    cache = FreshnessCache()
    assert cache.lookup("90210") == (None, False)
    assert len(cache) == 0


def test_store_then_lookup():
    cache = FreshnessCache()
    entry = snapshot(1000)

    assert cache.store("90210", entry) is True

    assert cache.lookup("90210") == (entry, True)
    assert "90210" in cache


def test_is_fresh_boundary():
    cache = FreshnessCache(freshness_window_seconds=1740)
    entry = snapshot(1000)

    assert cache.is_fresh(entry, 1000) is True
    assert cache.is_fresh(entry, 2740) is True
    assert cache.is_fresh(entry, 2741) is False


def test_newer_snapshot_overwrites():
    cache = FreshnessCache()
    cache.store("90210", snapshot(1000, "280.000000"))
    cache.store("90210", snapshot(2000, "285.000000"))

    entry, _ = cache.lookup("90210")
    assert entry.temperature == "285.000000"


def test_older_snapshot_is_refused():
    cache = FreshnessCache()
    cache.store("90210", snapshot(2000, "285.000000"))

    assert cache.store("90210", snapshot(1000, "280.000000")) is False

    entry, _ = cache.lookup("90210")
    assert entry.observed_at == 2000


def test_clear():
    cache = FreshnessCache()
    cache.store("90210", snapshot(1000))
    cache.clear()
    assert len(cache) == 0
