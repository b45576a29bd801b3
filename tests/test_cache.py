"""Tests for the in-memory TTL cache."""

from datetime import UTC, datetime, timedelta

from food_resolver.services.cache import InMemoryCache


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = InMemoryCache(clock=clock)

    cache.set("catalog:search:rice:15", ["hit"], ttl_seconds=60)
    assert cache.get("catalog:search:rice:15") == ["hit"]

    clock.now += timedelta(seconds=60)
    assert cache.get("catalog:search:rice:15") is None


def test_last_write_wins() -> None:
    cache = InMemoryCache()

    cache.set("canonical:generic_egg_large", "first", ttl_seconds=60)
    cache.set("canonical:generic_egg_large", "second", ttl_seconds=60)

    assert cache.get("canonical:generic_egg_large") == "second"


def test_non_positive_ttl_is_not_stored() -> None:
    cache = InMemoryCache()

    cache.set("key", "value", ttl_seconds=0)

    assert cache.get("key") is None
    assert cache.get("missing") is None
