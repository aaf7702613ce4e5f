import pytest

from app.dashtact.services.feature_settings import FeatureSettingsCache
from app.dashtact.services.menu_filter import FeatureSettings


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


def test_cache_hits_within_ttl_and_reloads_after_expiry():
    clock = FakeClock()
    cache = FeatureSettingsCache(ttl_seconds=300, clock=clock)
    loader = CountingLoader(FeatureSettings(track_inventory=True))

    first = cache.get_or_load("tenant-a", "user-1", loader)
    clock.now += 299
    second = cache.get_or_load("tenant-a", "user-1", loader)

    assert first == second == FeatureSettings(track_inventory=True)
    assert loader.calls == 1

    clock.now += 1
    cache.get_or_load("tenant-a", "user-1", loader)
    assert loader.calls == 2


def test_cache_remembers_missing_settings():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())
    loader = CountingLoader(None)

    assert cache.get_or_load("tenant-a", None, loader) is None
    assert cache.get_or_load("tenant-a", None, loader) is None
    assert loader.calls == 1


def test_cache_keys_by_tenant_and_user():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())
    loader = CountingLoader(FeatureSettings())

    cache.get_or_load("tenant-a", "user-1", loader)
    cache.get_or_load("tenant-a", "user-2", loader)
    cache.get_or_load("tenant-b", "user-1", loader)

    assert loader.calls == 3


def test_invalidate_tenant_keeps_other_tenants():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())
    loader_a = CountingLoader(FeatureSettings())
    loader_b = CountingLoader(FeatureSettings())
    cache.get_or_load("tenant-a", "user-1", loader_a)
    cache.get_or_load("tenant-b", "user-1", loader_b)

    cache.invalidate("tenant-a")
    cache.get_or_load("tenant-a", "user-1", loader_a)
    cache.get_or_load("tenant-b", "user-1", loader_b)

    assert loader_a.calls == 2
    assert loader_b.calls == 1


def test_invalidate_all():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())
    loader = CountingLoader(FeatureSettings())
    cache.get_or_load("tenant-a", None, loader)
    cache.get_or_load("tenant-b", None, loader)

    cache.invalidate()
    cache.get_or_load("tenant-a", None, loader)

    assert loader.calls == 3


def test_expired_entries_are_evicted_as_new_keys_arrive():
    clock = FakeClock()
    cache = FeatureSettingsCache(ttl_seconds=1, clock=clock)
    loader = CountingLoader(FeatureSettings())

    for index in range(1000):
        cache.get_or_load("tenant-a", f"user-{index}", loader)
        clock.now += 5
        assert len(cache) <= 1

    assert loader.calls == 1000


def test_stale_read_drops_its_entry():
    clock = FakeClock()
    cache = FeatureSettingsCache(ttl_seconds=10, clock=clock)
    cache.get_or_load("tenant-a", "user-1", CountingLoader(FeatureSettings()))
    clock.now += 10

    def failing_loader():
        raise RuntimeError("database unavailable")

    with pytest.raises(RuntimeError):
        cache.get_or_load("tenant-a", "user-1", failing_loader)

    assert len(cache) == 0


class UpdatingLoader:
    """Returns the value read before a settings update lands mid-load."""

    def __init__(self, cache, value, tenant_id=None):
        self.cache = cache
        self.value = value
        self.tenant_id = tenant_id

    def __call__(self):
        if self.tenant_id is None:
            self.cache.invalidate()
        else:
            self.cache.invalidate(self.tenant_id)
        return self.value


def test_load_overlapping_tenant_invalidate_is_not_stored():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())
    old_value = FeatureSettings(track_inventory=False)
    new_value = FeatureSettings(track_inventory=True)

    assert cache.get_or_load("tenant-a", "user-1", UpdatingLoader(cache, old_value, "tenant-a")) == old_value
    assert len(cache) == 0

    fresh = CountingLoader(new_value)
    assert cache.get_or_load("tenant-a", "user-1", fresh) == new_value
    assert fresh.calls == 1
    assert cache.get_or_load("tenant-a", "user-1", fresh) == new_value
    assert fresh.calls == 1


def test_load_overlapping_other_tenant_invalidate_is_stored():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())

    cache.get_or_load("tenant-a", "user-1", UpdatingLoader(cache, FeatureSettings(), "tenant-b"))

    assert len(cache) == 1


def test_load_overlapping_full_invalidate_is_not_stored():
    cache = FeatureSettingsCache(ttl_seconds=300, clock=FakeClock())

    cache.get_or_load("tenant-a", None, UpdatingLoader(cache, FeatureSettings()))
    assert len(cache) == 0

    fresh = CountingLoader(FeatureSettings(cod_enabled=True))
    assert cache.get_or_load("tenant-a", None, fresh) == FeatureSettings(cod_enabled=True)
    assert fresh.calls == 1
