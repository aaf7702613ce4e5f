from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.dashtact.core.config import settings as app_settings
from app.dashtact.core.metrics import metrics
from app.dashtact.db.models import EcommerceSettings
from app.dashtact.repos.settings import EcommerceSettingsRepository
from app.dashtact.services.menu_filter import FeatureSettings

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "store_name",
    "currency",
    "track_inventory",
    "shipping_enabled",
    "cod_enabled",
    "portal_enabled",
)


@dataclass(frozen=True)
class CacheEntry:
    value: FeatureSettings | None
    expires_at: float


class FeatureSettingsCache:
    """TTL cache of resolved feature settings keyed by ``(tenant_id, user_id)``.

    ``None`` (no settings row) is cached like any other value. A load that
    overlaps ``invalidate`` for its tenant is returned but not stored.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, str | None], CacheEntry] = {}
        self._tenant_generations: dict[str, int] = {}
        self._clear_generation = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _generation(self, tenant_key: str) -> tuple[int, int]:
        return self._clear_generation, self._tenant_generations.get(tenant_key, 0)

    def _evict_expired(self, now: float) -> None:
        stale_keys = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in stale_keys:
            self._entries.pop(key, None)

    def get_or_load(
        self,
        tenant_id: str,
        user_id: str | None,
        loader: Callable[[], FeatureSettings | None],
    ) -> FeatureSettings | None:
        key = (str(tenant_id), str(user_id) if user_id is not None else None)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if entry.expires_at > self._clock():
                    metrics.record_feature_settings_cache(hit=True)
                    return entry.value
                self._entries.pop(key, None)
            generation = self._generation(key[0])

        metrics.record_feature_settings_cache(hit=False)
        value = loader()

        with self._lock:
            if self._generation(key[0]) != generation:
                return value
            now = self._clock()
            self._evict_expired(now)
            self._entries[key] = CacheEntry(value=value, expires_at=now + self.ttl_seconds)
        return value

    def invalidate(self, tenant_id: str | None = None) -> None:
        with self._lock:
            if tenant_id is None:
                self._entries.clear()
                self._clear_generation += 1
                return
            tenant_key = str(tenant_id)
            self._tenant_generations[tenant_key] = self._tenant_generations.get(tenant_key, 0) + 1
            for key in [key for key in self._entries if key[0] == tenant_key]:
                del self._entries[key]


feature_settings_cache = FeatureSettingsCache(ttl_seconds=app_settings.FEATURE_SETTINGS_CACHE_TTL_SEC)


class EcommerceSettingsService:
    def __init__(self, db, cache: FeatureSettingsCache | None = None):
        self.repo = EcommerceSettingsRepository(db)
        self.cache = cache if cache is not None else feature_settings_cache

    def get_feature_settings(self, tenant_id: str, user_id: str | None) -> FeatureSettings | None:
        def load() -> FeatureSettings | None:
            row = self.repo.get_effective(tenant_id, user_id)
            return FeatureSettings.from_model(row) if row is not None else None

        return self.cache.get_or_load(tenant_id, user_id, load)

    def get_effective(self, tenant_id: str, user_id: str | None):
        return self.repo.get_effective(tenant_id, user_id)

    def update_global(self, tenant_id: str, changes: dict):
        row = self.repo.get_global(tenant_id)
        if row is None:
            row = EcommerceSettings(tenant_id=tenant_id, user_id=None, scope="global")
        for field_name in _UPDATABLE_FIELDS:
            if field_name in changes and changes[field_name] is not None:
                setattr(row, field_name, changes[field_name])
        saved = self.repo.save(row)
        self.cache.invalidate(tenant_id)
        logger.info("Ecommerce settings updated", extra={"tenant_id": str(tenant_id)})
        return saved
