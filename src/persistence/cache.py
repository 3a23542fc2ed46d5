"""Key-value memo for expensive report queries."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from persistence.contracts import CacheStore
from persistence.models import CacheEntry
from persistence.slugs import slugify

logger = logging.getLogger(__name__)

ALL_URLS_KEY = "getAllSavedUrls"
ALL_MEDIANS_KEY = "getMedianScoresOfAllUrls"


def reports_key(url: str) -> str:
    return f"getReports_{slugify(url)}"


class CacheManager:
    """JSON values keyed by name, invalidated explicitly by writers.

    Entries never expire unless ``ttl_seconds`` is set, in which case older
    entries read as absent.
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        ttl_seconds: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds) if ttl_seconds else None
        self._clock = clock or _utcnow

    @property
    def ttl_seconds(self) -> int | None:
        return int(self._ttl.total_seconds()) if self._ttl else None

    def get(self, key: str) -> Any | None:
        entry = self._store.get_cache_entry(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return None
        if self._ttl is not None and self._clock() - entry.created_at >= self._ttl:
            logger.debug("Cache expired: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._store.put_cache_entry(
            CacheEntry(cache_key=key, value=value, created_at=self._clock())
        )

    def delete(self, key: str) -> None:
        self._store.delete_cache_entry(key)

    def clear(self) -> int:
        return self._store.clear_cache_entries()

    def prune_older_than(self, *, days: int) -> int:
        cutoff = self._clock() - timedelta(days=days)
        entries = self._store.list_cache_entries_older_than(cutoff)
        for entry in entries:
            self._store.delete_cache_entry(entry.cache_key)
        return len(entries)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["ALL_MEDIANS_KEY", "ALL_URLS_KEY", "CacheManager", "reports_key"]
