"""Persistence protocol contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from persistence.models import CacheEntry, RunRow, UrlMetadata


class RunStore(Protocol):
    def latest_runs(self, url_id: str, *, limit: int) -> list[RunRow]: ...

    def add_run(
        self,
        url_id: str,
        *,
        audited_on: datetime,
        category_scores: list[dict[str, Any]],
        origin_field_data: dict[str, Any] | None,
    ) -> RunRow: ...

    def replace_run(
        self,
        run_id: str,
        *,
        audited_on: datetime,
        category_scores: list[dict[str, Any]],
        origin_field_data: dict[str, Any] | None,
    ) -> RunRow: ...

    def delete_run_batch(self, url_id: str, *, limit: int) -> int: ...

    def list_url_ids(self) -> list[str]: ...


class MetadataStore(Protocol):
    def set_last_viewed(self, url_id: str, when: datetime) -> None: ...

    def get_metadata(self, url_id: str) -> UrlMetadata | None: ...

    def list_url_ids_last_viewed_before(self, cutoff: datetime) -> list[str]: ...

    def delete_metadata(self, url_id: str) -> None: ...


class CacheStore(Protocol):
    def get_cache_entry(self, cache_key: str) -> CacheEntry | None: ...

    def put_cache_entry(self, entry: CacheEntry) -> None: ...

    def delete_cache_entry(self, cache_key: str) -> None: ...

    def clear_cache_entries(self) -> int: ...

    def list_cache_entries_older_than(self, cutoff: datetime) -> list[CacheEntry]: ...


class BlobStore(Protocol):
    def write_json(self, name: str, payload: dict[str, Any]) -> None: ...

    def read_json(self, name: str) -> dict[str, Any]: ...

    def delete(self, name: str) -> bool: ...


__all__ = ["BlobStore", "CacheStore", "MetadataStore", "RunStore"]
