"""Lightweight persistence records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RunRow:
    run_id: str
    url_id: str
    audited_on: datetime
    category_scores: list[dict[str, Any]]
    origin_field_data: dict[str, Any] | None


@dataclass(frozen=True)
class UrlMetadata:
    url_id: str
    last_viewed: datetime


@dataclass(frozen=True)
class CacheEntry:
    cache_key: str
    value: Any
    created_at: datetime


__all__ = ["CacheEntry", "RunRow", "UrlMetadata"]
