from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from persistence.cache import CacheManager
from persistence.fs_store import FsBlobStore
from persistence.manager import ReportStore
from persistence.sqlite_store import SqliteStore


class TickingClock:
    """Returns ``current`` and then advances it by ``step`` on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


def build_payload(
    scores: dict[str, float | None],
    *,
    crux: dict[str, Any] | None = None,
    runtime_error: dict[str, Any] | None = None,
) -> dict[str, Any]:
    categories = {
        category_id: {
            "id": category_id,
            "title": category_id.replace("-", " ").title(),
            "score": score,
            "auditRefs": [{"id": "first-contentful-paint", "weight": 10}],
        }
        for category_id, score in scores.items()
    }
    lhr: dict[str, Any] = {
        "requestedUrl": "https://example.com/",
        "lighthouseVersion": "11.0.0",
        "categories": categories,
        "audits": {"first-contentful-paint": {"id": "first-contentful-paint", "score": 1}},
        "i18n": {"rendererFormattedStrings": {"passedAuditsGroupTitle": "Passed"}},
    }
    if runtime_error is not None:
        lhr["runtimeError"] = runtime_error
    return {"lhr": lhr, "crux": crux or {}}


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SqliteStore:
    return SqliteStore(tmp_path / "metadata.sqlite")


@pytest.fixture
def blob_store(tmp_path: Path) -> FsBlobStore:
    return FsBlobStore(tmp_path)


@pytest.fixture
def report_store(
    sqlite_store: SqliteStore, blob_store: FsBlobStore, clock: TickingClock
) -> ReportStore:
    cache = CacheManager(sqlite_store, clock=clock)
    return ReportStore(sqlite_store, sqlite_store, blob_store, cache, clock=clock)


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    return build_payload
