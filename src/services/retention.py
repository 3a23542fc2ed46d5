"""Retention: erase URLs nobody has viewed since a cutoff."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from persistence.manager import ReportStore
from persistence.slugs import deslugify

logger = logging.getLogger(__name__)


def default_cutoff(days: int, *, now: datetime | None = None) -> datetime:
    if days < 1:
        raise ValueError("days must be >= 1")
    return (now or datetime.now(timezone.utc)) - timedelta(days=days)


def remove_stale_urls(store: ReportStore, cutoff: datetime) -> list[str]:
    """Erase every URL last viewed strictly before ``cutoff``.

    Reports are deleted before metadata for each URL. The first failure
    aborts the sweep.
    """
    removed: list[str] = []
    for url_id in store.get_urls_last_viewed_before(cutoff):
        url = deslugify(url_id)
        store.erase_url(url)
        removed.append(url)
    logger.info("Removed %d stale URLs (cutoff %s)", len(removed), cutoff.isoformat())
    return removed


__all__ = ["default_cutoff", "remove_stale_urls"]
