"""Report lifecycle: saving runs, cached reads, aggregation and deletion.

Writers are not isolated from each other. Two processes replacing the last
run of the same URL race with last-write-wins semantics, and cache
invalidation is at-least-once.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from core.errors import NotFoundError
from persistence.cache import ALL_MEDIANS_KEY, ALL_URLS_KEY, CacheManager, reports_key
from persistence.contracts import BlobStore, MetadataStore, RunStore
from persistence.models import RunRow, UrlMetadata
from persistence.slugs import deslugify, slugify
from persistence.stats import median_scores, pool_scores, scores_by_category
from schemas.reports import AuditRun, CategoryScore, isoformat_utc, slim_categories
from schemas.requests import MAX_REPORTS, ReportQuery

logger = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 20

QueryLike = ReportQuery | Mapping[str, Any] | None


class ReportStore:
    def __init__(
        self,
        runs: RunStore,
        metadata: MetadataStore,
        blobs: BlobStore,
        cache: CacheManager,
        *,
        max_reports: int = MAX_REPORTS,
        delete_batch_size: int = DELETE_BATCH_SIZE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if delete_batch_size < 1:
            raise ValueError("delete_batch_size must be >= 1")
        self._runs = runs
        self._metadata = metadata
        self._blobs = blobs
        self._cache = cache
        self._max_reports = max_reports
        self._delete_batch_size = delete_batch_size
        self._clock = clock or _utcnow

    @property
    def cache(self) -> CacheManager:
        return self._cache

    def save_report(self, url: str, payload: Mapping[str, Any], replace: bool = False) -> AuditRun:
        """Persist one audit result for ``url``.

        ``payload`` holds the raw Lighthouse result under ``lhr`` and the
        origin field data under ``crux``. With ``replace`` the most recent run
        is overwritten in place, otherwise a new run is appended.
        """
        raw_lhr = payload.get("lhr")
        if not isinstance(raw_lhr, dict):
            raise ValueError("Audit payload is missing the 'lhr' report object")
        lhr = dict(raw_lhr)
        lhr.pop("i18n", None)

        audited_on = self._clock()
        crux = payload.get("crux") or None
        run = AuditRun(
            category_scores=slim_categories(lhr.get("categories") or {}),
            audited_on=audited_on,
            origin_field_data=dict(crux) if crux else None,
        )

        url_id = slugify(url)
        latest = self._runs.latest_runs(url_id, limit=1)
        if not latest:
            self._cache.delete(ALL_URLS_KEY)

        lhr["auditedOn"] = isoformat_utc(audited_on)
        self._blobs.write_json(url_id, lhr)

        scores = [category.model_dump() for category in run.category_scores]
        if replace and latest:
            self._runs.replace_run(
                latest[0].run_id,
                audited_on=audited_on,
                category_scores=scores,
                origin_field_data=run.origin_field_data,
            )
        else:
            self._runs.add_run(
                url_id,
                audited_on=audited_on,
                category_scores=scores,
                origin_field_data=run.origin_field_data,
            )

        self._touch(url_id)
        self._cache.delete(reports_key(url))
        self._cache.delete(ALL_MEDIANS_KEY)
        logger.info(
            "Saved report for %s (%s)", url, "replaced" if replace and latest else "appended"
        )
        return run

    def get_reports(self, url: str, query: QueryLike = None) -> list[AuditRun]:
        """Return recent runs oldest-first; the latest full report is attached
        to the run it was recorded with."""
        options = self._resolve_query(query)
        url_id = slugify(url)
        cache_key = reports_key(url)

        if options.use_cache:
            cached = self._cache.get(cache_key)
            if cached is not None:
                self._touch(url_id)
                return [AuditRun.model_validate(item) for item in cached]

        rows = self._runs.latest_runs(url_id, limit=options.max_results)
        if not rows:
            return []
        rows.reverse()
        self._touch(url_id)

        lhr = self.get_full_report(url)
        full_audited_on = lhr.get("auditedOn")
        runs: list[AuditRun] = []
        for row in rows:
            run = _row_to_run(row)
            if run.audited_on_iso() == full_audited_on:
                run = run.model_copy(update={"lhr": lhr})
            runs.append(run)

        if options.use_cache:
            self._cache.set(cache_key, [run.model_dump(mode="json") for run in runs])
        return runs

    def get_full_report(self, url: str) -> dict[str, Any]:
        return self._blobs.read_json(slugify(url))

    def get_all_saved_urls(self, use_cache: bool = True) -> list[str]:
        if use_cache:
            cached = self._cache.get(ALL_URLS_KEY)
            if cached is not None:
                return list(cached)
        urls = sorted(deslugify(url_id) for url_id in self._runs.list_url_ids())
        self._cache.set(ALL_URLS_KEY, urls)
        return urls

    def get_urls_last_viewed_before(self, cutoff: datetime) -> list[str]:
        """Return identifiers (not URLs) whose last view is strictly before ``cutoff``."""
        return self._metadata.list_url_ids_last_viewed_before(cutoff)

    def get_metadata(self, url: str) -> UrlMetadata:
        metadata = self._metadata.get_metadata(slugify(url))
        if metadata is None:
            raise NotFoundError(f"No metadata for {url}")
        return metadata

    def get_median_scores(self, url: str, max_results: int | None = None) -> dict[str, float]:
        query = {} if max_results is None else {"max_results": max_results}
        options = self._resolve_query(query)
        return median_scores(self._scores(url, options.max_results))

    def get_median_scores_of_all_urls(self, query: QueryLike = None) -> dict[str, float]:
        """Median per category over the pooled scores of every saved URL."""
        options = self._resolve_query(query)
        if options.use_cache:
            cached = self._cache.get(ALL_MEDIANS_KEY)
            if cached is not None:
                return dict(cached)

        urls = self.get_all_saved_urls(use_cache=options.use_cache)
        pooled = pool_scores(self._scores(url, options.max_results) for url in urls)
        medians = median_scores(pooled)

        if options.use_cache:
            self._cache.set(ALL_MEDIANS_KEY, medians)
        return medians

    def delete_reports(self, url: str) -> int:
        """Delete every run of ``url`` in bounded batches; returns the count."""
        url_id = slugify(url)
        total = 0
        while True:
            deleted = self._runs.delete_run_batch(url_id, limit=self._delete_batch_size)
            if deleted == 0:
                break
            total += deleted
            logger.debug("Deleted batch of %d runs for %s", deleted, url)
        return total

    def delete_metadata(self, url: str) -> None:
        self._metadata.delete_metadata(slugify(url))

    def erase_url(self, url: str) -> int:
        """Remove runs, the full report and metadata of ``url``.

        Metadata goes last so a URL never looks unviewed while it still has
        runs.
        """
        deleted = self.delete_reports(url)
        self._blobs.delete(slugify(url))
        self.delete_metadata(url)
        for key in (ALL_URLS_KEY, ALL_MEDIANS_KEY, reports_key(url)):
            self._cache.delete(key)
        logger.info("Erased %s (%d runs)", url, deleted)
        return deleted

    def _scores(self, url: str, limit: int) -> dict[str, list[float]]:
        rows = self._runs.latest_runs(slugify(url), limit=limit)
        return scores_by_category([_row_to_run(row) for row in rows], limit)

    def _resolve_query(self, query: QueryLike) -> ReportQuery:
        options = ReportQuery.coerce(query)
        if "max_results" not in options.model_fields_set:
            options = options.model_copy(update={"max_results": self._max_reports})
        return options

    def _touch(self, url_id: str) -> None:
        self._metadata.set_last_viewed(url_id, self._clock())


def _row_to_run(row: RunRow) -> AuditRun:
    return AuditRun(
        category_scores=[CategoryScore.model_validate(item) for item in row.category_scores],
        audited_on=row.audited_on,
        origin_field_data=row.origin_field_data,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["DELETE_BATCH_SIZE", "ReportStore"]
