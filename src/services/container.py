"""Construction of the process-wide store and client instances."""

from __future__ import annotations

from dataclasses import dataclass

from core.config import Settings, get_settings
from persistence.cache import CacheManager
from persistence.fs_store import FsBlobStore
from persistence.manager import ReportStore
from persistence.sqlite_store import SqliteStore
from services.psi_client import AuditClient, PageSpeedClient


@dataclass
class Services:
    settings: Settings
    reports: ReportStore
    audit_client: AuditClient

    def close(self) -> None:
        close = getattr(self.audit_client, "close", None)
        if callable(close):
            close()


def build_report_store(settings: Settings) -> ReportStore:
    store = SqliteStore(settings.data_dir / "metadata.sqlite")
    cache = CacheManager(store, ttl_seconds=settings.cache_ttl_seconds)
    return ReportStore(
        store,
        store,
        FsBlobStore(settings.data_dir),
        cache,
        max_reports=settings.max_reports,
        delete_batch_size=settings.delete_batch_size,
    )


def build_services(
    settings: Settings | None = None,
    *,
    audit_client: AuditClient | None = None,
) -> Services:
    settings = settings or get_settings()
    if audit_client is None:
        audit_client = PageSpeedClient(
            settings.psi_api_key,
            endpoint=settings.psi_endpoint,
            strategy=settings.psi_strategy,
            timeout=settings.psi_timeout,
        )
    return Services(
        settings=settings,
        reports=build_report_store(settings),
        audit_client=audit_client,
    )


__all__ = ["Services", "build_report_store", "build_services"]
