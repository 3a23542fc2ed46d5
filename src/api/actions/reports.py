from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from api.deps import get_services
from schemas.reports import AuditRun
from schemas.requests import AuditRequest, CleanupRequest
from schemas.responses import AuditOutcome, CleanupResult
from services.audit_runner import run_lighthouse_api
from services.container import Services
from services.retention import default_cutoff, remove_stale_urls

router = APIRouter()

ServicesDep = Annotated[Services, Depends(get_services)]


def _query_options(max_results: Optional[int], use_cache: Optional[bool]) -> dict[str, Any]:
    # Only forward what the caller set so the store fills in its own defaults.
    options: dict[str, Any] = {}
    if max_results is not None:
        options["max_results"] = max_results
    if use_cache is not None:
        options["use_cache"] = use_cache
    return options


@router.get("/lh/urls", response_model=list[str], tags=["Reports"])
async def list_urls(services: ServicesDep, use_cache: bool = True):
    """List every URL with saved reports."""
    return await run_in_threadpool(services.reports.get_all_saved_urls, use_cache)


@router.get("/lh/reports", response_model=list[AuditRun], tags=["Reports"])
async def list_reports(
    services: ServicesDep,
    url: Annotated[str, Query(min_length=1)],
    max_results: Annotated[Optional[int], Query(ge=1)] = None,
    use_cache: Optional[bool] = None,
):
    """Recent runs for a URL, oldest first."""
    options = _query_options(max_results, use_cache)
    return await run_in_threadpool(services.reports.get_reports, url, options)


@router.get("/lh/report", tags=["Reports"])
async def full_report(services: ServicesDep, url: Annotated[str, Query(min_length=1)]):
    """The latest full Lighthouse report for a URL."""
    return await run_in_threadpool(services.reports.get_full_report, url)


@router.get("/lh/medians", response_model=dict[str, float], tags=["Reports"])
async def medians(
    services: ServicesDep,
    url: Optional[str] = None,
    max_results: Annotated[Optional[int], Query(ge=1)] = None,
    use_cache: Optional[bool] = None,
):
    """Median category scores for one URL, or pooled across all URLs."""
    if url:
        return await run_in_threadpool(services.reports.get_median_scores, url, max_results)
    options = _query_options(max_results, use_cache)
    return await run_in_threadpool(services.reports.get_median_scores_of_all_urls, options)


@router.post("/lh/newaudit", response_model=AuditOutcome, tags=["Audits"])
async def new_audit(services: ServicesDep, request: AuditRequest):
    """Run an audit now and store the result."""
    return await run_in_threadpool(
        run_lighthouse_api,
        services.reports,
        services.audit_client,
        request.url,
        request.replace,
    )


@router.post("/task/remove_stale_urls", response_model=CleanupResult, tags=["Tasks"])
async def remove_stale(services: ServicesDep, request: Optional[CleanupRequest] = None):
    """Erase URLs that have not been viewed within the retention window."""
    days = (request.days if request else None) or services.settings.retention_days
    cutoff = default_cutoff(days)
    removed = await run_in_threadpool(remove_stale_urls, services.reports, cutoff)
    return CleanupResult(cutoff=cutoff.isoformat(), removed=removed)
