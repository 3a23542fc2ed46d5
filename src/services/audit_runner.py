"""Audit orchestration shared by the CLI and API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.errors import RemoteAuditError
from persistence.manager import ReportStore
from schemas.responses import AuditOutcome
from services.psi_client import AuditClient

logger = logging.getLogger(__name__)

_NO_ERROR = "NO_ERROR"


def run_lighthouse_api(
    store: ReportStore,
    client: AuditClient,
    url: str,
    replace: bool = True,
) -> AuditOutcome:
    """Audit ``url`` and save the result.

    A failed remote run is returned as ``AuditOutcome.errors`` instead of
    raising; storage and other errors propagate.
    """
    try:
        payload = client.audit(url)
        raise_for_runtime_error(payload)
        run = store.save_report(url, payload, replace)
    except RemoteAuditError as exc:
        logger.warning("Audit failed for %s: %s", url, exc)
        return AuditOutcome(url=url, errors=str(exc))
    return AuditOutcome(url=url, run=run)


def raise_for_runtime_error(payload: Mapping[str, Any]) -> None:
    # Lighthouse reports page-load failures inside an otherwise successful response.
    lhr = payload.get("lhr") or {}
    runtime_error = lhr.get("runtimeError") if isinstance(lhr, Mapping) else None
    if not runtime_error:
        return
    if isinstance(runtime_error, Mapping):
        code = str(runtime_error.get("code") or "")
        message = str(runtime_error.get("message") or "")
    else:
        code, message = str(runtime_error), ""
    if code and code != _NO_ERROR:
        raise RemoteAuditError(code, message)


__all__ = ["raise_for_runtime_error", "run_lighthouse_api"]
