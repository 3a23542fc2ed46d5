"""Schema package for external and internal contracts."""

from .reports import AuditRun, CategoryScore
from .requests import AuditRequest, CleanupRequest, ReportQuery
from .responses import AuditOutcome, CleanupResult

__all__ = [
    "AuditOutcome",
    "AuditRequest",
    "AuditRun",
    "CategoryScore",
    "CleanupRequest",
    "CleanupResult",
    "ReportQuery",
]
