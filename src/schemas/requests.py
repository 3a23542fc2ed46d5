"""External request schemas for report queries and audits."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

MAX_REPORTS = 10


class ReportQuery(BaseModel):
    """Read options. Unspecified fields keep their defaults."""

    max_results: int = Field(default=MAX_REPORTS, ge=1)
    use_cache: bool = True

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def coerce(cls, value: "ReportQuery | Mapping[str, Any] | None") -> "ReportQuery":
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value or {}))


class AuditRequest(BaseModel):
    url: str = Field(min_length=1)
    replace: bool = True

    model_config = ConfigDict(extra="forbid")


class CleanupRequest(BaseModel):
    days: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


__all__ = ["AuditRequest", "CleanupRequest", "MAX_REPORTS", "ReportQuery"]
