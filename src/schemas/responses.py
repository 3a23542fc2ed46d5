"""External response schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from schemas.reports import AuditRun


class AuditOutcome(BaseModel):
    """Result of one audit; ``errors`` is set instead of raising on failure."""

    url: str
    run: AuditRun | None = None
    errors: str | None = None

    model_config = ConfigDict(extra="forbid")

    @property
    def ok(self) -> bool:
        return self.errors is None


class CleanupResult(BaseModel):
    cutoff: str
    removed: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


__all__ = ["AuditOutcome", "CleanupResult"]
