"""Stored Lighthouse run contracts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryScore(BaseModel):
    """Category rollup with per-audit references removed."""

    id: str
    title: str = ""
    score: Optional[float] = Field(default=None, ge=0, le=1)

    model_config = ConfigDict(extra="ignore")


class AuditRun(BaseModel):
    category_scores: List[CategoryScore] = Field(default_factory=list)
    audited_on: datetime
    origin_field_data: Optional[dict[str, Any]] = None
    lhr: Optional[dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")

    def audited_on_iso(self) -> str:
        return isoformat_utc(self.audited_on)


def isoformat_utc(value: datetime) -> str:
    """Format a timestamp the way full reports record ``auditedOn``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def slim_categories(categories: dict[str, Any]) -> list[CategoryScore]:
    """Flatten a Lighthouse ``categories`` map into slim category records."""
    slim: list[CategoryScore] = []
    for key, raw in categories.items():
        if not isinstance(raw, dict):
            continue
        slim.append(
            CategoryScore(
                id=str(raw.get("id") or key),
                title=str(raw.get("title") or ""),
                score=raw.get("score"),
            )
        )
    return slim


__all__ = ["AuditRun", "CategoryScore", "isoformat_utc", "slim_categories"]
