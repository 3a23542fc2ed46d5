"""Median aggregation over Lighthouse category scores."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from core.errors import EmptyInputError
from schemas.reports import AuditRun


def median(numbers: Sequence[float]) -> float:
    """Return the middle value of ``numbers``.

    Even-length input averages the two central values. The input is not
    mutated. Raises :class:`EmptyInputError` for an empty sequence.
    """
    if not numbers:
        raise EmptyInputError("median() requires at least one value")
    ordered = sorted(numbers)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def scores_by_category(runs: Sequence[AuditRun], limit: int) -> dict[str, list[float]]:
    """Collect ``score * 100`` per category from up to ``limit`` runs.

    ``runs`` is expected newest-first; values are appended oldest-first.
    """
    selected = list(runs[:limit])
    selected.reverse()
    scores: dict[str, list[float]] = {}
    for run in selected:
        for category in run.category_scores:
            if category.score is None:
                continue
            scores.setdefault(category.id, []).append(category.score * 100)
    return scores


def median_scores(scores: Mapping[str, Sequence[float]]) -> dict[str, float]:
    return {category: median(values) for category, values in scores.items() if values}


def pool_scores(per_url: Iterable[Mapping[str, Sequence[float]]]) -> dict[str, list[float]]:
    """Concatenate per-category samples from several URLs into one sample each."""
    pooled: dict[str, list[float]] = {}
    for scores in per_url:
        for category, values in scores.items():
            pooled.setdefault(category, []).extend(values)
    return pooled


__all__ = ["median", "median_scores", "pool_scores", "scores_by_category"]
