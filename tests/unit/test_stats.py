from datetime import datetime, timedelta, timezone

import pytest

from core.errors import EmptyInputError
from persistence.stats import median, median_scores, pool_scores, scores_by_category
from schemas.reports import AuditRun, CategoryScore


def _run(day: int, **scores: float | None) -> AuditRun:
    return AuditRun(
        category_scores=[CategoryScore(id=key, title=key, score=value) for key, value in scores.items()],
        audited_on=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(days=day),
    )


def test_median_even_and_odd() -> None:
    assert median([3, 5, 4, 4, 1, 1, 2, 3]) == 3
    assert median([1, 2, 3, 4]) == 2.5
    assert median([5]) == 5


def test_median_sorts_numerically() -> None:
    assert median([10, 9, 100]) == 10


def test_median_does_not_mutate_input() -> None:
    values = [3, 1, 2]
    median(values)
    assert values == [3, 1, 2]


def test_median_rejects_empty_input() -> None:
    with pytest.raises(EmptyInputError):
        median([])


def test_scores_by_category_reverses_to_oldest_first() -> None:
    newest_first = [_run(3, performance=0.3), _run(2, performance=0.2), _run(1, performance=0.1)]

    scores = scores_by_category(newest_first, 10)
    assert scores["performance"] == pytest.approx([10, 20, 30])

    limited = scores_by_category(newest_first, 2)
    assert limited["performance"] == pytest.approx([20, 30])


def test_scores_by_category_skips_unscored_categories() -> None:
    scores = scores_by_category([_run(1, performance=0.5, pwa=None)], 10)
    assert scores == {"performance": pytest.approx([50])}


def test_pooled_median_is_not_mean_of_medians() -> None:
    pooled = pool_scores([{"performance": [80.0]}, {"performance": [90.0, 100.0]}])
    assert pooled["performance"] == [80.0, 90.0, 100.0]
    assert median_scores(pooled) == {"performance": 90.0}
