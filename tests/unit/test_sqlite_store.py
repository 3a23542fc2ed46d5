from datetime import datetime, timedelta, timezone

from persistence.models import CacheEntry
from persistence.sqlite_store import SqliteStore

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _add(store: SqliteStore, url_id: str, when: datetime, score: float = 0.5):
    return store.add_run(
        url_id,
        audited_on=when,
        category_scores=[{"id": "performance", "title": "Performance", "score": score}],
        origin_field_data=None,
    )


def test_latest_runs_are_newest_first_and_limited(sqlite_store: SqliteStore) -> None:
    for hours in (0, 2, 1):
        _add(sqlite_store, "site", T0 + timedelta(hours=hours))
    _add(sqlite_store, "other", T0 + timedelta(hours=5))

    runs = sqlite_store.latest_runs("site", limit=2)
    assert [run.audited_on for run in runs] == [T0 + timedelta(hours=2), T0 + timedelta(hours=1)]
    assert all(run.url_id == "site" for run in runs)


def test_whole_second_and_fractional_timestamps_order_correctly(sqlite_store: SqliteStore) -> None:
    _add(sqlite_store, "site", T0)
    _add(sqlite_store, "site", T0 + timedelta(microseconds=500))

    newest = sqlite_store.latest_runs("site", limit=1)[0]
    assert newest.audited_on == T0 + timedelta(microseconds=500)


def test_replace_run_updates_in_place(sqlite_store: SqliteStore) -> None:
    run = _add(sqlite_store, "site", T0, score=0.1)
    replaced = sqlite_store.replace_run(
        run.run_id,
        audited_on=T0 + timedelta(days=1),
        category_scores=[{"id": "performance", "title": "Performance", "score": 0.9}],
        origin_field_data={"overall_category": "FAST"},
    )

    assert replaced.run_id == run.run_id
    assert sqlite_store.count_runs("site") == 1
    stored = sqlite_store.latest_runs("site", limit=1)[0]
    assert stored.category_scores[0]["score"] == 0.9
    assert stored.origin_field_data == {"overall_category": "FAST"}


def test_delete_run_batch_is_bounded(sqlite_store: SqliteStore) -> None:
    for i in range(5):
        _add(sqlite_store, "site", T0 + timedelta(minutes=i))
    _add(sqlite_store, "other", T0)

    assert sqlite_store.delete_run_batch("site", limit=3) == 3
    assert sqlite_store.delete_run_batch("site", limit=3) == 2
    assert sqlite_store.delete_run_batch("site", limit=3) == 0
    assert sqlite_store.count_runs("other") == 1


def test_list_url_ids_is_distinct(sqlite_store: SqliteStore) -> None:
    _add(sqlite_store, "b", T0)
    _add(sqlite_store, "a", T0)
    _add(sqlite_store, "a", T0 + timedelta(hours=1))

    assert sqlite_store.list_url_ids() == ["a", "b"]


def test_last_viewed_before_is_strict(sqlite_store: SqliteStore) -> None:
    sqlite_store.set_last_viewed("older", T0 - timedelta(seconds=1))
    sqlite_store.set_last_viewed("equal", T0)
    sqlite_store.set_last_viewed("newer", T0 + timedelta(seconds=1))

    assert sqlite_store.list_url_ids_last_viewed_before(T0) == ["older"]


def test_metadata_upsert_and_delete(sqlite_store: SqliteStore) -> None:
    sqlite_store.set_last_viewed("site", T0)
    sqlite_store.set_last_viewed("site", T0 + timedelta(days=1))

    metadata = sqlite_store.get_metadata("site")
    assert metadata is not None
    assert metadata.last_viewed == T0 + timedelta(days=1)

    sqlite_store.delete_metadata("site")
    assert sqlite_store.get_metadata("site") is None


def test_cache_entries_roundtrip(sqlite_store: SqliteStore) -> None:
    sqlite_store.put_cache_entry(CacheEntry(cache_key="k", value={"a": [1, 2]}, created_at=T0))

    entry = sqlite_store.get_cache_entry("k")
    assert entry is not None
    assert entry.value == {"a": [1, 2]}
    assert entry.created_at == T0

    assert sqlite_store.list_cache_entries_older_than(T0 + timedelta(days=1))[0].cache_key == "k"
    assert sqlite_store.clear_cache_entries() == 1
    assert sqlite_store.get_cache_entry("k") is None
