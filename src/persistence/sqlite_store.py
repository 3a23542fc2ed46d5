"""SQLite-backed store for audit runs, URL metadata and cache entries."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator
from uuid import uuid4

from core.errors import StorageError
from persistence.models import CacheEntry, RunRow, UrlMetadata
from schemas.reports import isoformat_utc


# Timestamps are stored as fixed-width UTC ISO strings so text ordering
# matches chronological ordering.
_SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS runs (
    run_id TEXT PRIMARY KEY,
    url_id TEXT NOT NULL,
    audited_on TEXT NOT NULL,
    category_scores_json TEXT NOT NULL,
    origin_field_data_json TEXT
);
CREATE INDEX IF NOT EXISTS idx_runs_url_audited ON runs(url_id, audited_on);

CREATE TABLE IF NOT EXISTS url_meta (
    url_id TEXT PRIMARY KEY,
    last_viewed TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_url_meta_last_viewed ON url_meta(last_viewed);

CREATE TABLE IF NOT EXISTS cache_entries (
    cache_key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""


class SqliteStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open {self._path}: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"SQLite operation failed: {exc}") from exc
        finally:
            conn.close()

    def _initialize(self) -> None:
        with self._session() as conn:
            conn.executescript(_SCHEMA)

    # Runs

    def latest_runs(self, url_id: str, *, limit: int) -> list[RunRow]:
        """Return up to ``limit`` runs for ``url_id``, newest first."""
        rows = self._fetch_all(
            """
            SELECT * FROM runs
             WHERE url_id = ?
             ORDER BY audited_on DESC, rowid DESC
             LIMIT ?
            """,
            (url_id, limit),
        )
        return [_row_to_run(row) for row in rows]

    def count_runs(self, url_id: str) -> int:
        row = self._fetch_one("SELECT COUNT(*) AS n FROM runs WHERE url_id = ?", (url_id,))
        return int(row["n"]) if row else 0

    def add_run(
        self,
        url_id: str,
        *,
        audited_on: datetime,
        category_scores: list[dict[str, Any]],
        origin_field_data: dict[str, Any] | None,
    ) -> RunRow:
        run_id = _new_id("run")
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO runs (
                    run_id, url_id, audited_on, category_scores_json, origin_field_data_json
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    run_id,
                    url_id,
                    isoformat_utc(audited_on),
                    _dumps(category_scores),
                    _dumps(origin_field_data) if origin_field_data is not None else None,
                ),
            )
        return RunRow(
            run_id=run_id,
            url_id=url_id,
            audited_on=audited_on,
            category_scores=category_scores,
            origin_field_data=origin_field_data,
        )

    def replace_run(
        self,
        run_id: str,
        *,
        audited_on: datetime,
        category_scores: list[dict[str, Any]],
        origin_field_data: dict[str, Any] | None,
    ) -> RunRow:
        with self._session() as conn:
            cur = conn.execute(
                """
                UPDATE runs
                   SET audited_on = ?, category_scores_json = ?, origin_field_data_json = ?
                 WHERE run_id = ?
                """,
                (
                    isoformat_utc(audited_on),
                    _dumps(category_scores),
                    _dumps(origin_field_data) if origin_field_data is not None else None,
                    run_id,
                ),
            )
            if cur.rowcount == 0:
                raise StorageError(f"Run not found for update: {run_id}")
            row = conn.execute("SELECT * FROM runs WHERE run_id = ?", (run_id,)).fetchone()
        return _row_to_run(row)

    def delete_run_batch(self, url_id: str, *, limit: int) -> int:
        """Delete at most ``limit`` runs for ``url_id`` in one transaction."""
        with self._session() as conn:
            cur = conn.execute(
                """
                DELETE FROM runs
                 WHERE run_id IN (
                    SELECT run_id FROM runs WHERE url_id = ? ORDER BY run_id LIMIT ?
                 )
                """,
                (url_id, limit),
            )
            return cur.rowcount

    def list_url_ids(self) -> list[str]:
        rows = self._fetch_all("SELECT DISTINCT url_id FROM runs ORDER BY url_id")
        return [row["url_id"] for row in rows]

    # URL metadata

    def set_last_viewed(self, url_id: str, when: datetime) -> None:
        with self._session() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO url_meta (url_id, last_viewed) VALUES (?, ?)",
                (url_id, isoformat_utc(when)),
            )

    def get_metadata(self, url_id: str) -> UrlMetadata | None:
        row = self._fetch_one("SELECT * FROM url_meta WHERE url_id = ?", (url_id,))
        if row is None:
            return None
        return UrlMetadata(url_id=row["url_id"], last_viewed=_from_iso(row["last_viewed"]))

    def list_url_ids_last_viewed_before(self, cutoff: datetime) -> list[str]:
        rows = self._fetch_all(
            "SELECT url_id FROM url_meta WHERE last_viewed < ? ORDER BY url_id",
            (isoformat_utc(cutoff),),
        )
        return [row["url_id"] for row in rows]

    def delete_metadata(self, url_id: str) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM url_meta WHERE url_id = ?", (url_id,))

    # Cache entries

    def get_cache_entry(self, cache_key: str) -> CacheEntry | None:
        row = self._fetch_one(
            "SELECT * FROM cache_entries WHERE cache_key = ?", (cache_key,)
        )
        return _row_to_cache(row) if row else None

    def put_cache_entry(self, entry: CacheEntry) -> None:
        with self._session() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO cache_entries (cache_key, value_json, created_at)
                VALUES (?, ?, ?)
                """,
                (entry.cache_key, _dumps(entry.value), isoformat_utc(entry.created_at)),
            )

    def delete_cache_entry(self, cache_key: str) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM cache_entries WHERE cache_key = ?", (cache_key,))

    def clear_cache_entries(self) -> int:
        with self._session() as conn:
            return conn.execute("DELETE FROM cache_entries").rowcount

    def list_cache_entries_older_than(self, cutoff: datetime) -> list[CacheEntry]:
        rows = self._fetch_all(
            "SELECT * FROM cache_entries WHERE created_at < ?",
            (isoformat_utc(cutoff),),
        )
        return [_row_to_cache(row) for row in rows]

    def list_cache_keys(self) -> list[str]:
        rows = self._fetch_all("SELECT cache_key FROM cache_entries ORDER BY cache_key")
        return [row["cache_key"] for row in rows]

    def _fetch_one(self, query: str, params: tuple[object, ...] = ()) -> sqlite3.Row | None:
        with self._session() as conn:
            return conn.execute(query, params).fetchone()

    def _fetch_all(self, query: str, params: tuple[object, ...] = ()) -> list[sqlite3.Row]:
        with self._session() as conn:
            return conn.execute(query, params).fetchall()


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


def _dumps(value: object) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


def _from_iso(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _row_to_run(row: sqlite3.Row) -> RunRow:
    origin = row["origin_field_data_json"]
    return RunRow(
        run_id=row["run_id"],
        url_id=row["url_id"],
        audited_on=_from_iso(row["audited_on"]),
        category_scores=json.loads(row["category_scores_json"]),
        origin_field_data=json.loads(origin) if origin else None,
    )


def _row_to_cache(row: sqlite3.Row) -> CacheEntry:
    return CacheEntry(
        cache_key=row["cache_key"],
        value=json.loads(row["value_json"]),
        created_at=_from_iso(row["created_at"]),
    )


__all__ = ["SqliteStore"]
