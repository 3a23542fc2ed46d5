"""Cache management commands."""

from __future__ import annotations

import typer

from .shared import emit_json


app = typer.Typer(
    help="Inspect and clear the query cache",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


def _open_store():
    from core.config import get_settings
    from persistence.sqlite_store import SqliteStore

    settings = get_settings()
    return SqliteStore(settings.data_dir / "metadata.sqlite"), settings


@app.command("stats", help="List cached keys")
def cache_stats() -> None:
    store, settings = _open_store()
    keys = store.list_cache_keys()
    emit_json({"count": len(keys), "keys": keys, "ttl_seconds": settings.cache_ttl_seconds})


@app.command("clear", help="Drop every cache entry")
def cache_clear() -> None:
    from persistence.cache import CacheManager

    store, settings = _open_store()
    removed = CacheManager(store, ttl_seconds=settings.cache_ttl_seconds).clear()
    emit_json({"removed": removed})


@app.command("prune", help="Drop cache entries older than N days")
def cache_prune(
    days: int = typer.Option(
        30,
        "--days",
        min=1,
        help="Age threshold in days",
    ),
) -> None:
    from persistence.cache import CacheManager

    store, settings = _open_store()
    removed = CacheManager(store, ttl_seconds=settings.cache_ttl_seconds).prune_older_than(days=days)
    emit_json({"removed": removed})


__all__ = ["app"]
