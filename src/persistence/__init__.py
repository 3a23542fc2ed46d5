"""Persistence subsystem exports."""

from persistence.cache import CacheManager
from persistence.fs_store import FsBlobStore
from persistence.manager import ReportStore
from persistence.slugs import deslugify, slugify
from persistence.sqlite_store import SqliteStore

__all__ = [
    "CacheManager",
    "FsBlobStore",
    "ReportStore",
    "SqliteStore",
    "deslugify",
    "slugify",
]
