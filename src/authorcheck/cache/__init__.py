"""Memoization of git history queries."""

from authorcheck.config import settings

from .base import CacheOperation, CacheStore, HistoryCache, repository_lock
from .memory import MemoryCacheStore
from .sqlite import SqliteCacheStore


def open_store(persistent: bool = True) -> CacheStore:
    """The configured SQLite store, or a throwaway in-memory one."""
    if not persistent:
        return MemoryCacheStore()
    return SqliteCacheStore(settings.cache_path)


__all__ = [
    "CacheOperation",
    "CacheStore",
    "HistoryCache",
    "MemoryCacheStore",
    "SqliteCacheStore",
    "open_store",
    "repository_lock",
]
