"""In-memory cache store."""

import json
from typing import Any

from .base import CacheStore


class MemoryCacheStore(CacheStore):
    """Cache store living for one process.

    Values are kept in serialized form so callers never share mutable state
    with the cache.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._entries.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = json.dumps(value)

    def has(self, key: str) -> bool:
        return key in self._entries

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count
