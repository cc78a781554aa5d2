"""Cache abstractions for git history reconstruction."""

import hashlib
import json
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class CacheStore(ABC):
    """Persistent key-value store for JSON-serializable values."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def has(self, key: str) -> bool:
        pass

    @abstractmethod
    def clear(self) -> int:
        """Remove all entries and return how many were removed."""
        pass


class CacheOperation(str, Enum):
    """Operations whose results are memoized."""

    ALL_COMMITS = "fetch_all_commits"
    REPOSITORY_INDEX = "analyze"
    COMMIT_CHANGES = "commit_changes"
    FILE_CONTENT = "file_content"
    MERGE_RENAMES = "merge_renames"
    FILE_HISTORY = "file_history"

    @property
    def head_scoped(self) -> bool:
        """Whether results depend on the current HEAD rather than a commit hash."""
        return self in (
            CacheOperation.ALL_COMMITS,
            CacheOperation.REPOSITORY_INDEX,
            CacheOperation.FILE_HISTORY,
        )


_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def repository_lock(repo_root: str) -> threading.Lock:
    """Process-wide lock serializing expensive builds for one repository."""
    with _locks_guard:
        return _locks.setdefault(repo_root, threading.Lock())


class HistoryCache:
    """Cache namespace for one repository.

    Keys combine the repository root, the operation and its structured
    input. HEAD-scoped operations also include the HEAD hash, so moving
    HEAD invalidates them without touching per-commit entries.
    """

    def __init__(self, store: CacheStore, repo_root: str, head: str = "") -> None:
        self.store = store
        self.repo_root = repo_root
        self.head = head

    @property
    def lock(self) -> threading.Lock:
        return repository_lock(self.repo_root)

    def key(
        self, operation: CacheOperation, *parts: str, head: str | None = None
    ) -> str:
        scope = None
        if operation.head_scoped:
            scope = head if head is not None else self.head
        payload = json.dumps([self.repo_root, operation.value, scope, *parts])
        digest = hashlib.md5(payload.encode("utf-8"), usedforsecurity=False)
        return f"{operation.value}:{digest.hexdigest()}"

    def get(
        self, operation: CacheOperation, *parts: str, head: str | None = None
    ) -> Any | None:
        return self.store.get(self.key(operation, *parts, head=head))

    def has(self, operation: CacheOperation, *parts: str) -> bool:
        return self.store.has(self.key(operation, *parts))

    def put(self, operation: CacheOperation, value: Any, *parts: str) -> None:
        self.store.set(self.key(operation, *parts), value)
