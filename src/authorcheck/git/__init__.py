"""Git history reconstruction for authorship attribution.

Provides the commit index, rename/copy tracking across the history and
the author lists derived from it.
"""

from .authors import AuthorAggregator
from .base import (
    AuthorEntry,
    ChangeKind,
    ChangeRecord,
    CommandFailure,
    Commit,
    FilePathRecord,
    GitError,
    HistoryNode,
    PathHistory,
    RepositoryNotFoundError,
    file_identity,
)
from .changes import ChangeSetParser
from .history import HistoryTracker
from .index import RepositoryIndex
from .log import CommitLog, parse_log
from .repository import GitRepository
from .runner import CommandRunner

__all__ = [
    # Classes
    "GitRepository",
    "CommandRunner",
    "CommitLog",
    "ChangeSetParser",
    "RepositoryIndex",
    "HistoryTracker",
    "AuthorAggregator",
    # Data classes
    "AuthorEntry",
    "ChangeKind",
    "ChangeRecord",
    "Commit",
    "FilePathRecord",
    "HistoryNode",
    "PathHistory",
    # Helpers
    "file_identity",
    "parse_log",
    # Errors
    "GitError",
    "RepositoryNotFoundError",
    "CommandFailure",
]
