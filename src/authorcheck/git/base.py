"""Base classes, dataclasses, and types for git history reconstruction."""

import hashlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from authorcheck.errors import AuthorCheckError


class GitError(AuthorCheckError):
    """Base exception for git history errors."""

    pass


class RepositoryNotFoundError(GitError):
    """No git repository contains the given path."""

    pass


class CommandFailure(GitError):
    """A git subcommand exited with an unexpected status."""

    def __init__(
        self,
        command: list[str],
        working_dir: str,
        status: int | None,
        stderr: str,
    ) -> None:
        self.command = command
        self.working_dir = working_dir
        self.status = status
        self.stderr = stderr
        super().__init__(
            f"Could not execute git command [{working_dir}] {' '.join(command)} "
            f"(exit status {status}): {stderr.strip()}"
        )


class ChangeKind(str, Enum):
    """Kind of change a commit applied to a path."""

    ADD = "A"
    MODIFY = "M"
    DELETE = "D"
    RENAME = "R"
    COPY = "C"


def file_identity(path: str) -> str:
    """Canonical key for a repository-relative path."""
    return hashlib.md5(path.encode("utf-8"), usedforsecurity=False).hexdigest()


@dataclass(frozen=True)
class ChangeRecord:
    """One path changed by a commit, as reported by name-status output."""

    kind: ChangeKind
    path: str  # destination for renames and copies
    source: str | None = None
    similarity: int | None = None

    @property
    def follows(self) -> bool:
        """True for renames and copies."""
        return self.kind in (ChangeKind.RENAME, ChangeKind.COPY)

    @property
    def paths(self) -> tuple[str, ...]:
        if self.source is not None:
            return (self.path, self.source)
        return (self.path,)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "source": self.source,
            "similarity": self.similarity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangeRecord":
        return cls(
            kind=ChangeKind(data["kind"]),
            path=data["path"],
            source=data.get("source"),
            similarity=data.get("similarity"),
        )


@dataclass(frozen=True)
class Commit:
    """Represents a git commit."""

    sha: str
    author: str
    author_email: str
    subject: str
    timestamp: datetime  # committer date, timezone-aware
    parents: tuple[str, ...]
    changes: tuple[ChangeRecord, ...] = ()

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def change_for(self, path: str) -> ChangeRecord | None:
        """Return the change record whose destination is ``path``."""
        for change in self.changes:
            if change.path == path:
                return change
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sha": self.sha,
            "author": self.author,
            "author_email": self.author_email,
            "subject": self.subject,
            "timestamp": self.timestamp.isoformat(),
            "parents": list(self.parents),
            "changes": [change.to_dict() for change in self.changes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Commit":
        return cls(
            sha=data["sha"],
            author=data["author"],
            author_email=data["author_email"],
            subject=data["subject"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            parents=tuple(data["parents"]),
            changes=tuple(
                ChangeRecord.from_dict(change) for change in data.get("changes", [])
            ),
        )


@dataclass
class FilePathRecord:
    """All commits that touched one file identity directly.

    Commit hashes are kept newest first, in the order the history log
    reported them.
    """

    identity: str
    path: str
    commits: list[str] = field(default_factory=list)

    def add_commit(self, sha: str) -> None:
        if sha not in self.commits:
            self.commits.append(sha)

    def to_dict(self) -> dict[str, Any]:
        return {"identity": self.identity, "path": self.path, "commits": self.commits}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilePathRecord":
        return cls(
            identity=data["identity"],
            path=data["path"],
            commits=list(data["commits"]),
        )


@dataclass
class HistoryNode:
    """One file identity in a path history tree."""

    identity: str
    path: str
    via_commit: str | None = None  # commit that renamed/copied this path onward
    children: list[int] = field(default_factory=list)


@dataclass
class PathHistory:
    """Arena of history nodes for one queried path; node 0 is the root."""

    nodes: list[HistoryNode] = field(default_factory=list)

    @property
    def root(self) -> HistoryNode:
        return self.nodes[0]

    def add(self, node: HistoryNode, parent: int | None = None) -> int:
        self.nodes.append(node)
        index = len(self.nodes) - 1
        if parent is not None:
            self.nodes[parent].children.append(index)
        return index

    def walk(self, start: int = 0) -> Iterator[HistoryNode]:
        """Yield nodes depth first, root before predecessors."""
        stack = [start]
        while stack:
            index = stack.pop()
            node = self.nodes[index]
            yield node
            stack.extend(reversed(node.children))

    def predecessors(self) -> list[str]:
        """Paths of every node except the root, in walk order."""
        return [node.path for node in self.walk()][1:]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [
                {
                    "identity": node.identity,
                    "path": node.path,
                    "via_commit": node.via_commit,
                    "children": node.children,
                }
                for node in self.nodes
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PathHistory":
        return cls(
            nodes=[
                HistoryNode(
                    identity=node["identity"],
                    path=node["path"],
                    via_commit=node["via_commit"],
                    children=list(node["children"]),
                )
                for node in data["nodes"]
            ]
        )


@dataclass(frozen=True)
class AuthorEntry:
    """An author as recorded in git history."""

    name: str
    email: str

    @property
    def key(self) -> str:
        return str(self).lower()

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
