"""Author lists derived from reconstructed file histories."""

from pathlib import Path

import structlog

from .base import AuthorEntry, PathHistory
from .history import HistoryTracker
from .index import RepositoryIndex
from .runner import CommandRunner

logger = structlog.get_logger(__name__)


class AuthorAggregator:
    """Collects the distinct authors of a file and all of its predecessors."""

    def __init__(
        self,
        runner: CommandRunner,
        index: RepositoryIndex,
        tracker: HistoryTracker,
        repo_root: str | Path,
    ) -> None:
        self.runner = runner
        self.index = index
        self.tracker = tracker
        self.repo_root = Path(repo_root)
        self._dirty: set[str] | None = None
        self._local: tuple[AuthorEntry | None] | None = None

    def authors_for(self, path: str) -> list[AuthorEntry] | None:
        """Return the authors of a repository-relative path.

        Authors are ordered by first appearance, walking the newest commits of
        the file first and its predecessors after it. Merge commits never
        contribute. When the file has uncommitted changes the local git
        identity is appended last.

        Returns:
            The author list, or None if the path has no history
        """
        history = self.tracker.track(path)
        if history is None:
            return None

        authors = self.history_authors(history)

        if self.is_dirty(path):
            local = self.local_identity()
            if local is not None:
                authors = [author for author in authors if author.key != local.key]
                authors.append(local)

        return authors

    def history_authors(self, history: PathHistory) -> list[AuthorEntry]:
        seen: set[str] = set()
        authors: list[AuthorEntry] = []

        for node in history.walk():
            record = self.index.records.get(node.identity)
            if record is None:
                continue
            for commit in self.index.commits_of(record):
                if commit.is_merge:
                    continue
                entry = AuthorEntry(name=commit.author, email=commit.author_email)
                if entry.key in seen:
                    continue
                seen.add(entry.key)
                authors.append(entry)

        return authors

    def is_dirty(self, path: str) -> bool:
        """Whether an existing file has changes not yet committed."""
        if not (self.repo_root / path).is_file():
            return False
        return path in self.dirty_paths()

    def dirty_paths(self) -> set[str]:
        """Paths with pending working-tree or index changes.

        The working tree status is read once per aggregator.
        """
        if self._dirty is None:
            output = self.runner.run(
                ["status", "--porcelain", "-z", "--untracked-files=no"], strip=False
            )
            self._dirty = _parse_porcelain(output)
        return self._dirty

    def local_identity(self) -> AuthorEntry | None:
        """The configured git user, or None when name or email is unset."""
        if self._local is None:
            name = self._config_value("user.name")
            email = self._config_value("user.email")
            if not name or not email:
                logger.debug("local_identity_missing", name=name, email=email)
                self._local = (None,)
            else:
                self._local = (AuthorEntry(name=name, email=email),)
        return self._local[0]

    def project_authors(self) -> list[AuthorEntry]:
        """Every non-merge author of the history reachable from HEAD."""
        output = self.runner.run(
            ["shortlog", "--summary", "--email", "--no-merges", "HEAD"]
        )
        seen: set[str] = set()
        authors: list[AuthorEntry] = []
        for line in output.splitlines():
            entry = _parse_shortlog_line(line)
            if entry is None or entry.key in seen:
                continue
            seen.add(entry.key)
            authors.append(entry)

        if self.is_working_tree_dirty():
            local = self.local_identity()
            if local is not None and local.key not in seen:
                authors.append(local)

        return authors

    def is_working_tree_dirty(self) -> bool:
        return bool(self.dirty_paths())

    def _config_value(self, key: str) -> str | None:
        # exit status 1 means the key is not set
        value = self.runner.run(["config", "--get", key], allow_status=(1,))
        return value.strip() or None


def _parse_shortlog_line(line: str) -> AuthorEntry | None:
    """Parse ``"   12\\tName <email>"`` into an author entry."""
    _, _, author = line.partition("\t")
    author = author.strip()
    if not author.endswith(">") or "<" not in author:
        return None
    name, _, email = author[:-1].rpartition("<")
    return AuthorEntry(name=name.strip(), email=email.strip())


def _parse_porcelain(output: str) -> set[str]:
    """Collect the paths of NUL-separated ``git status --porcelain -z`` output."""
    paths: set[str] = set()
    entries = iter(output.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        status, path = entry[:2], entry[3:]
        paths.add(path)
        if "R" in status or "C" in status:
            # the origin of a rename or copy follows as its own entry
            paths.add(next(entries, ""))
    paths.discard("")
    return paths
