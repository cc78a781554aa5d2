"""Entry point to history-based authorship of one repository."""

from pathlib import Path

import git
import structlog

from authorcheck.author_config import AuthorConfig
from authorcheck.cache import CacheStore, HistoryCache, MemoryCacheStore
from authorcheck.config import FollowThresholds, settings

from .authors import AuthorAggregator
from .base import AuthorEntry, RepositoryNotFoundError
from .history import HistoryTracker
from .index import RepositoryIndex
from .log import CommitLog
from .runner import CommandRunner

logger = structlog.get_logger(__name__)


class GitRepository:
    """Answers "which files exist" and "who wrote this file" for a repository.

    Example:
        repository = GitRepository.discover("src/app.py", store=SqliteCacheStore(path))
        for path in sorted(repository.list_file_identities()):
            print(path, repository.authors_for(path))
    """

    def __init__(
        self,
        root: str | Path,
        store: CacheStore | None = None,
        config: AuthorConfig | None = None,
        executable: str | None = None,
        thresholds: FollowThresholds | None = None,
        find_copies: bool | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.config = config or AuthorConfig()
        self.runner = CommandRunner(self.root, executable or settings.git_executable)
        self.cache = HistoryCache(
            store if store is not None else MemoryCacheStore(), str(self.root)
        )
        self.commit_log = CommitLog(self.runner, self.cache)
        self.index = RepositoryIndex(
            self.runner,
            self.cache,
            commit_log=self.commit_log,
            find_copies=settings.find_copies if find_copies is None else find_copies,
        )
        self.tracker = HistoryTracker(
            self.runner,
            self.index,
            self.cache,
            thresholds=thresholds or settings.follow,
        )
        self.aggregator = AuthorAggregator(
            self.runner, self.index, self.tracker, self.root
        )
        self._head: str | None = None

    @classmethod
    def discover(cls, path: str | Path, **kwargs) -> "GitRepository":
        """Open the repository containing ``path``, searching parent directories.

        Raises:
            RepositoryNotFoundError: If no repository contains the path
        """
        try:
            repo = git.Repo(path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise RepositoryNotFoundError(f"Not a git repository: {path}") from e

        try:
            root = repo.working_tree_dir
        finally:
            repo.close()

        if root is None:
            raise RepositoryNotFoundError(f"Repository has no working tree: {path}")
        return cls(root, **kwargs)

    @property
    def head(self) -> str:
        if self._head is None:
            self._head = self.commit_log.fetch_head()
            self.cache.head = self._head
        return self._head

    def analyze(self) -> None:
        """Build the history index for the current HEAD."""
        head = self.head
        self.index.build()
        logger.debug("repository_analyzed", root=str(self.root), head=head)

    def list_file_identities(self) -> set[str]:
        """Absolute paths of all files in HEAD that are not excluded."""
        output = self.runner.run(
            ["ls-tree", "HEAD", "-r", "--full-name", "--name-only", "-z"], strip=False
        )
        paths = {str(self.root / name) for name in output.split("\0") if name}
        return {path for path in paths if not self.config.is_path_excluded(path)}

    def relative_path(self, path: str | Path) -> str | None:
        """Repository-relative form of ``path``; None when it lies outside.

        Relative paths are taken as relative to the repository root.
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        try:
            relative = candidate.resolve().relative_to(self.root)
        except ValueError:
            return None
        return relative.as_posix()

    def authors_for(self, path: str | Path) -> list[AuthorEntry] | None:
        """Authors of a file and its predecessors, or None without history."""
        relative = self.relative_path(path)
        if relative is None or relative == ".":
            return None

        self.analyze()
        return self.aggregator.authors_for(relative)

    def project_authors(self) -> list[AuthorEntry]:
        """Authors of every non-merge commit reachable from HEAD."""
        return self.aggregator.project_authors()
