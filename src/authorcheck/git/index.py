"""Repository-wide index of which commits touched which file identity."""

from dataclasses import replace
from typing import Any

import structlog

from authorcheck.cache import CacheOperation, HistoryCache

from .base import ChangeRecord, Commit, FilePathRecord, file_identity
from .changes import ChangeSetParser
from .log import CommitLog
from .runner import CommandRunner

logger = structlog.get_logger(__name__)


class RepositoryIndex:
    """Maps file identities to the commits that touched them.

    The index is built once per repository state. A build for the current
    HEAD is restored from the cache as a whole; otherwise every commit's
    name-status diff is read (each one cached by commit hash) and merged in.
    """

    def __init__(
        self,
        runner: CommandRunner,
        cache: HistoryCache,
        commit_log: CommitLog | None = None,
        parser: ChangeSetParser | None = None,
        find_copies: bool = True,
    ) -> None:
        self.runner = runner
        self.cache = cache
        self.commit_log = commit_log or CommitLog(runner, cache)
        self.parser = parser or ChangeSetParser()
        self.find_copies = find_copies

        self.commits: dict[str, Commit] = {}
        self.records: dict[str, FilePathRecord] = {}
        self._positions: dict[str, int] = {}
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    def build(self) -> None:
        """Build the index, reusing cached work wherever possible."""
        if self._built:
            return

        with self.cache.lock:
            snapshot = self.cache.get(CacheOperation.REPOSITORY_INDEX)
            if snapshot is not None:
                self._restore(snapshot)
                self._built = True
                logger.debug(
                    "repository_index_restored",
                    head=self.cache.head,
                    commits=len(self.commits),
                )
                return

            log = self.commit_log.fetch_all_commits()
            self._positions = {commit.sha: position for position, commit in enumerate(log)}
            merged_snapshots = 0

            for commit in log:
                if commit.sha in self.commits:
                    continue

                # A full build from when HEAD was at this commit covers all of
                # its ancestors.
                previous = self.cache.get(CacheOperation.REPOSITORY_INDEX, head=commit.sha)
                if previous is not None:
                    self._restore(previous, merge=True)
                    merged_snapshots += 1
                    continue

                self._add_commit(commit, self.fetch_changes(commit.sha))

            for record in self.records.values():
                record.commits.sort(key=self.position)

            self.cache.put(CacheOperation.REPOSITORY_INDEX, self._snapshot())
            self._built = True
            logger.info(
                "repository_index_built",
                head=self.cache.head,
                commits=len(self.commits),
                files=len(self.records),
                merged_snapshots=merged_snapshots,
            )

    def fetch_changes(self, sha: str) -> list[ChangeRecord]:
        """Return the change records of one commit (cached by hash)."""
        cached = self.cache.get(CacheOperation.COMMIT_CHANGES, sha)
        if cached is not None:
            return [ChangeRecord.from_dict(data) for data in cached]

        arguments = ["show", sha, "-M"]
        if self.find_copies:
            arguments.append("-C")
        arguments.extend(["--name-status", "--format=", "-z"])

        changes = self.parser.parse(self.runner.run(arguments, strip=False))
        self.cache.put(
            CacheOperation.COMMIT_CHANGES, [change.to_dict() for change in changes], sha
        )
        return changes

    def record_for(self, path: str) -> FilePathRecord | None:
        """Return the record for a repository-relative path, if it has history."""
        return self.records.get(file_identity(path))

    def commit(self, sha: str) -> Commit:
        return self.commits[sha]

    def commits_of(self, record: FilePathRecord) -> list[Commit]:
        return [self.commits[sha] for sha in record.commits if sha in self.commits]

    def position(self, sha: str) -> int:
        """Position of a commit in the history log; larger means older."""
        return self._positions.get(sha, len(self._positions))

    def _add_commit(self, commit: Commit, changes: list[ChangeRecord]) -> None:
        commit = replace(commit, changes=tuple(changes))
        self.commits[commit.sha] = commit

        for change in changes:
            # renames and copies land in both identities so the seam can be
            # found from either side
            for path in change.paths:
                self._record(path).add_commit(commit.sha)

    def _record(self, path: str) -> FilePathRecord:
        identity = file_identity(path)
        record = self.records.get(identity)
        if record is None:
            record = FilePathRecord(identity=identity, path=path)
            self.records[identity] = record
        return record

    def _snapshot(self) -> dict[str, Any]:
        ordered = sorted(self.commits.values(), key=lambda commit: self.position(commit.sha))
        return {
            "commits": [commit.to_dict() for commit in ordered],
            "records": [record.to_dict() for record in self.records.values()],
        }

    def _restore(self, snapshot: dict[str, Any], merge: bool = False) -> None:
        commits = [Commit.from_dict(data) for data in snapshot["commits"]]
        if not merge:
            self._positions = {commit.sha: position for position, commit in enumerate(commits)}

        for commit in commits:
            self.commits.setdefault(commit.sha, commit)

        for data in snapshot["records"]:
            record = FilePathRecord.from_dict(data)
            existing = self.records.get(record.identity)
            if existing is None:
                self.records[record.identity] = record
                continue
            for sha in record.commits:
                existing.add_commit(sha)
