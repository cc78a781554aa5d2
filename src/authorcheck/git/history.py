"""Reconstruction of a file's lineage across renames and copies."""

import structlog

from authorcheck.cache import CacheOperation, HistoryCache
from authorcheck.config import FollowThresholds
from authorcheck.similarity import CopyPasteDetector, ScratchDirectory

from .base import (
    ChangeKind,
    ChangeRecord,
    Commit,
    FilePathRecord,
    HistoryNode,
    PathHistory,
)
from .changes import ChangeSetParser
from .index import RepositoryIndex
from .runner import CommandRunner

logger = structlog.get_logger(__name__)


class HistoryTracker:
    """Finds the prior identities a file inherits its history from.

    Starting at the queried path, every rename or copy that produced the
    path is inspected. Renames with a high similarity index are followed
    directly; weaker renames and copies are confirmed by comparing the two
    blob contents with a copy/paste detector. Followed predecessors are
    tracked recursively, only ever looking at older commits, so the result
    is a tree.
    """

    def __init__(
        self,
        runner: CommandRunner,
        index: RepositoryIndex,
        cache: HistoryCache,
        thresholds: FollowThresholds | None = None,
        parser: ChangeSetParser | None = None,
    ) -> None:
        self.runner = runner
        self.index = index
        self.cache = cache
        self.thresholds = thresholds or FollowThresholds()
        self.parser = parser or ChangeSetParser()
        self.detector_calls = 0
        self._scratch: ScratchDirectory | None = None

    def track(self, path: str) -> PathHistory | None:
        """Return the path history of a repository-relative path.

        Returns None when the path never appears in the history.
        """
        self.index.build()
        record = self.index.record_for(path)
        if record is None:
            return None

        newest = record.commits[0] if record.commits else ""
        cached = self.cache.get(CacheOperation.FILE_HISTORY, record.identity, newest)
        if cached is not None:
            return PathHistory.from_dict(cached)

        history = PathHistory()
        root = history.add(HistoryNode(identity=record.identity, path=record.path))

        with ScratchDirectory() as scratch:
            self._scratch = scratch
            try:
                start, lookup, before = root, record, None
                resolved = self._resolve_merge_only(record)
                if resolved is not None:
                    predecessor, merge = resolved
                    start = history.add(
                        HistoryNode(
                            identity=predecessor.identity,
                            path=predecessor.path,
                            via_commit=merge.sha,
                        ),
                        parent=root,
                    )
                    lookup, before = predecessor, merge.sha
                self._follow(history, start, lookup, before=before, visited=set())
            finally:
                self._scratch = None

        logger.debug(
            "path_history_tracked",
            path=path,
            predecessors=history.predecessors(),
        )
        self.cache.put(
            CacheOperation.FILE_HISTORY, history.to_dict(), record.identity, newest
        )
        return history

    def _follow(
        self,
        history: PathHistory,
        node_index: int,
        record: FilePathRecord,
        before: str | None,
        visited: set[tuple[str, str | None]],
    ) -> None:
        if (record.identity, before) in visited:
            return
        visited.add((record.identity, before))

        for commit, change, source in self._origins(record, before):
            if not self._should_follow(commit, change, source):
                continue

            predecessor = self.index.record_for(source)
            if predecessor is None:
                continue

            child = history.add(
                HistoryNode(
                    identity=predecessor.identity,
                    path=predecessor.path,
                    via_commit=commit.sha,
                ),
                parent=node_index,
            )
            self._follow(history, child, predecessor, before=commit.sha, visited=visited)

    def _origins(
        self, record: FilePathRecord, before: str | None
    ) -> list[tuple[Commit, ChangeRecord, str]]:
        """Renames and copies that produced ``record.path``, with their source path."""
        limit = self.index.position(before) if before is not None else -1
        origins: list[tuple[Commit, ChangeRecord, str]] = []

        for commit in self.index.commits_of(record):
            if before is not None and self.index.position(commit.sha) <= limit:
                continue
            for change in commit.changes:
                if change.follows and change.path == record.path and change.source:
                    origins.append((commit, change, change.source))

        return origins

    def _should_follow(self, commit: Commit, change: ChangeRecord, source: str) -> bool:
        if self._destination_added(commit, change):
            return False
        if change.kind is ChangeKind.RENAME:
            return self._follow_rename(commit, change, source)
        if change.kind is ChangeKind.COPY:
            return self._follow_copy(commit, change, source)
        return False

    def _destination_added(self, commit: Commit, change: ChangeRecord) -> bool:
        """A weak rename or copy whose destination the commit also adds."""
        if (change.similarity or 0) > self.thresholds.added_path_similarity:
            return False
        return any(
            other.kind is ChangeKind.ADD and other.path == change.path
            for other in commit.changes
        )

    def _follow_rename(self, commit: Commit, change: ChangeRecord, source: str) -> bool:
        if (change.similarity or 0) >= self.thresholds.rename_similarity:
            return True

        original, renamed = self._contents(commit, source, change.path)
        return self._detect(
            original,
            renamed,
            min_lines=self.thresholds.rename_min_lines,
            min_tokens=self.thresholds.rename_min_tokens,
        )

    def _follow_copy(self, commit: Commit, change: ChangeRecord, source: str) -> bool:
        original, copy = self._contents(commit, source, change.path)
        if _byte_length(original) == _byte_length(copy):
            return True

        return self._detect(
            original,
            copy,
            min_lines=self.thresholds.copy_min_lines,
            min_tokens=self.thresholds.copy_min_tokens,
        )

    def _contents(self, commit: Commit, source: str, path: str) -> tuple[str, str]:
        parent = commit.parents[0] if commit.parents else commit.sha
        return self.file_content(parent, source), self.file_content(commit.sha, path)

    def _detect(self, source: str, target: str, min_lines: int, min_tokens: int) -> bool:
        if self._scratch is None:
            with ScratchDirectory() as scratch:
                return self._run_detector(scratch, source, target, min_lines, min_tokens)
        return self._run_detector(self._scratch, source, target, min_lines, min_tokens)

    def _run_detector(
        self,
        scratch: ScratchDirectory,
        source: str,
        target: str,
        min_lines: int,
        min_tokens: int,
    ) -> bool:
        paths = [scratch.write(source), scratch.write(target)]
        if paths[0] == paths[1]:
            # identical blobs share one scratch file
            return True
        self.detector_calls += 1

        detector = CopyPasteDetector(min_lines=min_lines, min_tokens=min_tokens)
        clones = detector.detect(paths)
        logger.debug(
            "similarity_checked",
            min_lines=min_lines,
            min_tokens=min_tokens,
            clones=len(clones),
        )
        return bool(clones)

    def file_content(self, commit: str, path: str) -> str:
        """Return the content of ``path`` at ``commit`` (cached)."""
        cached = self.cache.get(CacheOperation.FILE_CONTENT, commit, path)
        if cached is not None:
            return cached

        content = self.runner.run(["show", f"{commit}:{path}"], strip=False)
        self.cache.put(CacheOperation.FILE_CONTENT, content, commit, path)
        return content

    def _resolve_merge_only(
        self, record: FilePathRecord
    ) -> tuple[FilePathRecord, Commit] | None:
        """Locate the renamed path behind a file only ever touched by merges.

        Merge commits carry no usable rename information, so the oldest
        merge is diffed against its second parent. Returns the record on the
        other side of the matching rename together with that merge.
        """
        commits = self.index.commits_of(record)
        if not commits or not all(commit.is_merge for commit in commits):
            return None

        merge = commits[-1]
        for change in self.merge_renames(merge):
            if record.path not in change.paths:
                continue

            other = change.source if change.path == record.path else change.path
            resolved = self.index.record_for(other) if other else None
            if resolved is None or resolved.identity == record.identity:
                return None

            logger.debug(
                "merge_rename_resolved",
                path=record.path,
                resolved=resolved.path,
                merge=merge.sha,
            )
            return resolved, merge

        return None

    def merge_renames(self, merge: Commit) -> list[ChangeRecord]:
        """Pure renames between a merge commit and its second parent."""
        cached = self.cache.get(CacheOperation.MERGE_RENAMES, merge.sha)
        if cached is not None:
            return [ChangeRecord.from_dict(data) for data in cached]

        output = self.runner.run(
            [
                "diff",
                merge.sha,
                merge.parents[1],
                "--diff-filter=R",
                "--name-status",
                "--format=",
                "-M",
                "-z",
            ],
            strip=False,
        )
        changes = [
            change
            for change in self.parser.parse(output)
            if change.kind is ChangeKind.RENAME
        ]
        self.cache.put(
            CacheOperation.MERGE_RENAMES,
            [change.to_dict() for change in changes],
            merge.sha,
        )
        return changes


def _byte_length(content: str) -> int:
    return len(content.encode("utf-8", errors="surrogateescape"))
