"""Bulk retrieval of the commit history."""

from datetime import datetime

import structlog

from authorcheck.cache import CacheOperation, HistoryCache

from .base import Commit
from .runner import CommandRunner

logger = structlog.get_logger(__name__)

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"

# hash, author name, author email, subject, committer date, parents
LOG_FORMAT = "%x1f".join(["%H", "%aN", "%aE", "%s", "%cI", "%P"]) + "%x1e"


class CommitLog:
    """Reads every commit reachable from HEAD with a single git invocation."""

    def __init__(self, runner: CommandRunner, cache: HistoryCache) -> None:
        self.runner = runner
        self.cache = cache

    def fetch_head(self) -> str:
        """Return the hash of the current HEAD commit."""
        return self.runner.run(["rev-parse", "HEAD"]).strip()

    def fetch_all_commits(self) -> list[Commit]:
        """Return all commits, newest first.

        The result is cached under the current HEAD hash.
        """
        cached = self.cache.get(CacheOperation.ALL_COMMITS)
        if cached is not None:
            return [Commit.from_dict(data) for data in cached]

        output = self.runner.run(
            ["log", "--simplify-merges", f"--format={LOG_FORMAT}"]
        )
        commits = parse_log(output)
        logger.debug("commit_log_fetched", commits=len(commits), head=self.cache.head)

        self.cache.put(
            CacheOperation.ALL_COMMITS, [commit.to_dict() for commit in commits]
        )
        return commits


def parse_log(output: str) -> list[Commit]:
    """Parse ``git log`` output produced with :data:`LOG_FORMAT`."""
    commits: list[Commit] = []
    for record in output.split(RECORD_SEPARATOR):
        record = record.strip("\r\n")
        if not record:
            continue

        fields = record.split(FIELD_SEPARATOR)
        if len(fields) != 6:
            logger.warning("commit_record_malformed", fields=len(fields))
            continue

        sha, author, email, subject, date, parents = fields
        commits.append(
            Commit(
                sha=sha.strip(),
                author=author,
                author_email=email,
                subject=subject,
                timestamp=datetime.fromisoformat(date.strip()),
                parents=tuple(parents.split()),
            )
        )
    return commits
