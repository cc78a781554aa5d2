"""Reference author lists taken from git history."""

from enum import Enum
from pathlib import Path

from authorcheck.author_config import AuthorConfig
from authorcheck.git import GitRepository

from .base import AuthorExtractor


class GitScope(str, Enum):
    """Whether a file should name its own authors or the project's."""

    FILE = "file"
    PROJECT = "project"


class GitAuthorExtractor(AuthorExtractor):
    """Authors according to the history of each file, or of the whole project."""

    def __init__(
        self,
        config: AuthorConfig,
        repository: GitRepository,
        scope: GitScope = GitScope.FILE,
    ) -> None:
        super().__init__(config, repository.root)
        self.repository = repository
        self.scope = GitScope(scope)
        self._project: list[str] | None = None

    def file_paths(self) -> list[str]:
        return sorted(self.repository.list_file_identities())

    def _extract(self, path: str) -> list[str] | None:
        if self.scope is GitScope.PROJECT:
            if self._project is None:
                self._project = [str(author) for author in self.repository.project_authors()]
            return self._project

        authors = self.repository.authors_for(Path(path))
        if authors is None:
            return None
        return [str(author) for author in authors]
