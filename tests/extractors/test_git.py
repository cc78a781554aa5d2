"""Tests for the git history author source."""

from pathlib import Path

import git

from authorcheck.author_config import AuthorConfig
from authorcheck.extractors import GitAuthorExtractor, GitScope
from authorcheck.git import GitRepository
from tests.fixtures.git_history import ALICE, BOB, CAROL, commit_file


def build_history(repo: git.Repo) -> None:
    commit_file(repo, "src/a.php", "<?php\n// a\n", ALICE)
    commit_file(repo, "src/b.php", "<?php\n// b\n", BOB)
    commit_file(repo, "src/a.php", "<?php\n// a, revised\n", CAROL)


class TestGitAuthorExtractor:
    """Tests for file and project scope."""

    def test_file_scope(self, temp_repo: tuple[Path, git.Repo]) -> None:
        path, repo = temp_repo
        build_history(repo)
        extractor = GitAuthorExtractor(AuthorConfig(), GitRepository(path))

        authors = extractor.extract_authors_for(str(path / "src" / "a.php"))

        assert list(authors.values()) == [
            "Alice Example <alice@example.com>",
            "Carol Coder <carol@example.com>",
        ]

    def test_project_scope(self, temp_repo: tuple[Path, git.Repo]) -> None:
        """Test every file gets the authors of the whole project."""
        path, repo = temp_repo
        build_history(repo)
        extractor = GitAuthorExtractor(AuthorConfig(), GitRepository(path), GitScope.PROJECT)

        authors = extractor.extract_authors_for(str(path / "src" / "b.php"))

        assert list(authors.values()) == [
            "Alice Example <alice@example.com>",
            "Bob Builder <bob@example.com>",
            "Carol Coder <carol@example.com>",
        ]

    def test_untracked_file(self, temp_repo: tuple[Path, git.Repo]) -> None:
        path, repo = temp_repo
        build_history(repo)
        extractor = GitAuthorExtractor(AuthorConfig(), GitRepository(path))

        assert extractor.extract_authors_for(str(path / "src" / "new.php")) is None

    def test_file_paths_are_tracked_files(self, temp_repo: tuple[Path, git.Repo]) -> None:
        path, repo = temp_repo
        build_history(repo)
        config = AuthorConfig().exclude_path("b.php")

        paths = GitAuthorExtractor(config, GitRepository(path, config=config)).file_paths()

        assert paths == [str(path / "src" / "a.php")]

    def test_aliases_applied(self, temp_repo: tuple[Path, git.Repo]) -> None:
        path, repo = temp_repo
        build_history(repo)
        config = AuthorConfig().alias_author(
            "Carol Coder <carol@example.com>", "Alice Example <alice@example.com>"
        )

        authors = GitAuthorExtractor(config, GitRepository(path)).extract_authors_for(
            str(path / "src" / "a.php")
        )

        assert authors == {"alice example <alice@example.com>": "Alice Example <alice@example.com>"}
