"""Pytest configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path

import git
import pytest

from authorcheck.config import settings
from tests.fixtures.git_history import LOCAL


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the persistent cache out of the real home directory."""
    home = tmp_path / "authorcheck-home"
    monkeypatch.setattr(settings, "home", home)
    monkeypatch.setattr(settings, "cache_path", home / "cache.db")
    return home


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[tuple[Path, git.Repo], None, None]:
    """Create a temporary git repository for testing."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)

    # Configure git for commits
    with repo.config_writer() as config:
        config.set_value("user", "name", LOCAL.name)
        config.set_value("user", "email", LOCAL.email)

    yield repo_path.resolve(), repo
    repo.close()
