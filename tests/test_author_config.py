"""Tests for AuthorConfig."""

from pathlib import Path

import pytest

from authorcheck.author_config import AuthorConfig, match_pattern
from authorcheck.errors import ConfigError

CONFIG_YAML = """\
mapping:
  Real Name <real@example.org>:
    - Alias <alias@example.org>
    - Old Name <old@example.org>
  Single <single@example.org>: Short <short@example.org>
ignore:
  - Some Bot <bot@example.org>
copy-left:
  Original Author <original@example.org>: src/legacy/*
  Upstream <upstream@example.org>:
    - vendored/*
    - /abs/third_party/*
exclude:
  - "*.min.js"
metadata:
  Real Name <real@example.org>:
    role: Lead developer
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / ".authorcheck.yml"
    path.write_text(CONFIG_YAML)
    return path


class TestLoading:
    """Tests for reading YAML configuration files."""

    def test_loads_all_sections(self, config_file: Path) -> None:
        config = AuthorConfig(config_file)

        assert config.is_alias("alias <ALIAS@example.org>")
        assert config.real_author("Short <short@example.org>") == "Single <single@example.org>"
        assert config.is_author_ignored("Some Bot <bot@example.org>")
        assert config.excluded_paths == ["*.min.js"]
        assert config.get_metadata("real name <real@example.org>", "role") == "Lead developer"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            AuthorConfig(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yml"
        path.write_text("mapping: [unclosed\n")

        with pytest.raises(ConfigError):
            AuthorConfig(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError, match="mapping"):
            AuthorConfig(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert AuthorConfig(path).mapping == {}

    def test_well_known_bots(self) -> None:
        """Test the bundled bot list is ignored."""
        config = AuthorConfig().add_well_known_bots()

        assert config.is_author_ignored(
            "dependabot[bot] <49699333+dependabot[bot]@users.noreply.github.com>"
        )
        assert config.real_author("GitHub <noreply@github.com>") is None


class TestAuthors:
    """Tests for alias resolution and ignoring."""

    def test_unknown_author_unchanged(self) -> None:
        assert AuthorConfig().real_author("Jane <jane@example.org>") == "Jane <jane@example.org>"

    def test_ignored_alias(self) -> None:
        """Test an alias of an ignored author is dropped."""
        config = AuthorConfig().alias_author("Old <old@x.org>", "Bot <bot@x.org>")
        config.ignore_author("Bot <bot@x.org>")

        assert config.real_author("Old <old@x.org>") is None

    def test_ignored_before_alias(self) -> None:
        config = AuthorConfig().alias_author("Old <old@x.org>", "New <new@x.org>")
        config.ignore_author("OLD <old@x.org>")

        assert config.real_author("Old <old@x.org>") is None


class TestCopyLeft:
    """Tests for copy-left authors."""

    def test_matches_relative_pattern_at_any_depth(self, config_file: Path) -> None:
        config = AuthorConfig(config_file)

        assert config.copy_left_authors("/repo/src/legacy/old.php") == {
            "original author <original@example.org>": "Original Author <original@example.org>"
        }
        assert config.is_copy_left_author(
            "upstream <upstream@example.org>", "/repo/vendored/lib.php"
        )
        assert config.copy_left_authors("/repo/src/new.php") == {}

    def test_absolute_pattern(self, config_file: Path) -> None:
        config = AuthorConfig(config_file)

        assert config.is_copy_left_author(
            "Upstream <upstream@example.org>", "/abs/third_party/x.php"
        )
        assert not config.is_copy_left_author(
            "Upstream <upstream@example.org>", "/repo/abs/third_party/x.php"
        )

    def test_copy_left_respects_aliases(self) -> None:
        config = AuthorConfig()
        config.add_copy_left("Alias <a@x.org>", "*.php")
        config.alias_author("Alias <a@x.org>", "Real <r@x.org>")

        assert config.copy_left_authors("/repo/a.php") == {"real <r@x.org>": "Real <r@x.org>"}


class TestPaths:
    """Tests for include and exclude rules."""

    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("/repo/web/app.min.js", "*.min.js", True),
            ("/repo/web/app.js", "*.min.js", False),
            ("/repo/build/out.php", "build/*", True),
            ("/repo/src/build.php", "build/*", False),
            ("/repo/build/out.php", "/repo/build/*", True),
            ("/other/build/out.php", "/repo/build/*", False),
        ],
    )
    def test_match_pattern(self, path: str, pattern: str, expected: bool) -> None:
        assert match_pattern(path, pattern) is expected

    def test_excluded(self) -> None:
        config = AuthorConfig().exclude_paths(["*.min.js", "*.min.js"])

        assert config.excluded_paths == ["*.min.js"]
        assert config.is_path_excluded("/repo/a.min.js")
        assert not config.is_path_excluded("/repo/a.js")

    def test_included(self) -> None:
        config = AuthorConfig().include_paths(["/repo/src", "/repo/src", "/repo/lib"])

        assert config.included_paths == ["/repo/src", "/repo/lib"]


class TestMetadata:
    def test_case_insensitive_keys(self) -> None:
        config = AuthorConfig().set_metadata("Jane <J@x.org>", "role", "Maintainer")

        assert config.has_metadata("jane <j@x.org>", "role")
        assert config.get_metadata("JANE <j@x.org>", "role") == "Maintainer"
        assert config.get_metadata("JANE <j@x.org>", "homepage") is None
