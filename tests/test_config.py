"""Tests for authorcheck configuration module."""

import os
from unittest.mock import patch

from authorcheck.config import AUTHORCHECK_HOME, AuthorCheckSettings, FollowThresholds


class TestAuthorCheckSettings:
    """Tests for AuthorCheckSettings class."""

    def test_default_values(self) -> None:
        """Test that default values are set correctly."""
        settings = AuthorCheckSettings()

        assert settings.home == AUTHORCHECK_HOME
        assert settings.log_level == "warning"
        assert settings.log_format == "console"
        assert settings.git_executable == "git"
        assert settings.find_copies is True

    def test_default_thresholds(self) -> None:
        follow = AuthorCheckSettings().follow

        assert follow == FollowThresholds(
            rename_similarity=75,
            rename_min_lines=2,
            rename_min_tokens=7,
            copy_min_lines=5,
            copy_min_tokens=35,
            added_path_similarity=70,
        )

    def test_env_override(self) -> None:
        """Test that environment variables override defaults."""
        with patch.dict(os.environ, {"AUTHORCHECK_LOG_LEVEL": "debug"}):
            settings = AuthorCheckSettings()
            assert settings.log_level == "debug"

    def test_nested_env_override(self) -> None:
        """Test thresholds can be tuned through nested variables."""
        with patch.dict(os.environ, {"AUTHORCHECK_FOLLOW__RENAME_SIMILARITY": "60"}):
            settings = AuthorCheckSettings()
            assert settings.follow.rename_similarity == 60
            assert settings.follow.copy_min_tokens == 35
