"""authorcheck Configuration Module.

Provides centralized runtime settings for all authorcheck components.
All settings support environment variable overrides with AUTHORCHECK_ prefix.
"""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FollowThresholds(BaseModel):
    """Thresholds deciding whether a rename or copy is followed.

    The defaults are empirical values that have not been calibrated against
    a large corpus yet.
    """

    rename_similarity: int = Field(
        default=75,
        description="Rename similarity index at or above which a rename is always followed",
    )
    rename_min_lines: int = Field(
        default=2,
        description="Minimum cloned lines confirming a low-similarity rename",
    )
    rename_min_tokens: int = Field(
        default=7,
        description="Token window size used to confirm a low-similarity rename",
    )
    copy_min_lines: int = Field(
        default=5,
        description="Minimum cloned lines confirming a copy",
    )
    copy_min_tokens: int = Field(
        default=35,
        description="Token window size used to confirm a copy",
    )
    added_path_similarity: int = Field(
        default=70,
        description=(
            "Similarity index at or below which a rename or copy is ignored when "
            "the same commit also reports its destination as added"
        ),
    )


# Default paths
AUTHORCHECK_HOME = Path.home() / ".authorcheck"
AUTHORCHECK_CACHE = AUTHORCHECK_HOME / "cache.db"


class AuthorCheckSettings(BaseSettings):
    """authorcheck configuration.

    All settings can be overridden via environment variables with AUTHORCHECK_
    prefix. For example, AUTHORCHECK_LOG_LEVEL=debug enables debug logging and
    AUTHORCHECK_FOLLOW__RENAME_SIMILARITY=60 lowers the rename threshold.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTHORCHECK_",
        env_nested_delimiter="__",
    )

    # Paths
    home: Path = Field(
        default=AUTHORCHECK_HOME,
        description="Base directory for authorcheck data",
    )
    cache_path: Path = Field(
        default=AUTHORCHECK_CACHE,
        description="Path to the SQLite history cache",
    )

    # Logging
    log_level: str = Field(
        default="warning",
        description="Logging level (debug, info, warning, error)",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console or json)",
    )

    # Git
    git_executable: str = Field(
        default="git",
        description="Git executable used for all history queries",
    )
    find_copies: bool = Field(
        default=True,
        description="Ask git to detect copies as well as renames",
    )

    # Nested settings
    follow: FollowThresholds = Field(default_factory=FollowThresholds)


# Module-level singleton
settings = AuthorCheckSettings()
