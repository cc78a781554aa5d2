"""Author mapping, ignore lists and path rules loaded from YAML files.

A configuration file may contain the following keys::

    mapping:
      Real Name <real@example.org>:
        - Alias <alias@example.org>
        - Old Name <old@example.org>
    ignore:
      - Some Bot <bot@example.org>
    copy-left:
      Original Author <original@example.org>: src/legacy/*
    include:
      - src
    exclude:
      - "*.min.js"
    metadata:
      Real Name <real@example.org>:
        role: Lead developer
        homepage: https://example.org
"""

import fnmatch
from importlib import resources
from pathlib import Path
from typing import Any

import structlog
import yaml

from authorcheck.errors import ConfigError

logger = structlog.get_logger(__name__)

WELL_KNOWN_BOTS = "ignore-well-known-bots.yml"


def _key(author: str) -> str:
    return author.strip().lower()


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value]
    return [str(value)]


def match_pattern(path: str, pattern: str) -> bool:
    """Match a path against a pattern; relative patterns match at any depth."""
    if not pattern.startswith("/"):
        pattern = "**/" + pattern
    return fnmatch.fnmatchcase(path, pattern)


class AuthorConfig:
    """Rules applied to author lists and to the paths being checked."""

    def __init__(self, config_file: str | Path | None = None) -> None:
        self.mapping: dict[str, str] = {}
        self.ignored_authors: dict[str, str] = {}
        self.copy_left: dict[str, list[str]] = {}
        self.copy_left_real: dict[str, str] = {}
        self.included_paths: list[str] = []
        self.excluded_paths: list[str] = []
        self.metadata: dict[str, dict[str, Any]] = {}

        if config_file is not None:
            self.add_from_yaml(config_file)

    # Loading

    def add_from_yaml(self, file_name: str | Path) -> "AuthorConfig":
        """Merge a YAML configuration file into this instance.

        Raises:
            ConfigError: If the file cannot be read or is not a mapping
        """
        path = Path(file_name)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Could not read config file: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

        logger.debug("author_config_loaded", path=str(path))
        return self.add_from_dict(data or {}, source=str(path))

    def add_from_dict(self, data: Any, source: str = "<dict>") -> "AuthorConfig":
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {source} must contain a mapping")

        if "mapping" in data:
            self.add_author_map(data["mapping"] or {})
        if "ignore" in data:
            self.ignore_authors(_as_list(data["ignore"]))
        if "copy-left" in data:
            self.add_copy_left_authors(data["copy-left"] or {})
        if "include" in data:
            self.include_paths(_as_list(data["include"]))
        if "exclude" in data:
            self.exclude_paths(_as_list(data["exclude"]))
        if "metadata" in data:
            self.add_authors_metadata(data["metadata"] or {})
        return self

    def add_well_known_bots(self) -> "AuthorConfig":
        """Ignore the bots listed in the bundled defaults."""
        defaults = resources.files("authorcheck.defaults").joinpath(WELL_KNOWN_BOTS)
        return self.add_from_dict(yaml.safe_load(defaults.read_text(encoding="utf-8")))

    # Aliases

    def alias_author(self, alias: str, real_author: str) -> "AuthorConfig":
        self.mapping[_key(alias)] = real_author.strip()
        return self

    def add_author_map(self, mapping: dict[str, Any]) -> "AuthorConfig":
        """Absorb a ``real author: alias`` or ``real author: [aliases]`` map."""
        for author, aliases in mapping.items():
            for alias in _as_list(aliases):
                self.alias_author(alias, author)
        return self

    def is_alias(self, author: str) -> bool:
        return _key(author) in self.mapping

    def real_author(self, author: str) -> str | None:
        """Translate an alias to the real author; None when the author is ignored."""
        if self.is_author_ignored(author):
            return None

        if self.is_alias(author):
            author = self.mapping[_key(author)]

        if self.is_author_ignored(author):
            return None

        return author

    # Ignored authors

    def ignore_author(self, author: str) -> "AuthorConfig":
        self.ignored_authors[_key(author)] = author.strip()
        return self

    def ignore_authors(self, authors: list[str]) -> "AuthorConfig":
        for author in authors:
            self.ignore_author(author)
        return self

    def is_author_ignored(self, author: str) -> bool:
        return _key(author) in self.ignored_authors

    # Copy-left

    def add_copy_left(self, author: str, pattern: str) -> "AuthorConfig":
        key = _key(author)
        self.copy_left.setdefault(key, []).append(pattern)
        self.copy_left_real[key] = author.strip()
        return self

    def add_copy_left_authors(self, authors: dict[str, Any]) -> "AuthorConfig":
        for author, patterns in authors.items():
            for pattern in _as_list(patterns):
                self.add_copy_left(author, pattern)
        return self

    def is_copy_left_author(self, author: str, path: str) -> bool:
        patterns = self.copy_left.get(_key(author))
        if not patterns:
            return False
        return any(match_pattern(path, pattern) for pattern in patterns)

    def copy_left_authors(self, path: str) -> dict[str, str]:
        """Authors who must be credited for ``path`` regardless of history."""
        result: dict[str, str] = {}
        for key, patterns in self.copy_left.items():
            if not any(match_pattern(path, pattern) for pattern in patterns):
                continue
            real = self.real_author(self.copy_left_real[key])
            if real:
                result[_key(real)] = real
        return result

    # Paths

    def include_path(self, path: str) -> "AuthorConfig":
        if path not in self.included_paths:
            self.included_paths.append(path)
        return self

    def include_paths(self, paths: list[str]) -> "AuthorConfig":
        for path in paths:
            self.include_path(path)
        return self

    def exclude_path(self, pattern: str) -> "AuthorConfig":
        if pattern not in self.excluded_paths:
            self.excluded_paths.append(pattern)
        return self

    def exclude_paths(self, patterns: list[str]) -> "AuthorConfig":
        for pattern in patterns:
            self.exclude_path(pattern)
        return self

    def is_path_excluded(self, path: str) -> bool:
        return any(match_pattern(path, pattern) for pattern in self.excluded_paths)

    # Metadata

    def add_authors_metadata(self, metadata: dict[str, Any]) -> "AuthorConfig":
        for author, values in metadata.items():
            for name, value in (values or {}).items():
                self.set_metadata(author, name, value)
        return self

    def has_metadata(self, author: str, name: str) -> bool:
        return name in self.metadata.get(_key(author), {})

    def get_metadata(self, author: str, name: str) -> Any | None:
        return self.metadata.get(_key(author), {}).get(name)

    def set_metadata(self, author: str, name: str, value: Any) -> "AuthorConfig":
        self.metadata.setdefault(_key(author), {})[name] = value
        return self
