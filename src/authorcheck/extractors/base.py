"""Common behaviour of all author sources."""

import os
from abc import ABC, abstractmethod
from collections import Counter
from enum import Enum
from pathlib import Path

import structlog

from authorcheck.author_config import AuthorConfig

logger = structlog.get_logger(__name__)

SKIPPED_DIRECTORIES = frozenset({".git", "vendor"})


class ExtractorKind(str, Enum):
    """Author sources that can be validated."""

    HEADERS = "headers"
    COMPOSER = "composer"
    PACKAGES = "packages"
    BOWER = "bower"


class AuthorExtractor(ABC):
    """Reads the authors a source declares for a file.

    Subclasses implement :meth:`_extract`, returning the raw author strings
    of one file or None when the file does not exist. The public methods
    normalize that list: case-insensitive dedup, case-insensitive sorting,
    alias resolution and removal of ignored authors.
    """

    def __init__(self, config: AuthorConfig, base_dir: str | Path | None = None) -> None:
        self.config = config
        self.base_dir = Path(base_dir or Path.cwd()).resolve()

    def file_paths(self) -> list[str]:
        """Absolute paths of all files this extractor reads."""
        return [str(path) for path in self._find_files() if self.accepts(path)]

    def accepts(self, path: Path) -> bool:
        return True

    def extract_authors_for(self, path: str) -> dict[str, str] | None:
        """Return ``{lower-cased author: author}`` for ``path``.

        Returns None when the file does not provide an author list at all.
        """
        raw = self._extract(path)
        if raw is None:
            return None

        authors: dict[str, str] = {}
        for author in _beautify(raw):
            real = self.config.real_author(author)
            if real:
                authors[real.lower()] = real
        return authors

    def duplicate_authors_for(self, path: str) -> list[str]:
        """Authors mentioned more than once, as ``"author count: N"``."""
        raw = self._extract(path) or []
        counts = Counter(author.strip() for author in raw)
        return [f"{author} count: {count}" for author, count in counts.items() if count > 1]

    @abstractmethod
    def _extract(self, path: str) -> list[str] | None:
        pass

    def _roots(self) -> list[Path]:
        if not self.config.included_paths:
            return [self.base_dir]
        return [self.base_dir / path for path in self.config.included_paths]

    def _find_files(self) -> list[Path]:
        found: dict[str, Path] = {}
        for root in self._roots():
            if root.is_file():
                found.setdefault(str(root), root)
                continue
            for directory, subdirectories, files in os.walk(root):
                subdirectories[:] = sorted(
                    name for name in subdirectories if name not in SKIPPED_DIRECTORIES
                )
                for name in files:
                    path = Path(directory) / name
                    if not self.config.is_path_excluded(str(path)):
                        found.setdefault(str(path), path)

        logger.debug(
            "extractor_files_found",
            extractor=type(self).__name__,
            files=len(found),
        )
        return sorted(found.values())


def _beautify(authors: list[str]) -> list[str]:
    """Case-insensitively unique authors, sorted case-insensitively."""
    unique: dict[str, str] = {}
    for author in authors:
        author = author.strip()
        if author:
            unique.setdefault(author.lower(), author)
    return sorted(unique.values(), key=str.lower)


def format_author(name: str, email: str | None) -> str:
    if email:
        return f"{name.strip()} <{email.strip()}>"
    return name.strip()
