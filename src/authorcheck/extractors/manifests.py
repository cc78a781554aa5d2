"""Author lists declared in package manifests (composer, npm, bower)."""

import json
import re
from pathlib import Path
from typing import Any

import structlog

from authorcheck.errors import ExtractorError

from .base import AuthorExtractor, format_author

logger = structlog.get_logger(__name__)

# "Name <email> (url)", as allowed by package.json and bower.json
_PERSON = re.compile(r"^\s*(?P<name>[^<(]*?)\s*(?:<(?P<email>[^>]*)>)?\s*(?:\((?P<url>[^)]*)\))?\s*$")


class JsonManifestExtractor(AuthorExtractor):
    """Base for manifests identified by a fixed file name."""

    file_name = ""

    def accepts(self, path: Path) -> bool:
        return path.name == self.file_name

    def load(self, path: str) -> dict[str, Any] | None:
        """Parse the manifest; None when it does not exist.

        Raises:
            ExtractorError: If the file is not a JSON object
        """
        file_path = Path(path)
        if not file_path.is_file():
            return None

        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ExtractorError(f"Cannot read manifest {path}: {e}") from e

        if not isinstance(data, dict):
            raise ExtractorError(f"Manifest {path} must contain a JSON object")
        return data

    def _person(self, entry: Any) -> str | None:
        """Format an object or string person entry."""
        if isinstance(entry, dict):
            name = str(entry.get("name", "")).strip()
            if not name:
                return None
            return format_author(name, entry.get("email"))

        if isinstance(entry, str):
            match = _PERSON.match(entry)
            if match is None or not match.group("name"):
                return None
            return format_author(match.group("name"), match.group("email"))

        return None


class ComposerAuthorExtractor(JsonManifestExtractor):
    """``authors`` of composer.json; also records role and homepage metadata."""

    file_name = "composer.json"

    def _extract(self, path: str) -> list[str] | None:
        data = self.load(path)
        if data is None:
            return None

        entries = data.get("authors")
        if not isinstance(entries, list):
            return []

        authors: list[str] = []
        for entry in entries:
            author = self._person(entry)
            if author is None:
                logger.warning("manifest_author_skipped", path=path, entry=repr(entry))
                continue
            if isinstance(entry, dict):
                self._record_metadata(author, entry)
            authors.append(author)
        return authors

    def _record_metadata(self, author: str, entry: dict[str, Any]) -> None:
        # configured metadata wins over the manifest
        for name in ("role", "homepage"):
            if entry.get(name) and not self.config.has_metadata(author, name):
                self.config.set_metadata(author, name, entry[name])


class NodeAuthorExtractor(JsonManifestExtractor):
    """``author`` and ``contributors`` of package.json."""

    file_name = "package.json"

    def _extract(self, path: str) -> list[str] | None:
        data = self.load(path)
        if data is None:
            return None

        entries: list[Any] = []
        if data.get("author"):
            entries.append(data["author"])
        if isinstance(data.get("contributors"), list):
            entries.extend(data["contributors"])

        return [author for author in map(self._person, entries) if author]


class BowerAuthorExtractor(JsonManifestExtractor):
    """``authors`` of bower.json."""

    file_name = "bower.json"

    def _extract(self, path: str) -> list[str] | None:
        data = self.load(path)
        if data is None:
            return None

        entries = data.get("authors")
        if not isinstance(entries, list):
            return []

        return [author for author in map(self._person, entries) if author]
