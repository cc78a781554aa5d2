"""Comparison of declared author lists against a reference."""

from dataclasses import dataclass, field
from enum import Enum

import structlog

from authorcheck.author_config import AuthorConfig
from authorcheck.extractors import AuthorExtractor

logger = structlog.get_logger(__name__)


class MismatchKind(str, Enum):
    SUPERFLUOUS = "superfluous"
    MISSING = "missing"
    DUPLICATE = "duplicate"


@dataclass
class AuthorMismatch:
    """Authors of one file that disagree with the reference."""

    path: str
    kind: MismatchKind
    authors: list[str] = field(default_factory=list)

    def describe(self) -> str:
        if self.kind is MismatchKind.SUPERFLUOUS:
            headline = f"The file {self.path} is mentioning superfluous author(s):"
        elif self.kind is MismatchKind.MISSING:
            headline = f"The file {self.path} is not mentioning its author(s):"
        else:
            headline = f"The file {self.path} is mentioning author(s) more than once:"
        return "\n".join([headline, *self.authors])


class AuthorListComparator:
    """Checks that every file names exactly the authors it should."""

    def __init__(self, config: AuthorConfig) -> None:
        self.config = config

    def compare(
        self, current: AuthorExtractor, reference: AuthorExtractor
    ) -> list[AuthorMismatch]:
        mismatches: list[AuthorMismatch] = []
        for path in current.file_paths():
            mismatches.extend(self.compare_path(path, current, reference))
        return mismatches

    def compare_path(
        self, path: str, current: AuthorExtractor, reference: AuthorExtractor
    ) -> list[AuthorMismatch]:
        mentioned = current.extract_authors_for(path)
        if mentioned is None:
            logger.info("author_check_skipped", path=path, reason="not present")
            return []

        wanted = dict(reference.extract_authors_for(path) or {})
        wanted.update(self.config.copy_left_authors(path))

        mismatches: list[AuthorMismatch] = []

        superfluous = [author for key, author in mentioned.items() if key not in wanted]
        if superfluous:
            mismatches.append(AuthorMismatch(path, MismatchKind.SUPERFLUOUS, superfluous))

        missing = [author for key, author in wanted.items() if key not in mentioned]
        if missing:
            mismatches.append(
                AuthorMismatch(path, MismatchKind.MISSING, sorted(missing, key=str.lower))
            )

        duplicates = current.duplicate_authors_for(path)
        if duplicates:
            mismatches.append(AuthorMismatch(path, MismatchKind.DUPLICATE, duplicates))

        logger.debug(
            "author_list_compared",
            path=path,
            mentioned=len(mentioned),
            wanted=len(wanted),
            mismatches=len(mismatches),
        )
        return mismatches
