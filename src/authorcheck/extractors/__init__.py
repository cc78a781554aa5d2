"""Sources of declared and historical author lists."""

from pathlib import Path

from authorcheck.author_config import AuthorConfig

from .base import AuthorExtractor, ExtractorKind
from .git import GitAuthorExtractor, GitScope
from .headers import HeaderAuthorExtractor
from .manifests import (
    BowerAuthorExtractor,
    ComposerAuthorExtractor,
    JsonManifestExtractor,
    NodeAuthorExtractor,
)

EXTRACTORS: dict[ExtractorKind, type[AuthorExtractor]] = {
    ExtractorKind.HEADERS: HeaderAuthorExtractor,
    ExtractorKind.COMPOSER: ComposerAuthorExtractor,
    ExtractorKind.PACKAGES: NodeAuthorExtractor,
    ExtractorKind.BOWER: BowerAuthorExtractor,
}


def create_extractor(
    kind: ExtractorKind | str,
    config: AuthorConfig,
    base_dir: str | Path | None = None,
) -> AuthorExtractor:
    """Instantiate the extractor registered for ``kind``."""
    return EXTRACTORS[ExtractorKind(kind)](config, base_dir)


__all__ = [
    "AuthorExtractor",
    "BowerAuthorExtractor",
    "ComposerAuthorExtractor",
    "EXTRACTORS",
    "ExtractorKind",
    "GitAuthorExtractor",
    "GitScope",
    "HeaderAuthorExtractor",
    "JsonManifestExtractor",
    "NodeAuthorExtractor",
    "create_extractor",
]
