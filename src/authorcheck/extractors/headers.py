"""``@author`` tags in the documentation header of source files."""

import re
from pathlib import Path

from authorcheck.author_config import AuthorConfig

from .base import AuthorExtractor

# 4k ought to be enough for a file header
HEADER_SIZE = 4096

DEFAULT_SUFFIXES = (".php", ".js", ".ts", ".java", ".css", ".scss", ".c", ".h", ".cpp")

_AUTHOR_TAG = re.compile(r"@author\s+(.+?)\s*$", re.MULTILINE)


class HeaderAuthorExtractor(AuthorExtractor):
    """Authors listed as ``@author`` lines in the first doc block of a file."""

    def __init__(
        self,
        config: AuthorConfig,
        base_dir: str | Path | None = None,
        suffixes: tuple[str, ...] = DEFAULT_SUFFIXES,
    ) -> None:
        super().__init__(config, base_dir)
        self.suffixes = suffixes

    def accepts(self, path: Path) -> bool:
        return path.suffix.lower() in self.suffixes

    def _extract(self, path: str) -> list[str] | None:
        header = self.header(path)
        if header is None:
            return None
        return _AUTHOR_TAG.findall(header)

    def header(self, path: str) -> str | None:
        """Return the file's text up to the end of its first comment block.

        Returns an empty string when no comment block closes within the
        first 4096 bytes, and None when the file does not exist.
        """
        file_path = Path(path)
        if not file_path.is_file():
            return None

        with file_path.open("rb") as f:
            content = f.read(HEADER_SIZE).decode("utf-8", errors="replace")

        closing = content.find("*/")
        if closing == -1:
            return ""
        return content[: closing + 2]
