"""Temporary files holding blob contents for the copy/paste detector."""

import hashlib
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

import structlog

from authorcheck.errors import AuthorCheckError

logger = structlog.get_logger(__name__)


class ScratchDirectoryError(AuthorCheckError):
    """The temporary directory for content comparison could not be created."""

    pass


class ScratchDirectory:
    """A private temporary directory that lives for one history traversal.

    The directory is created on first use and removed, with everything in
    it, when the context exits.
    """

    def __init__(self, prefix: str = "authorcheck-") -> None:
        self.prefix = prefix
        self.path: Path | None = None

    def __enter__(self) -> "ScratchDirectory":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    def write(self, content: str) -> Path:
        """Store content in a file named by its digest and return the path."""
        data = content.encode("utf-8", errors="surrogateescape")
        name = hashlib.md5(data, usedforsecurity=False).hexdigest()
        target = self._directory() / name
        if not target.exists():
            target.write_bytes(data)
        return target

    def cleanup(self) -> None:
        if self.path is None:
            return
        shutil.rmtree(self.path, ignore_errors=True)
        logger.debug("scratch_directory_removed", path=str(self.path))
        self.path = None

    def _directory(self) -> Path:
        if self.path is None:
            try:
                self.path = Path(tempfile.mkdtemp(prefix=self.prefix))
            except OSError as e:
                raise ScratchDirectoryError(
                    f"Temporary directory could not be created: {e}"
                ) from e
        return self.path
