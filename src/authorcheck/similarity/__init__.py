"""Content-similarity detection used to confirm low-confidence renames."""

from .detector import CodeClone, CodeFragment, CopyPasteDetector, DetectorError, tokenize
from .scratch import ScratchDirectory, ScratchDirectoryError

__all__ = [
    "CodeClone",
    "CodeFragment",
    "CopyPasteDetector",
    "DetectorError",
    "ScratchDirectory",
    "ScratchDirectoryError",
    "tokenize",
]
