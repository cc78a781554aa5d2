"""Token-window copy/paste detection between files."""

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from authorcheck.errors import AuthorCheckError

logger = structlog.get_logger(__name__)


class DetectorError(AuthorCheckError):
    """Input to the content-similarity detector could not be read."""

    pass


_TOKEN_PATTERN = re.compile(
    r"""
      (?P<comment>/\*.*?\*/|//[^\n]*|\#[^\n]*)
    | (?P<string>"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*')
    | (?P<word>[A-Za-z_$][\w$]*|\d[\w.]*)
    | (?P<space>\s+)
    | (?P<symbol>.)
    """,
    re.DOTALL | re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    value: str
    line: int


@dataclass(frozen=True)
class CodeFragment:
    path: str
    start_line: int


@dataclass(frozen=True)
class CodeClone:
    """A run of tokens found in two places."""

    first: CodeFragment
    second: CodeFragment
    lines: int
    tokens: int


def tokenize(text: str) -> list[Token]:
    """Split source text into tokens, dropping whitespace and comments."""
    tokens: list[Token] = []
    line = 1
    for match in _TOKEN_PATTERN.finditer(text):
        value = match.group()
        kind = match.lastgroup
        if kind not in ("comment", "space"):
            tokens.append(Token(value=value, line=line))
        line += value.count("\n")
    return tokens


class CopyPasteDetector:
    """Finds duplicated token sequences across files.

    Every window of ``min_tokens`` consecutive tokens is hashed. A window
    already seen in an earlier file starts a clone that extends for as long
    as the following windows keep matching. Clones spanning fewer than
    ``min_lines`` lines are dropped.
    """

    def __init__(self, min_lines: int = 5, min_tokens: int = 70) -> None:
        self.min_lines = min_lines
        self.min_tokens = min_tokens

    def detect(self, paths: list[Path]) -> list[CodeClone]:
        seen: dict[tuple[str, ...], tuple[str, int]] = {}
        clones: list[CodeClone] = []

        for path in paths:
            tokens = tokenize(self._read(path))
            clones.extend(self._scan(str(path), tokens, seen))

        logger.debug(
            "copy_paste_detection",
            files=len(paths),
            clones=len(clones),
            min_lines=self.min_lines,
            min_tokens=self.min_tokens,
        )
        return clones

    def _read(self, path: Path) -> str:
        try:
            return path.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            raise DetectorError(f"Cannot read {path}: {e}") from e

    def _scan(
        self,
        path: str,
        tokens: list[Token],
        seen: dict[tuple[str, ...], tuple[str, int]],
    ) -> list[CodeClone]:
        clones: list[CodeClone] = []
        window_count = len(tokens) - self.min_tokens + 1
        start: int | None = None
        origin: tuple[str, int] | None = None

        for index in range(window_count):
            window = tuple(token.value for token in tokens[index : index + self.min_tokens])
            previous = seen.get(window)

            if previous is not None and previous[0] != path:
                if start is None:
                    start, origin = index, previous
                continue

            if start is not None and origin is not None:
                clone = self._clone(path, tokens, start, index - 1, origin)
                if clone is not None:
                    clones.append(clone)
                start = origin = None

            seen.setdefault(window, (path, tokens[index].line))

        if start is not None and origin is not None:
            clone = self._clone(path, tokens, start, window_count - 1, origin)
            if clone is not None:
                clones.append(clone)

        return clones

    def _clone(
        self,
        path: str,
        tokens: list[Token],
        first_window: int,
        last_window: int,
        origin: tuple[str, int],
    ) -> CodeClone | None:
        start_line = tokens[first_window].line
        end_line = tokens[last_window + self.min_tokens - 1].line
        lines = end_line - start_line + 1
        if lines < self.min_lines:
            return None

        return CodeClone(
            first=CodeFragment(path=origin[0], start_line=origin[1]),
            second=CodeFragment(path=path, start_line=start_line),
            lines=lines,
            tokens=last_window - first_window + self.min_tokens,
        )
