"""Tests for the copy/paste detector and scratch directory."""

from pathlib import Path

import pytest

from authorcheck.similarity import (
    CopyPasteDetector,
    DetectorError,
    ScratchDirectory,
    ScratchDirectoryError,
    tokenize,
)

BLOCK = "".join(f"$total = $total + compute($item{i}, {i});\n" for i in range(8))


def write(path: Path, content: str) -> Path:
    path.write_text(content)
    return path


class TestTokenize:
    """Tests for the tokenizer."""

    def test_drops_whitespace_and_comments(self) -> None:
        tokens = tokenize("a = 1; // note\n/* block\ncomment */ b # shell\n")

        assert [token.value for token in tokens] == ["a", "=", "1", ";", "b"]

    def test_tracks_lines(self) -> None:
        tokens = tokenize("first\n\nsecond /* x\ny */ third\n")

        assert [(token.value, token.line) for token in tokens] == [
            ("first", 1),
            ("second", 3),
            ("third", 4),
        ]

    def test_strings_are_single_tokens(self) -> None:
        tokens = tokenize('echo "a // not a comment";')

        assert [token.value for token in tokens] == ["echo", '"a // not a comment"', ";"]


class TestCopyPasteDetector:
    """Tests for clone detection."""

    def test_finds_shared_block(self, tmp_path: Path) -> None:
        """Test a block copied into a larger file is reported."""
        first = write(tmp_path / "first.php", BLOCK)
        second = write(tmp_path / "second.php", "<?php\nprologue();\n" + BLOCK + "epilogue();\n")

        clones = CopyPasteDetector(min_lines=5, min_tokens=35).detect([first, second])

        assert len(clones) == 1
        clone = clones[0]
        assert clone.first.path == str(first)
        assert clone.second.path == str(second)
        assert clone.second.start_line == 3
        assert clone.lines >= 5

    def test_whitespace_and_comments_do_not_matter(self, tmp_path: Path) -> None:
        reformatted = BLOCK.replace(" = ", "=").replace(";\n", "; // changed\n")
        first = write(tmp_path / "first.php", BLOCK)
        second = write(tmp_path / "second.php", reformatted)

        assert CopyPasteDetector(min_lines=5, min_tokens=35).detect([first, second])

    def test_unrelated_files(self, tmp_path: Path) -> None:
        first = write(tmp_path / "first.php", BLOCK)
        second = write(tmp_path / "second.php", BLOCK.replace("$", "@").replace("compute", "other"))

        assert CopyPasteDetector(min_lines=2, min_tokens=7).detect([first, second]) == []

    def test_clone_shorter_than_min_lines(self, tmp_path: Path) -> None:
        """Test a match on too few lines is dropped."""
        line = "call(alpha, beta, gamma, delta, epsilon, zeta);\n"
        first = write(tmp_path / "first.php", line)
        second = write(tmp_path / "second.php", "other();\n" + line)

        assert CopyPasteDetector(min_lines=2, min_tokens=7).detect([first, second]) == []
        assert CopyPasteDetector(min_lines=1, min_tokens=7).detect([first, second])

    def test_files_shorter_than_window(self, tmp_path: Path) -> None:
        first = write(tmp_path / "first.php", "a;\n")
        second = write(tmp_path / "second.php", "a;\n")

        assert CopyPasteDetector(min_lines=1, min_tokens=35).detect([first, second]) == []

    def test_unreadable_file_raises(self, tmp_path: Path) -> None:
        """Test a missing input is an error, not an absent match."""
        first = write(tmp_path / "first.php", BLOCK)

        with pytest.raises(DetectorError):
            CopyPasteDetector().detect([first, tmp_path / "missing.php"])


class TestScratchDirectory:
    """Tests for the scratch directory."""

    def test_files_named_by_content(self) -> None:
        with ScratchDirectory() as scratch:
            first = scratch.write("same\n")
            second = scratch.write("same\n")
            other = scratch.write("other\n")

            assert first == second
            assert first != other
            assert first.read_text() == "same\n"

    def test_removed_on_exit(self) -> None:
        with ScratchDirectory() as scratch:
            path = scratch.write("content")
            directory = scratch.path

        assert not path.exists()
        assert not directory.exists()

    def test_removed_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with ScratchDirectory() as scratch:
                path = scratch.write("content")
                raise RuntimeError("boom")

        assert not path.exists()

    def test_created_lazily(self) -> None:
        with ScratchDirectory() as scratch:
            assert scratch.path is None

    def test_creation_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a failing mkdtemp raises ScratchDirectoryError."""

        def failing_mkdtemp(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("tempfile.mkdtemp", failing_mkdtemp)

        with ScratchDirectory() as scratch:
            with pytest.raises(ScratchDirectoryError):
                scratch.write("content")

    def test_undecodable_content_round_trips(self) -> None:
        """Test surrogate-escaped bytes from git output are written back as-is."""
        content = b"caf\xe9\n".decode("utf-8", errors="surrogateescape")

        with ScratchDirectory() as scratch:
            path = scratch.write(content)

            assert path.read_bytes() == b"caf\xe9\n"
