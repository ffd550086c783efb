"""Line-indexed document model.

A Document is the raw file text split on '\\n'. Lines keep everything else,
including a trailing '\\r' on CRLF files, and a trailing newline in the file
shows up as a final empty line. reconstruct() is the exact inverse of the
split, so load followed by reconstruct is a byte-identical round trip.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .exceptions import PatchError, PatchFileNotFoundError
from .fs_utils import FileOperations

NEWLINE = "\n"


def split_lines(text: str) -> list[str]:
    """Split text into lines on '\\n' (an empty string is one empty line)."""
    return text.split(NEWLINE)


def reconstruct(lines: Sequence[str]) -> str:
    """Join lines back into raw text; inverse of split_lines."""
    return NEWLINE.join(lines)


@dataclass(frozen=True)
class Document:
    """Immutable, 1-indexed view of a text file's lines."""

    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> Document:
        return cls(lines=tuple(split_lines(text)))

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> Document:
        return cls(lines=tuple(lines))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        return reconstruct(self.lines)

    def span(self, start_line: int, end_line: int) -> str:
        """Return lines start_line..end_line (1-indexed, inclusive) joined by newline."""
        return reconstruct(self.lines[start_line - 1 : end_line])

    def numbered(self, start_line: int = 1, end_line: int | None = None) -> str:
        """Render lines with right-aligned line numbers, cat -n style.

        Out-of-range bounds are clamped to the document.
        """
        last = self.line_count if end_line is None else min(end_line, self.line_count)
        first = max(1, start_line)
        width = len(str(last)) if last > 0 else 1
        return NEWLINE.join(
            f"{number:>{width}}\t{self.lines[number - 1]}" for number in range(first, last + 1)
        )


def load(
    path: Path,
    encoding: str = "utf-8",
    max_size_bytes: int | None = None,
) -> Document:
    """Read path and return its Document.

    Raises:
        PatchFileNotFoundError: path does not exist or is not a regular file
        PatchError: file could not be read or decoded, or exceeds max_size_bytes
    """
    read_result = FileOperations.read_text(path, encoding=encoding, max_size_bytes=max_size_bytes)
    if read_result.kind == "not_found":
        raise PatchFileNotFoundError(str(path))
    if not read_result.ok:
        raise PatchError(str(read_result.error))

    return Document.from_text(read_result.unwrap())


__all__ = ["Document", "load", "reconstruct", "split_lines"]
