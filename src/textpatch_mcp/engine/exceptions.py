"""Patch engine exceptions.

Every rejection the engine can produce derives from PatchError. Each exception
keeps the values that caused it as attributes so callers (and tests) can
inspect them, while str(exc) is the single descriptive message returned to
the MCP client.
"""

from __future__ import annotations


class PatchError(Exception):
    """Base class for all patch request failures."""


class PathEscapeError(PatchError):
    """
    Target path resolves outside the workspace root.

    Raised before any file access is performed.

    Attributes:
        path: Path exactly as supplied by the caller
        resolved: Canonical path the request resolved to
        workspace_root: Canonical workspace root
    """

    def __init__(self, path: str, resolved: str, workspace_root: str):
        self.path = path
        self.resolved = resolved
        self.workspace_root = workspace_root
        super().__init__(
            f"Access denied. File path '{path}' is outside the workspace directory "
            f"(resolved: {resolved}, workspace: {workspace_root})."
        )

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"PathEscapeError(path={self.path!r}, workspace_root={self.workspace_root!r})"


class PatchFileNotFoundError(PatchError, FileNotFoundError):
    """Target file does not exist (or is not a regular file)."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason
        message = f"File '{path}' does not exist."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)

    def __str__(self) -> str:
        # OSError.__str__ would render errno/strerror instead of our message
        return str(self.args[0])

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"PatchFileNotFoundError(path={self.path!r})"


class NoOperationsError(PatchError):
    """Request supplied zero operations for its command."""

    def __init__(self, command: str):
        self.command = command
        kind = "replacement" if command == "replace" else "insertion"
        super().__init__(f"No valid {kind} parameters provided for {command} command.")


class InvalidRequestError(PatchError):
    """Request is structurally invalid (mixed operation kinds, too many operations)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid patch request: {reason}")


class InvalidLineRangeError(PatchError):
    """
    A line reference falls outside the document, or start_line > end_line.

    Attributes:
        index: 1-based position of the operation in the request
        start_line: Requested start line (or insertion anchor)
        end_line: Requested end line (None for insertions)
        line_count: Actual number of lines in the document
    """

    def __init__(
        self,
        index: int,
        start_line: int,
        end_line: int | None,
        line_count: int,
        kind: str = "replacement",
    ):
        self.index = index
        self.start_line = start_line
        self.end_line = end_line
        self.line_count = line_count
        self.kind = kind

        if end_line is None:
            message = (
                f"Invalid insertion line {start_line} for {kind} {index}. "
                f"File has {line_count} lines."
            )
        elif start_line > end_line:
            message = (
                f"Start line {start_line} cannot be greater than end line {end_line} "
                f"for {kind} {index}."
            )
        else:
            message = (
                f"Invalid line numbers for {kind} {index}. File has {line_count} lines, "
                f"but specified range is {start_line}-{end_line}."
            )
        super().__init__(message)

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return (
            f"InvalidLineRangeError(index={self.index}, start={self.start_line}, "
            f"end={self.end_line}, line_count={self.line_count})"
        )


class ContentMismatchError(PatchError):
    """
    Claimed current content does not match the file at the claimed lines.

    Carries both strings so the caller can re-derive the correct coordinates.

    Attributes:
        index: 1-based position of the replacement in the request
        expected: old_text supplied by the caller
        found: Text actually present at start_line..end_line
    """

    def __init__(self, index: int, expected: str, found: str, start_line: int, end_line: int):
        self.index = index
        self.expected = expected
        self.found = found
        self.start_line = start_line
        self.end_line = end_line
        super().__init__(
            f'String mismatch for replacement {index}. Expected:\n"{expected}"\n\n'
            f'But found:\n"{found}"\n\nAt lines {start_line}-{end_line}.'
        )

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return (
            f"ContentMismatchError(index={self.index}, expected={self.expected!r}, "
            f"found={self.found!r})"
        )


class OverlappingOperationsError(PatchError):
    """Two operations in one request target overlapping regions.

    Attributes:
        first: 1-based request position of the earlier-positioned operation
        second: 1-based request position of the operation overlapping it
    """

    def __init__(self, first: int, second: int, detail: str):
        self.first = first
        self.second = second
        self.detail = detail
        super().__init__(f"Operations {first} and {second} overlap: {detail}")


class BackupWriteError(PatchError):
    """Backup was requested but could not be written. The file was not modified."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to create backup of '{path}': {reason}. File was not modified.")


class WriteError(PatchError):
    """Final write failed. The original file keeps its prior content."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write '{path}': {reason}")


__all__ = [
    "PatchError",
    "PathEscapeError",
    "PatchFileNotFoundError",
    "NoOperationsError",
    "InvalidRequestError",
    "InvalidLineRangeError",
    "ContentMismatchError",
    "OverlappingOperationsError",
    "BackupWriteError",
    "WriteError",
]
