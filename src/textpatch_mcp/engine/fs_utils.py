"""Filesystem utilities for the patch engine.

PathGuard keeps every request inside its workspace root; FileOperations
performs exact-byte reads, atomic writes and byte-for-byte copies. Both
return IOResult values instead of raising.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from .io_result import IOResult


class PathGuard:
    """Workspace-scoped path resolution.

    Security Model:
        - Relative paths are joined to the workspace root
        - Absolute paths are accepted only when they stay inside the root
        - Symlinks are followed by resolve(), so a link pointing outside the
          workspace is rejected like any other escape
        - Containment is checked per path component, so '/ws-other' is not
          inside '/ws'
    """

    def __init__(self, workspace_root: Path | str):
        self.workspace_root = Path(workspace_root).expanduser().resolve()

    def resolve(self, path: str) -> IOResult[Path]:
        """Resolve path against the workspace root.

        Args:
            path: Caller-supplied path (relative to the workspace, or absolute)

        Returns:
            IOResult holding the canonical path, or a failure of kind
            'escape' (details carry 'resolved') or 'invalid'

        Example:
            guard = PathGuard("/srv/project")
            guard.resolve("src/app.py")        # ok: /srv/project/src/app.py
            guard.resolve("../../etc/passwd")  # failure: kind='escape'
        """
        if not path.strip():
            return IOResult.failure("invalid", "Path must not be empty")
        if "\x00" in path:
            return IOResult.failure("invalid", "Path must not contain NUL bytes")

        # No tilde expansion: "~/x" names a directory called "~" in the workspace
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.workspace_root / candidate

        try:
            resolved = candidate.resolve()
        except (OSError, RuntimeError) as e:
            return IOResult.failure("invalid", f"Failed to resolve path '{path}': {e}")

        if resolved.is_relative_to(self.workspace_root):
            return IOResult.success(resolved)

        return IOResult.failure(
            "escape",
            f"Path escapes workspace. Path: {path}, Resolved: {resolved}, "
            f"Workspace: {self.workspace_root}",
            resolved=str(resolved),
        )


class FileOperations:
    """Exact-byte file I/O for patching.

    Reads and writes use newline='' so line endings pass through untouched:
    a load followed by a write of the same text is a byte-identical round trip.
    """

    @staticmethod
    def read_text(
        path: Path,
        encoding: str = "utf-8",
        max_size_bytes: int | None = None,
    ) -> IOResult[str]:
        """Read a text file without newline translation.

        Failure kinds: 'not_found' (missing or not a regular file),
        'too_large' and 'read' (stat, decode or I/O error).
        """
        if not path.is_file():
            reason = "Path is not a file" if path.exists() else "File not found"
            return IOResult.failure("not_found", f"{reason}: {path}")

        try:
            if max_size_bytes is not None and path.stat().st_size > max_size_bytes:
                return IOResult.failure(
                    "too_large",
                    f"File too large: {path.stat().st_size} bytes exceeds limit "
                    f"of {max_size_bytes}",
                )
            with open(path, encoding=encoding, newline="") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            return IOResult.failure(
                "read", f"Encoding error reading '{path}' with {encoding}: {e}"
            )
        except LookupError as e:
            return IOResult.failure("read", f"Unknown encoding '{encoding}': {e}")
        except OSError as e:
            return IOResult.failure("read", f"Failed to read file '{path}': {e}")

        return IOResult.success(content)

    @staticmethod
    def write_text_atomic(path: Path, content: str, encoding: str = "utf-8") -> IOResult[int]:
        """Replace path with content via a temp file in the same directory.

        The temp file is flushed, fsynced, given the target's mode and then
        renamed over it with os.replace, so readers see either the old
        content or the new content, never a truncated mix.

        Returns:
            IOResult holding the number of bytes written
        """
        try:
            data = content.encode(encoding)
        except (UnicodeEncodeError, LookupError) as e:
            return IOResult.failure(
                "write", f"Encoding error writing '{path}' with {encoding}: {e}"
            )

        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        except OSError as e:
            return IOResult.failure(
                "write", f"Failed to create temporary file next to '{path}': {e}"
            )

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if path.exists():
                shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        except OSError as e:
            return IOResult.failure("write", f"Failed to write file '{path}': {e}")
        finally:
            # Only left behind when the replace did not happen
            tmp_path.unlink(missing_ok=True)

        return IOResult.success(len(data))

    @staticmethod
    def copy_exclusive(source: Path, destination: Path) -> IOResult[Path]:
        """Copy source to destination byte-for-byte, never overwriting.

        The destination is opened with exclusive create; if it already exists
        the failure kind is 'exists' and nothing is written. A copy that fails
        part way removes the destination it created.
        """
        try:
            with open(source, "rb") as src:
                try:
                    dst = open(destination, "xb")
                except FileExistsError:
                    return IOResult.failure("exists", f"Destination exists: {destination}")
                try:
                    with dst:
                        shutil.copyfileobj(src, dst)
                except OSError:
                    # The destination is ours; drop the partial copy
                    destination.unlink(missing_ok=True)
                    raise
        except OSError as e:
            return IOResult.failure("copy", f"Failed to copy '{source}' to '{destination}': {e}")

        return IOResult.success(destination)
