"""Pre-write backups of patched files."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from .exceptions import BackupWriteError
from .fs_utils import FileOperations

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_MARKER = ".backup."

# Bound on numeric suffixes tried when timestamps collide
MAX_COLLISION_ATTEMPTS = 100


def backup_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp made filesystem-safe (':' and '.' become '-').

    Example:
        2026-10-18T09:15:02.123456+00:00 -> 2026-10-18T09-15-02-123456+00-00
    """
    moment = now or datetime.now(UTC)
    return moment.isoformat().replace(":", "-").replace(".", "-")


class BackupManager:
    """Copies a file to a timestamped sibling before it is overwritten.

    Backup naming: ``<name><marker><timestamp>``, e.g.
    ``app.py.backup.2026-10-18T09-15-02-123456+00-00``. If that name is taken
    a ``-1``, ``-2``, ... suffix is appended. Existing files are never
    overwritten.
    """

    def __init__(self, marker: str = DEFAULT_BACKUP_MARKER):
        self.marker = marker

    def backup_path_for(self, path: Path, now: datetime | None = None) -> Path:
        return path.with_name(f"{path.name}{self.marker}{backup_timestamp(now)}")

    def backup(self, path: Path) -> Path:
        """Copy path byte-for-byte to a new backup sibling.

        Returns:
            Path of the created backup

        Raises:
            BackupWriteError: The copy failed; the caller must not write path
        """
        candidate = self.backup_path_for(path)

        for attempt in range(MAX_COLLISION_ATTEMPTS):
            target = candidate
            if attempt:
                target = candidate.with_name(f"{candidate.name}-{attempt}")
            copy_result = FileOperations.copy_exclusive(path, target)
            if copy_result.ok:
                logger.info(f"Created backup {target}")
                return target
            if copy_result.kind != "exists":
                raise BackupWriteError(str(path), copy_result.error or "unknown error")

        raise BackupWriteError(
            str(path), f"no free backup name after {MAX_COLLISION_ATTEMPTS} attempts"
        )


__all__ = ["BackupManager", "backup_timestamp", "DEFAULT_BACKUP_MARKER"]
