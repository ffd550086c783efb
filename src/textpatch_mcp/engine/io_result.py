"""Result values for the filesystem helpers in fs_utils.

PathGuard and FileOperations report failures as values. The engine turns a
failed IOResult into the matching PatchError using its ``kind``; callers
above the engine only ever see exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

FailureKind = Literal[
    "invalid",  # path is empty or cannot be resolved
    "escape",  # path resolves outside the workspace
    "not_found",
    "too_large",
    "read",
    "write",
    "exists",  # exclusive create hit an existing file
    "copy",
]


@dataclass(frozen=True)
class IOResult(Generic[T]):  # noqa: UP046
    """
    Value or failure of one filesystem call.

    Usage:
        copy_result = FileOperations.copy_exclusive(path, target)
        if copy_result.ok:
            return copy_result.value
        if copy_result.kind != "exists":
            raise BackupWriteError(str(path), copy_result.error)
    """

    value: T | None = None
    error: str | None = None
    kind: FailureKind | None = None
    details: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> IOResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: FailureKind, error: str, **details: str) -> IOResult[T]:
        """Failed result; details carries extra context such as the resolved path."""
        return cls(error=error, kind=kind, details=details)

    def unwrap(self) -> T:
        """Return the value, or raise ValueError for a failed result."""
        if self.error is not None or self.value is None:
            raise ValueError(f"Cannot unwrap failed {self.kind} result: {self.error}")
        return self.value


__all__ = ["IOResult", "FailureKind"]
