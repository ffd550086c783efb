"""Text patch engine core components.

Key Components:

- PatchEngine: Runs one patch request end to end (validate, plan, backup, write, report)
- EngineConfig / EngineConfigLoader: Explicit per-engine configuration (YAML + env)
- Document: Immutable 1-indexed line view with exact round-trip reconstruction
- RequestValidator: Structural and document-level request validation
- ReplacementPlanner / InsertionPlanner: Descending-order line splicing
- BackupManager: Timestamped byte-for-byte backups before writes
- ResultReporter: PatchResult assembly with diff preview and line statistics
- PathGuard / FileOperations: Workspace containment and atomic file I/O
- EditQueue: Serializes engine calls made from the async MCP server
- PatchError hierarchy: One exception type per rejection reason
"""

from .backup import BackupManager
from .config import EngineConfig, EngineConfigLoader
from .document import Document, load, reconstruct, split_lines
from .exceptions import (
    BackupWriteError,
    ContentMismatchError,
    InvalidLineRangeError,
    InvalidRequestError,
    NoOperationsError,
    OverlappingOperationsError,
    PatchError,
    PatchFileNotFoundError,
    PathEscapeError,
    WriteError,
)
from .fs_utils import FileOperations, PathGuard
from .io_queue import EditQueue
from .io_result import FailureKind, IOResult
from .models import InsertionOp, PatchCommand, PatchRequest, PatchResult, ReplacementOp
from .patch_engine import PatchEngine
from .planners import InsertionPlanner, ReplacementPlanner
from .reporter import ResultReporter, compute_diff, compute_stats
from .validation import RequestValidator, ValidatedPlan

__all__ = [
    # Engine
    "PatchEngine",
    "EngineConfig",
    "EngineConfigLoader",
    "EditQueue",
    # Document model
    "Document",
    "load",
    "reconstruct",
    "split_lines",
    # Request/response models
    "PatchCommand",
    "PatchRequest",
    "PatchResult",
    "ReplacementOp",
    "InsertionOp",
    # Pipeline stages
    "RequestValidator",
    "ValidatedPlan",
    "ReplacementPlanner",
    "InsertionPlanner",
    "BackupManager",
    "ResultReporter",
    "compute_diff",
    "compute_stats",
    # Filesystem
    "PathGuard",
    "FileOperations",
    "IOResult",
    "FailureKind",
    # Exceptions
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
