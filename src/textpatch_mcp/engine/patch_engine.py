"""PatchEngine: runs one patch request end to end.

Pipeline:
    check_structure -> PathGuard -> load -> validate -> plan
        -> backup (optional, not on dry run) -> atomic write (not on dry run) -> report

Every step before the write is side-effect free, and the write is a single
atomic replace of fully assembled content, so a failing request never leaves
a partially edited file. There is no file locking: a change made by another
process between load and write is overwritten.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .backup import BackupManager
from .config import EngineConfig
from .document import Document, load
from .exceptions import PatchError, PathEscapeError, WriteError
from .fs_utils import FileOperations, PathGuard
from .models import PatchRequest, PatchResult
from .planners import InsertionPlanner, ReplacementPlanner
from .reporter import ResultReporter
from .validation import RequestValidator

logger = logging.getLogger(__name__)


class PatchEngine:
    """Applies validated line-anchored edits to files inside one workspace.

    Args:
        config: Engine configuration (workspace root, limits, backup naming)

    Example:
        engine = PatchEngine(EngineConfig(workspace_root=Path("/srv/project")))
        result = engine.apply(
            PatchRequest(
                command="replace",
                path="notes.txt",
                replacements=[
                    ReplacementOp(old_text="line 2", new_text="modified line 2",
                                  start_line=2, end_line=2)
                ],
            )
        )
        result.operations_log  # ['Replaced 1 lines (2-2) with 1 lines']
    """

    def __init__(self, config: EngineConfig):
        self.config = config
        self.path_guard = PathGuard(config.workspace_root)
        self.validator = RequestValidator(max_operations=config.max_operations)
        self.replacement_planner = ReplacementPlanner()
        self.insertion_planner = InsertionPlanner()
        self.backup_manager = BackupManager(marker=config.backup_marker)
        self.reporter = ResultReporter()

    @property
    def workspace_root(self) -> Path:
        return self.path_guard.workspace_root

    def resolve_path(self, path: str) -> Path:
        """Resolve path inside the workspace.

        Raises:
            PathEscapeError: path resolves outside the workspace root
            PatchError: path is empty or cannot be resolved
        """
        path_result = self.path_guard.resolve(path)
        if path_result.kind == "escape":
            raise PathEscapeError(
                path, path_result.details.get("resolved", ""), str(self.workspace_root)
            )
        if not path_result.ok:
            raise PatchError(f"Invalid path: {path_result.error}")

        return path_result.unwrap()

    def load_document(self, path: str, encoding: str = "utf-8") -> tuple[Path, Document]:
        """Resolve and load a workspace file."""
        resolved = self.resolve_path(path)
        document = load(
            resolved, encoding=encoding, max_size_bytes=self.config.max_file_size_bytes
        )
        return resolved, document

    def plan(self, request: PatchRequest, document: Document) -> tuple[Document, list[str]]:
        """Validate request against document and compute the patched document.

        Raises:
            PatchError: Any validation failure (nothing is applied)
        """
        validated = self.validator.validate(request, document)
        if validated.command == "replace":
            return self.replacement_planner.apply(document, validated.replacements)
        return self.insertion_planner.apply(document, validated.insertions)

    def apply(self, request: PatchRequest) -> PatchResult:
        """Run request and return its result.

        Raises:
            PatchError: The request was rejected or could not be written. The
                target file is unchanged in every failure case.
        """
        # Structural problems are reported before the path is touched
        self.validator.check_structure(request)

        resolved, original = self.load_document(request.path, encoding=request.encoding)
        planned, operations_log = self.plan(request, original)

        backup_path: Path | None = None
        if not request.dry_run:
            if request.create_backup:
                backup_path = self.backup_manager.backup(resolved)

            write_result = FileOperations.write_text_atomic(
                resolved, planned.text, encoding=request.encoding
            )
            if not write_result.ok:
                raise WriteError(str(resolved), write_result.error or "unknown error")

            logger.info(
                f"Patched {resolved}: {len(operations_log)} {request.command} operations, "
                f"{original.line_count} -> {planned.line_count} lines"
            )
        else:
            logger.info(f"Dry run for {resolved}: {len(operations_log)} operations planned")

        return self.reporter.report(
            planned,
            original,
            request,
            resolved_path=resolved,
            operations_log=operations_log,
            backup_path=backup_path,
        )


__all__ = ["PatchEngine"]
