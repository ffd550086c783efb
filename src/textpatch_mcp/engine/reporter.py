"""Result reporting: operation log, line counts, diff preview and statistics."""

from __future__ import annotations

import difflib
from pathlib import Path

from .document import Document
from .models import PatchRequest, PatchResult


def compute_diff(original: Document, modified: Document, filepath: str) -> str:
    """Unified diff between two documents, line by line.

    Args:
        original: Document before the patch
        modified: Document after the patch
        filepath: Path used in the a/ and b/ headers

    Returns:
        Unified diff text (empty string when nothing changed)
    """
    diff_lines = difflib.unified_diff(
        list(original.lines),
        list(modified.lines),
        fromfile=f"a/{filepath}",
        tofile=f"b/{filepath}",
        lineterm="",
    )
    return "\n".join(diff_lines)


def compute_stats(original: Document, modified: Document) -> dict[str, int]:
    """Count added, removed and modified lines between two documents.

    Returns:
        Dictionary with 'added', 'removed', 'modified' counts
    """
    matcher = difflib.SequenceMatcher(None, original.lines, modified.lines, autojunk=False)

    added = removed = changed = 0
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "replace":
            changed += max(i2 - i1, j2 - j1)
        elif tag == "delete":
            removed += i2 - i1
        elif tag == "insert":
            added += j2 - j1

    return {"added": added, "removed": removed, "modified": changed}


class ResultReporter:
    """Builds the PatchResult for one request."""

    def report(
        self,
        planned: Document,
        original: Document,
        request: PatchRequest,
        *,
        resolved_path: Path,
        operations_log: list[str],
        backup_path: Path | None = None,
    ) -> PatchResult:
        """Assemble the result of a planned (dry run) or applied request.

        On a dry run backup_created is always False and the counts describe
        what the write would have produced.
        """
        stats = compute_stats(original, planned)
        backup_created = backup_path is not None and not request.dry_run

        if request.dry_run:
            message = "Changes previewed successfully (dry run, file not modified)"
        else:
            message = "File edited successfully"

        return PatchResult(
            command=request.command,
            path=request.path,
            resolved_path=str(resolved_path),
            operations_log=operations_log,
            original_line_count=original.line_count,
            modified_line_count=planned.line_count,
            line_diff=planned.line_count - original.line_count,
            lines_added=stats["added"],
            lines_removed=stats["removed"],
            lines_modified=stats["modified"],
            diff=compute_diff(original, planned, request.path),
            dry_run=request.dry_run,
            backup_created=backup_created,
            backup_path=str(backup_path) if backup_created else None,
            instruction=request.instruction,
            message=message,
        )


__all__ = ["ResultReporter", "compute_diff", "compute_stats"]
