"""Replacement and insertion planners.

Both planners apply operations to a single line buffer in descending line
order. A splice only shifts lines at or after its own position, so every
pending operation (all anchored strictly lower) still points at the lines
it was validated against. The result is therefore independent of the order
in which the caller listed non-overlapping operations.

Planners assume RequestValidator has already accepted the operations.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .document import Document, split_lines
from .models import InsertionOp, ReplacementOp

logger = logging.getLogger(__name__)


class ReplacementPlanner:
    """Splices verified replacements into a new Document."""

    def apply(
        self, document: Document, ops: Sequence[ReplacementOp]
    ) -> tuple[Document, list[str]]:
        """Apply replacements, highest start_line first.

        Returns:
            (new_document, operations_log) with one log entry per operation
            in application order
        """
        lines = list(document.lines)
        log: list[str] = []

        for op in sorted(ops, key=lambda o: o.start_line, reverse=True):
            new_lines = split_lines(op.new_text)
            lines[op.start_line - 1 : op.end_line] = new_lines
            removed = op.end_line - op.start_line + 1
            log.append(
                f"Replaced {removed} lines ({op.start_line}-{op.end_line}) "
                f"with {len(new_lines)} lines"
            )
            logger.debug(log[-1])

        return Document.from_lines(lines), log


class InsertionPlanner:
    """Splices insertions into a new Document."""

    def apply(self, document: Document, ops: Sequence[InsertionOp]) -> tuple[Document, list[str]]:
        """Apply insertions, highest after_line first.

        after_line=0 inserts before the current first line.

        Returns:
            (new_document, operations_log)
        """
        lines = list(document.lines)
        log: list[str] = []

        for op in sorted(ops, key=lambda o: o.after_line, reverse=True):
            new_lines = split_lines(op.text)
            lines[op.after_line : op.after_line] = new_lines
            log.append(f"Inserted {len(new_lines)} lines after line {op.after_line}")
            logger.debug(log[-1])

        return Document.from_lines(lines), log


__all__ = ["ReplacementPlanner", "InsertionPlanner"]
