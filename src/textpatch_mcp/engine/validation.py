"""Patch request validation.

Validation runs in two phases:

1. check_structure(request): shape of the request only. Runs before the path
   is resolved or the file is read.
2. validate(request, document): every operation against the loaded document
   (line bounds, exact content match, overlaps).

Nothing is applied unless both phases pass, so a request is rejected as a
whole rather than partially applied.
"""

from __future__ import annotations

from dataclasses import dataclass

from .document import Document
from .exceptions import (
    ContentMismatchError,
    InvalidLineRangeError,
    InvalidRequestError,
    NoOperationsError,
    OverlappingOperationsError,
)
from .models import InsertionOp, PatchCommand, PatchRequest, ReplacementOp


@dataclass(frozen=True)
class ValidatedPlan:
    """Operations that passed validation against a specific document."""

    command: PatchCommand
    replacements: tuple[ReplacementOp, ...] = ()
    insertions: tuple[InsertionOp, ...] = ()


class RequestValidator:
    """Validates patch requests.

    Args:
        max_operations: Upper bound on operations per request
    """

    def __init__(self, max_operations: int = 20):
        self.max_operations = max_operations

    def check_structure(self, request: PatchRequest) -> None:
        """Reject requests that are invalid regardless of file content.

        Raises:
            NoOperationsError: No operations for the request's command
            InvalidRequestError: Operations of the other kind supplied, or too many operations
        """
        if request.command == "replace" and request.insertions:
            raise InvalidRequestError(
                "insertions cannot be combined with the replace command; "
                "send them in a separate insert request"
            )
        if request.command == "insert" and request.replacements:
            raise InvalidRequestError(
                "replacements cannot be combined with the insert command; "
                "send them in a separate replace request"
            )

        operations = request.operations
        if not operations:
            raise NoOperationsError(request.command)

        if len(operations) > self.max_operations:
            raise InvalidRequestError(
                f"{len(operations)} operations supplied, at most {self.max_operations} "
                f"are allowed per request"
            )

    def validate(self, request: PatchRequest, document: Document) -> ValidatedPlan:
        """Validate every operation of request against document.

        Raises:
            NoOperationsError, InvalidRequestError: see check_structure
            InvalidLineRangeError: A line reference is outside the document
            ContentMismatchError: old_text differs from the document's content
            OverlappingOperationsError: Two operations touch the same region
        """
        self.check_structure(request)

        if request.command == "replace":
            for index, op in enumerate(request.replacements, 1):
                self._check_replacement(index, op, document)
            self._check_replacement_overlaps(request.replacements)
            return ValidatedPlan(command="replace", replacements=tuple(request.replacements))

        for index, op in enumerate(request.insertions, 1):
            if not 0 <= op.after_line <= document.line_count:
                raise InvalidLineRangeError(
                    index, op.after_line, None, document.line_count, kind="insertion"
                )
        self._check_insertion_overlaps(request.insertions)
        return ValidatedPlan(command="insert", insertions=tuple(request.insertions))

    @staticmethod
    def _check_replacement(index: int, op: ReplacementOp, document: Document) -> None:
        line_count = document.line_count
        if not (1 <= op.start_line <= line_count and 1 <= op.end_line <= line_count):
            raise InvalidLineRangeError(index, op.start_line, op.end_line, line_count)
        if op.start_line > op.end_line:
            raise InvalidLineRangeError(index, op.start_line, op.end_line, line_count)

        found = document.span(op.start_line, op.end_line)
        if found != op.old_text:
            raise ContentMismatchError(index, op.old_text, found, op.start_line, op.end_line)

    @staticmethod
    def _check_replacement_overlaps(ops: list[ReplacementOp]) -> None:
        ordered = sorted(enumerate(ops, 1), key=lambda item: item[1].start_line)
        for (prev_index, prev), (index, op) in zip(ordered, ordered[1:]):
            if op.start_line <= prev.end_line:
                first, second = sorted((prev_index, index))
                raise OverlappingOperationsError(
                    first,
                    second,
                    f"lines {prev.start_line}-{prev.end_line} and "
                    f"{op.start_line}-{op.end_line} intersect",
                )

    @staticmethod
    def _check_insertion_overlaps(ops: list[InsertionOp]) -> None:
        seen: dict[int, int] = {}
        for index, op in enumerate(ops, 1):
            if op.after_line in seen:
                raise OverlappingOperationsError(
                    seen[op.after_line],
                    index,
                    f"both insert after line {op.after_line}; combine them into one insertion",
                )
            seen[op.after_line] = index


__all__ = ["RequestValidator", "ValidatedPlan"]
