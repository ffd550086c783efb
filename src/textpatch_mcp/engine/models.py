"""Pydantic models for patch requests and results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PatchCommand = Literal["replace", "insert"]


class ReplacementOp(BaseModel):
    """Replace lines start_line..end_line, asserting their current content."""

    model_config = ConfigDict(frozen=True)

    old_text: str = Field(
        description=(
            "Exact current content of lines start_line..end_line joined by newlines. "
            "The replacement is rejected if it does not match byte-for-byte."
        )
    )
    new_text: str = Field(description="Replacement content (may span multiple lines)")
    start_line: int = Field(description="1-indexed first line to replace")
    end_line: int = Field(description="1-indexed last line to replace (inclusive)")


class InsertionOp(BaseModel):
    """Insert text after a line without removing anything."""

    model_config = ConfigDict(frozen=True)

    after_line: int = Field(
        description="1-indexed line after which to insert (0 inserts before the first line)",
    )
    text: str = Field(description="Content to insert (may span multiple lines)")


class PatchRequest(BaseModel):
    """A single caller-issued batch of line-anchored edits to one file.

    Exactly one command kind per request: 'replace' uses replacements,
    'insert' uses insertions. Cross-field rules (empty or mixed operation
    lists, operation limits) are enforced by RequestValidator so they
    surface as PatchError messages rather than pydantic validation errors.
    """

    command: PatchCommand = Field(description="Edit command: replace or insert")
    path: str = Field(min_length=1, description="File path relative to the workspace root")
    replacements: list[ReplacementOp] = Field(default_factory=list)
    insertions: list[InsertionOp] = Field(default_factory=list)
    create_backup: bool = Field(default=True, description="Create a backup before writing")
    dry_run: bool = Field(default=False, description="Preview without writing to disk")
    encoding: str = Field(default="utf-8", description="Text encoding of the file")
    instruction: str | None = Field(
        default=None, description="Free-text description of the change, echoed in the result"
    )

    @property
    def operations(self) -> list[ReplacementOp] | list[InsertionOp]:
        """Operations belonging to this request's command."""
        return self.replacements if self.command == "replace" else self.insertions


class PatchResult(BaseModel):
    """Structured summary of a planned or applied patch request."""

    command: PatchCommand
    path: str = Field(description="Path as supplied by the caller")
    resolved_path: str = Field(description="Absolute path inside the workspace")
    operations_log: list[str] = Field(default_factory=list)
    original_line_count: int
    modified_line_count: int
    line_diff: int = Field(default=0, description="modified_line_count - original_line_count")
    lines_added: int = 0
    lines_removed: int = 0
    lines_modified: int = 0
    diff: str = Field(default="", description="Unified diff of the change")
    dry_run: bool = False
    backup_created: bool = False
    backup_path: str | None = None
    instruction: str | None = None
    message: str = ""

    def to_response(self) -> dict[str, object]:
        """Response dict returned by the MCP tool."""
        return {"status": "success", **self.model_dump()}


__all__ = [
    "PatchCommand",
    "ReplacementOp",
    "InsertionOp",
    "PatchRequest",
    "PatchResult",
]
