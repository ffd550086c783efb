"""Tests for markdown response formatting."""

from textpatch_mcp.engine import PatchResult
from textpatch_mcp.formatting import (
    format_error_markdown,
    format_patch_result_markdown,
    format_view_markdown,
)


def _result(**overrides: object) -> PatchResult:
    fields: dict[str, object] = {
        "command": "replace",
        "path": "notes.txt",
        "resolved_path": "/ws/notes.txt",
        "operations_log": ["Replaced 1 lines (2-2) with 2 lines"],
        "original_line_count": 3,
        "modified_line_count": 4,
        "line_diff": 1,
        "lines_added": 1,
        "lines_modified": 1,
        "diff": "--- a/notes.txt\n+++ b/notes.txt",
        "backup_created": True,
        "backup_path": "/ws/notes.txt.backup.2026",
        "message": "File edited successfully",
    }
    fields.update(overrides)
    return PatchResult(**fields)  # type: ignore[arg-type]


def test_applied_result() -> None:
    markdown = format_patch_result_markdown(_result(instruction="split line 2"))

    assert markdown.startswith("# Patch Applied: notes.txt\n\nFile edited successfully")
    assert "**Instruction**: split line 2" in markdown
    assert "- **Lines**: 3 -> 4 (+1)" in markdown
    assert "- **Added / removed / modified**: 1 / 0 / 1" in markdown
    assert "- **Backup**: /ws/notes.txt.backup.2026" in markdown
    assert "1. Replaced 1 lines (2-2) with 2 lines" in markdown
    assert markdown.endswith("```diff\n--- a/notes.txt\n+++ b/notes.txt\n```")


def test_dry_run_result_without_diff() -> None:
    markdown = format_patch_result_markdown(
        _result(dry_run=True, backup_created=False, backup_path=None, diff="", line_diff=-2)
    )

    assert markdown.startswith("# Patch Preview (dry run): notes.txt")
    assert "- **Backup**: none" in markdown
    assert "(-2)" in markdown
    assert "## Diff" not in markdown


def test_error() -> None:
    assert format_error_markdown("File 'x' does not exist.") == (
        "# Patch Rejected\n\nFile 'x' does not exist."
    )


def test_view() -> None:
    view = {
        "path": "notes.txt",
        "start_line": 1,
        "end_line": 2,
        "line_count": 3,
        "content": "1\ta\n2\tb",
    }

    assert format_view_markdown(view) == "# notes.txt (lines 1-2 of 3)\n\n```\n1\ta\n2\tb\n```"
