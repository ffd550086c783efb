"""Shared formatting utilities for MCP tool responses.

Following MCP best practices:
- JSON format: Machine-readable structured data (PatchResult.to_response())
- Markdown format: Human-readable summary with headers, lists and a diff block
"""

from typing import Any

from .engine import PatchResult

# =============================================================================
# Markdown Formatting Utilities
# =============================================================================


def format_patch_result_markdown(result: PatchResult) -> str:
    """Format a patch result as markdown.

    Args:
        result: Result of a planned or applied patch request

    Returns:
        Markdown summary: outcome, line counts, operations, backup and diff
    """
    title = "Patch Preview (dry run)" if result.dry_run else "Patch Applied"
    lines = [
        f"# {title}: {result.path}",
        "",
        result.message,
        "",
    ]

    if result.instruction:
        lines.extend([f"**Instruction**: {result.instruction}", ""])

    lines.extend(
        [
            "## Summary",
            f"- **Command**: {result.command}",
            f"- **Resolved path**: {result.resolved_path}",
            f"- **Lines**: {result.original_line_count} -> {result.modified_line_count} "
            f"({result.line_diff:+d})",
            f"- **Added / removed / modified**: {result.lines_added} / "
            f"{result.lines_removed} / {result.lines_modified}",
        ]
    )

    if result.backup_created:
        lines.append(f"- **Backup**: {result.backup_path}")
    else:
        lines.append("- **Backup**: none")

    lines.append("")
    lines.append("## Operations")
    lines.extend(f"{i}. {entry}" for i, entry in enumerate(result.operations_log, 1))

    if result.diff:
        lines.extend(["", "## Diff", "```diff", result.diff, "```"])

    return "\n".join(lines)


def format_error_markdown(error: str) -> str:
    """Format a rejection message as markdown."""
    return f"# Patch Rejected\n\n{error}"


def format_view_markdown(view: dict[str, Any]) -> str:
    """Format a view_file response as markdown.

    Args:
        view: Dictionary returned by view_file in json format

    Returns:
        Markdown with a header and the numbered excerpt in a code block
    """
    header = (
        f"# {view['path']} (lines {view['start_line']}-{view['end_line']} "
        f"of {view['line_count']})"
    )
    return f"{header}\n\n```\n{view['content']}\n```"


__all__ = [
    "format_patch_result_markdown",
    "format_error_markdown",
    "format_view_markdown",
]
