"""MCP tools exposing the patch engine.

Three tools: str_replace_editor (replace or insert), view_file (numbered
lines to cite) and get_engine_config. Parameters are flat and annotated so
FastMCP can derive the input schema; each docstring is the tool description.

Rejections are returned, not raised: the response is
{"status": "failure", "error": "<one descriptive message>"} so the caller
can correct its line numbers and retry.
"""

import logging
from typing import Annotated, Any, Literal

from mcp.types import ToolAnnotations
from pydantic import Field, ValidationError

from .context import AppContextType
from .engine import InsertionOp, PatchError, PatchRequest, PatchResult, ReplacementOp
from .formatting import format_error_markdown, format_patch_result_markdown, format_view_markdown
from .server import mcp

logger = logging.getLogger(__name__)

NO_CONTEXT_ERROR = "Server context not available; textpatch tools must run inside the MCP server."


def _failure(error: str, format: str = "json") -> dict[str, Any] | str:
    if format == "markdown":
        return format_error_markdown(error)
    return {"status": "failure", "error": error}


def _validation_message(exc: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'request'}: {err['msg']}"
        for err in exc.errors()
    )
    return f"Invalid patch request: {details}"


@mcp.tool(
    annotations=ToolAnnotations(
        title="String Replace Editor",
        readOnlyHint=False,
        destructiveHint=True,  # Overwrites file content
        idempotentHint=False,  # Re-applying a replacement fails the content check
        openWorldHint=False,
    )
)
async def str_replace_editor(
    command: Annotated[
        Literal["replace", "insert"],
        Field(description="replace=verified line-range replacement, insert=insert after a line"),
    ],
    path: Annotated[
        str,
        Field(
            description="File path relative to the workspace root",
            min_length=1,
            max_length=4096,
        ),
    ],
    replacements: Annotated[
        list[ReplacementOp] | None,
        Field(
            description=(
                "Required for replace: [{old_text, new_text, start_line, end_line}]. "
                "old_text must equal the current lines start_line..end_line exactly."
            )
        ),
    ] = None,
    insertions: Annotated[
        list[InsertionOp] | None,
        Field(description="Required for insert: [{after_line, text}] (after_line=0 = top)"),
    ] = None,
    create_backup: Annotated[
        bool | None,
        Field(description="Create a timestamped backup before writing (default: true)"),
    ] = None,
    dry_run: Annotated[
        bool,
        Field(description="Preview the result and diff without writing"),
    ] = False,
    encoding: Annotated[
        str,
        Field(description="File text encoding"),
    ] = "utf-8",
    instruction: Annotated[
        str | None,
        Field(description="Short description of the change (echoed in the result)"),
    ] = None,
    format: Annotated[
        Literal["json", "markdown"],
        Field(description="Response format"),
    ] = "json",
    *,
    ctx: AppContextType,
) -> dict[str, Any] | str:
    """Edit a file with line-anchored replacements or insertions. Required: command, path."""
    if ctx is None:
        return _failure(NO_CONTEXT_ERROR, format)

    app_ctx = ctx.request_context.lifespan_context

    try:
        request = PatchRequest(
            command=command,
            path=path,
            replacements=replacements or [],
            insertions=insertions or [],
            create_backup=(
                app_ctx.config.default_create_backup if create_backup is None else create_backup
            ),
            dry_run=dry_run,
            encoding=encoding,
            instruction=instruction,
        )
    except ValidationError as e:
        return _failure(_validation_message(e), format)

    try:
        result: PatchResult = await app_ctx.run(
            lambda: app_ctx.engine.apply(request), label=request.path
        )
    except PatchError as e:
        logger.info(f"Rejected {command} on {path}: {type(e).__name__}")
        return _failure(str(e), format)
    except Exception as e:
        logger.exception(f"Unexpected error patching {path}: {e}")
        return _failure(f"Error in str_replace_editor: {e}", format)

    if format == "markdown":
        return format_patch_result_markdown(result)
    return result.to_response()


@mcp.tool(
    annotations=ToolAnnotations(
        title="View File",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def view_file(
    path: Annotated[
        str,
        Field(
            description="File path relative to the workspace root",
            min_length=1,
            max_length=4096,
        ),
    ],
    start_line: Annotated[
        int,
        Field(description="First line to show (1-indexed)", ge=1),
    ] = 1,
    end_line: Annotated[
        int | None,
        Field(description="Last line to show (inclusive, default: end of file)", ge=1),
    ] = None,
    encoding: Annotated[
        str,
        Field(description="File text encoding"),
    ] = "utf-8",
    format: Annotated[
        Literal["json", "markdown"],
        Field(description="Response format"),
    ] = "json",
    *,
    ctx: AppContextType,
) -> dict[str, Any] | str:
    """Show numbered file lines so replacements can cite exact line numbers."""
    if ctx is None:
        return _failure(NO_CONTEXT_ERROR, format)

    app_ctx = ctx.request_context.lifespan_context

    try:
        resolved, document = await app_ctx.run(
            lambda: app_ctx.engine.load_document(path, encoding=encoding), label=path
        )
    except PatchError as e:
        return _failure(str(e), format)

    if start_line > document.line_count:
        return _failure(
            f"start_line {start_line} is past the end of the file "
            f"({document.line_count} lines).",
            format,
        )

    last = document.line_count if end_line is None else min(end_line, document.line_count)
    if last < start_line:
        return _failure(f"end_line {end_line} is before start_line {start_line}.", format)

    view = {
        "status": "success",
        "path": path,
        "resolved_path": str(resolved),
        "line_count": document.line_count,
        "start_line": start_line,
        "end_line": last,
        "content": document.numbered(start_line, last),
    }
    if format == "markdown":
        return format_view_markdown(view)
    return view


@mcp.tool(
    annotations=ToolAnnotations(
        title="Get Engine Config",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def get_engine_config(*, ctx: AppContextType) -> dict[str, Any]:
    """Show the workspace root, operation limit and backup settings in effect."""
    if ctx is None:
        return {"status": "failure", "error": NO_CONTEXT_ERROR}

    app_ctx = ctx.request_context.lifespan_context
    config = app_ctx.config

    response: dict[str, Any] = {
        "status": "success",
        "workspace_root": str(app_ctx.engine.workspace_root),
        "max_operations": config.max_operations,
        "default_create_backup": config.default_create_backup,
        "backup_marker": config.backup_marker,
        "max_file_size_bytes": config.max_file_size_bytes,
        "edit_queue_enabled": app_ctx.edit_queue is not None,
    }
    if app_ctx.edit_queue is not None:
        response["edit_queue_stats"] = app_ctx.edit_queue.get_stats()
    return response


__all__ = ["str_replace_editor", "view_file", "get_engine_config"]
