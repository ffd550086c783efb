"""FastMCP application for textpatch-mcp.

Owns the process-wide pieces: the `mcp` instance the tools register on, the
lifespan that builds the AppContext (engine bound to one workspace, optional
EditQueue), and the stdio entry point. Tool functions live in tools.py.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from .context import AppContext, AppContextType
from .engine import EditQueue, EngineConfigLoader, PatchEngine

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def create_app_context(config_loader: EngineConfigLoader | None = None) -> AppContext:
    """Build the AppContext shared by all tool calls.

    Environment Variables:
        TEXTPATCH_CONFIG: Optional YAML config file
        TEXTPATCH_WORKSPACE_PATH / WORKSPACE_PATH: Workspace root (default: cwd)
        TEXTPATCH_MAX_OPERATIONS: Operations per request (1-1000)
        TEXTPATCH_EDIT_QUEUE_ENABLED: Serialize edits through EditQueue (default: true)

    Raises:
        RuntimeError: The configuration is unusable, so the server must not start
    """
    try:
        config = (config_loader or EngineConfigLoader()).load_config()
    except ValueError as e:
        logger.error(f"Invalid engine configuration: {e}")
        raise RuntimeError(
            f"{e}\n"
            "Server cannot start without a valid configuration. Check that "
            "TEXTPATCH_WORKSPACE_PATH is an existing directory and that "
            "TEXTPATCH_CONFIG, if set, is a YAML mapping."
        ) from e

    edit_queue = EditQueue() if _env_flag("TEXTPATCH_EDIT_QUEUE_ENABLED", True) else None
    return AppContext(config=config, engine=PatchEngine(config), edit_queue=edit_queue)


@asynccontextmanager
async def app_lifespan(_server: FastMCP) -> AsyncIterator[AppContext]:
    """Create the AppContext and run the edit queue for the server's lifetime."""
    app_context = create_app_context()
    logger.info(f"Patching files under {app_context.engine.workspace_root}")

    edit_queue = app_context.edit_queue
    if edit_queue is None:
        logger.info("Edit queue disabled, engine calls run inline")
    else:
        await edit_queue.start()

    try:
        yield app_context
    finally:
        if edit_queue is not None:
            await edit_queue.stop()
        logger.info("textpatch-mcp resources released")


mcp = FastMCP("textpatch_mcp", lifespan=app_lifespan)


def configure_logging() -> None:
    """Send logs to stderr at TEXTPATCH_LOG_LEVEL (default INFO).

    stdout is reserved for MCP protocol messages.
    """
    level_name = os.getenv("TEXTPATCH_LOG_LEVEL", "INFO").upper()
    if level_name not in LOG_LEVELS:
        print(
            f"Warning: Invalid TEXTPATCH_LOG_LEVEL '{level_name}'. "
            f"Valid levels: {', '.join(LOG_LEVELS)}. Using INFO.",
            file=sys.stderr,
        )
        level_name = "INFO"

    logging.basicConfig(
        level=getattr(logging, level_name),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Serve over stdio until the client disconnects or Ctrl+C."""
    configure_logging()
    logger.info("textpatch-mcp starting on stdio")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        sys.exit(1)


__all__ = [
    "mcp",
    "main",
    "AppContext",
    "AppContextType",
    "create_app_context",
    "configure_logging",
]
