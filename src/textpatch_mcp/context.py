"""AppContext: per-server resources handed to every tool call.

Kept apart from server.py so tools.py can import the type without importing
the FastMCP instance's lifespan machinery first.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from mcp.server.fastmcp import Context
from mcp.server.session import ServerSession

from .engine import EditQueue, EngineConfig, PatchEngine

T = TypeVar("T")


@dataclass
class AppContext:
    """Engine, configuration and edit queue for one server process.

    Built once in the server lifespan. The engine is bound to a single
    workspace root.
    """

    config: EngineConfig
    engine: PatchEngine
    edit_queue: EditQueue | None = None  # None runs engine calls inline

    async def run(self, operation: Callable[[], T], label: str = "") -> T:
        """Run a synchronous engine call through the edit queue when it is running."""
        if self.edit_queue is not None and self.edit_queue.running:
            return await self.edit_queue.submit(operation, label=label)
        return operation()


# What tools declare as their `ctx` parameter
AppContextType = Context[ServerSession, AppContext]


__all__ = ["AppContext", "AppContextType"]
