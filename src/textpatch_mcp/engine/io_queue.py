"""Edit queue for serialized patch execution.

The MCP server handles tool calls concurrently, while the patch engine does
blocking read-validate-write cycles. Submitting every engine call through one
EditQueue guarantees two requests never interleave their file I/O inside the
server process. Synchronous callables run in a worker thread so the event
loop stays responsive.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class _PendingEdit:
    operation: Callable[[], Any]
    label: str
    future: asyncio.Future[Any]


class EditQueue:
    """Single-worker queue: submitted operations run one at a time, in order.

    stop() enqueues a shutdown marker behind everything already submitted, so
    queued edits are finished rather than dropped (up to drain_timeout).

    Usage:
        queue = EditQueue()
        await queue.start()

        result = await queue.submit(lambda: engine.apply(request), label="notes.txt")
    """

    def __init__(self, drain_timeout: float = 30.0) -> None:
        self.drain_timeout = drain_timeout
        self._pending: asyncio.Queue[_PendingEdit | None] = asyncio.Queue()
        self._worker_task: asyncio.Task[None] | None = None
        self._accepting = False
        self._completed = 0
        self._failed = 0

    @property
    def running(self) -> bool:
        return self._accepting

    async def start(self) -> None:
        if self._accepting:
            logger.warning("EditQueue already running")
            return

        self._accepting = True
        self._worker_task = asyncio.create_task(self._run_worker())
        logger.info("EditQueue started")

    async def stop(self) -> None:
        """Stop accepting edits, finish the queued ones, then stop the worker."""
        if not self._accepting or self._worker_task is None:
            return

        self._accepting = False
        await self._pending.put(None)

        try:
            await asyncio.wait_for(asyncio.shield(self._worker_task), timeout=self.drain_timeout)
        except TimeoutError:
            logger.warning(
                f"EditQueue drain timeout ({self.drain_timeout}s), "
                f"{self._pending.qsize()} edits abandoned"
            )
            self._worker_task.cancel()
            try:
                await self._worker_task
            except asyncio.CancelledError:
                pass

        self._worker_task = None
        logger.info(
            f"EditQueue stopped after {self._completed + self._failed} edits "
            f"({self._failed} failed)"
        )

    async def submit(self, operation: Callable[[], Any], label: str = "") -> Any:
        """Queue operation and wait for its result.

        Args:
            operation: Callable (sync or async) performing the edit
            label: Short description for logs (usually the target path)

        Returns:
            Whatever operation returned

        Raises:
            RuntimeError: Queue not started (or already stopping)
            Exception: Whatever operation raised
        """
        if not self._accepting:
            raise RuntimeError("EditQueue not started. Call start() first.")

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        await self._pending.put(_PendingEdit(operation, label, future))
        return await future

    async def _run_worker(self) -> None:
        while (edit := await self._pending.get()) is not None:
            await self._execute(edit)
        logger.debug("EditQueue worker stopped")

    async def _execute(self, edit: _PendingEdit) -> None:
        try:
            if inspect.iscoroutinefunction(edit.operation):
                result = await edit.operation()
            else:
                result = await asyncio.to_thread(edit.operation)
        except Exception as e:
            # Rejections are reported by the caller, so this stays at debug
            logger.debug(f"Edit failed ({edit.label or 'unlabelled'}): {e}")
            self._failed += 1
            if not edit.future.cancelled():
                edit.future.set_exception(e)
            return

        self._completed += 1
        if not edit.future.cancelled():
            edit.future.set_result(result)

    def get_stats(self) -> dict[str, int]:
        return {
            "total_operations": self._completed + self._failed,
            "successful_operations": self._completed,
            "failed_operations": self._failed,
            "queue_size": self._pending.qsize(),
        }


__all__ = ["EditQueue"]
