"""Task Supervisor — owns detached fire-and-forget coroutines.

Invariants:
    - submit() never blocks and never awaits the coroutine
    - Every submitted task is strongly referenced until it finishes
    - A failed task is logged once; nothing is retried
    - drain() waits at most `timeout` seconds, then cancels what is left; completion
      before process teardown is not guaranteed

Design Decisions:
    - Plain asyncio tasks instead of FastAPI BackgroundTasks, which run inside the
      response cycle and would hold the ASGI call open
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class TaskSupervisor:
    """Tracks background tasks so they are not garbage-collected mid-flight."""

    def __init__(self, name: str = "background"):
        self.name = name
        self._tasks: set[asyncio.Task] = set()

    def submit(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"{self.name} task {task.get_name()} cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"{self.name} task {task.get_name()} failed: {exc}",
                exc_info=exc,
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: float = 2.0) -> None:
        """Give in-flight tasks a bounded chance to finish."""
        if not self._tasks:
            return
        tasks = list(self._tasks)
        _, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning(
                f"{self.name}: cancelled {len(still_running)} unfinished task(s) on drain",
            )
            await asyncio.gather(*still_running, return_exceptions=True)
