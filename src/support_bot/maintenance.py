"""
Periodic background jobs.

:func:`startup` runs a job every ``interval`` seconds on its own
:class:`asyncio.Task`; :func:`shutdown` cancels it. :class:`Scheduler` keeps
named jobs together so the bot can start them on ready and stop them on close
(the channel-context refresh and the optional conversation-memory reset).
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Dict, Union

logger = logging.getLogger(__name__)

Job = Callable[[], Union[Awaitable[None], None]]


async def startup(task_fn: Job, interval: float) -> asyncio.Task:
    """
    Schedule ``task_fn`` to run periodically every ``interval`` seconds.

    The first run happens one interval after scheduling. Exceptions raised by
    the job are logged and do not stop later runs.

    Returns the created :class:`asyncio.Task` handle.
    """

    async def _periodic() -> None:
        await asyncio.sleep(interval)
        while True:
            try:
                result = task_fn()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # pragma: no cover - best effort logging
                logger.error("Maintenance cycle failed: %s", exc)
            await asyncio.sleep(interval)

    return asyncio.create_task(_periodic())


async def shutdown(task: asyncio.Task | None) -> None:
    """Cancel a task started with :func:`startup`; tolerant of ``None``."""

    if not task:
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:  # pragma: no cover - normal cancellation
        pass


class Scheduler:
    """Registry of named periodic jobs."""

    def __init__(self) -> None:
        self._tasks: Dict[str, asyncio.Task] = {}

    async def start(self, name: str, task_fn: Job, interval: float) -> asyncio.Task | None:
        """Start ``name`` unless it is already running; ``interval <= 0`` disables it."""

        if interval <= 0:
            logger.info("Job %s disabled (interval=%s)", name, interval)
            return None
        task = self._tasks.get(name)
        if task and not task.done():
            return task
        logger.info("Starting job %s (interval=%ss)", name, interval)
        self._tasks[name] = await startup(task_fn, interval)
        return self._tasks[name]

    async def stop(self) -> None:
        """Cancel every running job."""

        tasks, self._tasks = self._tasks, {}
        for task in tasks.values():
            await shutdown(task)

    def running(self) -> list[str]:
        return [name for name, task in self._tasks.items() if not task.done()]


__all__ = ["startup", "shutdown", "Scheduler"]
