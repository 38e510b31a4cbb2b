"""
Background action scheduler.

Simulated provisioning actions (OS install, power transitions) run as
asyncio tasks that the initiating request does not await. The scheduler
keeps a reference to every pending task so they are not garbage collected
mid-flight and so tests or shutdown can wait for them with join().
"""

import asyncio
import logging
from typing import Awaitable, Callable, Set

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[None]]


class ActionScheduler:
    """Tracked fire-and-forget task launcher"""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of actions not finished yet"""
        return len(self._tasks)

    def start(self, action: Action, name: str = "action") -> asyncio.Task:
        """
        Launch an action in the background.

        Must be called from a running event loop.

        Args:
            action: Zero-argument coroutine function performing the action
            name: Task name used in logs

        Returns:
            The scheduled task
        """
        task = asyncio.get_running_loop().create_task(self._run(action, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"Scheduled background action '{name}' ({len(self._tasks)} pending)")
        return task

    async def _run(self, action: Action, name: str) -> None:
        # Nobody awaits the task, so a failure can only be reported in the log
        try:
            await action()
            logger.debug(f"Background action '{name}' finished")
        except Exception as e:
            logger.error(f"Background action '{name}' failed: {e}", exc_info=True)

    async def join(self) -> None:
        """Wait until every pending action, including chained ones, is done"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
