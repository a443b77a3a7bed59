"""
Debounce Timer

Delays an action until input has been quiet for a fixed interval. Every call
to schedule() cancels the previously scheduled timer, so only the trailing
edge of a burst of calls fires.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Trailing-edge debounce timer backed by an asyncio task.

    The timer handle is private to this object; callers only schedule and
    cancel through it.
    """

    def __init__(self, delay: float = 0.3):
        """
        Initialize a debounce timer.

        Args:
            delay: Time in seconds to wait after the last schedule() before firing
        """
        self.delay = delay
        self.fire_count = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        """True while a scheduled timer has neither fired nor been cancelled."""
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        """
        (Re)start the timer; callback(*args) runs once it elapses.

        Must be called from inside a running event loop.
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._delayed(callback, args))

    def cancel(self) -> bool:
        """
        Cancel the scheduled timer.

        Returns:
            True if a timer was pending
        """
        if self.pending:
            self._task.cancel()
            return True
        return False

    async def _delayed(self, callback: Callable[..., Any], args: tuple) -> None:
        await asyncio.sleep(self.delay)
        self.fire_count += 1
        logger.debug(f"Debounce timer fired after {self.delay}s")
        callback(*args)
