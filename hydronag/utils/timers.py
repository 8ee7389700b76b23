"""Cancellable one-shot timers on top of asyncio tasks."""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

# Receives the generation it was armed with
TimerCallback = Callable[[int], Awaitable[None]]


class OneShotTimer:
    """A single deferred callback. Arming again cancels the pending one.

    Every arm or cancel starts a new generation. A callback that has
    already woken up cannot be cancelled as a task, so it is handed its
    generation and should bail out once ``is_current`` says otherwise.
    """

    def __init__(self, name: str):
        self.name = name
        self.delay: timedelta | None = None
        self.due_at: datetime | None = None
        self.generation = 0
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        """Whether a callback is waiting to fire."""
        return self._task is not None and not self._task.done()

    def is_current(self, generation: int) -> bool:
        """Whether nothing has re-armed or cancelled the timer since generation."""
        return generation == self.generation

    def arm(
        self,
        delay: timedelta,
        callback: TimerCallback,
        due_at: datetime | None = None,
    ) -> None:
        """Schedule callback after delay, replacing any pending callback."""
        self.cancel()

        if delay < timedelta(0):
            delay = timedelta(0)

        self.delay = delay
        self.due_at = due_at
        self._task = asyncio.create_task(
            self._run(delay, callback, self.generation), name=self.name
        )

    def cancel(self) -> None:
        """Cancel the pending callback, if any, and retire its generation."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.delay = None
        self.due_at = None
        self.generation += 1

    async def _run(self, delay: timedelta, callback: TimerCallback, generation: int) -> None:
        await asyncio.sleep(delay.total_seconds())

        # Detach before running so the callback may re-arm this timer
        self._task = None
        self.delay = None
        self.due_at = None

        try:
            await callback(generation)
        except Exception as e:
            logger.error(f"Timer '{self.name}' callback failed: {e}")
