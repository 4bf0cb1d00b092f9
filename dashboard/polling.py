"""Repeating timer bound to the lifetime of its owner.

An IntervalSubscription is acquired with start() (or ``async with``) and
released with stop(). Stopping cancels the single task it owns, so an owner
that is activated and deactivated repeatedly never leaves timers behind.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class IntervalSubscription:
    """Run an async callback now and then every ``interval_seconds``."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[object]],
        interval_seconds: float,
        run_immediately: bool = True
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.run_immediately = run_immediately
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the timer on the running event loop; no-op if already active."""
        if self.active:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(f"Interval subscription started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel the timer and wait for it to finish. Safe to call twice."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Interval subscription stopped")

    async def _run(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval_seconds)
        while True:
            try:
                await self.callback()
            except Exception as e:
                logger.error(f"Scheduled callback failed: {e}")
            await asyncio.sleep(self.interval_seconds)

    async def __aenter__(self) -> "IntervalSubscription":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
