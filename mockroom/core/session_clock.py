"""
Session Clock for MockRoom

Counts elapsed interview seconds for the on-screen timer.
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

TickCallback = Callable[[int], Awaitable[None]]


def format_elapsed(seconds: int) -> str:
    """Format elapsed seconds as mm:ss (minutes are not wrapped at 60)."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class SessionClock:
    """
    One tick per interval while a session is open.
    
    start() and stop() are idempotent; a stopped clock keeps its count.
    """
    
    def __init__(self, interval_seconds: float = 1.0):
        self.interval_seconds = interval_seconds
        self.elapsed = 0
        self._task: asyncio.Task | None = None
        self._tick_callbacks: list[TickCallback] = []
    
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
    
    def on_tick(self, callback: TickCallback) -> None:
        """Register a callback receiving the elapsed-seconds count."""
        self._tick_callbacks.append(callback)
    
    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.debug("Session clock started")
    
    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        if task is not asyncio.current_task():
            await asyncio.wait([task])
        logger.debug(f"Session clock stopped at {format_elapsed(self.elapsed)}")
    
    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.elapsed += 1
            for callback in self._tick_callbacks:
                try:
                    await callback(self.elapsed)
                except Exception as e:
                    logger.error(f"Clock tick callback error: {e}")
