"""Timed resumption on the running asyncio loop."""
from __future__ import annotations

import asyncio
import logging

from price_queue.application.ports.scheduler import ScheduledCallback

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """Implements application.ports.scheduler.Scheduler.

    Each callback runs as its own task once its delay elapses, so a queue
    that keeps rescheduling itself never grows the call stack.
    """

    def __init__(self) -> None:
        self._handles: set[asyncio.TimerHandle] = set()
        self._tasks: set[asyncio.Task[None]] = set()

    def call_later(self, delay: float, callback: ScheduledCallback) -> None:
        loop = asyncio.get_running_loop()
        self._handles = {h for h in self._handles if not h.cancelled() and h.when() > loop.time()}
        handle = loop.call_later(max(delay, 0), self._spawn, callback)
        self._handles.add(handle)

    def _spawn(self, callback: ScheduledCallback) -> None:
        task = asyncio.ensure_future(callback())
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Scheduled callback failed", exc_info=exc)

    async def aclose(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
