from __future__ import annotations

from typing import Awaitable, Callable, Protocol

ScheduledCallback = Callable[[], Awaitable[None]]


class Scheduler(Protocol):
    """Timed resumption of coroutine callbacks on the current event loop."""

    def call_later(self, delay: float, callback: ScheduledCallback) -> None: ...
