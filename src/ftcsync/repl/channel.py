"""Bounded event queue feeding the REPL display.

Any number of producers (the push-event listener and in-flight build
watchers) publish display lines; the session loop is the only consumer.
"""

from __future__ import annotations

import asyncio

from ftcsync.domain.models import PushedEvent


class EventChannel:
    """Ordered multi-producer, single-consumer queue of ``PushedEvent``."""

    def __init__(self, capacity: int = 10) -> None:
        self._queue: asyncio.Queue[PushedEvent] = asyncio.Queue(maxsize=capacity)

    async def publish(self, text: str, fatal: bool = False) -> None:
        """Queue a line, waiting for a free slot if the channel is full."""
        await self._queue.put(PushedEvent(text=text, fatal=fatal))

    async def receive(self, timeout: float | None = None) -> PushedEvent | None:
        """Return the next event, or None if ``timeout`` elapses first."""
        if timeout is None:
            return await self._queue.get()
        try:
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
