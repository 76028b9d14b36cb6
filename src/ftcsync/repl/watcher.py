"""Long-poll for build completion after ``build`` is issued."""

from __future__ import annotations

import logging
from typing import Protocol

from ftcsync.repl.channel import EventChannel

logger = logging.getLogger(__name__)

BUILD_OK_NO_OUTPUT = "Build succeeded with no output."


class BuildStatusSource(Protocol):
    async def wait_for_build(self) -> bytes: ...


class BuildWatcher:
    """Waits for one build to finish and publishes exactly one line."""

    def __init__(self, client: BuildStatusSource, channel: EventChannel) -> None:
        self._client = client
        self._channel = channel

    async def run(self) -> None:
        try:
            body = await self._client.wait_for_build()
        except Exception as e:
            logger.info("Build wait failed: %s", e)
            await self._channel.publish(f"Error waiting for build: {e}")
            return

        if not body:
            await self._channel.publish(BUILD_OK_NO_OUTPUT)
        else:
            await self._channel.publish("Build result:\n" + body.decode("utf-8", errors="replace"))
