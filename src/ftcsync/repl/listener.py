"""Background task that surfaces pushed build-system events."""

from __future__ import annotations

import json
import logging
from typing import Any

from ftcsync.connection.base import DuplexConnection
from ftcsync.domain.models import BUILD_NAMESPACE
from ftcsync.repl.channel import EventChannel

logger = logging.getLogger(__name__)


def format_event(message: dict[str, Any], namespace: str = BUILD_NAMESPACE) -> str | None:
    """Render a pushed message as a display line.

    Returns None for messages outside ``namespace`` or without a string
    ``type``.
    """
    if message.get("namespace") != namespace:
        return None
    msg_type = message.get("type")
    if not isinstance(msg_type, str):
        return None
    payload = message.get("payload", "")
    if not isinstance(payload, str):
        payload = json.dumps(payload, separators=(",", ":"))
    return f"[{namespace}] {msg_type}: {payload}"


class PushEventListener:
    """Reads the duplex connection and publishes matching events.

    Runs until the connection fails, then publishes a single fatal line so
    the session knows to shut down.
    """

    def __init__(
        self,
        connection: DuplexConnection,
        channel: EventChannel,
        namespace: str = BUILD_NAMESPACE,
    ) -> None:
        self._connection = connection
        self._channel = channel
        self._namespace = namespace

    async def run(self) -> None:
        while True:
            try:
                message = await self._connection.receive()
            except Exception as e:
                logger.info("Event listener stopped: %s", e)
                await self._channel.publish(f"Connection error: {e}", fatal=True)
                return

            line = format_event(message, self._namespace)
            if line is None:
                logger.debug("Ignoring message: %s", message)
                continue
            await self._channel.publish(line)
