"""Websocket duplex connection backend.

Connects to the robot controller's event websocket (a separate port from
the main HTTP server) and exchanges JSON text frames.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from ftcsync.connection.base import DuplexConnection, DuplexConnectionError
from ftcsync.domain.models import ProtocolMessage

logger = logging.getLogger(__name__)

_CLOSED_TYPES = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)


class WebSocketConnection(DuplexConnection):
    """A ``DuplexConnection`` over an aiohttp client websocket."""

    def __init__(self, url: str = "ws://192.168.49.1:8081", connect_timeout: float = 10.0) -> None:
        self._url = url
        self._connect_timeout = connect_timeout
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    async def connect(self) -> None:
        """Dial the websocket."""
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=None, connect=self._connect_timeout),
        )
        try:
            self._ws = await self._session.ws_connect(self._url)
            logger.info("Connected to %s", self._url)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await self._session.close()
            self._session = None
            raise DuplexConnectionError(f"dial {self._url}: {e}", url=self._url) from e

    async def close(self) -> None:
        """Close the websocket and its client session."""
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.info("Disconnected from %s", self._url)

    async def send(self, message: ProtocolMessage) -> None:
        if self._ws is None:
            raise DuplexConnectionError("Not connected", url=self._url)
        try:
            await self._ws.send_json(message.model_dump())
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
            raise DuplexConnectionError(f"write json: {e}", url=self._url) from e
        logger.debug("Sent %s/%s", message.namespace, message.type)

    async def receive(self) -> dict[str, Any]:
        if self._ws is None:
            raise DuplexConnectionError("Not connected", url=self._url)
        msg = await self._ws.receive()

        if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
            try:
                data = json.loads(msg.data)
            except ValueError as e:
                raise DuplexConnectionError(f"decode message: {e}", url=self._url) from e
            if not isinstance(data, dict):
                raise DuplexConnectionError(
                    f"decode message: expected JSON object, got {type(data).__name__}",
                    url=self._url,
                )
            return data

        if msg.type == aiohttp.WSMsgType.ERROR:
            raise DuplexConnectionError(f"read: {self._ws.exception()}", url=self._url)
        if msg.type in _CLOSED_TYPES:
            raise DuplexConnectionError("connection closed by remote", url=self._url)
        raise DuplexConnectionError(f"unexpected frame type {msg.type!r}", url=self._url)
