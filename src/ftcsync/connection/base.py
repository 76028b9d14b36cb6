"""Abstract base class for the duplex message connection.

The REPL talks to the robot's event bus through this interface: it sends
subscription and build commands and receives pushed events. The concrete
websocket backend and the test fakes both implement it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ftcsync.domain.models import ProtocolMessage

logger = logging.getLogger(__name__)


class DuplexConnection(ABC):
    """A persistent, full-duplex channel of JSON messages.

    One task may ``receive()`` while another ``send()``s. ``close()`` must
    be safe to call more than once.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection.

        Raises:
            DuplexConnectionError: If the remote cannot be reached.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection and release its resources."""
        ...

    @abstractmethod
    async def send(self, message: ProtocolMessage) -> None:
        """Send one message.

        Raises:
            DuplexConnectionError: If the message cannot be written.
        """
        ...

    @abstractmethod
    async def receive(self) -> dict[str, Any]:
        """Wait for and decode the next message.

        Returns:
            The decoded JSON object. Its fields are whatever the server
            sent; callers must not assume ``namespace`` or ``type`` exist.

        Raises:
            DuplexConnectionError: If the connection drops or a frame
                cannot be decoded as a JSON object.
        """
        ...


class DuplexConnectionError(Exception):
    """Raised when the duplex connection fails."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url
