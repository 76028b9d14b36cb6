"""Duplex message connection to the robot's event bus.

Public API:
    DuplexConnection -- Abstract base class
    DuplexConnectionError -- Raised on dial, send or receive failure
    WebSocketConnection -- aiohttp websocket backend
"""

from ftcsync.connection.base import DuplexConnection, DuplexConnectionError

__all__ = ["DuplexConnection", "DuplexConnectionError", "WebSocketConnection"]


def __getattr__(name: str) -> type:
    """Lazy import for the backend that requires aiohttp."""
    if name == "WebSocketConnection":
        from ftcsync.connection.websocket_backend import WebSocketConnection
        return WebSocketConnection
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
