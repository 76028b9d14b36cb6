"""HTTP access to the robot's OnBotJava server.

Public API:
    RobotClient -- httpx client for the file and build endpoints
    RemoteError -- Raised when a request fails
    FileCookieStore -- Cookie persistence between invocations
"""

from ftcsync.remote.client import RemoteError, RobotClient
from ftcsync.remote.cookies import FileCookieStore

__all__ = ["FileCookieStore", "RemoteError", "RobotClient"]
