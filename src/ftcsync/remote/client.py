"""HTTP client for the robot's OnBotJava API.

Wraps the one-shot calls used by the file commands and the long-poll the
REPL uses to wait for a build to finish.
"""

from __future__ import annotations

import logging

import httpx

from ftcsync.remote.cookies import FileCookieStore

logger = logging.getLogger(__name__)


class RobotClient:
    """Async client for the OnBotJava HTTP endpoints.

    Usage::

        async with RobotClient("192.168.49.1:8080") as client:
            for name in await client.list_files():
                print(name)
    """

    def __init__(
        self,
        address: str = "192.168.49.1:8080",
        remote_directory: str = "/org/firstinspires/ftc/teamcode/",
        timeout: float = 5.0,
        cookie_store: FileCookieStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = f"http://{address}".rstrip("/")
        self._remote_directory = remote_directory
        self._timeout = timeout
        self._cookie_store = cookie_store
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def remote_directory(self) -> str:
        return self._remote_directory

    async def connect(self) -> None:
        """Create the HTTP client, seeded with any stored cookies."""
        cookies = self._cookie_store.load() if self._cookie_store else None
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            cookies=cookies,
            transport=self._transport,
        )
        logger.debug("HTTP client ready for %s", self._base_url)

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> RobotClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()

    async def ping(self, name: str = "ftc-sync/ping") -> httpx.Response:
        """Announce ourselves so the robot keeps us in its connected-devices list."""
        return await self._request("POST", "/ping", data={"name": name})

    async def list_files(self) -> list[str]:
        """List source files under the remote directory, relative to it."""
        resp = await self._request("GET", "/java/file/tree")
        try:
            sources = resp.json()["src"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteError(f"Malformed file tree: {e}", status_code=resp.status_code) from e

        files = []
        for entry in sources:
            if entry.endswith("/"):
                continue
            if entry.startswith(self._remote_directory):
                files.append(entry[len(self._remote_directory):])
        logger.debug("Got tree: %s", files)
        return files

    async def fetch_file(self, name: str) -> bytes:
        resp = await self._request("GET", "/java/file/get", params={"f": self._source_path(name)})
        return resp.content

    async def push_file(self, name: str, contents: str) -> httpx.Response:
        return await self._request(
            "POST",
            "/java/file/save",
            params={"f": self._source_path(name)},
            data={"data": contents},
        )

    async def wait_for_build(self) -> bytes:
        """Block until the robot finishes a build; returns the build output.

        This is a long-poll, so the configured timeout does not apply.
        """
        resp = await self._request("GET", "/java/build/wait", timeout=None)
        return resp.content

    def _source_path(self, name: str) -> str:
        return f"/src{self._remote_directory}{name}"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if self._client is None:
            raise RemoteError(f"Not connected to {self._base_url}")
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteError(
                f"{method} {path}: unexpected status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path}: {e}") from e
        finally:
            if self._cookie_store is not None and self._client is not None:
                self._cookie_store.save(self._client.cookies)
        return resp


class RemoteError(Exception):
    """Raised when a request to the robot fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
