"""Tests for the RobotClient HTTP client."""

from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import parse_qs

import httpx
import pytest

from ftcsync.remote.client import RemoteError, RobotClient
from ftcsync.remote.cookies import FileCookieStore


def _client(handler, **kwargs) -> RobotClient:
    return RobotClient(address="10.0.0.2:8080", transport=httpx.MockTransport(handler), **kwargs)


class TestRobotClientInit:
    def test_defaults(self) -> None:
        client = RobotClient()
        assert client._base_url == "http://192.168.49.1:8080"
        assert client.remote_directory == "/org/firstinspires/ftc/teamcode/"
        assert client._timeout == 5.0

    @pytest.mark.asyncio
    async def test_request_before_connect_raises(self) -> None:
        with pytest.raises(RemoteError, match="Not connected"):
            await RobotClient().list_files()


class TestRobotClientRequests:
    @pytest.mark.asyncio
    async def test_ping_posts_name(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="pong")

        async with _client(handler) as client:
            resp = await client.ping()

        assert resp.text == "pong"
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/ping"
        assert parse_qs(seen[0].content.decode()) == {"name": ["ftc-sync/ping"]}

    @pytest.mark.asyncio
    async def test_list_files_filters_tree(self) -> None:
        tree = {
            "src": [
                "/org/",
                "/org/firstinspires/ftc/teamcode/",
                "/org/firstinspires/ftc/teamcode/Auto.java",
                "/org/firstinspires/ftc/teamcode/drive/TeleOp.java",
                "/org/firstinspires/ftc/robotcontroller/Other.java",
            ]
        }

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/java/file/tree"
            return httpx.Response(200, json=tree)

        async with _client(handler) as client:
            files = await client.list_files()

        assert files == ["Auto.java", "drive/TeleOp.java"]

    @pytest.mark.asyncio
    async def test_list_files_malformed(self) -> None:
        async with _client(lambda request: httpx.Response(200, json={"nope": []})) as client:
            with pytest.raises(RemoteError, match="Malformed file tree"):
                await client.list_files()

    @pytest.mark.asyncio
    async def test_fetch_file_uses_source_path(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/java/file/get"
            assert request.url.params["f"] == "/src/org/firstinspires/ftc/teamcode/Auto.java"
            return httpx.Response(200, content=b"class Auto {}")

        async with _client(handler) as client:
            assert await client.fetch_file("Auto.java") == b"class Auto {}"

    @pytest.mark.asyncio
    async def test_push_file_posts_form_data(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        async with _client(handler, remote_directory="/team/") as client:
            await client.push_file("Auto.java", "class Auto {}")

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/java/file/save"
        assert request.url.params["f"] == "/src/team/Auto.java"
        assert parse_qs(request.content.decode()) == {"data": ["class Auto {}"]}

    @pytest.mark.asyncio
    async def test_wait_for_build_returns_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/java/build/wait"
            assert request.extensions["timeout"] == {"connect": None, "read": None, "write": None, "pool": None}
            return httpx.Response(200, content=b"")

        async with _client(handler) as client:
            assert await client.wait_for_build() == b""

    @pytest.mark.asyncio
    async def test_error_status_wrapped(self) -> None:
        async with _client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(RemoteError) as info:
                await client.wait_for_build()
        assert info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host")

        async with _client(handler) as client:
            with pytest.raises(RemoteError, match="no route to host") as info:
                await client.ping()
        assert info.value.status_code is None


class TestRobotClientCookies:
    @pytest.mark.asyncio
    async def test_response_cookies_persisted_and_reused(self, tmp_path: Path) -> None:
        store = FileCookieStore(tmp_path / ".cookies")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, headers={"Set-Cookie": "JSESSIONID=abc123; Path=/"})

        async with _client(handler, cookie_store=store) as client:
            await client.ping()

        saved = json.loads(store.path.read_text())
        assert [c["name"] for c in saved] == ["JSESSIONID"]

        async with _client(handler, cookie_store=store) as client:
            await client.ping()
        assert "JSESSIONID=abc123" in seen[1].headers["cookie"]
