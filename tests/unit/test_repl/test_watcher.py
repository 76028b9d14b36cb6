"""Tests for the BuildWatcher."""

from __future__ import annotations

import pytest

from ftcsync.remote.client import RemoteError
from ftcsync.repl.channel import EventChannel
from ftcsync.repl.watcher import BUILD_OK_NO_OUTPUT, BuildWatcher

from tests.fakes import FakeBuildClient


class TestBuildWatcher:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "result, expected",
        [
            (b"", BUILD_OK_NO_OUTPUT),
            (b"Foo.java:3: error: ';' expected", "Build result:\nFoo.java:3: error: ';' expected"),
            (RemoteError("GET /java/build/wait: unexpected status 500", status_code=500),
             "Error waiting for build: GET /java/build/wait: unexpected status 500"),
        ],
    )
    async def test_publishes_exactly_one_line(self, result: bytes | Exception, expected: str) -> None:
        channel = EventChannel()
        client = FakeBuildClient(result)

        await BuildWatcher(client, channel).run()

        event = await channel.receive(timeout=0.1)
        assert event is not None
        assert event.text == expected
        assert event.fatal is False
        assert await channel.receive(timeout=0.01) is None
        assert client.calls == 1

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self) -> None:
        channel = EventChannel()
        await BuildWatcher(FakeBuildClient(b"bad \xff byte"), channel).run()
        event = await channel.receive(timeout=0.1)
        assert event is not None
        assert event.text == "Build result:\nbad � byte"
