"""Shared test fixtures for the ftcsync test suite.

Provides a scripted duplex connection, a terminal handle that counts
acquire/release calls, a build status source, and a pipe-backed
keystroke reader, plus a factory for sessions wired to them.
"""

from __future__ import annotations

import asyncio
import io
from typing import Any, Callable

import pytest

from ftcsync.repl.session import ReplSession
from ftcsync.repl.terminal import TerminalInputReader
from tests.fakes import FakeBuildClient, FakeConnection, FakeTerminal, PipeInput


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def build_client() -> FakeBuildClient:
    return FakeBuildClient()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def pipe_input():
    pipe = PipeInput()
    yield pipe
    pipe.close()


@pytest.fixture
def make_session(
    connection: FakeConnection,
    terminal: FakeTerminal,
    build_client: FakeBuildClient,
    output: io.StringIO,
    pipe_input: PipeInput,
) -> Callable[..., ReplSession]:
    """Build a session wired to the default fakes; keyword args override."""

    def _make(**overrides: Any) -> ReplSession:
        kwargs: dict[str, Any] = {
            "connection": connection,
            "build_client": build_client,
            "terminal": terminal,
            "reader": TerminalInputReader(pipe_input.source),
            "output": output,
            "idle_timeout": 0.01,
        }
        kwargs.update(overrides)
        return ReplSession(**kwargs)

    return _make


@pytest.fixture
def wait_until() -> Callable[..., Any]:
    """Poll a predicate from async tests until it holds."""

    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.01)

    return _wait
