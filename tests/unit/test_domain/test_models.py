"""Tests for the ftcsync domain models."""

from __future__ import annotations

import pydantic
import pytest

from ftcsync.domain.models import (
    Command,
    CommandKind,
    LineBuffer,
    ProtocolMessage,
    PushedEvent,
)


class TestProtocolMessage:
    def test_subscribe_message(self) -> None:
        assert ProtocolMessage.subscribe().model_dump() == {
            "namespace": "system",
            "type": "subscribeToNamespace",
            "payload": "ONBOTJAVA",
        }

    def test_build_launch_message(self) -> None:
        assert ProtocolMessage.build_launch().model_dump() == {
            "namespace": "ONBOTJAVA",
            "type": "build:launch",
            "payload": "",
        }

    def test_frozen(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ProtocolMessage.build_launch().payload = "x"  # type: ignore[misc]


class TestPushedEvent:
    def test_not_fatal_by_default(self) -> None:
        assert PushedEvent(text="hi").fatal is False


class TestCommand:
    @pytest.mark.parametrize(
        "kind, ends",
        [
            (CommandKind.BUILD, False),
            (CommandKind.HELP, False),
            (CommandKind.EXIT, True),
            (CommandKind.QUIT, True),
            (CommandKind.UNKNOWN, False),
        ],
    )
    def test_ends_session(self, kind: CommandKind, ends: bool) -> None:
        assert Command(kind=kind).ends_session is ends


class TestLineBuffer:
    def test_append_and_take(self) -> None:
        buffer = LineBuffer()
        for char in "build":
            buffer.append(char)
        assert buffer.text == "build"
        assert buffer.take() == "build"
        assert buffer.text == ""
        assert len(buffer) == 0

    def test_backspace(self) -> None:
        buffer = LineBuffer()
        buffer.append("a")
        assert buffer.backspace() is True
        assert buffer.backspace() is False
        assert buffer.text == ""
