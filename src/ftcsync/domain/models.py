"""Core domain models for the ftcsync REPL.

These models represent the data flowing through the interactive session:
protocol messages exchanged on the websocket, display-ready events queued
for the session loop, parsed user commands, and the line being edited.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

# Namespace the OnBotJava build system publishes under
BUILD_NAMESPACE = "ONBOTJAVA"
SYSTEM_NAMESPACE = "system"


# ---------------------------------------------------------------------------
# Protocol Messages
# ---------------------------------------------------------------------------


class ProtocolMessage(BaseModel):
    """A message sent to the robot over the duplex connection.

    Serialized as ``{"namespace": ..., "type": ..., "payload": ...}``.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    type: str
    payload: str = ""

    @classmethod
    def subscribe(cls, namespace: str = BUILD_NAMESPACE) -> ProtocolMessage:
        return cls(namespace=SYSTEM_NAMESPACE, type="subscribeToNamespace", payload=namespace)

    @classmethod
    def build_launch(cls) -> ProtocolMessage:
        return cls(namespace=BUILD_NAMESPACE, type="build:launch", payload="")


# ---------------------------------------------------------------------------
# Session Events
# ---------------------------------------------------------------------------


class PushedEvent(BaseModel):
    """A display-ready line produced by a background producer.

    ``fatal`` marks the last line a dead connection listener emits; the
    session ends after showing it.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    fatal: bool = False


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class CommandKind(str, enum.Enum):
    """The closed set of REPL commands."""

    BUILD = "build"
    HELP = "help"
    EXIT = "exit"
    QUIT = "quit"
    UNKNOWN = "unknown"


class Command(BaseModel):
    """A parsed REPL command. ``text`` holds the submitted line."""

    model_config = ConfigDict(frozen=True)

    kind: CommandKind
    text: str = Field(default="", description="The trimmed line as typed")

    @property
    def ends_session(self) -> bool:
        return self.kind in (CommandKind.EXIT, CommandKind.QUIT)


# ---------------------------------------------------------------------------
# Line Editing
# ---------------------------------------------------------------------------


class LineBuffer:
    """The not-yet-submitted input line.

    Only the session loop reads or writes it.
    """

    def __init__(self) -> None:
        self._chars: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def append(self, char: str) -> None:
        self._chars.append(char)

    def backspace(self) -> bool:
        """Remove the last character. Returns False when already empty."""
        if not self._chars:
            return False
        self._chars.pop()
        return True

    def take(self) -> str:
        """Return the buffered line and clear the buffer."""
        line = self.text
        self._chars.clear()
        return line
