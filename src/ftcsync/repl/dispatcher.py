"""Command parsing and dispatch for the REPL.

The dispatcher writes through the session's output callable, so the
session stays the only writer to the terminal.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ftcsync.connection.base import DuplexConnection, DuplexConnectionError
from ftcsync.domain.models import Command, CommandKind, ProtocolMessage
from ftcsync.repl.channel import EventChannel
from ftcsync.repl.watcher import BuildStatusSource, BuildWatcher

logger = logging.getLogger(__name__)

HELP_LINES = (
    "Available commands:",
    "  build - Trigger a build",
    "  help  - Show this help",
    "  exit  - Exit the REPL",
    "  quit  - Exit the REPL",
)

_KEYWORDS = {
    "build": CommandKind.BUILD,
    "help": CommandKind.HELP,
    "exit": CommandKind.EXIT,
    "quit": CommandKind.QUIT,
}


def parse_command(line: str) -> Command | None:
    """Classify a submitted line. Blank lines yield None."""
    text = line.strip()
    if not text:
        return None
    return Command(kind=_KEYWORDS.get(text, CommandKind.UNKNOWN), text=text)


class CommandDispatcher:
    """Carries out parsed commands.

    ``build`` sends the launch message and hands the wait for completion
    to a ``BuildWatcher`` task; each ``build`` gets its own watcher even
    if an earlier one is still waiting.
    """

    def __init__(
        self,
        connection: DuplexConnection,
        build_client: BuildStatusSource,
        channel: EventChannel,
        write: Callable[[str], None],
    ) -> None:
        self._connection = connection
        self._build_client = build_client
        self._channel = channel
        self._write = write
        self._watchers: set[asyncio.Task[None]] = set()

    async def dispatch(self, command: Command) -> bool:
        """Run ``command``. Returns False when the session should end."""
        if command.ends_session:
            return False

        if command.kind == CommandKind.BUILD:
            await self._build()
        elif command.kind == CommandKind.HELP:
            for line in HELP_LINES:
                self._write(line + "\r\n")
        else:
            self._write(f"Unknown command: {command.text} (type 'help' for available commands)\r\n")
        return True

    async def _build(self) -> None:
        self._write("Triggering build...\r\n")
        try:
            await self._connection.send(ProtocolMessage.build_launch())
        except DuplexConnectionError as e:
            logger.info("Build launch failed: %s", e)
            self._write(f"Error sending build command: {e}\r\n")
            return

        self._write("Build command sent! Waiting for events...\r\n")
        watcher = BuildWatcher(self._build_client, self._channel)
        task = asyncio.create_task(watcher.run())
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)
