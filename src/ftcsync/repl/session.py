"""The interactive REPL session loop.

The session owns the raw terminal, the duplex connection and the line
being typed. It waits on whichever of {keystroke, pushed event, idle tick}
is ready first and is the only code that writes to the terminal, so
events printed from background producers never corrupt a half-typed line.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Protocol, TextIO

from ftcsync.connection.base import DuplexConnection, DuplexConnectionError
from ftcsync.domain.models import LineBuffer, ProtocolMessage, PushedEvent
from ftcsync.repl.channel import EventChannel
from ftcsync.repl.dispatcher import CommandDispatcher, parse_command
from ftcsync.repl.listener import PushEventListener
from ftcsync.repl.terminal import TerminalError
from ftcsync.repl.watcher import BuildStatusSource

logger = logging.getLogger(__name__)

CTRL_C = 0x03
CTRL_D = 0x04
BACKSPACE = 0x08
DELETE = 0x7F
ESCAPE = 0x1B
CLEAR_LINE = "\r\x1b[K"


class TerminalMode(Protocol):
    def acquire(self) -> None: ...
    def release(self) -> None: ...


class InputReader(Protocol):
    @property
    def finished(self) -> bool: ...
    def start(self, handoff: asyncio.Queue[int], loop: asyncio.AbstractEventLoop) -> None: ...


class ReplSession:
    """Runs one REPL session from connect to cleanup.

    Lifecycle: Connecting (raw mode, dial, subscribe) -> Active (event
    loop) -> Closing. Closing always runs, releasing the connection and
    the terminal exactly once.
    """

    def __init__(
        self,
        connection: DuplexConnection,
        build_client: BuildStatusSource,
        terminal: TerminalMode,
        reader: InputReader,
        output: TextIO | None = None,
        prompt: str = "ftc> ",
        channel_capacity: int = 10,
        idle_timeout: float = 0.05,
    ) -> None:
        self._connection = connection
        self._terminal = terminal
        self._reader = reader
        self._output = output if output is not None else sys.stdout
        self._prompt = prompt
        self._idle_timeout = idle_timeout
        self._buffer = LineBuffer()
        self._channel = EventChannel(channel_capacity)
        self._dispatcher = CommandDispatcher(connection, build_client, self._channel, self._write)
        self._escape_state = 0

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def channel(self) -> EventChannel:
        return self._channel

    async def run(self) -> int:
        """Run the session. Returns a process exit code."""
        raw = False
        opened = False
        listener_task: asyncio.Task[None] | None = None
        try:
            try:
                self._terminal.acquire()
            except TerminalError as e:
                logger.error("%s", e)
                self._write(f"Error: {e}\n")
                return 1
            raw = True

            self._write("Connecting...\r\n")
            try:
                await self._connection.connect()
                opened = True
                await self._connection.send(ProtocolMessage.subscribe())
            except DuplexConnectionError as e:
                logger.error("Connection failed: %s", e)
                self._write(f"Error: {e}\r\n")
                return 1

            listener = PushEventListener(self._connection, self._channel)
            listener_task = asyncio.create_task(listener.run())
            return await self._active()
        finally:
            try:
                if listener_task is not None:
                    listener_task.cancel()
                    try:
                        await listener_task
                    except asyncio.CancelledError:
                        pass
                if opened:
                    try:
                        await self._connection.close()
                    except DuplexConnectionError as e:
                        logger.warning("Error closing connection: %s", e)
            finally:
                if raw:
                    self._terminal.release()
                self._write("Goodbye!\n")

    async def _active(self) -> int:
        handoff: asyncio.Queue[int] = asyncio.Queue(maxsize=1)
        self._reader.start(handoff, asyncio.get_running_loop())

        self._write("Connected! Subscribed to ONBOTJAVA events.\r\n")
        self._write("Type 'build' to trigger a build, 'exit' or 'quit' to leave the REPL.\r\n")
        self._write(self._prompt)

        byte_task = asyncio.create_task(handoff.get())
        event_task = asyncio.create_task(self._channel.receive())
        try:
            while True:
                done, _ = await asyncio.wait(
                    {byte_task, event_task},
                    timeout=self._idle_timeout,
                    return_when=asyncio.FIRST_COMPLETED,
                )

                if event_task in done:
                    event = event_task.result()
                    self._show_event(event)
                    if event.fatal:
                        return 1
                    event_task = asyncio.create_task(self._channel.receive())

                if byte_task in done:
                    if not await self.handle_byte(byte_task.result()):
                        return 0
                    byte_task = asyncio.create_task(handoff.get())

                if not done and self._reader.finished and handoff.empty():
                    logger.debug("Input closed, leaving REPL")
                    self._write("\r\n")
                    return 0
        finally:
            byte_task.cancel()
            event_task.cancel()

    async def handle_byte(self, byte: int) -> bool:
        """Apply one keystroke. Returns False when the session should end."""
        if self._escape_state and self._consume_escape(byte):
            return True

        if byte in (0x0D, 0x0A):
            return await self._submit()
        if byte in (DELETE, BACKSPACE):
            if self._buffer.backspace():
                self._redraw()
            return True
        if byte == CTRL_C:
            self._write("\r\n")
            return False
        if byte == CTRL_D and not len(self._buffer):
            self._write("\r\n")
            return False
        if byte == ESCAPE:
            self._escape_state = 1
            return True
        if 32 <= byte < 127:
            char = chr(byte)
            self._buffer.append(char)
            self._write(char)
        return True

    def _consume_escape(self, byte: int) -> bool:
        """Advance the escape parser. Returns True if ``byte`` was swallowed."""
        # ESC [ params final, or ESC O final
        if self._escape_state == 1:
            if byte in (ord("["), ord("O")):
                self._escape_state = 2
                return True
            self._escape_state = 0
            return False

        if byte < 0x20:
            self._escape_state = 0
            return False
        if 0x40 <= byte <= 0x7E:
            self._escape_state = 0
        return True

    async def _submit(self) -> bool:
        self._write("\r\n")
        command = parse_command(self._buffer.take())
        if command is None:
            self._write(self._prompt)
            return True

        if not await self._dispatcher.dispatch(command):
            return False
        self._write(self._prompt)
        return True

    def _show_event(self, event: PushedEvent) -> None:
        text = event.text.replace("\r\n", "\n").replace("\n", "\r\n")
        self._write(CLEAR_LINE + text + "\r\n")
        if not event.fatal:
            self._write(self._prompt + self._buffer.text)

    def _redraw(self) -> None:
        self._write(CLEAR_LINE + self._prompt + self._buffer.text)

    def _write(self, text: str) -> None:
        self._output.write(text)
        self._output.flush()
