"""Raw terminal mode and the keystroke reader thread.

``RawTerminal`` switches the controlling terminal into raw mode so every
keystroke reaches the REPL immediately. ``TerminalInputReader`` reads
those keystrokes one byte at a time on a daemon thread and hands them to
the event loop through a single-slot queue.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import sys
import termios
import threading
import tty
from typing import BinaryIO

logger = logging.getLogger(__name__)


class TerminalError(Exception):
    """Raised when the terminal cannot be switched into raw mode."""


class RawTerminal:
    """Saves the terminal attributes, enters raw mode, restores once.

    Usage::

        terminal = RawTerminal()
        terminal.acquire()
        try:
            ...
        finally:
            terminal.release()
    """

    def __init__(self, fd: int | None = None) -> None:
        self._fd = fd if fd is not None else sys.stdin.fileno()
        self._saved: list | None = None

    @property
    def is_raw(self) -> bool:
        return self._saved is not None

    def acquire(self) -> None:
        try:
            self._saved = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        except (termios.error, OSError) as e:
            self._saved = None
            raise TerminalError(f"failed to set terminal to raw mode: {e}") from e
        logger.debug("Terminal fd %d in raw mode", self._fd)

    def release(self) -> None:
        """Restore the saved attributes. Later calls do nothing."""
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        termios.tcsetattr(self._fd, termios.TCSADRAIN, saved)
        logger.debug("Terminal fd %d restored", self._fd)


class TerminalInputReader:
    """Forwards bytes from ``source`` into an asyncio queue.

    The reader thread blocks in ``read(1)`` and then blocks again until the
    loop has taken the previous byte, so it never runs ahead of the loop
    by more than one keystroke. It stops quietly on EOF or a read error;
    ``finished`` tells the session there is nothing more to come.
    """

    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self._finished = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def start(self, handoff: asyncio.Queue[int], loop: asyncio.AbstractEventLoop) -> None:
        self._thread = threading.Thread(
            target=self._run,
            args=(handoff, loop),
            name="ftcsync-stdin",
            daemon=True,
        )
        self._thread.start()

    def _run(self, handoff: asyncio.Queue[int], loop: asyncio.AbstractEventLoop) -> None:
        try:
            while True:
                try:
                    data = self._source.read(1)
                except (OSError, ValueError) as e:
                    logger.debug("Input read stopped: %s", e)
                    return
                if not data:
                    return
                future = asyncio.run_coroutine_threadsafe(handoff.put(data[0]), loop)
                future.result()
        except (RuntimeError, concurrent.futures.CancelledError):
            # event loop closed or shutting down
            return
        finally:
            self._finished.set()
