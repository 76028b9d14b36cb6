"""Interactive REPL for driving OnBotJava builds.

Public API:
    ReplSession -- The session loop
    EventChannel -- Queue of display lines from background producers
    CommandDispatcher -- Carries out REPL commands
    RawTerminal -- Raw terminal mode handle
    TerminalInputReader -- Keystroke reader thread
"""

from ftcsync.repl.channel import EventChannel
from ftcsync.repl.dispatcher import CommandDispatcher, parse_command
from ftcsync.repl.session import ReplSession
from ftcsync.repl.terminal import RawTerminal, TerminalError, TerminalInputReader

__all__ = [
    "CommandDispatcher",
    "EventChannel",
    "RawTerminal",
    "ReplSession",
    "TerminalError",
    "TerminalInputReader",
    "parse_command",
]
