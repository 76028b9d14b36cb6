"""Domain models for ftcsync.

This package contains the core data structures used by the REPL.
Value objects use Pydantic v2 for validation and serialization.
"""

from ftcsync.domain.models import (
    BUILD_NAMESPACE,
    Command,
    CommandKind,
    LineBuffer,
    ProtocolMessage,
    PushedEvent,
)

__all__ = [
    "BUILD_NAMESPACE",
    "Command",
    "CommandKind",
    "LineBuffer",
    "ProtocolMessage",
    "PushedEvent",
]
