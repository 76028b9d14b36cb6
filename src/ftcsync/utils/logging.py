"""Logging setup for ftcsync.

Log records go to stderr: stdout carries file contents for ``pull``, and
in the REPL the terminal is in raw mode, so the default level is kept at
WARNING to stay out of the way of the prompt.
"""

from __future__ import annotations

import logging
import sys

from ftcsync.config.settings import LoggingConfig

PACKAGE_LOGGER = "ftcsync"


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the ``ftcsync`` package logger and return it.

    Safe to call repeatedly: handlers installed by an earlier call are
    removed and closed before the new ones are attached.
    """
    if config is None:
        config = LoggingConfig()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(getattr(logging, config.level.upper(), logging.WARNING))
    formatter = logging.Formatter(config.format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.debug("Logging at %s to %d handler(s)", config.level, len(handlers))
    return package_logger
