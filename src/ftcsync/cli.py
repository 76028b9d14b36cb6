"""Command-line interface for ftc-sync.

Provides the file commands (ping, tree, pull, push) that talk to the
robot's OnBotJava server, and the interactive build REPL.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ftc-sync",
        description="Keep your current directory in sync with an FTC robot via the OnBotJava API",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ftc-sync.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--address",
        default=None,
        help="Host:Port of the robot to connect to (FTC_ROBOT_ADDRESS)",
    )
    parser.add_argument(
        "--remote",
        default=None,
        help="Directory on remote system (FTC_REMOTE_DIRECTORY)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("ping", help="Check that the robot is reachable")
    subparsers.add_parser("tree", help="List source files in the remote directory")
    pull_parser = subparsers.add_parser("pull", help="Print a remote file to stdout")
    pull_parser.add_argument("file", help="File name relative to the remote directory")
    push_parser = subparsers.add_parser("push", help="Upload a file to the robot")
    push_parser.add_argument("file", help="File name relative to the remote directory")
    push_parser.add_argument(
        "source", nargs="?", default=None,
        help="Local file to upload, '-' for stdin (default: same as FILE)",
    )
    subparsers.add_parser("repl", help="Interactive build session")

    return parser.parse_args(argv)


def _make_client(settings):
    from ftcsync.remote.client import RobotClient
    from ftcsync.remote.cookies import FileCookieStore

    remote = settings.remote
    return RobotClient(
        address=remote.address,
        remote_directory=remote.remote_directory,
        timeout=remote.http_timeout,
        cookie_store=FileCookieStore(remote.cookie_file),
    )


async def _ping(settings) -> None:
    print("Pinging...", file=sys.stderr)
    async with _make_client(settings) as client:
        resp = await client.ping()
    print(f"{resp.status_code} {resp.reason_phrase}")
    print(resp.text)


async def _tree(settings) -> None:
    async with _make_client(settings) as client:
        files = await client.list_files()
    for name in files:
        print(name)


async def _pull(settings, name: str) -> None:
    async with _make_client(settings) as client:
        contents = await client.fetch_file(name)
    sys.stdout.buffer.write(contents)
    sys.stdout.flush()


async def _push(settings, name: str, source: str | None) -> None:
    if source == "-":
        contents = sys.stdin.read()
    else:
        with open(source or name, encoding="utf-8") as f:
            contents = f.read()

    async with _make_client(settings) as client:
        resp = await client.push_file(name, contents)
    logger.info("Pushed %s (%d bytes): %s", name, len(contents), resp.status_code)
    print(f"{resp.status_code} {resp.reason_phrase}")


async def _repl(settings) -> int:
    from ftcsync.connection.websocket_backend import WebSocketConnection
    from ftcsync.repl.session import ReplSession
    from ftcsync.repl.terminal import RawTerminal, TerminalInputReader

    stdin = open(sys.stdin.fileno(), "rb", buffering=0, closefd=False)
    async with _make_client(settings) as client:
        session = ReplSession(
            connection=WebSocketConnection(settings.remote.resolved_websocket_url),
            build_client=client,
            terminal=RawTerminal(sys.stdin.fileno()),
            reader=TerminalInputReader(stdin),
            prompt=settings.repl.prompt,
            channel_capacity=settings.repl.channel_capacity,
            idle_timeout=settings.repl.idle_timeout,
        )
        return await session.run()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the ftc-sync CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from ftcsync.config.settings import load_settings
    from ftcsync.remote.client import RemoteError
    from ftcsync.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"
    if args.address:
        settings.remote.address = args.address
    if args.remote:
        settings.remote.remote_directory = args.remote

    setup_logging(settings.logging)

    try:
        if args.command == "ping":
            asyncio.run(_ping(settings))
        elif args.command == "tree":
            asyncio.run(_tree(settings))
        elif args.command == "pull":
            asyncio.run(_pull(settings, args.file))
        elif args.command == "push":
            asyncio.run(_push(settings, args.file, args.source))
        elif args.command == "repl":
            logger.info("Starting REPL against %s", settings.remote.resolved_websocket_url)
            code = asyncio.run(_repl(settings))
            if code:
                sys.exit(code)
    except (RemoteError, OSError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
