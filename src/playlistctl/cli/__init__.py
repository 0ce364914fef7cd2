"""
CLI commands for playlistctl.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from playlistctl import __version__
from playlistctl.cli.publish import publish_command
from playlistctl.logging import configure_logging

__all__ = ["build_parser", "main", "publish_command"]

LOG_FORMATS = {"auto": None, "json": True, "console": False}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playlistctl",
        description="Provision and publish signage playlists",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    publish_parser = subparsers.add_parser(
        "publish",
        help="Upload media, recreate the playlist, attach, schedule and publish it",
    )
    publish_parser.add_argument(
        "media_path",
        nargs="?",
        default="sample.jpg",
        help="Media file to reuse or upload (default: sample.jpg)",
    )
    publish_parser.add_argument("--playlist-name", help="Playlist name (default: DEMO_PLAYLIST_NAME)")
    publish_parser.add_argument(
        "--poll-delay",
        type=float,
        help="Seconds to wait before polling the POP overview (0 disables the wait)",
    )
    publish_parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip TLS certificate verification (self-signed dev certificates)",
    )
    publish_parser.add_argument("-v", "--verbose", action="store_true", help="Emit structured logs")
    publish_parser.add_argument(
        "--log-format",
        choices=sorted(LOG_FORMATS),
        default="auto",
        help="Log line format on stderr (default: console on a terminal, json otherwise)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging(
        logging.INFO if args.verbose else logging.WARNING,
        json_logs=LOG_FORMATS[args.log_format],
    )

    if args.command == "publish":
        sys.exit(
            publish_command(
                args.media_path,
                playlist_name=args.playlist_name,
                poll_delay=args.poll_delay,
                insecure=args.insecure,
            )
        )
