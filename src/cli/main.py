from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from ..protocol.console.loop import run_console
from ..protocol.http.app import create_app
from ..protocol.http.settings import ServerSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chess-rules", description="Chess rule engine views")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API (settings default from CHESS_* env vars)")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--log-level", type=str, default=None)
    serve.add_argument("--max-games", type=int, default=None)

    play = sub.add_parser("play", help="Play in the terminal")
    play.add_argument("--log-level", type=str, default="WARNING")
    return parser


def resolve_settings(args: argparse.Namespace) -> ServerSettings:
    """Environment settings with any CLI flags layered on top."""
    base = ServerSettings.from_env()
    return ServerSettings(
        host=args.host if args.host is not None else base.host,
        port=args.port if args.port is not None else base.port,
        log_level=args.log_level if args.log_level is not None else base.log_level,
        max_games=args.max_games if args.max_games is not None else base.max_games,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.command == "play":
        logging.basicConfig(level=args.log_level.upper())
        run_console()
        return
    settings = resolve_settings(args)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
