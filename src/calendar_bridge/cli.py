from __future__ import annotations

import argparse
import logging

from .logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calendar bridge MCP tools.")
    subparsers = parser.add_subparsers(dest="command")

    mcp_parser = subparsers.add_parser("mcp", help="Serve the calendar tools over MCP (default).")
    mcp_parser.add_argument("--transport", choices=("stdio", "http"), default="stdio")
    mcp_parser.add_argument("--host", default="127.0.0.1")
    mcp_parser.add_argument("--port", type=int, default=8765)

    api_parser = subparsers.add_parser("api", help="Serve the calendar tools as a local HTTP API.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.getLogger(__name__).info("Calendar bridge CLI starting (%s)", args.command or "mcp")

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command in (None, "mcp"):
        from .services.mcp import run_mcp_server

        run_mcp_server(
            transport=getattr(args, "transport", "stdio"),
            host=getattr(args, "host", "127.0.0.1"),
            port=getattr(args, "port", 8765),
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
