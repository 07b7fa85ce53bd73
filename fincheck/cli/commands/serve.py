"""
Serve command for the Fincheck CLI.

Usage:
    fincheck serve [--host HOST] [--port PORT] [--no-explorer]
"""

import argparse
import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fincheck.cli.main import CLIContext


def register(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    """
    Register the serve command with the parser.

    Args:
        subparsers: Subparsers action to add command to.
    """
    parser = subparsers.add_parser(
        "serve",
        help="Run the API server",
        description="Bootstrap the Fincheck API and serve until interrupted.",
    )
    parser.add_argument(
        "--host",
        metavar="HOST",
        help="Host address to bind (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        metavar="PORT",
        help="Port to listen on (overrides config and PORT)",
    )
    parser.add_argument(
        "--no-explorer",
        action="store_true",
        help="Do not mount the descriptor explorer UI",
    )
    parser.set_defaults(func=run_serve)


def run_serve(args: argparse.Namespace, ctx: "CLIContext") -> int:
    """
    Execute the serve command.

    Args:
        args: Parsed command-line arguments.
        ctx: CLI context.

    Returns:
        Exit code.
    """
    from fincheck.cli.main import EXIT_SUCCESS
    from fincheck.server.app import run_server

    config = ctx.config
    if args.host:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    if args.no_explorer:
        config.docs.explorer = False

    logger = ctx.setup_logging()
    logger.info(f"Starting Fincheck API on {config.server.host}:{config.server.port}")

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")

    return EXIT_SUCCESS
