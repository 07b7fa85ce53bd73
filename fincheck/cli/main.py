"""
Main entry point for the Fincheck CLI.

This module provides the command-line interface for running the Fincheck
API and exporting its descriptor, using argparse for argument parsing.

Exit Codes:
    0: Success
    1: General error
    3: Configuration error
    4: Startup or listen error
"""

import argparse
import logging
import sys
from typing import Any

from fincheck import __version__
from fincheck.config.schema import LoggingConfig
from fincheck.exceptions import (
    ConfigurationError,
    FincheckError,
    ListenError,
    StartupError,
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 3
EXIT_STARTUP_ERROR = 4


def configure_logging(config: LoggingConfig, level: int | None = None) -> logging.Logger:
    """
    Configure the ``fincheck`` logger hierarchy.

    Args:
        config: Logging configuration.
        level: Explicit level overriding the configured one.

    Returns:
        The root ``fincheck`` logger.
    """
    root = logging.getLogger("fincheck")
    root.setLevel(level if level is not None else config.level.upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(config.format))
        root.addHandler(handler)

    return root


class CLIContext:
    """
    Context object that holds CLI state and configuration.

    Attributes:
        config_path: Path to the configuration file.
        verbose: Enable verbose output.
        quiet: Suppress non-essential output.
    """

    def __init__(
        self,
        config_path: str | None = None,
        verbose: bool = False,
        quiet: bool = False,
    ) -> None:
        """
        Initialize the CLI context.

        Args:
            config_path: Path to configuration file.
            verbose: Enable verbose output.
            quiet: Suppress non-essential output.
        """
        self.config_path = config_path
        self.verbose = verbose
        self.quiet = quiet
        self._config: Any = None

    @property
    def config(self) -> Any:
        """
        Load and return configuration.

        Raises:
            ConfigurationError: If configuration cannot be loaded.
        """
        if self._config is None:
            from fincheck.config.loader import ConfigLoader

            self._config = ConfigLoader().load(self.config_path)
        return self._config

    def setup_logging(self) -> logging.Logger:
        """Configure logging from the loaded configuration and CLI flags."""
        level = None
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.WARNING
        return configure_logging(self.config.logging, level)

    def print(self, message: str, error: bool = False) -> None:
        """
        Print a message to stdout or stderr.

        Args:
            message: The message to print.
            error: If True, print to stderr.
        """
        if self.quiet and not error:
            return
        output = sys.stderr if error else sys.stdout
        print(message, file=output)

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        print(f"Error: {message}", file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="fincheck",
        description="Fincheck: personal-finance HTTP API",
        epilog="Use 'fincheck <command> --help' for more information on a command.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"fincheck {__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="Path to configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        metavar="<command>",
    )

    _register_commands(subparsers)

    return parser


def _register_commands(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    """
    Register all command modules with the parser.

    Args:
        subparsers: Subparsers action to add commands to.
    """
    from fincheck.cli.commands import openapi as openapi_cmd
    from fincheck.cli.commands import serve as serve_cmd

    serve_cmd.register(subparsers)
    openapi_cmd.register(subparsers)


def run_command(
    args: argparse.Namespace,
    ctx: CLIContext,
) -> int:
    """
    Execute the selected command.

    Args:
        args: Parsed command-line arguments.
        ctx: CLI context object.

    Returns:
        Exit code.
    """
    if not hasattr(args, "func"):
        return EXIT_ERROR

    try:
        return args.func(args, ctx)
    except ConfigurationError as e:
        ctx.print_error(str(e))
        return EXIT_CONFIG_ERROR
    except (StartupError, ListenError) as e:
        ctx.print_error(str(e))
        return EXIT_STARTUP_ERROR
    except FincheckError as e:
        ctx.print_error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        ctx.print("\nOperation cancelled.", error=True)
        return EXIT_ERROR
    except Exception as e:
        ctx.print_error(f"Unexpected error: {e}")
        if ctx.verbose:
            import traceback

            traceback.print_exc()
        return EXIT_ERROR


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_SUCCESS

    ctx = CLIContext(
        config_path=args.config,
        verbose=args.verbose,
        quiet=args.quiet,
    )

    return run_command(args, ctx)


if __name__ == "__main__":
    sys.exit(main())
