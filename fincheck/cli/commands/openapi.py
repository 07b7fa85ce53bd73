"""
OpenAPI export command for the Fincheck CLI.

Builds the application without binding a listener and writes the API
descriptor document, e.g. for client generation.

Usage:
    fincheck openapi [--format json|yaml] [--output PATH]
"""

import argparse
import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fincheck.cli.main import CLIContext
    from fincheck.config.schema import FincheckConfig
    from fincheck.docs.generator import DescriptorDocument


def register(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    """
    Register the openapi command with the parser.

    Args:
        subparsers: Subparsers action to add command to.
    """
    parser = subparsers.add_parser(
        "openapi",
        help="Export the API descriptor",
        description="Write the OpenAPI descriptor of the Fincheck API.",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=["json", "yaml"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        "-o",
        metavar="PATH",
        help="Write to a file instead of stdout",
    )
    parser.set_defaults(func=run_openapi)


async def build_document(config: "FincheckConfig") -> "DescriptorDocument":
    """
    Build the application and generate its descriptor document.

    Runs the same steps as the bootstrap except binding the listener.
    """
    from fincheck.docs.generator import DocumentOptions, create_document
    from fincheck.docs.swagger import configure_docs
    from fincheck.server.app import FincheckApplication
    from fincheck.server.policies import apply_policies

    app = await FincheckApplication.create(None, config)
    apply_policies(
        app,
        route_prefix=config.server.route_prefix,
        enable_cors=config.server.enable_cors,
    )
    model = configure_docs(app, config.docs)
    return create_document(
        model,
        app.registry,
        DocumentOptions(auto_tag_modules=config.docs.auto_tag_modules),
    )


def run_openapi(args: argparse.Namespace, ctx: "CLIContext") -> int:
    """
    Execute the openapi command.

    Args:
        args: Parsed command-line arguments.
        ctx: CLI context.

    Returns:
        Exit code.
    """
    from fincheck.cli.main import EXIT_SUCCESS

    document = asyncio.run(build_document(ctx.config))

    if args.format == "yaml":
        output = document.to_yaml()
    else:
        output = document.to_json(indent=2) + "\n"

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        ctx.print(f"Descriptor written to {args.output}")
    else:
        print(output, end="")

    return EXIT_SUCCESS
