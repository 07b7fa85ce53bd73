"""
CLI command modules for Fincheck.

Modules:
    serve: Run the API server
    openapi: Export the API descriptor
"""

from fincheck.cli.commands import openapi, serve

__all__ = ["serve", "openapi"]
