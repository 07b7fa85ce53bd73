"""
Command-line interface for Fincheck.

Usage:
    fincheck serve [--host HOST] [--port PORT]
    fincheck openapi [--format json|yaml] [--output PATH]
"""

from fincheck.cli.main import main

__all__ = ["main"]
