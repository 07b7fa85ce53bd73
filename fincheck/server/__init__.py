"""
HTTP server module for Fincheck.

This module provides the aiohttp-based runtime of the Fincheck API and
its bootstrap sequence.

Example:
    Running the server::

        import asyncio
        from fincheck.server import run_server

        asyncio.run(run_server())

Components:
    - app: Application context, bootstrap and runner
    - modules: Application module definitions and graph resolution
    - registry: Operation registry and route prefix
    - policies: CORS and route prefix policies
    - middleware: HTTP middleware (request IDs, errors, logging, CORS)
    - routes: Root application module
"""

from fincheck.server.app import FincheckApplication, bootstrap, run_server
from fincheck.server.modules import Module
from fincheck.server.registry import OperationDescriptor, OperationRegistry, Route

__all__ = [
    "FincheckApplication",
    "bootstrap",
    "run_server",
    "Module",
    "OperationDescriptor",
    "OperationRegistry",
    "Route",
]
