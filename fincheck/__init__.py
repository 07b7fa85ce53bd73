"""
Fincheck: personal-finance HTTP API.

This package contains the startup sequence of the Fincheck API service:
building the aiohttp runtime from application modules, applying the
process-wide request policies (CORS and the ``/api/v1`` prefix), and
publishing an OpenAPI descriptor with a Swagger UI explorer.

Example:
    Starting the service::

        import asyncio
        from fincheck.server import run_server

        asyncio.run(run_server())

Public API:
    Version:
        __version__: The package version string

    Exceptions:
        FincheckError: Base exception for all Fincheck errors
        ConfigurationError: Configuration and descriptor model errors
        StartupError: Runtime construction errors
        ListenError: Network listener bind errors
"""

from fincheck.exceptions import (
    ConfigurationError,
    FincheckError,
    ListenError,
    StartupError,
)
from fincheck.version import __version__

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "FincheckError",
    "ConfigurationError",
    "StartupError",
    "ListenError",
]
