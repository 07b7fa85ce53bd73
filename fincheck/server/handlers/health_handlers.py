"""
Health check handlers.

The health module is the one application module that ships with the
bootstrap itself; business modules are registered by their owners.
"""

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aiohttp import web

from fincheck.server.modules import Module
from fincheck.server.registry import Route

_start_time = time.time()

HEALTH_SCHEMA = {
    "type": "object",
    "properties": {
        "status": {"type": "string", "example": "healthy"},
        "timestamp": {"type": "number"},
        "uptime_seconds": {"type": "number"},
    },
    "required": ["status", "timestamp"],
}


async def health_check(request: "web.Request") -> "web.Response":
    """
    Health check endpoint.

    Returns a simple OK response to indicate the server is running.
    This endpoint is suitable for load balancer health checks.
    """
    from aiohttp import web

    now = time.time()
    return web.json_response({
        "status": "healthy",
        "timestamp": now,
        "uptime_seconds": round(now - _start_time, 3),
    })


def create_health_module() -> Module:
    """Create the health module."""
    return Module(
        name="Health",
        description="Service liveness",
        routes=[
            Route(
                method="GET",
                path="/health",
                handler=health_check,
                name="health",
                summary="Health check",
                tags=["Health"],
                responses={200: {"description": "Service is healthy", "schema": "Health"}},
            ),
        ],
        schemas={"Health": HEALTH_SCHEMA},
    )
