"""
HTTP middleware for the Fincheck server.

This module provides the middleware installed on the aiohttp application:
request IDs, error handling, request logging, and cross-origin headers.
"""

import asyncio
import logging
import time
import uuid
from typing import TYPE_CHECKING, Awaitable, Callable

if TYPE_CHECKING:
    from aiohttp import web

from fincheck.exceptions import FincheckError

# Type alias for aiohttp middleware handler
Handler = Callable[["web.Request"], Awaitable["web.StreamResponse"]]
Middleware = Callable[["web.Request", Handler], Awaitable["web.StreamResponse"]]

DEFAULT_CORS_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]

logger = logging.getLogger("fincheck.server")


def generate_request_id() -> str:
    """Generate a new request identifier."""
    return str(uuid.uuid4())


def create_request_id_middleware() -> Middleware:
    """
    Create middleware that ensures every request has a unique ID.

    The request ID is taken from the X-Request-ID header if present,
    otherwise a new UUID is generated.

    Returns:
        Middleware function.
    """
    from aiohttp import web

    @web.middleware
    async def request_id_middleware(
        request: web.Request,
        handler: Handler,
    ) -> web.StreamResponse:
        """Ensure request has a unique ID."""
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        request["request_id"] = request_id

        response = await handler(request)
        response.headers["X-Request-ID"] = request_id

        return response

    return request_id_middleware


def create_error_handler_middleware() -> Middleware:
    """
    Create error handling middleware.

    Converts Fincheck exceptions and unexpected errors to JSON 500
    responses; none of them is a client error. aiohttp HTTP exceptions
    pass through untouched.

    Returns:
        Middleware function.
    """
    from aiohttp import web

    @web.middleware
    async def error_handler_middleware(
        request: web.Request,
        handler: Handler,
    ) -> web.StreamResponse:
        """Handle exceptions and convert to HTTP responses."""
        try:
            return await handler(request)

        except web.HTTPException:
            raise

        except FincheckError as e:
            request_id = request.get("request_id", "unknown")
            logger.error(
                f"Fincheck error: {e.__class__.__name__}: {e.message}",
                extra={"request_id": request_id, "details": e.details},
            )

            return web.json_response(
                {
                    "error": {
                        "type": e.__class__.__name__,
                        "message": e.message,
                        "details": e.details,
                        "request_id": request_id,
                    }
                },
                status=500,
            )

        except asyncio.CancelledError:
            raise

        except Exception as e:
            request_id = request.get("request_id", "unknown")
            logger.exception(
                f"Unhandled exception: {e}",
                extra={"request_id": request_id},
            )

            return web.json_response(
                {
                    "error": {
                        "type": "InternalError",
                        "message": "Internal server error",
                        "request_id": request_id,
                    }
                },
                status=500,
            )

    return error_handler_middleware


def create_request_logging_middleware(log_level: int = logging.INFO) -> Middleware:
    """
    Create request logging middleware.

    Logs method, path, status, and duration of each request.

    Args:
        log_level: Logging level for request logs.

    Returns:
        Middleware function.
    """
    from aiohttp import web

    @web.middleware
    async def request_logging_middleware(
        request: web.Request,
        handler: Handler,
    ) -> web.StreamResponse:
        """Log request and response information."""
        start_time = time.perf_counter()
        status = 500
        error: str | None = None

        try:
            response = await handler(request)
            status = response.status
            return response

        except web.HTTPException as e:
            status = e.status
            error = str(e)
            raise

        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            request_id = request.get("request_id", "unknown")
            log_message = (
                f"{request.method} {request.path} {status} "
                f"{duration_ms:.2f}ms [{request_id[:8]}]"
            )
            if error:
                log_message += f" error={error}"
            logger.log(log_level, log_message)

    return request_logging_middleware


def create_cors_middleware(
    allowed_origins: list[str] | None = None,
    allowed_methods: list[str] | None = None,
    allowed_headers: list[str] | None = None,
    max_age: int = 3600,
) -> Middleware:
    """
    Create CORS middleware.

    With the defaults the policy is fully permissive: any origin, the
    standard methods, and whatever headers the preflight asks for.

    Args:
        allowed_origins: Allowed origins. None or ``["*"]`` allows all.
        allowed_methods: Allowed HTTP methods.
        allowed_headers: Allowed request headers. None reflects the
            headers requested by the preflight.
        max_age: Preflight cache duration in seconds.

    Returns:
        Middleware function.
    """
    from aiohttp import web

    origins = allowed_origins or ["*"]
    methods = allowed_methods or DEFAULT_CORS_METHODS

    def allow_origin_value(origin: str) -> str | None:
        if "*" in origins:
            return "*"
        if origin in origins:
            return origin
        return None

    @web.middleware
    async def cors_middleware(
        request: web.Request,
        handler: Handler,
    ) -> web.StreamResponse:
        """Handle CORS headers."""
        origin = request.headers.get("Origin", "")
        allow_origin = allow_origin_value(origin)

        # Preflight
        if (
            request.method == "OPTIONS"
            and allow_origin is not None
            and "Access-Control-Request-Method" in request.headers
        ):
            requested_headers = request.headers.get("Access-Control-Request-Headers", "")
            response = web.Response(status=204)
            response.headers["Access-Control-Allow-Origin"] = allow_origin
            response.headers["Access-Control-Allow-Methods"] = ", ".join(methods)
            if allowed_headers is not None:
                response.headers["Access-Control-Allow-Headers"] = ", ".join(allowed_headers)
            else:
                response.headers["Access-Control-Allow-Headers"] = requested_headers or "*"
            response.headers["Access-Control-Max-Age"] = str(max_age)
            if allow_origin != "*":
                response.headers["Vary"] = "Origin"
            return response

        try:
            response = await handler(request)
        except web.HTTPException as e:
            # Error responses need the headers too or browsers hide them
            if allow_origin is not None:
                e.headers["Access-Control-Allow-Origin"] = allow_origin
            raise

        if allow_origin is not None:
            response.headers["Access-Control-Allow-Origin"] = allow_origin
            if allow_origin != "*":
                response.headers["Vary"] = "Origin"

        return response

    return cors_middleware
