"""
Process-wide request policies.

Applies the cross-origin policy and the global route prefix to an
application. The prefix must be applied before the descriptor endpoints
are published so that the descriptor reports prefixed paths.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fincheck.server.app import FincheckApplication

logger = logging.getLogger("fincheck.server")

DEFAULT_ROUTE_PREFIX = "/api/v1"


def apply_policies(
    app: "FincheckApplication",
    route_prefix: str = DEFAULT_ROUTE_PREFIX,
    enable_cors: bool = True,
) -> None:
    """
    Apply the request policies to an application.

    Cross-origin access is fully permissive: every origin, method and
    header is allowed. Tightening it is left to the deployment in front
    of the service.

    Calling this again with the same prefix changes nothing.

    Args:
        app: The application to configure.
        route_prefix: Prefix for every operation path.
        enable_cors: Whether to install the cross-origin policy.

    Raises:
        ConfigurationError: If a different prefix was already applied.
    """
    from fincheck.server.middleware import create_cors_middleware

    app.registry.set_prefix(route_prefix)

    if enable_cors and not app.cors_enabled:
        # Outermost, so error responses carry the headers too
        app.web_app.middlewares.insert(0, create_cors_middleware())
        app.cors_enabled = True

    logger.info(
        f"Request policies applied: prefix={app.registry.prefix or '/'}, "
        f"cors={'permissive' if enable_cors else 'off'}"
    )
