"""
API handlers bundled with the Fincheck server.

Modules:
    health_handlers: Liveness check
"""

from fincheck.server.handlers import health_handlers

__all__ = ["health_handlers"]
