"""
Root application definition for the Fincheck server.

The root module imports every feature module of the application. Feature
modules passed in by callers are imported alongside the bundled health
module.
"""

from fincheck.server.modules import Module

ROOT_MODULE_NAME = "AppModule"


def create_root_module(*feature_modules: Module) -> Module:
    """
    Create the root application module.

    Args:
        *feature_modules: Additional modules to import.

    Returns:
        The root module.
    """
    from fincheck.server.handlers.health_handlers import create_health_module

    return Module(
        name=ROOT_MODULE_NAME,
        imports=[create_health_module(), *feature_modules],
    )
