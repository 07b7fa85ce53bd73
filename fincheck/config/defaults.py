"""
Default configuration profiles for Fincheck.

The defaults mirror how the service is deployed: listen on every
interface on port 3333, prefix every route with ``/api/v1``, allow any
origin, and publish the descriptor with the explorer enabled.
"""

from fincheck.config.schema import (
    DEFAULT_PORT,
    DocsConfig,
    FincheckConfig,
    LoggingConfig,
    ServerConfig,
)


def get_default_config() -> FincheckConfig:
    """
    Get the default configuration.

    Returns:
        A new FincheckConfig with default values.
    """
    return FincheckConfig(
        environment="development",
        server=ServerConfig(port=DEFAULT_PORT),
        docs=DocsConfig(),
        logging=LoggingConfig(),
    )


def get_development_config() -> FincheckConfig:
    """
    Get configuration for local development.

    Verbose logging; everything else as the defaults.
    """
    config = get_default_config()
    config.environment = "development"
    config.logging.level = "DEBUG"
    return config


def get_production_config() -> FincheckConfig:
    """
    Get configuration for production deployments.

    Returns:
        FincheckConfig with warnings-only logging.
    """
    config = get_default_config()
    config.environment = "production"
    config.logging.level = "WARNING"
    return config


def get_test_config() -> FincheckConfig:
    """
    Get configuration for tests.

    Binds to localhost on an OS-assigned port so parallel test runs never
    collide.
    """
    config = get_default_config()
    config.environment = "test"
    config.server.host = "127.0.0.1"
    config.server.port = 0
    config.logging.level = "DEBUG"
    return config
