"""
Configuration system for Fincheck.

This module provides configuration loading, validation, and management
for the API bootstrap. Configuration can be loaded from YAML files with
environment variable overrides.
"""

from fincheck.config.loader import ConfigLoader, load_config
from fincheck.config.schema import (
    DEFAULT_PORT,
    DocsConfig,
    FincheckConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "DEFAULT_PORT",
    "FincheckConfig",
    "ServerConfig",
    "DocsConfig",
    "LoggingConfig",
]
