"""
Configuration loader for Fincheck.

This module provides the ConfigLoader class for loading configuration
from YAML files with environment variable overrides.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from fincheck.config.defaults import (
    get_default_config,
    get_development_config,
    get_production_config,
    get_test_config,
)
from fincheck.config.schema import (
    DocsConfig,
    FincheckConfig,
    LoggingConfig,
    ServerConfig,
)
from fincheck.exceptions import ConfigurationError


class ConfigLoader:
    """
    Loads and validates Fincheck configuration.

    Configuration sources are applied in order, with later sources
    overriding earlier ones:

    1. Default values (or an environment profile)
    2. YAML configuration file
    3. Environment variables (FINCHECK_ prefix)
    4. The ``PORT`` environment variable, when set and non-empty

    Example:
        Loading configuration::

            loader = ConfigLoader()
            config = loader.load("config/fincheck.yaml")
            print(config.server.port)
    """

    PORT_ENV_VAR = "PORT"

    def load(
        self,
        config_path: str | Path | None = None,
        environment: str | None = None,
    ) -> FincheckConfig:
        """
        Load configuration from file and environment.

        Args:
            config_path: Path to a YAML configuration file. If None,
                only defaults and environment variables are used.
            environment: Environment profile to use. Overrides any
                environment setting in the config file.

        Returns:
            A validated FincheckConfig object.

        Raises:
            ConfigurationError: If configuration is invalid or file not found.
        """
        if environment:
            config = self._get_environment_defaults(environment)
        else:
            config = get_default_config()

        if config_path:
            file_config = self._load_yaml(config_path)
            try:
                config = self._merge_config(config, file_config)
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid configuration in {config_path}: {e}",
                    details={"path": str(config_path)},
                ) from e

        config = self._apply_env_overrides(config)

        if environment:
            config.environment = environment

        self._validate(config)

        return config

    def _get_environment_defaults(self, environment: str) -> FincheckConfig:
        """Get default configuration for an environment."""
        env_lower = environment.lower()
        if env_lower == "production":
            return get_production_config()
        elif env_lower == "development":
            return get_development_config()
        elif env_lower == "test":
            return get_test_config()
        else:
            config = get_default_config()
            config.environment = environment
            return config

    def _load_yaml(self, path: str | Path) -> dict[str, Any]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Dictionary of configuration values.

        Raises:
            ConfigurationError: If file not found or invalid YAML.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                details={"path": str(path)},
            )

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}",
                details={"path": str(path)},
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read configuration file: {e}",
                details={"path": str(path)},
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a mapping at the top level",
                details={"path": str(path)},
            )
        return data

    def _merge_config(
        self,
        base: FincheckConfig,
        override: dict[str, Any],
    ) -> FincheckConfig:
        """
        Merge file configuration into base configuration.

        Args:
            base: Base configuration object.
            override: Dictionary of override values.

        Returns:
            Merged configuration object.
        """
        if not override:
            return base

        if "environment" in override:
            base.environment = str(override["environment"])

        if "server" in override:
            base.server = self._merge_server(base.server, override["server"] or {})

        if "docs" in override:
            base.docs = self._merge_docs(base.docs, override["docs"] or {})

        if "logging" in override:
            base.logging = self._merge_logging(base.logging, override["logging"] or {})

        return base

    def _merge_server(
        self,
        base: ServerConfig,
        override: dict[str, Any],
    ) -> ServerConfig:
        """Merge server configuration."""
        return ServerConfig(
            host=override.get("host", base.host),
            port=int(override.get("port", base.port)),
            route_prefix=override.get("route_prefix", base.route_prefix),
            enable_cors=override.get("enable_cors", base.enable_cors),
        )

    def _merge_docs(
        self,
        base: DocsConfig,
        override: dict[str, Any],
    ) -> DocsConfig:
        """Merge descriptor configuration."""
        global_responses = base.global_responses
        if "global_responses" in override:
            # YAML may key statuses as strings; null clears the defaults
            global_responses = {
                int(status): description
                for status, description in (override["global_responses"] or {}).items()
            }

        version = override.get("version", base.version)
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            # Unquoted YAML versions such as 1.0 load as numbers
            version = str(version)

        return DocsConfig(
            title=override.get("title", base.title),
            description=override.get("description", base.description),
            version=version,
            bearer_auth=override.get("bearer_auth", base.bearer_auth),
            global_responses=global_responses,
            path=override.get("path", base.path),
            json_document_url=override.get("json_document_url", base.json_document_url),
            yaml_document_url=override.get("yaml_document_url", base.yaml_document_url),
            custom_site_title=override.get("custom_site_title", base.custom_site_title),
            explorer=override.get("explorer", base.explorer),
            auto_tag_modules=override.get("auto_tag_modules", base.auto_tag_modules),
        )

    def _merge_logging(
        self,
        base: LoggingConfig,
        override: dict[str, Any],
    ) -> LoggingConfig:
        """Merge logging configuration."""
        return LoggingConfig(
            level=override.get("level", base.level),
            format=override.get("format", base.format),
        )

    def _apply_env_overrides(self, config: FincheckConfig) -> FincheckConfig:
        """
        Apply environment variable overrides to configuration.

        Environment variables use the format FINCHECK_SECTION_OPTION=value,
        for example FINCHECK_SERVER_HOST=127.0.0.1 or
        FINCHECK_DOCS_EXPLORER=false. The bare PORT variable wins over
        FINCHECK_SERVER_PORT and is ignored when empty.

        Args:
            config: Configuration to modify.

        Returns:
            Modified configuration.

        Raises:
            ConfigurationError: If an environment variable has an invalid value.
        """
        env_mapping: dict[str, tuple[str, Any]] = {
            "FINCHECK_ENVIRONMENT": ("environment", str),
            # Server
            "FINCHECK_SERVER_HOST": ("server.host", str),
            "FINCHECK_SERVER_PORT": ("server.port", int),
            "FINCHECK_SERVER_ROUTE_PREFIX": ("server.route_prefix", str),
            "FINCHECK_SERVER_ENABLE_CORS": ("server.enable_cors", self._parse_bool),
            # Docs
            "FINCHECK_DOCS_TITLE": ("docs.title", str),
            "FINCHECK_DOCS_VERSION": ("docs.version", str),
            "FINCHECK_DOCS_BEARER_AUTH": ("docs.bearer_auth", self._parse_bool),
            "FINCHECK_DOCS_CUSTOM_SITE_TITLE": ("docs.custom_site_title", str),
            "FINCHECK_DOCS_EXPLORER": ("docs.explorer", self._parse_bool),
            "FINCHECK_DOCS_AUTO_TAG_MODULES": ("docs.auto_tag_modules", self._parse_bool),
            # Logging
            "FINCHECK_LOGGING_LEVEL": ("logging.level", str),
        }

        for env_var, (path, converter) in env_mapping.items():
            value = os.environ.get(env_var)
            if value is not None:
                self._set_from_env(config, env_var, value, path, converter)

        port = os.environ.get(self.PORT_ENV_VAR)
        if port:
            self._set_from_env(config, self.PORT_ENV_VAR, port, "server.port", int)

        return config

    def _set_from_env(
        self,
        config: FincheckConfig,
        env_var: str,
        value: str,
        path: str,
        converter: Any,
    ) -> None:
        """Convert an environment value and store it at a dotted path."""
        try:
            converted = converter(value)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid value for {env_var}: {e}",
                details={"env_var": env_var, "value": value},
            ) from e
        self._set_nested_attr(config, path, converted)

    def _set_nested_attr(self, obj: Any, path: str, value: Any) -> None:
        """Set a nested attribute using dot notation."""
        parts = path.split(".")
        for part in parts[:-1]:
            obj = getattr(obj, part)
        setattr(obj, parts[-1], value)

    def _parse_bool(self, value: str) -> bool:
        """Parse a string to boolean."""
        if value.lower() in ("true", "1", "yes", "on"):
            return True
        elif value.lower() in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"Cannot parse '{value}' as boolean")

    def _validate(self, config: FincheckConfig) -> None:
        """
        Validate the complete configuration.

        Environment overrides bypass the dataclass validators, so every
        section is re-instantiated here.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        errors: list[str] = []

        try:
            FincheckConfig(environment=config.environment)
        except ValueError as e:
            errors.append(f"environment: {e}")

        try:
            ServerConfig(
                host=config.server.host,
                port=config.server.port,
                route_prefix=config.server.route_prefix,
                enable_cors=config.server.enable_cors,
            )
        except ValueError as e:
            errors.append(f"server: {e}")

        try:
            DocsConfig(
                title=config.docs.title,
                description=config.docs.description,
                version=config.docs.version,
                bearer_auth=config.docs.bearer_auth,
                global_responses=config.docs.global_responses,
                path=config.docs.path,
                json_document_url=config.docs.json_document_url,
                yaml_document_url=config.docs.yaml_document_url,
                custom_site_title=config.docs.custom_site_title,
                explorer=config.docs.explorer,
                auto_tag_modules=config.docs.auto_tag_modules,
            )
        except ValueError as e:
            errors.append(f"docs: {e}")

        try:
            LoggingConfig(level=config.logging.level, format=config.logging.format)
        except ValueError as e:
            errors.append(f"logging: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                details={"errors": errors},
            )


def load_config(
    config_path: str | Path | None = None,
    environment: str | None = None,
) -> FincheckConfig:
    """
    Load Fincheck configuration.

    Convenience wrapper around ConfigLoader.

    Args:
        config_path: Optional path to a YAML configuration file.
        environment: Optional environment profile name.

    Returns:
        A validated FincheckConfig object.
    """
    return ConfigLoader().load(config_path, environment)
