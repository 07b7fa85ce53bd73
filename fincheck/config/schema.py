"""
Configuration schema for Fincheck.

This module defines the dataclasses holding every configurable option of
the API bootstrap. Each section validates its own values in
``__post_init__`` so invalid configuration fails as early as possible.
"""

from dataclasses import dataclass, field

FINCHECK_DESCRIPTION = (
    "O Fincheck é um aplicativo fullstack desenvolvido para ajudar usuários a "
    "monitorar suas finanças pessoais de forma fácil e eficiente.\n"
    "O objetivo do projeto é fornecer ferramentas que permitam o controle total "
    "sobre contas bancárias, investimentos, despesas, receitas e planejamento "
    "financeiro.\n\n"
    "Este projeto foi desenvolvido como parte do curso JStack e teve como foco a "
    "prática de desenvolvimento fullstack moderno, explorando desde o backend "
    "com NestJS até o frontend com React."
)

DEFAULT_PORT = 3333


@dataclass
class ServerConfig:
    """
    HTTP server configuration.

    Attributes:
        host: Host address to bind the listener to.
        port: Port number to listen on. Zero asks the OS for a free port.
        route_prefix: Path prefix applied to every registered operation.
        enable_cors: Whether to apply the permissive cross-origin policy.
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    route_prefix: str = "/api/v1"
    enable_cors: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.port < 0 or self.port > 65535:
            raise ValueError("port must be between 0 and 65535")
        if not isinstance(self.host, str) or not self.host:
            raise ValueError("host must be a non-empty string")
        if not isinstance(self.route_prefix, str):
            raise ValueError("route_prefix must be a string")


@dataclass
class DocsConfig:
    """
    API descriptor configuration.

    Attributes:
        title: Title of the descriptor document.
        description: Free-text, multi-line description of the API.
        version: Version string reported in the descriptor.
        bearer_auth: Whether to declare the bearer token security scheme.
        global_responses: Responses added to every operation, keyed by
            status code.
        path: Sub-path of the explorer UI.
        json_document_url: Sub-path of the JSON descriptor endpoint.
        yaml_document_url: Sub-path of the YAML descriptor endpoint.
            Empty disables it.
        custom_site_title: HTML title of the explorer page.
        explorer: Whether to mount the explorer UI at all.
        auto_tag_modules: Whether untagged operations are tagged with the
            name of the module that owns them.
    """

    title: str = "Fincheck API"
    description: str = FINCHECK_DESCRIPTION
    version: str = "1.0"
    bearer_auth: bool = True
    global_responses: dict[int, str] = field(
        default_factory=lambda: {500: "Internal server error"}
    )
    path: str = "openapi"
    json_document_url: str = "openapi/json"
    yaml_document_url: str = ""
    custom_site_title: str = "Fincheck Swagger"
    explorer: bool = True
    auto_tag_modules: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        text_fields = (
            "title",
            "description",
            "version",
            "path",
            "json_document_url",
            "yaml_document_url",
            "custom_site_title",
        )
        for name in text_fields:
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string")
        if not self.path.strip("/"):
            raise ValueError("path must not be empty")
        if not self.json_document_url.strip("/"):
            raise ValueError("json_document_url must not be empty")
        for status, description in self.global_responses.items():
            if int(status) < 100 or int(status) > 599:
                raise ValueError(f"invalid HTTP status in global_responses: {status}")
            if not isinstance(description, str):
                raise ValueError(f"description of global response {status} must be a string")


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        level: Minimum log level. One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        format: Log message format string.
    """

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of: {valid_levels}")


@dataclass
class FincheckConfig:
    """
    Root configuration object for Fincheck.

    Attributes:
        environment: The environment profile name (development, staging,
            production, test).
        server: HTTP server configuration options.
        docs: API descriptor configuration options.
        logging: Logging configuration options.
    """

    environment: str = "development"
    server: ServerConfig = field(default_factory=ServerConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        valid_environments = ["development", "staging", "production", "test"]
        if self.environment.lower() not in valid_environments:
            raise ValueError(f"environment must be one of: {valid_environments}")
