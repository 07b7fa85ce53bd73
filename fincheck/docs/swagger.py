"""
Swagger configuration for the Fincheck API.

Builds the descriptor model from DocsConfig and publishes the descriptor
endpoints on an application.
"""

from typing import TYPE_CHECKING

from fincheck.config.schema import DocsConfig
from fincheck.docs.builder import DescriptorModel, DocumentBuilder
from fincheck.docs.generator import DescriptorDocument, DocumentOptions, create_document
from fincheck.docs.publisher import PublishOptions, setup_docs

if TYPE_CHECKING:
    from fincheck.server.app import FincheckApplication


def build_model(config: DocsConfig) -> DescriptorModel:
    """
    Build the descriptor model described by the configuration.

    Raises:
        ConfigurationError: If the title or version is empty.
    """
    builder = (
        DocumentBuilder()
        .set_title(config.title)
        .set_description(config.description)
        .set_version(config.version)
    )
    if config.bearer_auth:
        builder = builder.add_bearer_auth()
    for status, description in config.global_responses.items():
        builder = builder.add_global_response(status, description)
    return builder.build()


def configure_docs(app: "FincheckApplication", config: DocsConfig) -> DescriptorModel:
    """
    Publish the API descriptor and explorer on the application.

    Args:
        app: The application to configure.
        config: Descriptor configuration.

    Returns:
        The descriptor model in use.
    """
    model = build_model(config)
    options = DocumentOptions(auto_tag_modules=config.auto_tag_modules)

    def document_factory() -> DescriptorDocument:
        return create_document(model, app.registry, options)

    setup_docs(
        app,
        config.path,
        document_factory,
        PublishOptions(
            json_document_url=config.json_document_url,
            yaml_document_url=config.yaml_document_url,
            custom_site_title=config.custom_site_title,
            explorer=config.explorer,
        ),
    )
    return model
