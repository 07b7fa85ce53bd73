"""
API descriptor support for Fincheck.

This package builds and publishes the OpenAPI descriptor of the service.

Components:
    - builder: Immutable DocumentBuilder and the DescriptorModel it builds
    - generator: Pure generation of the document from the operation registry
    - publisher: JSON, YAML and explorer endpoints
    - swagger: Wiring of the above from DocsConfig
"""

from fincheck.docs.builder import (
    BearerAuth,
    DescriptorModel,
    DocumentBuilder,
    ResponseSpec,
    SecurityScheme,
)
from fincheck.docs.generator import DescriptorDocument, DocumentOptions, create_document
from fincheck.docs.publisher import PublishOptions, setup_docs
from fincheck.docs.swagger import build_model, configure_docs

__all__ = [
    "BearerAuth",
    "DescriptorModel",
    "DocumentBuilder",
    "ResponseSpec",
    "SecurityScheme",
    "DescriptorDocument",
    "DocumentOptions",
    "create_document",
    "PublishOptions",
    "setup_docs",
    "build_model",
    "configure_docs",
]
