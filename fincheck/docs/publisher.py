"""
Descriptor publisher.

Registers the HTTP operations that expose the API descriptor: the JSON
document, an optional YAML rendition, and the Swagger UI explorer page.
The document factory runs on every request, so the published document
always matches the current operation registry.
"""

import html
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from aiohttp import web

    from fincheck.server.app import FincheckApplication

from fincheck.docs.generator import DescriptorDocument
from fincheck.server.registry import Route

logger = logging.getLogger("fincheck.docs")

DocumentFactory = Callable[[], DescriptorDocument]

SWAGGER_UI_CDN = "https://cdn.jsdelivr.net/npm/swagger-ui-dist@5"


@dataclass(frozen=True)
class PublishOptions:
    """
    Options for publishing the descriptor.

    Attributes:
        json_document_url: Sub-path of the JSON document endpoint.
        yaml_document_url: Sub-path of the YAML document endpoint. Empty
            disables it.
        custom_site_title: HTML title of the explorer page.
        explorer: Whether to mount the explorer page.
    """

    json_document_url: str = "openapi/json"
    yaml_document_url: str = ""
    custom_site_title: str = "Swagger UI"
    explorer: bool = True


def render_explorer_html(title: str, document_url: str) -> str:
    """
    Render the Swagger UI explorer page.

    Args:
        title: Page title.
        document_url: URL of the JSON descriptor the page loads.

    Returns:
        The HTML page.
    """
    return (
        "<!DOCTYPE html><html><head>"
        '<meta charset="utf-8" />'
        f"<title>{html.escape(title)}</title>"
        f'<link rel="stylesheet" href="{SWAGGER_UI_CDN}/swagger-ui.css" />'
        "</head><body>"
        '<div id="swagger-ui"></div>'
        f'<script src="{SWAGGER_UI_CDN}/swagger-ui-bundle.js"></script>'
        "<script>window.ui = SwaggerUIBundle({"
        f"url: {json.dumps(document_url)}, "
        'dom_id: "#swagger-ui", '
        "deepLinking: true, "
        "persistAuthorization: true"
        "});</script>"
        "</body></html>"
    )


def setup_docs(
    app: "FincheckApplication",
    path: str,
    document_factory: DocumentFactory,
    options: PublishOptions | None = None,
) -> None:
    """
    Register the descriptor endpoints on the application.

    Paths are relative to the global route prefix, which is applied when
    the routes are mounted.

    Args:
        app: The application whose registry receives the routes.
        path: Sub-path of the explorer page.
        document_factory: Callable producing a fresh document per request.
        options: Publishing options.
    """
    from aiohttp import web

    options = options or PublishOptions()
    registry = app.registry
    json_path = "/" + options.json_document_url.strip("/")

    async def get_json_document(request: web.Request) -> web.Response:
        document = document_factory()
        return web.Response(text=document.to_json(), content_type="application/json")

    async def get_yaml_document(request: web.Request) -> web.Response:
        document = document_factory()
        return web.Response(text=document.to_yaml(), content_type="text/yaml")

    async def get_explorer(request: web.Request) -> web.Response:
        page = render_explorer_html(
            options.custom_site_title,
            registry.external_path(json_path),
        )
        return web.Response(text=page, content_type="text/html")

    registry.add_route(
        Route(
            method="GET",
            path=json_path,
            handler=get_json_document,
            name="openapi_json",
            summary="API descriptor document (JSON)",
        )
    )

    if options.yaml_document_url.strip("/"):
        registry.add_route(
            Route(
                method="GET",
                path="/" + options.yaml_document_url.strip("/"),
                handler=get_yaml_document,
                name="openapi_yaml",
                summary="API descriptor document (YAML)",
            )
        )

    if options.explorer:
        registry.add_route(
            Route(
                method="GET",
                path="/" + path.strip("/"),
                handler=get_explorer,
                name="openapi_explorer",
                summary="Interactive API explorer",
            )
        )

    logger.info(
        f"API descriptor published at {registry.external_path(json_path)}"
        + (f", explorer at {registry.external_path(path)}" if options.explorer else "")
    )
