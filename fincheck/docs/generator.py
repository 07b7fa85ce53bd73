"""
OpenAPI descriptor generator.

This module turns the descriptor model and the live operation registry
into a DescriptorDocument. Generation is a pure function of its inputs:
nothing is cached, so every call reflects the registry's current state,
and two calls against an unchanged registry render identical JSON.
"""

import copy
import json
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

import yaml

from fincheck.docs.builder import DescriptorModel
from fincheck.server.registry import OperationDescriptor

OPENAPI_VERSION = "3.0.0"


class OperationSource(Protocol):
    """Read interface of an operation registry."""

    def operations(self) -> list[OperationDescriptor]:
        """Return the registered operations in registry order."""
        ...

    def schemas(self) -> dict[str, dict[str, Any]]:
        """Return the named schemas."""
        ...

    def tags(self) -> dict[str, str]:
        """Return tag descriptions keyed by tag name."""
        ...


@dataclass(frozen=True)
class DocumentOptions:
    """
    Options for descriptor generation.

    Attributes:
        auto_tag_modules: Tag operations that declare no tags with the
            name of the module that owns them.
    """

    auto_tag_modules: bool = False


@dataclass(frozen=True)
class DescriptorDocument:
    """
    A generated API descriptor.

    Attributes:
        model: Document-level settings.
        operations: Operations in registry order.
        schemas: Named component schemas.
        tags: Tag objects in order of first use.
    """

    model: DescriptorModel
    operations: tuple[OperationDescriptor, ...] = ()
    schemas: dict[str, dict[str, Any]] = field(default_factory=dict)
    tags: tuple[dict[str, str], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Render the document as an OpenAPI 3 dictionary."""
        paths: dict[str, dict[str, Any]] = {}
        for operation in self.operations:
            paths.setdefault(operation.path, {})[operation.method.lower()] = (
                self._render_operation(operation)
            )

        components: dict[str, Any] = {
            "securitySchemes": {
                scheme.name: scheme.to_dict() for scheme in self.model.security_schemes
            },
            "schemas": self.schemas,
        }

        return {
            "openapi": OPENAPI_VERSION,
            "paths": paths,
            "info": self.model.info(),
            "tags": [dict(tag) for tag in self.tags],
            "servers": [],
            "components": components,
        }

    def to_json(self, indent: int | None = None) -> str:
        """Render the document as a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_yaml(self) -> str:
        """Render the document as a YAML string."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    def _render_operation(self, operation: OperationDescriptor) -> dict[str, Any]:
        rendered: dict[str, Any] = {"operationId": operation.operation_id}
        if operation.summary:
            rendered["summary"] = operation.summary
        if operation.description:
            rendered["description"] = operation.description
        rendered["parameters"] = [dict(p) for p in operation.parameters]

        if operation.request_body_schema is not None:
            rendered["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": operation.request_body_schema}},
            }

        rendered["responses"] = self._render_responses(operation)
        rendered["tags"] = list(operation.tags)

        security = [
            {name: []}
            for name in operation.security
            if self.model.get_security_scheme(name) is not None
        ]
        if security:
            rendered["security"] = security
        if operation.deprecated:
            rendered["deprecated"] = True
        return rendered

    def _render_responses(self, operation: OperationDescriptor) -> dict[str, Any]:
        responses: dict[str, Any] = {}
        for status, response in operation.response_schemas.items():
            entry: dict[str, Any] = {"description": response.get("description", "")}
            if "schema" in response:
                entry["content"] = {"application/json": {"schema": response["schema"]}}
            responses[str(status)] = entry

        if not responses:
            # Same implicit success status the HTTP layer would answer with
            default_status = "201" if operation.method == "POST" else "200"
            responses[default_status] = {"description": ""}

        for default in self.model.default_responses:
            responses.setdefault(str(default.status), default.to_dict())
        return responses


def create_document(
    model: DescriptorModel,
    registry: OperationSource,
    options: DocumentOptions | None = None,
) -> DescriptorDocument:
    """
    Generate the descriptor document from the current registry state.

    Args:
        model: Document-level settings.
        registry: The operation registry to enumerate.
        options: Generation options.

    Returns:
        The generated DescriptorDocument.
    """
    options = options or DocumentOptions()
    tag_descriptions = registry.tags()

    operations: list[OperationDescriptor] = []
    tag_names: list[str] = []
    for operation in registry.operations():
        if not operation.include_in_schema:
            continue
        if options.auto_tag_modules and not operation.tags and operation.module:
            operation = replace(operation, tags=(operation.module,))
        for tag in operation.tags:
            if tag not in tag_names:
                tag_names.append(tag)
        operations.append(operation)

    tags = []
    for name in tag_names:
        tag = {"name": name}
        if tag_descriptions.get(name):
            tag["description"] = tag_descriptions[name]
        tags.append(tag)

    # Documents share no mutable state with the registry
    return DescriptorDocument(
        model=model,
        operations=copy.deepcopy(tuple(operations)),
        schemas=copy.deepcopy(registry.schemas()),
        tags=tuple(tags),
    )
