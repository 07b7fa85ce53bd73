"""
Descriptor model builder.

This module provides the immutable DocumentBuilder used to assemble the
DescriptorModel: the title, description, version, security schemes and
default responses shared by every operation in the OpenAPI document.

Example:
    Building the Fincheck descriptor model::

        model = (
            DocumentBuilder()
            .set_title("Fincheck API")
            .set_version("1.0")
            .add_bearer_auth()
            .add_global_response(500, "Internal server error")
            .build()
        )
"""

from dataclasses import dataclass, replace
from typing import Any

from fincheck.exceptions import ConfigurationError


@dataclass(frozen=True)
class SecurityScheme:
    """
    Base class for security schemes declared by the descriptor.

    Attributes:
        name: Key of the scheme under ``components.securitySchemes``.
    """

    name: str

    def to_dict(self) -> dict[str, Any]:
        """Render the scheme as an OpenAPI security scheme object."""
        raise NotImplementedError


@dataclass(frozen=True)
class BearerAuth(SecurityScheme):
    """
    HTTP bearer token authentication.

    Attributes:
        name: Scheme key, ``bearer`` unless overridden.
        bearer_format: Hint about the token format.
    """

    name: str = "bearer"
    bearer_format: str = "JWT"

    def to_dict(self) -> dict[str, Any]:
        """Render the scheme as an OpenAPI security scheme object."""
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": self.bearer_format,
        }


@dataclass(frozen=True)
class ResponseSpec:
    """
    A response entry applied to every operation.

    Attributes:
        status: HTTP status code.
        description: Human-readable description of the response.
    """

    status: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Render the response as an OpenAPI response object."""
        return {"description": self.description}


@dataclass(frozen=True)
class DescriptorModel:
    """
    Immutable document-level settings of the API descriptor.

    Attributes:
        title: API title. Never empty.
        description: Free-text, possibly multi-line, description.
        version: API version. Never empty.
        security_schemes: Declared security schemes, ordered by name.
        default_responses: Responses inherited by every operation, ordered
            by status code.
    """

    title: str
    description: str
    version: str
    security_schemes: tuple[SecurityScheme, ...] = ()
    default_responses: tuple[ResponseSpec, ...] = ()

    def get_security_scheme(self, name: str) -> SecurityScheme | None:
        """Look up a declared security scheme by name."""
        for scheme in self.security_schemes:
            if scheme.name == name:
                return scheme
        return None

    def get_default_response(self, status: int) -> ResponseSpec | None:
        """Look up a default response by status code."""
        for response in self.default_responses:
            if response.status == int(status):
                return response
        return None

    def info(self) -> dict[str, Any]:
        """Render the OpenAPI ``info`` object."""
        return {
            "title": self.title,
            "description": self.description,
            "version": self.version,
            "contact": {},
        }


@dataclass(frozen=True)
class DocumentBuilder:
    """
    Fluent, immutable builder for DescriptorModel.

    Every configuration call returns a new builder; the receiver is never
    modified, so partially configured builders can be shared and extended
    independently.

    Repeated calls for the same field keep the last value. This holds for
    ``add_global_response`` too: adding a status twice replaces the
    earlier description instead of raising.
    """

    title: str | None = None
    description: str = ""
    version: str | None = None
    security_schemes: tuple[SecurityScheme, ...] = ()
    global_responses: tuple[ResponseSpec, ...] = ()

    def set_title(self, title: str) -> "DocumentBuilder":
        """Set the document title."""
        return replace(self, title=title)

    def set_description(self, description: str) -> "DocumentBuilder":
        """Set the document description."""
        return replace(self, description=description)

    def set_version(self, version: str) -> "DocumentBuilder":
        """Set the API version."""
        return replace(self, version=version)

    def add_bearer_auth(
        self,
        name: str = "bearer",
        bearer_format: str = "JWT",
    ) -> "DocumentBuilder":
        """
        Declare a bearer token security scheme.

        Args:
            name: Scheme key. Re-adding an existing name replaces it.
            bearer_format: Token format hint.

        Returns:
            A new builder with the scheme declared.
        """
        return self.add_security_scheme(BearerAuth(name=name, bearer_format=bearer_format))

    def add_security_scheme(self, scheme: SecurityScheme) -> "DocumentBuilder":
        """Declare a security scheme, replacing any scheme with the same name."""
        kept = tuple(s for s in self.security_schemes if s.name != scheme.name)
        return replace(self, security_schemes=kept + (scheme,))

    def add_global_response(self, status: int, description: str) -> "DocumentBuilder":
        """
        Add a response inherited by every operation.

        Args:
            status: HTTP status code.
            description: Response description.

        Returns:
            A new builder with the response added.
        """
        status = int(status)
        kept = tuple(r for r in self.global_responses if r.status != status)
        return replace(self, global_responses=kept + (ResponseSpec(status, description),))

    def build(self) -> DescriptorModel:
        """
        Build the descriptor model.

        Returns:
            The immutable DescriptorModel.

        Raises:
            ConfigurationError: If the title or version was never set.
        """
        missing = [name for name in ("title", "version") if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Descriptor model is missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        return DescriptorModel(
            title=self.title or "",
            description=self.description,
            version=self.version or "",
            security_schemes=tuple(sorted(self.security_schemes, key=lambda s: s.name)),
            default_responses=tuple(sorted(self.global_responses, key=lambda r: r.status)),
        )
