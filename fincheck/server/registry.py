"""
Operation registry for the Fincheck server.

The registry records every HTTP operation contributed by application
modules, owns the route prefix, and mounts the operations onto the
aiohttp router. It is also the source the descriptor generator reads:
``operations()`` reports the externally visible, prefixed paths in
registration order.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Coroutine

if TYPE_CHECKING:
    from aiohttp import web

from fincheck.exceptions import ConfigurationError

logger = logging.getLogger("fincheck.server.routes")

Handler = Callable[["web.Request"], Coroutine[Any, Any, "web.StreamResponse"]]

# aiohttp allows {name:regex}; OpenAPI only knows {name}
_PATH_PARAM_RE = re.compile(r"\{([^}:]+)(?::[^}]*)?\}")


@dataclass
class Route:
    """
    API route definition.

    Attributes:
        method: HTTP method (GET, POST, PUT, DELETE, PATCH).
        path: URL path pattern, without the global prefix.
        handler: Async handler function.
        name: Route name for reverse URL lookup; also the operation id.
        summary: One-line summary shown in the explorer.
        description: Longer human-readable description.
        tags: Explicit descriptor tags.
        parameters: OpenAPI parameter objects.
        request_body: JSON schema of the request body, or the name of a
            registered schema.
        responses: Responses keyed by status code. Each value holds a
            ``description`` and optionally a ``schema`` (JSON schema or
            registered schema name).
        security: Names of the security schemes the operation requires.
        deprecated: Whether the operation is deprecated.
        include_in_schema: Whether the operation appears in the descriptor.
    """

    method: str
    path: str
    handler: Handler
    name: str = ""
    summary: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    parameters: list[dict[str, Any]] = field(default_factory=list)
    request_body: dict[str, Any] | str | None = None
    responses: dict[int, dict[str, Any]] = field(default_factory=dict)
    security: list[str] = field(default_factory=list)
    deprecated: bool = False
    include_in_schema: bool = True


@dataclass(frozen=True)
class OperationDescriptor:
    """
    Read-only view of a registered operation.

    Attributes:
        path: Externally visible path, prefix included.
        method: Upper-case HTTP method.
        tags: Explicitly declared tags.
        parameters: OpenAPI parameter objects, path parameters included.
        request_body_schema: JSON schema of the request body, if any.
        response_schemas: Responses keyed by status code.
        summary: One-line summary.
        description: Longer description.
        operation_id: Unique operation identifier.
        module: Name of the module that registered the operation.
        security: Required security scheme names.
        deprecated: Whether the operation is deprecated.
        include_in_schema: Whether the operation appears in the descriptor.
    """

    path: str
    method: str
    tags: tuple[str, ...] = ()
    parameters: tuple[dict[str, Any], ...] = ()
    request_body_schema: dict[str, Any] | None = None
    response_schemas: dict[int, dict[str, Any]] = field(default_factory=dict)
    summary: str = ""
    description: str = ""
    operation_id: str = ""
    module: str | None = None
    security: tuple[str, ...] = ()
    deprecated: bool = False
    include_in_schema: bool = True


def normalize_prefix(prefix: str) -> str:
    """
    Normalize a route prefix to ``/segment`` form.

    Empty and ``/`` normalize to the empty prefix.
    """
    prefix = prefix.strip().strip("/")
    return f"/{prefix}" if prefix else ""


def schema_ref(schema: dict[str, Any] | str) -> dict[str, Any]:
    """Turn a registered schema name into a ``$ref`` object."""
    if isinstance(schema, str):
        return {"$ref": f"#/components/schemas/{schema}"}
    return schema


class OperationRegistry:
    """
    Registry of the HTTP operations served by the application.

    Routes are collected while the application is built and mounted on
    the aiohttp router when the listener starts. Once mounted the
    registry is frozen: adding routes or changing the prefix raises
    ConfigurationError.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._routes: list[tuple[Route, str | None]] = []
        self._schemas: dict[str, dict[str, Any]] = {}
        self._tags: dict[str, str] = {}
        self._prefix = ""
        self._prefix_applied = False
        self._frozen = False

    @property
    def prefix(self) -> str:
        """The normalized route prefix, empty when none was applied."""
        return self._prefix

    @property
    def frozen(self) -> bool:
        """Whether the registry has been mounted."""
        return self._frozen

    def __len__(self) -> int:
        return len(self._routes)

    def _check_not_frozen(self, action: str) -> None:
        if self._frozen:
            raise ConfigurationError(
                f"Cannot {action}: operation registry is already mounted",
                details={"action": action},
            )

    def set_prefix(self, prefix: str) -> None:
        """
        Apply the global route prefix.

        Applying the same prefix again is a no-op.

        Args:
            prefix: Path prefix such as ``/api/v1``.

        Raises:
            ConfigurationError: If a different prefix was already applied
                or the registry is mounted.
        """
        normalized = normalize_prefix(prefix)
        if self._prefix_applied:
            if normalized == self._prefix:
                return
            raise ConfigurationError(
                "Route prefix has already been applied",
                details={"current": self._prefix, "requested": normalized},
            )
        self._check_not_frozen("set the route prefix")
        self._prefix = normalized
        self._prefix_applied = True
        logger.debug(f"Route prefix set to {normalized or '/'}")

    def external_path(self, path: str) -> str:
        """Return the externally visible path for a route path."""
        path = "/" + path.lstrip("/")
        if not self._prefix:
            return path
        if path == "/":
            return self._prefix
        return self._prefix + path

    def add_route(self, route: Route, module: str | None = None) -> None:
        """
        Register a route.

        Args:
            route: The route definition.
            module: Name of the module that owns the route.

        Raises:
            ConfigurationError: If the registry is mounted or the method
                and path are already registered.
        """
        self._check_not_frozen("add a route")
        method = route.method.upper()
        path = "/" + route.path.lstrip("/")
        for existing, _ in self._routes:
            if existing.method.upper() == method and "/" + existing.path.lstrip("/") == path:
                raise ConfigurationError(
                    f"Duplicate route: {method} {path}",
                    details={"method": method, "path": path},
                )
        self._routes.append((route, module))

    def add_schema(self, name: str, schema: dict[str, Any]) -> None:
        """Register a named JSON schema for ``components.schemas``."""
        self._schemas[name] = schema

    def schemas(self) -> dict[str, dict[str, Any]]:
        """Return a copy of the registered named schemas."""
        return dict(self._schemas)

    def add_tag(self, name: str, description: str) -> None:
        """Register the description shown for a descriptor tag."""
        self._tags[name] = description

    def tags(self) -> dict[str, str]:
        """Return a copy of the registered tag descriptions."""
        return dict(self._tags)

    def routes(self) -> list[Route]:
        """Return the registered routes in registration order."""
        return [route for route, _ in self._routes]

    def operations(self) -> list[OperationDescriptor]:
        """
        Describe every registered operation.

        Returns:
            Operation descriptors in registration order, with prefixed
            paths and path parameters filled in from the path template.
        """
        return [self._describe(route, module) for route, module in self._routes]

    def _describe(self, route: Route, module: str | None) -> OperationDescriptor:
        path = _PATH_PARAM_RE.sub(r"{\1}", self.external_path(route.path))

        parameters = [dict(p) for p in route.parameters]
        declared = {(p.get("in"), p.get("name")) for p in parameters}
        for param_name in _PATH_PARAM_RE.findall(route.path):
            if ("path", param_name) not in declared:
                parameters.append({
                    "name": param_name,
                    "in": "path",
                    "required": True,
                    "schema": {"type": "string"},
                })

        responses: dict[int, dict[str, Any]] = {}
        for status, response in route.responses.items():
            entry = dict(response)
            if "schema" in entry:
                entry["schema"] = schema_ref(entry["schema"])
            responses[int(status)] = entry

        handler_name = getattr(route.handler, "__name__", "handler")
        operation_id = route.name or (f"{module}_{handler_name}" if module else handler_name)

        return OperationDescriptor(
            path=path,
            method=route.method.upper(),
            tags=tuple(route.tags),
            parameters=tuple(parameters),
            request_body_schema=(
                schema_ref(route.request_body) if route.request_body is not None else None
            ),
            response_schemas=responses,
            summary=route.summary,
            description=route.description,
            operation_id=operation_id,
            module=module,
            security=tuple(route.security),
            deprecated=route.deprecated,
            include_in_schema=route.include_in_schema,
        )

    def mount(self, app: "web.Application") -> None:
        """
        Add every registered route to the aiohttp router and freeze.

        Args:
            app: The aiohttp application to mount on.

        Raises:
            ConfigurationError: If the registry was already mounted.
        """
        self._check_not_frozen("mount routes")
        for route, _ in self._routes:
            app.router.add_route(
                route.method.upper(),
                self.external_path(route.path),
                route.handler,
                name=route.name or None,
            )
        self._frozen = True
        logger.info(f"Mounted {len(self._routes)} routes under {self._prefix or '/'}")
