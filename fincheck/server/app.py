"""
Fincheck HTTP server application.

This module provides the application context and the bootstrap sequence
of the Fincheck API:

1. Create the runtime from the root application module.
2. Apply the request policies (CORS and the route prefix).
3. Publish the API descriptor and explorer.
4. Bind the network listener.

Every failure along the way is fatal; nothing is retried.

Example:
    Running the server::

        import asyncio
        from fincheck.server import run_server

        asyncio.run(run_server())
"""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aiohttp import web

from fincheck.config.loader import load_config
from fincheck.config.schema import FincheckConfig
from fincheck.exceptions import ListenError, StartupError
from fincheck.server.modules import Module, resolve_modules
from fincheck.server.registry import OperationRegistry

logger = logging.getLogger("fincheck.server")


class FincheckApplication:
    """
    Fincheck application context.

    Wraps the aiohttp application together with the operation registry,
    the resolved modules and the configuration. The context is passed
    explicitly to every bootstrap step; nothing is stored globally, so
    several isolated instances can coexist.

    Use ``await FincheckApplication.create(...)`` rather than the
    constructor: creation resolves the module graph and runs the module
    initialization hooks.
    """

    def __init__(
        self,
        root_module: Module,
        config: FincheckConfig | None = None,
    ) -> None:
        """
        Initialize the application context.

        Args:
            root_module: The root application module.
            config: Fincheck configuration.
        """
        from aiohttp import web

        from fincheck.server.middleware import (
            create_error_handler_middleware,
            create_request_id_middleware,
            create_request_logging_middleware,
        )

        self.config = config or FincheckConfig()
        self.root_module = root_module
        self.registry = OperationRegistry()
        self.modules: list[Module] = []
        self.cors_enabled = False
        self.web_app: web.Application = web.Application(
            middlewares=[
                create_request_id_middleware(),
                create_error_handler_middleware(),
                create_request_logging_middleware(),
            ]
        )
        self.web_app["fincheck"] = self
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    @classmethod
    async def create(
        cls,
        root_module: Module | None = None,
        config: FincheckConfig | None = None,
    ) -> "FincheckApplication":
        """
        Create the runtime for an application definition.

        Args:
            root_module: The root application module. Defaults to the
                Fincheck application module.
            config: Fincheck configuration.

        Returns:
            The initialized application.

        Raises:
            StartupError: If the module graph is malformed or a module
                fails to initialize.
        """
        if root_module is None:
            from fincheck.server.routes import create_root_module

            root_module = create_root_module()

        app = cls(root_module, config)
        logger.info(f"Starting Fincheck application ({app.config.environment})...")

        for module in resolve_modules(root_module):
            await app._init_module(module)

        logger.info(f"Application modules initialized: {len(app.modules)} modules")
        return app

    async def _init_module(self, module: Module) -> None:
        """Register a module's routes and schemas and run its init hook."""
        if module.on_init is not None:
            try:
                await module.on_init(self)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                raise StartupError(
                    f"Module {module.name} failed to initialize: {e}",
                    details={"module": module.name},
                ) from e

        try:
            for route in module.routes:
                self.registry.add_route(route, module=module.name)
        except Exception as e:
            raise StartupError(
                f"Module {module.name} has invalid routes: {e}",
                details={"module": module.name},
            ) from e

        for name, schema in module.schemas.items():
            self.registry.add_schema(name, schema)
        if module.description:
            self.registry.add_tag(module.name, module.description)

        self.modules.append(module)
        logger.debug(f"Module {module.name} initialized with {len(module.routes)} routes")

    def mount(self) -> "web.Application":
        """
        Mount the registered routes on the aiohttp application.

        Safe to call more than once; routes are mounted the first time.

        Returns:
            The aiohttp application, ready to serve.
        """
        if not self.registry.frozen:
            self.registry.mount(self.web_app)
        return self.web_app

    @property
    def port(self) -> int | None:
        """The port actually bound, once listening."""
        if self._runner is None:
            return None
        for address in self._runner.addresses:
            if isinstance(address, tuple) and len(address) >= 2:
                return int(address[1])
        return None

    async def listen(self, port: int | None = None, host: str | None = None) -> None:
        """
        Bind the network listener.

        Args:
            port: Port to bind. Defaults to the configured port.
            host: Host to bind. Defaults to the configured host.

        Raises:
            ListenError: If the address cannot be bound.
        """
        from aiohttp import web

        host = host or self.config.server.host
        port = self.config.server.port if port is None else port

        self._runner = web.AppRunner(self.mount())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, host, port)
        try:
            await self._site.start()
        except OSError as e:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            raise ListenError(
                f"Cannot listen on {host}:{port}: {e.strerror or e}",
                details={"host": host, "port": port, "errno": e.errno},
            ) from e

        logger.info(f"Server listening on http://{host}:{self.port or port}")

    async def close(self) -> None:
        """Stop the listener and release server resources."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("Fincheck server shut down")


async def bootstrap(
    config: FincheckConfig | None = None,
    root_module: Module | None = None,
) -> FincheckApplication:
    """
    Bring the Fincheck API to a request-serving state.

    Args:
        config: Fincheck configuration. Loaded from the environment when
            not given.
        root_module: The root application module.

    Returns:
        The listening application.

    Raises:
        StartupError: If the runtime cannot be created.
        ConfigurationError: If the descriptor configuration is invalid.
        ListenError: If the listener cannot be bound.
    """
    from fincheck.docs.swagger import configure_docs
    from fincheck.server.policies import apply_policies

    config = config or load_config()

    app = await FincheckApplication.create(root_module, config)
    apply_policies(
        app,
        route_prefix=config.server.route_prefix,
        enable_cors=config.server.enable_cors,
    )
    configure_docs(app, config.docs)
    await app.listen()
    return app


async def run_server(
    config: FincheckConfig | None = None,
    root_module: Module | None = None,
    shutdown_event: asyncio.Event | None = None,
) -> None:
    """
    Run the Fincheck server until shutdown.

    Args:
        config: Fincheck configuration.
        root_module: The root application module.
        shutdown_event: Event to signal shutdown. Without one the server
            runs until the task is cancelled.
    """
    app = await bootstrap(config, root_module)
    try:
        if shutdown_event:
            await shutdown_event.wait()
        else:
            while True:
                await asyncio.sleep(3600)
    finally:
        await app.close()
