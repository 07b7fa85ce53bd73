"""
Tests for the application runtime and the bootstrap sequence.
"""

import asyncio
import socket
from typing import Any, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from fincheck.config.schema import FincheckConfig
from fincheck.exceptions import ListenError, StartupError
from fincheck.server.app import FincheckApplication, bootstrap, run_server
from fincheck.server.modules import Module
from fincheck.server.registry import Route
from fincheck.server.routes import create_root_module


@pytest.fixture
def occupied_port() -> Generator[int, None, None]:
    """A localhost port held by another listening socket."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


class TestCreate:
    """Tests for FincheckApplication.create."""

    @pytest.mark.asyncio
    async def test_default_root_module(self, test_config: FincheckConfig) -> None:
        """Test that the default application serves the health check."""
        app = await FincheckApplication.create(config=test_config)

        assert [m.name for m in app.modules] == ["Health", "AppModule"]
        assert [r.path for r in app.registry.routes()] == ["/health"]
        assert "Health" in app.registry.schemas()

    @pytest.mark.asyncio
    async def test_feature_modules(
        self, accounts_module: Module, test_config: FincheckConfig
    ) -> None:
        """Test that feature modules contribute routes, schemas and tags."""
        app = await FincheckApplication.create(
            create_root_module(accounts_module), test_config
        )

        assert len(app.registry) == 4
        assert "BankAccount" in app.registry.schemas()
        assert app.registry.tags()["BankAccounts"] == "Bank account management"

    @pytest.mark.asyncio
    async def test_init_hooks_run_in_dependency_order(self, test_config: FincheckConfig) -> None:
        """Test that imported modules initialize first."""
        seen: list[str] = []

        def hook(name: str) -> Any:
            async def on_init(app: FincheckApplication) -> None:
                seen.append(name)

            return on_init

        users = Module(name="Users", on_init=hook("Users"))
        accounts = Module(name="BankAccounts", imports=[users], on_init=hook("BankAccounts"))
        root = Module(name="AppModule", imports=[accounts], on_init=hook("AppModule"))

        await FincheckApplication.create(root, test_config)

        assert seen == ["Users", "BankAccounts", "AppModule"]

    @pytest.mark.asyncio
    async def test_cyclic_modules(self, test_config: FincheckConfig) -> None:
        """Test that a cyclic module graph aborts creation."""
        accounts = Module(name="BankAccounts", imports=["AppModule"])
        root = Module(name="AppModule", imports=[accounts])

        with pytest.raises(StartupError):
            await FincheckApplication.create(root, test_config)

    @pytest.mark.asyncio
    async def test_failing_init_hook(self, test_config: FincheckConfig) -> None:
        """Test that a failing init hook aborts creation."""

        async def on_init(app: FincheckApplication) -> None:
            raise RuntimeError("database unreachable")

        root = create_root_module(Module(name="Database", on_init=on_init))

        with pytest.raises(StartupError) as exc_info:
            await FincheckApplication.create(root, test_config)

        assert exc_info.value.details == {"module": "Database"}
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_conflicting_routes(
        self, accounts_module: Module, test_config: FincheckConfig
    ) -> None:
        """Test that two modules registering the same operation abort creation."""

        async def handler(request: Any) -> Any:
            return None

        clash = Module(name="Legacy", routes=[Route("GET", "/bank-accounts", handler)])

        with pytest.raises(StartupError):
            await FincheckApplication.create(
                create_root_module(accounts_module, clash), test_config
            )

    @pytest.mark.asyncio
    async def test_instances_are_isolated(self, test_config: FincheckConfig) -> None:
        """Test that two applications share no registry state."""
        first = await FincheckApplication.create(config=test_config)
        second = await FincheckApplication.create(config=test_config)

        first.registry.set_prefix("/api/v1")

        assert second.registry.prefix == ""
        assert first.web_app is not second.web_app


class TestBootstrap:
    """Tests for the bootstrap sequence."""

    @pytest.mark.asyncio
    async def test_serves_requests(
        self, accounts_module: Module, test_config: FincheckConfig
    ) -> None:
        """Test that a bootstrapped server answers on the real network."""
        app = await bootstrap(test_config, create_root_module(accounts_module))
        try:
            assert app.port
            base_url = f"http://127.0.0.1:{app.port}/api/v1"
            async with aiohttp.ClientSession() as session:
                async with session.get(f"{base_url}/health") as resp:
                    assert resp.status == 200
                    assert resp.headers["Access-Control-Allow-Origin"] == "*"
                async with session.get(f"{base_url}/openapi/json") as resp:
                    document = await resp.json()
                    assert "/api/v1/bank-accounts" in document["paths"]
                async with session.get(f"{base_url}/openapi") as resp:
                    assert resp.status == 200
        finally:
            await app.close()

    @pytest.mark.asyncio
    async def test_default_port(self) -> None:
        """Test that the listener binds port 3333 when PORT is unset."""
        site = MagicMock()
        site.start = AsyncMock()

        with patch("aiohttp.web.TCPSite", return_value=site) as site_class:
            app = await bootstrap()
            try:
                _, host, port = site_class.call_args.args
                assert host == "0.0.0.0"
                assert port == 3333
            finally:
                await app.close()

    @pytest.mark.asyncio
    async def test_port_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the PORT variable selects the listening port."""
        monkeypatch.setenv("PORT", "8080")
        site = MagicMock()
        site.start = AsyncMock()

        with patch("aiohttp.web.TCPSite", return_value=site) as site_class:
            app = await bootstrap()
            try:
                assert site_class.call_args.args[2] == 8080
            finally:
                await app.close()

    @pytest.mark.asyncio
    async def test_port_in_use(self, test_config: FincheckConfig, occupied_port: int) -> None:
        """Test that an occupied port is a listen error."""
        test_config.server.port = occupied_port

        with pytest.raises(ListenError) as exc_info:
            await bootstrap(test_config)

        assert exc_info.value.details["port"] == occupied_port
        assert exc_info.value.details["host"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_run_server_until_shutdown(self, test_config: FincheckConfig) -> None:
        """Test that run_server stops when the shutdown event is set."""
        shutdown = asyncio.Event()
        task = asyncio.create_task(run_server(test_config, shutdown_event=shutdown))
        await asyncio.sleep(0.1)

        shutdown.set()
        await asyncio.wait_for(task, timeout=5)

        assert task.done()
        assert task.exception() is None
