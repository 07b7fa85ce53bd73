"""
Pytest configuration and shared fixtures for Fincheck tests.

This module provides:
- Environment isolation (PORT and FINCHECK_* variables)
- Configuration fixtures
- A sample feature module standing in for business handlers
- Application fixtures for API tests
"""

from __future__ import annotations

import os
from typing import Any

import pytest

from fincheck.config.defaults import get_test_config
from fincheck.config.schema import FincheckConfig
from fincheck.server.modules import Module
from fincheck.server.registry import OperationRegistry, Route


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration environment variables for every test."""
    for name in list(os.environ):
        if name == "PORT" or name.startswith("FINCHECK_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> FincheckConfig:
    """Configuration bound to localhost on an OS-assigned port."""
    return get_test_config()


# =============================================================================
# Module Fixtures
# =============================================================================


async def list_accounts(request: Any) -> Any:
    from aiohttp import web

    return web.json_response([{"id": "1", "name": "Nubank", "balance": 150.0}])


async def get_account(request: Any) -> Any:
    from aiohttp import web

    return web.json_response(
        {"id": request.match_info["account_id"], "name": "Nubank", "balance": 150.0}
    )


async def create_account(request: Any) -> Any:
    from aiohttp import web

    body = await request.json()
    return web.json_response({"id": "2", **body}, status=201)


BANK_ACCOUNT_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string"},
        "balance": {"type": "number"},
    },
    "required": ["name"],
}


def make_accounts_module() -> Module:
    """Build a bank accounts module as a business collaborator would."""
    return Module(
        name="BankAccounts",
        description="Bank account management",
        routes=[
            Route(
                method="GET",
                path="/bank-accounts",
                handler=list_accounts,
                summary="List bank accounts",
                responses={200: {"description": "Accounts", "schema": "BankAccount"}},
                security=["bearer"],
            ),
            Route(
                method="GET",
                path="/bank-accounts/{account_id}",
                handler=get_account,
                summary="Get a bank account",
                security=["bearer"],
            ),
            Route(
                method="POST",
                path="/bank-accounts",
                handler=create_account,
                summary="Create a bank account",
                request_body="BankAccount",
                security=["bearer"],
            ),
        ],
        schemas={"BankAccount": BANK_ACCOUNT_SCHEMA},
    )


@pytest.fixture
def accounts_module() -> Module:
    """A feature module with three bank account operations."""
    return make_accounts_module()


@pytest.fixture
def registry(accounts_module: Module) -> OperationRegistry:
    """A registry populated with the accounts module routes."""
    registry = OperationRegistry()
    for route in accounts_module.routes:
        registry.add_route(route, module=accounts_module.name)
    for name, schema in accounts_module.schemas.items():
        registry.add_schema(name, schema)
    return registry
