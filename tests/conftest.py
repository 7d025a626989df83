"""Pytest configuration and shared fixtures for ci_secrets tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from unittest.mock import patch

import pytest
import pytest_asyncio
from pydantic import SecretStr

from ci_secrets.enums import EnumSecretScope
from ci_secrets.handlers import HandlerVaultSecrets
from ci_secrets.models import ModelSecret
from tests.helpers.fake_vault import VAULT_URL, FakeVaultClient


@pytest.fixture
def fake_vault() -> FakeVaultClient:
    """Provide an empty in-memory Vault."""
    return FakeVaultClient()


@pytest.fixture(params=["1", "2"], ids=["kv-v1", "kv-v2"])
def kv_version(request: pytest.FixtureRequest) -> str:
    """Run a test against both KV engine versions."""
    return str(request.param)


@pytest.fixture
def vault_config(kv_version: str) -> dict[str, object]:
    """Provide a static token configuration for the parametrized KV version."""
    return {
        "url": VAULT_URL,
        "token": "s.test1234567890",
        "version": kv_version,
    }


@pytest_asyncio.fixture
async def handler(
    vault_config: dict[str, object], fake_vault: FakeVaultClient
) -> AsyncGenerator[HandlerVaultSecrets, None]:
    """Provide an initialized handler backed by the fake Vault."""
    handler = HandlerVaultSecrets()
    with patch(
        "ci_secrets.handlers.handler_vault.hvac.Client", return_value=fake_vault
    ):
        await handler.initialize(vault_config)
    yield handler
    await handler.shutdown()


@pytest.fixture
def repo_secret() -> ModelSecret:
    """Provide a complete repo secret."""
    return ModelSecret(
        type=EnumSecretScope.REPO,
        org="octocat",
        repo="hello-world",
        name="db_password",
        value=SecretStr("hunter2"),
        images=["alpine:latest"],
        allow_events=3,
        allow_command=True,
        allow_substitution=False,
        created_at=1700000000,
        created_by="octocat",
        updated_at=1700000000,
        updated_by="octocat",
    )
