# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Tests for the ci-secrets CLI."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from ci_secrets.cli.commands import cli
from tests.helpers.fake_vault import VAULT_URL, FakeVaultClient

CONNECTION = ["--addr", VAULT_URL, "--token", "s.cli", "--kv-version", "2"]
ORG_OWNER = ["--type", "org", "--org", "foo", "--secondary", "*"]

# Keep the caller's shell from leaking Vault settings into the tests.
CLEAN_ENV: dict[str, str | None] = {
    f"{prefix}SECRET_VAULT_{name}": None
    for prefix in ("", "VELA_")
    for name in (
        "ADDR",
        "TOKEN",
        "VERSION",
        "PREFIX",
        "AUTH_METHOD",
        "AWS_ROLE",
        "AWS_REGION",
    )
}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def patched_vault(fake_vault: FakeVaultClient) -> Iterator[FakeVaultClient]:
    with patch(
        "ci_secrets.handlers.handler_vault.hvac.Client", return_value=fake_vault
    ):
        yield fake_vault


def _invoke(
    runner: CliRunner, *args: str, env: dict[str, str | None] | None = None
) -> Result:
    return runner.invoke(
        cli, [*args], env={**CLEAN_ENV, **(env or {})}, catch_exceptions=False
    )


class TestSecretCommands:
    """Test the secret subcommands end to end against the fake Vault."""

    def test_create_and_get(
        self, runner: CliRunner, patched_vault: FakeVaultClient
    ) -> None:
        created = _invoke(
            runner,
            *CONNECTION,
            "secret",
            "create",
            *ORG_OWNER,
            "--name",
            "baz",
            "--value",
            "foob",
            "--image",
            "alpine",
            "--event",
            "push_branch",
            "--event",
            "push_tag",
            "--allow-command",
        )
        assert created.exit_code == 0, created.output
        assert "Created secret baz" in created.output

        stored = patched_vault.store["secret/data/org/foo/baz"]["data"]
        assert stored["value"] == "foob"
        assert stored["allow_events"] == 3
        assert stored["allow_command"] is True

        shown = _invoke(
            runner, *CONNECTION, "secret", "get", *ORG_OWNER, "--name", "baz"
        )
        assert shown.exit_code == 0, shown.output
        assert "alpine" in shown.output
        assert "push_branch" in shown.output
        assert "foob" not in shown.output

    def test_list_and_count(
        self, runner: CliRunner, patched_vault: FakeVaultClient
    ) -> None:
        for name in ("one", "two"):
            result = _invoke(
                runner,
                *CONNECTION,
                "secret",
                "create",
                *ORG_OWNER,
                "--name",
                name,
                "--value",
                "v",
            )
            assert result.exit_code == 0, result.output

        listed = _invoke(runner, *CONNECTION, "secret", "list", *ORG_OWNER)
        assert listed.exit_code == 0, listed.output
        assert "one" in listed.output
        assert "two" in listed.output

        counted = _invoke(runner, *CONNECTION, "secret", "count", *ORG_OWNER)
        assert counted.exit_code == 0, counted.output
        assert "2 secrets" in counted.output

    def test_update_keeps_other_fields(
        self, runner: CliRunner, patched_vault: FakeVaultClient
    ) -> None:
        _invoke(
            runner,
            *CONNECTION,
            "secret",
            "create",
            *ORG_OWNER,
            "--name",
            "baz",
            "--value",
            "old",
            "--image",
            "alpine",
        )

        updated = _invoke(
            runner,
            *CONNECTION,
            "secret",
            "update",
            *ORG_OWNER,
            "--name",
            "baz",
            "--value",
            "new",
            "--actor",
            "hubot",
        )

        assert updated.exit_code == 0, updated.output
        stored = patched_vault.store["secret/data/org/foo/baz"]["data"]
        assert stored["value"] == "new"
        assert stored["images"] == ["alpine"]
        assert stored["updated_by"] == "hubot"

    def test_delete(self, runner: CliRunner, patched_vault: FakeVaultClient) -> None:
        _invoke(
            runner,
            *CONNECTION,
            "secret",
            "create",
            *ORG_OWNER,
            "--name",
            "baz",
            "--value",
            "v",
        )

        deleted = _invoke(
            runner, *CONNECTION, "secret", "delete", *ORG_OWNER, "--name", "baz"
        )

        assert deleted.exit_code == 0, deleted.output
        assert patched_vault.store == {}


class TestCliErrors:
    """Test failures print a message and exit 1."""

    def test_missing_secret(
        self, runner: CliRunner, patched_vault: FakeVaultClient
    ) -> None:
        result = _invoke(
            runner, *CONNECTION, "secret", "get", *ORG_OWNER, "--name", "nope"
        )

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_missing_address(
        self, runner: CliRunner, patched_vault: FakeVaultClient
    ) -> None:
        result = _invoke(
            runner, "--token", "s.cli", "secret", "count", *ORG_OWNER
        )

        assert result.exit_code == 1
        assert "Invalid Vault configuration" in result.output

    def test_invalid_event_name(self, runner: CliRunner) -> None:
        result = _invoke(
            runner,
            *CONNECTION,
            "secret",
            "create",
            *ORG_OWNER,
            "--name",
            "baz",
            "--event",
            "bogus",
        )

        assert result.exit_code == 2
        assert "Invalid value" in result.output


class TestCliEnvironment:
    """Test connection settings come from the environment."""

    def test_env_configures_connection(
        self, runner: CliRunner, patched_vault: FakeVaultClient
    ) -> None:
        env = {
            "SECRET_VAULT_ADDR": VAULT_URL,
            "SECRET_VAULT_TOKEN": "s.env",
            "VELA_SECRET_VAULT_VERSION": "1",
        }

        result = _invoke(
            runner,
            "secret",
            "create",
            "--type",
            "repo",
            "--org",
            "foo",
            "--secondary",
            "bar",
            "--name",
            "baz",
            "--value",
            "v",
            env=env,
        )

        assert result.exit_code == 0, result.output
        assert list(patched_vault.store) == ["secret/repo/foo/bar/baz"]
