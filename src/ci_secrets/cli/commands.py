"""
CI Secrets CLI Commands.

Provides a CLI interface for managing org, repo and shared secrets stored in
HashiCorp Vault. Connection options fall back to the SECRET_VAULT_* (and
VELA_SECRET_VAULT_*) environment variables.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
from pydantic import SecretStr
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ci_secrets.enums import EnumAllowEvent, EnumSecretScope
from ci_secrets.errors import RuntimeHostError
from ci_secrets.handlers import HandlerVaultSecrets
from ci_secrets.handlers.model_vault_handler_config import (
    ENV_VAULT_ADDR,
    ENV_VAULT_AUTH_METHOD,
    ENV_VAULT_AWS_REGION,
    ENV_VAULT_AWS_ROLE,
    ENV_VAULT_PREFIX,
    ENV_VAULT_TOKEN,
    ENV_VAULT_VERSION,
)
from ci_secrets.models import ModelSecret

T = TypeVar("T")

console = Console()

EVENT_CHOICES: list[str] = [name.lower() for name in EnumAllowEvent.__members__]


def _envvars(variable: str) -> list[str]:
    # click uses the first variable that is set
    return [f"VELA_{variable}", variable]


@click.group()
@click.option("--addr", envvar=_envvars(ENV_VAULT_ADDR), help="Vault server URL")
@click.option("--token", envvar=_envvars(ENV_VAULT_TOKEN), help="Static Vault token")
@click.option(
    "--kv-version",
    envvar=_envvars(ENV_VAULT_VERSION),
    type=click.Choice(["1", "2"]),
    default="2",
    show_default=True,
    help="KV secrets engine version",
)
@click.option("--prefix", envvar=_envvars(ENV_VAULT_PREFIX), default="")
@click.option(
    "--auth-method",
    envvar=_envvars(ENV_VAULT_AUTH_METHOD),
    type=click.Choice(["aws"]),
    default=None,
    help="Log in to Vault instead of using a static token",
)
@click.option("--aws-role", envvar=_envvars(ENV_VAULT_AWS_ROLE))
@click.option(
    "--aws-region", envvar=_envvars(ENV_VAULT_AWS_REGION), default="us-east-1"
)
@click.pass_context
def cli(
    ctx: click.Context,
    addr: str | None,
    token: str | None,
    kv_version: str,
    prefix: str,
    auth_method: str | None,
    aws_role: str | None,
    aws_region: str,
) -> None:
    """CI secrets stored in HashiCorp Vault."""
    config: dict[str, object] = {
        "url": addr or "",
        "version": kv_version,
        "prefix": prefix,
        "aws_region": aws_region,
    }
    if token:
        config["token"] = SecretStr(token)
    if auth_method:
        config["auth_method"] = auth_method
    if aws_role:
        config["aws_role"] = aws_role
    ctx.obj = config


@cli.group()
def secret() -> None:
    """Create, read, update and delete secrets."""


def _run(
    config: dict[str, object],
    action: Callable[[HandlerVaultSecrets], Awaitable[T]],
) -> T:
    """Run one handler action, printing errors and exiting 1 on failure."""

    async def _main() -> T:
        handler = HandlerVaultSecrets()
        await handler.initialize(config)
        try:
            return await action(handler)
        finally:
            await handler.shutdown()

    try:
        return asyncio.run(_main())
    except RuntimeHostError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        if e.correlation_id is not None:
            console.print(f"[dim]correlation_id={e.correlation_id}[/dim]")
        raise SystemExit(1)


def _owner_options(func: Callable[..., None]) -> Callable[..., None]:
    func = click.option(
        "--secondary",
        required=True,
        help="Repository name (org/repo scope, '*' for org) or team name (shared)",
    )(func)
    func = click.option("--org", required=True, help="Owner organization")(func)
    func = click.option(
        "--type",
        "scope",
        required=True,
        type=click.Choice([s.value for s in EnumSecretScope], case_sensitive=False),
        help="Secret scope",
    )(func)
    return func


def _events_mask(events: tuple[str, ...]) -> int | None:
    if not events:
        return None
    mask = EnumAllowEvent(0)
    for event in events:
        mask |= EnumAllowEvent[event.upper()]
    return int(mask)


def _print_secret(item: ModelSecret) -> None:
    table = Table(title=f"Secret {item.name}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("type", item.type.value if item.type else "")
    table.add_row("org", item.org or "")
    secondary_label = "team" if item.type is EnumSecretScope.SHARED else "repo"
    table.add_row(secondary_label, item.secondary or "")
    table.add_row("value", "********" if item.value is not None else "")
    table.add_row("images", ", ".join(item.images or []))
    table.add_row("allow_events", _format_events(item))
    table.add_row("allow_command", _format_flag(item.allow_command))
    table.add_row("allow_substitution", _format_flag(item.allow_substitution))
    if item.repo_allowlist:
        table.add_row("repo_allowlist", ", ".join(item.repo_allowlist))
    table.add_row("created", _format_audit(item.created_at, item.created_by))
    table.add_row("updated", _format_audit(item.updated_at, item.updated_by))
    console.print(table)


def _format_events(item: ModelSecret) -> str:
    return ", ".join(
        flag.name.lower()
        for flag in EnumAllowEvent
        if flag.name and flag in item.events
    )


def _format_flag(flag: bool | None) -> str:
    return "" if flag is None else str(flag).lower()


def _format_audit(at: int | None, by: str | None) -> str:
    if not at:
        return by or ""
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime(at))
    return f"{stamp} by {by}" if by else stamp


@secret.command("get")
@_owner_options
@click.option("--name", required=True, help="Secret name")
@click.pass_obj
def get_cmd(
    config: dict[str, object], scope: str, org: str, secondary: str, name: str
) -> None:
    """Show a secret (the value is masked)."""
    item = _run(config, lambda h: h.get_secret(scope, org, secondary, name))
    _print_secret(item)


@secret.command("list")
@_owner_options
@click.pass_obj
def list_cmd(config: dict[str, object], scope: str, org: str, secondary: str) -> None:
    """List the secrets of an org, repo or team."""
    items = _run(config, lambda h: h.list_secrets(scope, org, secondary))

    table = Table(title=f"Secrets for {org}/{secondary} ({len(items)})")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Images")
    table.add_column("Events")
    table.add_column("Command")
    table.add_column("Updated")
    for item in items:
        table.add_row(
            item.name or "",
            item.type.value if item.type else "",
            ", ".join(item.images or []),
            _format_events(item),
            _format_flag(item.allow_command),
            _format_audit(item.updated_at, item.updated_by),
        )
    console.print(table)


@secret.command("count")
@_owner_options
@click.pass_obj
def count_cmd(config: dict[str, object], scope: str, org: str, secondary: str) -> None:
    """Count the secrets of an org, repo or team."""
    total = _run(config, lambda h: h.count_secrets(scope, org, secondary))
    console.print(f"[bold]{total}[/bold] secrets for {org}/{secondary}")


def _secret_options(func: Callable[..., None]) -> Callable[..., None]:
    func = click.option("--actor", default=None, help="Actor recorded on the secret")(
        func
    )
    func = click.option(
        "--repo-allowlist", multiple=True, help="Repository allowed to use it"
    )(func)
    func = click.option(
        "--allow-substitution/--no-allow-substitution", default=None
    )(func)
    func = click.option("--allow-command/--no-allow-command", default=None)(func)
    func = click.option(
        "--event",
        "events",
        multiple=True,
        type=click.Choice(EVENT_CHOICES, case_sensitive=False),
        help="Trigger event the secret is exposed to",
    )(func)
    func = click.option("--image", "images", multiple=True, help="Allowed image")(func)
    func = click.option("--value", default=None, help="Secret value")(func)
    func = click.option("--name", required=True, help="Secret name")(func)
    return func


@secret.command("create")
@_owner_options
@_secret_options
@click.pass_obj
def create_cmd(
    config: dict[str, object],
    scope: str,
    org: str,
    secondary: str,
    name: str,
    value: str | None,
    images: tuple[str, ...],
    events: tuple[str, ...],
    allow_command: bool | None,
    allow_substitution: bool | None,
    repo_allowlist: tuple[str, ...],
    actor: str | None,
) -> None:
    """Create a secret."""
    now = int(time.time())
    item = ModelSecret(
        name=name,
        value=SecretStr(value) if value is not None else None,
        images=list(images) or None,
        allow_events=_events_mask(events),
        allow_command=allow_command,
        allow_substitution=allow_substitution,
        repo_allowlist=list(repo_allowlist) or None,
        created_at=now,
        created_by=actor,
        updated_at=now,
        updated_by=actor,
    )
    _run(config, lambda h: h.create_secret(scope, org, secondary, item))
    console.print(f"[bold green]Created secret {name}[/bold green]")


@secret.command("update")
@_owner_options
@_secret_options
@click.pass_obj
def update_cmd(
    config: dict[str, object],
    scope: str,
    org: str,
    secondary: str,
    name: str,
    value: str | None,
    images: tuple[str, ...],
    events: tuple[str, ...],
    allow_command: bool | None,
    allow_substitution: bool | None,
    repo_allowlist: tuple[str, ...],
    actor: str | None,
) -> None:
    """Update the given fields of a secret, keeping the rest."""
    item = ModelSecret(
        name=name,
        value=SecretStr(value) if value is not None else None,
        images=list(images) or None,
        allow_events=_events_mask(events),
        allow_command=allow_command,
        allow_substitution=allow_substitution,
        repo_allowlist=list(repo_allowlist) or None,
        updated_at=int(time.time()),
        updated_by=actor,
    )
    _run(config, lambda h: h.update_secret(scope, org, secondary, item))
    console.print(f"[bold green]Updated secret {name}[/bold green]")


@secret.command("delete")
@_owner_options
@click.option("--name", required=True, help="Secret name")
@click.pass_obj
def delete_cmd(
    config: dict[str, object], scope: str, org: str, secondary: str, name: str
) -> None:
    """Delete a secret."""
    _run(config, lambda h: h.delete_secret(scope, org, secondary, name))
    console.print(f"[bold green]Deleted secret {name}[/bold green]")


if __name__ == "__main__":
    cli()
