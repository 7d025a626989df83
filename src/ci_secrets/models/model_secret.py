# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret domain model.

This module provides the Pydantic model for a CI secret as consumed by the
build orchestration and secret injection layers.

Security Note:
    The value field uses SecretStr so the secret value never shows up in
    reprs, logs or error messages.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from ci_secrets.enums import EnumAllowEvent, EnumSecretScope


class ModelSecret(BaseModel):
    """A secret stored in the external secret backend.

    Every field is optional: ``None`` means "not set", which matters for
    partial updates (only set fields are overlaid) and for encoding (unset
    fields are not written to the backend).

    Identity:
        (type, org, secondary, name) identifies a secret, where the secondary
        key is ``repo`` for org and repo scope (``*`` for org scope) and
        ``team`` for shared scope.

    Attributes:
        type: Secret scope
        org: Owner organization
        repo: Repository name, ``*`` for org-wide secrets
        team: Team name for shared secrets
        name: Secret name
        value: Secret value (SecretStr, never logged)
        images: Image patterns the secret may be injected into
        allow_events: Bitmask of EnumAllowEvent flags
        allow_command: Whether the secret may be used in commands
        allow_substitution: Whether the secret may be substituted into the pipeline
        repo_allowlist: Repositories allowed to use a shared secret
        created_at: Creation time in unix seconds
        created_by: Creating actor
        updated_at: Last update time in unix seconds
        updated_by: Last updating actor

    Example:
        >>> secret = ModelSecret(
        ...     type=EnumSecretScope.REPO,
        ...     org="octocat",
        ...     repo="hello-world",
        ...     name="db_password",
        ...     value="hunter2",
        ...     images=["alpine:latest"],
        ...     allow_events=EnumAllowEvent.PUSH_BRANCH | EnumAllowEvent.PUSH_TAG,
        ... )
        >>> secret.value
        SecretStr('**********')
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    type: EnumSecretScope | None = Field(default=None, description="Secret scope")
    org: str | None = Field(default=None, description="Owner organization")
    repo: str | None = Field(
        default=None, description="Repository name ('*' for org-wide secrets)"
    )
    team: str | None = Field(default=None, description="Team name (shared scope)")
    name: str | None = Field(default=None, description="Secret name")
    value: SecretStr | None = Field(default=None, description="Secret value")
    images: list[str] | None = Field(
        default=None, description="Allowed image patterns"
    )
    allow_events: int | None = Field(
        default=None, ge=0, description="Bitmask of allowed trigger events"
    )
    allow_command: bool | None = Field(
        default=None, description="Allow use of the secret in commands"
    )
    allow_substitution: bool | None = Field(
        default=None, description="Allow substitution of the secret value"
    )
    repo_allowlist: list[str] | None = Field(
        default=None, description="Repositories allowed to use a shared secret"
    )
    created_at: int | None = Field(default=None, description="Created (unix seconds)")
    created_by: str | None = Field(default=None, description="Created by")
    updated_at: int | None = Field(default=None, description="Updated (unix seconds)")
    updated_by: str | None = Field(default=None, description="Updated by")

    @property
    def secondary(self) -> str | None:
        """Return the secondary identity key for the secret's scope."""
        if self.type is EnumSecretScope.SHARED:
            return self.team
        return self.repo

    @property
    def events(self) -> EnumAllowEvent:
        """Return allow_events as flags (empty when unset)."""
        return EnumAllowEvent(self.allow_events or 0)

    def get_value(self) -> str:
        """Return the plain secret value, or an empty string when unset."""
        if self.value is None:
            return ""
        return self.value.get_secret_value()


__all__: list[str] = ["ModelSecret"]
