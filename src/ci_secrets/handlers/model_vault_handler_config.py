# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Handler Configuration Model.

This module provides the Pydantic configuration model for the Vault secret
handler: where Vault lives, which KV wire format it speaks, and how the client
authenticates.

Security Note:
    The token field uses SecretStr to prevent accidental logging of
    sensitive credentials. Tokens should come from environment variables,
    never from configuration files.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from ci_secrets.enums import EnumVaultAuthMethod, EnumVaultVersion

# Environment variables read by config_from_env(); each is also accepted with
# a VELA_ prefix, which takes precedence.
ENV_VAULT_ADDR = "SECRET_VAULT_ADDR"
ENV_VAULT_TOKEN = "SECRET_VAULT_TOKEN"
ENV_VAULT_VERSION = "SECRET_VAULT_VERSION"
ENV_VAULT_PREFIX = "SECRET_VAULT_PREFIX"
ENV_VAULT_AUTH_METHOD = "SECRET_VAULT_AUTH_METHOD"
ENV_VAULT_AWS_ROLE = "SECRET_VAULT_AWS_ROLE"
ENV_VAULT_AWS_REGION = "SECRET_VAULT_AWS_REGION"
ENV_VAULT_RENEWAL = "SECRET_VAULT_RENEWAL"
ENV_VAULT_TOKEN_DURATION = "SECRET_VAULT_TOKEN_DURATION"

_DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = re.compile(rf"(?:{_DURATION_PART})+")
_DURATION_PART_RE = re.compile(_DURATION_PART)

# Later variables for the same field are fallbacks for earlier ones.
_ENV_FIELDS: dict[str, str] = {
    ENV_VAULT_ADDR: "url",
    ENV_VAULT_TOKEN: "token",
    ENV_VAULT_VERSION: "version",
    ENV_VAULT_PREFIX: "prefix",
    ENV_VAULT_AUTH_METHOD: "auth_method",
    ENV_VAULT_AWS_ROLE: "aws_role",
    ENV_VAULT_AWS_REGION: "aws_region",
    ENV_VAULT_RENEWAL: "token_renewal_interval_seconds",
    ENV_VAULT_TOKEN_DURATION: "token_renewal_interval_seconds",
}


def parse_duration(text: str) -> float:
    """Convert a duration string such as "1h30m" or "500ms" to seconds.

    Accepts a sequence of <number><unit> pairs with units ns, us, ms, s, m
    and h. A bare "0" is zero.

    Raises:
        ValueError: If the text is not a duration.
    """
    value = text.strip()
    if value == "0":
        return 0.0
    if not _DURATION_RE.fullmatch(value):
        raise ValueError(f"invalid duration {text!r}")
    return sum(
        float(number) * _DURATION_UNITS[unit]
        for number, unit in _DURATION_PART_RE.findall(value)
    )


class ModelVaultHandlerConfig(BaseModel):
    """Configuration for the Vault secret handler.

    Security Policy:
        - The token field uses SecretStr to prevent accidental logging
        - Tokens should be provided via environment variables, not config files
        - Never log or expose token values in error messages
        - Use verify_ssl=True in production environments

    Attributes:
        url: Vault server URL (required, fully qualified, no trailing slash)
        token: Static Vault token (SecretStr, optional when auth_method is set)
        version: KV secrets engine version, "1" or "2" (required)
        prefix: Administrator prefix appended to the system prefix
        auth_method: Runtime authentication method; None means static token mode
        aws_role: Vault role for the AWS IAM login (required for auth_method=aws)
        aws_region: Region used to sign the STS identity request
        auth_mount: Mount path of the AWS auth method in Vault
        token_renewal_interval_seconds: Period of the background token renewal
        namespace: Vault namespace for Vault Enterprise (optional)
        timeout_seconds: HTTP timeout for every Vault call
        verify_ssl: Whether to verify SSL certificates (default True)
        max_concurrent_operations: Thread pool size for blocking Vault calls

    Example:
        >>> config = ModelVaultHandlerConfig(
        ...     url="https://vault.example.com:8200",
        ...     token=SecretStr("s.1234567890abcdefghijklmnopqrstuv"),
        ...     version=EnumVaultVersion.V2,
        ...     prefix="ci",
        ... )
        >>> config.mount_prefix
        'secret/data/ci'
        >>> print(config.token)
        **********
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        from_attributes=True,
    )

    url: str = Field(
        description="Vault server URL (e.g., 'https://vault.example.com:8200')",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Static Vault token (use SecretStr for security)",
    )
    version: EnumVaultVersion = Field(
        description="KV secrets engine version ('1' or '2')",
    )
    prefix: str = Field(
        default="",
        description="Administrator prefix, e.g. secret/data/<prefix>/<path>",
    )
    auth_method: EnumVaultAuthMethod | None = Field(
        default=None,
        description="Authentication method used to obtain a token at runtime",
    )
    aws_role: str | None = Field(
        default=None,
        description="Vault role to log in with at the auth/aws/login endpoint",
    )
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region used to sign the STS GetCallerIdentity request",
    )
    auth_mount: str = Field(
        default="aws",
        description="Mount path of the AWS auth method",
    )
    token_renewal_interval_seconds: float = Field(
        default=300.0,
        gt=0.0,
        description="How often the background loop renews the Vault token",
    )
    namespace: str | None = Field(
        default=None,
        description="Vault namespace for Vault Enterprise",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Operation timeout in seconds",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    max_concurrent_operations: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum concurrent Vault operations (thread pool size)",
    )

    @field_validator("url")
    @classmethod
    def _check_url(cls, url: str) -> str:
        if not url:
            raise ValueError("no secret address provided")
        if "://" not in url:
            raise ValueError(
                "secret address must be fully qualified (<scheme>://<host>)"
            )
        if url.endswith("/"):
            raise ValueError("secret address must not have trailing slash")
        return url

    @field_validator("prefix")
    @classmethod
    def _strip_prefix(cls, prefix: str) -> str:
        return prefix.strip("/")

    @field_validator("token_renewal_interval_seconds", mode="before")
    @classmethod
    def _parse_renewal_interval(cls, interval: object) -> object:
        # Plain numbers are seconds; anything else must be a duration string.
        if isinstance(interval, str):
            try:
                return float(interval)
            except ValueError:
                return parse_duration(interval)
        return interval

    @field_validator("auth_method", mode="before")
    @classmethod
    def _empty_auth_method(cls, auth_method: object) -> object:
        # An empty string from the environment means static token mode.
        if auth_method == "":
            return None
        return auth_method

    @model_validator(mode="after")
    def _check_credentials(self) -> ModelVaultHandlerConfig:
        has_token = self.token is not None and bool(self.token.get_secret_value())
        if not has_token and self.auth_method is None:
            raise ValueError("no secret token or authentication method provided")
        if self.auth_method is EnumVaultAuthMethod.AWS and not self.aws_role:
            raise ValueError("no secret AWS role provided")
        return self

    @property
    def mount_prefix(self) -> str:
        """Return the path prefix every secret path starts with."""
        if self.prefix:
            return f"{self.version.system_prefix}/{self.prefix}"
        return self.version.system_prefix

    @property
    def is_versioned(self) -> bool:
        """Return True for the KV v2 wire format."""
        return self.version is EnumVaultVersion.V2

    @classmethod
    def config_from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> dict[str, object]:
        """Collect a raw configuration dict from environment variables.

        Args:
            environ: Environment to read (defaults to os.environ)

        Returns:
            Dict suitable for HandlerVaultSecrets.initialize(); unset
            variables are left out so model defaults apply.
        """
        env = os.environ if environ is None else environ
        config: dict[str, object] = {}
        for variable, field_name in _ENV_FIELDS.items():
            raw = env.get(f"VELA_{variable}", env.get(variable))
            if raw is not None and raw != "":
                config.setdefault(field_name, raw)
        return config


__all__: list[str] = [
    "ENV_VAULT_ADDR",
    "ENV_VAULT_AUTH_METHOD",
    "ENV_VAULT_AWS_REGION",
    "ENV_VAULT_AWS_ROLE",
    "ENV_VAULT_PREFIX",
    "ENV_VAULT_RENEWAL",
    "ENV_VAULT_TOKEN",
    "ENV_VAULT_TOKEN_DURATION",
    "ENV_VAULT_VERSION",
    "ModelVaultHandlerConfig",
    "parse_duration",
]
