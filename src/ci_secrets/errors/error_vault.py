# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault-Specific Infrastructure Error Class.

This module defines the InfraVaultError class for failed calls against the
Vault HTTP API. It extends InfraConnectionError.
"""

from ci_secrets.errors.infra_errors import InfraConnectionError
from ci_secrets.errors.model_infra_error_context import ModelInfraErrorContext


class InfraVaultError(InfraConnectionError):
    """Error communicating with Vault.

    Raised by the secret handler when a read, write, list or delete call
    fails in transport or with a non-2xx status. The secret identity is
    attached so callers can tell which secret the failure belongs to; the raw
    backend payload is never attached.

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="vault.write_secret",
        ...     target_name="vault_secrets",
        ... )
        >>> raise InfraVaultError(
        ...     "Failed to write repo secret octocat/hello-world/db_password",
        ...     context=context,
        ...     secret_path="secret/data/repo/octocat/hello-world/db_password",
        ...     status_code=403,
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        secret_path: str | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize InfraVaultError with Vault-specific context.

        Args:
            message: Human-readable error message
            context: Bundled infrastructure context (should use VAULT transport_type)
            secret_path: Optional path to the secret that caused the error
            **extra_context: Additional context information (e.g., status_code)
        """
        if secret_path is not None:
            extra_context["secret_path"] = secret_path

        super().__init__(
            message=message,
            context=context,
            **extra_context,
        )


__all__: list[str] = [
    "InfraVaultError",
]
