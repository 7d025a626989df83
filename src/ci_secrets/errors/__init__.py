# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Client Errors Module.

Exports:
    ModelInfraErrorContext: Configuration model for bundled error context
    RuntimeHostError: Base error class
    ProtocolConfigurationError: Configuration validation errors
    SecretNotFoundError: Missing secret or empty listing
    SecretValidationError: Secret rejected before write
    SecretShapeError: Unexpected backend payload shape
    InfraConnectionError: Backend transport errors
    InfraVaultError: Vault HTTP API errors with secret path context
    InfraAuthenticationError: Identity handshake and token errors

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Secret values
        - Vault tokens or AWS credentials
        - Raw backend payloads

    SAFE to include:
        - Secret scope, org, secondary key and name
        - Storage paths
        - Operation names and correlation IDs
        - HTTP status codes
"""

from ci_secrets.errors.error_vault import InfraVaultError
from ci_secrets.errors.infra_errors import (
    InfraAuthenticationError,
    InfraConnectionError,
    ProtocolConfigurationError,
    RuntimeHostError,
    SecretNotFoundError,
    SecretShapeError,
    SecretValidationError,
)
from ci_secrets.errors.model_infra_error_context import ModelInfraErrorContext

__all__: list[str] = [
    # Configuration model
    "ModelInfraErrorContext",
    # Error classes
    "RuntimeHostError",
    "ProtocolConfigurationError",
    "SecretNotFoundError",
    "SecretValidationError",
    "SecretShapeError",
    "InfraConnectionError",
    "InfraVaultError",
    "InfraAuthenticationError",
]
