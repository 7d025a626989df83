# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Client Error Classes.

Error Hierarchy:
    RuntimeHostError (base error)
    ├── ProtocolConfigurationError   invalid or missing configuration
    ├── SecretNotFoundError          no secret at the path / empty listing
    ├── SecretValidationError        secret rejected before write
    ├── SecretShapeError             backend payload has an unexpected shape
    ├── InfraConnectionError         transport or non-2xx backend failure
    └── InfraAuthenticationError     identity handshake or token failure

All errors:
    - Carry an EnumSecretErrorCode for classification
    - Support proper error chaining with `raise ... from e`
    - Include structured context for debugging
    - Support correlation IDs for request tracking
    - Accept ModelInfraErrorContext for bundled context parameters
"""

from typing import Optional
from uuid import UUID

from ci_secrets.enums import EnumSecretErrorCode
from ci_secrets.errors.model_infra_error_context import ModelInfraErrorContext


class RuntimeHostError(Exception):
    """Base error class for secret client errors.

    Structured Fields (via ModelInfraErrorContext):
        transport_type: Type of transport (vault, aws_sts, runtime)
        operation: Operation being performed
        correlation_id: Request correlation ID for tracking
        target_name: Target resource/endpoint name

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="vault.read_secret",
        ...     target_name="vault_secrets",
        ... )
        >>> raise RuntimeHostError("Operation failed", context=context)

        # Or with extra context:
        >>> raise RuntimeHostError(
        ...     "Operation failed",
        ...     context=context,
        ...     secret_name="db_password",
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumSecretErrorCode] = None,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize RuntimeHostError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled infrastructure context (transport_type, operation, etc.)
            **extra_context: Additional context information
        """
        structured_context: dict[str, object] = dict(extra_context)

        correlation_id: Optional[UUID] = None
        if context is not None:
            if context.transport_type is not None:
                structured_context["transport_type"] = context.transport_type
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            correlation_id = context.correlation_id

        super().__init__(message)
        self.message = message
        self.error_code = error_code or EnumSecretErrorCode.OPERATION_FAILED
        self.correlation_id = correlation_id
        self.context = structured_context

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"error_code={self.error_code.value}, "
            f"correlation_id={self.correlation_id})"
        )


class ProtocolConfigurationError(RuntimeHostError):
    """Raised when client configuration validation fails.

    Used for a missing address, a missing or unsupported KV version, or an
    authentication method without the settings it needs. Always fatal to
    client construction.

    Example:
        >>> raise ProtocolConfigurationError(
        ...     "Unrecognized vault version",
        ...     context=context,
        ...     version="3",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class SecretNotFoundError(RuntimeHostError):
    """Raised when a secret (or a listing of secrets) does not exist.

    Example:
        >>> raise SecretNotFoundError(
        ...     "Secret does not exist",
        ...     context=context,
        ...     scope="repo",
        ...     org="octocat",
        ...     secondary="hello-world",
        ...     secret_name="db_password",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.RESOURCE_NOT_FOUND,
            context=context,
            **extra_context,
        )


class SecretValidationError(RuntimeHostError):
    """Raised when a secret fails validation before it is written."""

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.VALIDATION_FAILED,
            context=context,
            **extra_context,
        )


class SecretShapeError(RuntimeHostError):
    """Raised when the backend returns a payload of an unexpected shape.

    The backend is loosely typed, so listing and reading check the shape of
    what comes back instead of trusting it.
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.INVALID_RESPONSE_SHAPE,
            context=context,
            **extra_context,
        )


class InfraConnectionError(RuntimeHostError):
    """Raised when the secret backend cannot be reached or rejects a request.

    Covers network failures and non-2xx responses.

    Example:
        >>> raise InfraConnectionError(
        ...     "Failed to write secret",
        ...     context=context,
        ...     host="vault.example.com",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.CONNECTION_ERROR,
            context=context,
            **extra_context,
        )


class InfraAuthenticationError(RuntimeHostError):
    """Raised when authentication against the secret backend fails.

    Used for identity handshake failures (signing, login exchange) and
    token renewal failures.

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="authenticate",
        ...     target_name="vault_secrets",
        ... )
        >>> raise InfraAuthenticationError(
        ...     "Vault failed to return a token",
        ...     context=context,
        ...     auth_method="aws",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.AUTHENTICATION_FAILED,
            context=context,
            **extra_context,
        )


__all__ = [
    "RuntimeHostError",
    "ProtocolConfigurationError",
    "SecretNotFoundError",
    "SecretValidationError",
    "SecretShapeError",
    "InfraConnectionError",
    "InfraAuthenticationError",
]
