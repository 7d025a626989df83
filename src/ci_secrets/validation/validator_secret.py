# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Validation of secrets before they are written to the backend.

A secret must name its scope, organization and secret name, carry the
secondary key its scope requires (repository for org and repo scope, team for
shared scope) and have a non-empty value.
"""

from __future__ import annotations

from ci_secrets.enums import EnumInfraTransportType, EnumSecretScope
from ci_secrets.errors import ModelInfraErrorContext, SecretValidationError
from ci_secrets.models.model_secret import ModelSecret


def validate_secret(
    secret: ModelSecret,
    context: ModelInfraErrorContext | None = None,
) -> None:
    """Check that a secret is complete enough to be stored.

    Args:
        secret: Secret to validate (after any update merge)
        context: Optional error context of the calling operation

    Raises:
        SecretValidationError: On the first missing field.
    """
    if context is None:
        context = ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.RUNTIME,
            operation="validate_secret",
        )

    if secret.type is None:
        raise SecretValidationError("empty secret type provided", context=context)

    if not secret.org:
        raise SecretValidationError("empty secret org provided", context=context)

    if secret.type in (EnumSecretScope.ORG, EnumSecretScope.REPO) and not secret.repo:
        raise SecretValidationError(
            "empty secret repo provided",
            context=context,
            scope=secret.type.value,
        )

    if secret.type is EnumSecretScope.SHARED and not secret.team:
        raise SecretValidationError(
            "empty secret team provided",
            context=context,
            scope=secret.type.value,
        )

    if not secret.name:
        raise SecretValidationError("empty secret name provided", context=context)

    if not secret.get_value():
        raise SecretValidationError(
            "empty secret value provided",
            context=context,
            secret_name=secret.name,
        )


__all__: list[str] = ["validate_secret"]
