# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""CI secrets client backed by HashiCorp Vault.

Stores organization, repository and shared (team) secrets for a CI server in
a Vault KV secrets engine, v1 or v2, and keeps a Vault token alive through
the AWS IAM auth method.

Example:
    >>> handler = HandlerVaultSecrets()
    >>> await handler.initialize(ModelVaultHandlerConfig.config_from_env())
    >>> await handler.count_secrets("org", "octocat", "*")
"""

from ci_secrets.enums import EnumAllowEvent, EnumSecretScope, EnumVaultVersion
from ci_secrets.handlers import HandlerVaultSecrets, ModelVaultHandlerConfig
from ci_secrets.models import ModelSecret

__all__: list[str] = [
    "EnumAllowEvent",
    "EnumSecretScope",
    "EnumVaultVersion",
    "HandlerVaultSecrets",
    "ModelSecret",
    "ModelVaultHandlerConfig",
]
