# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Client Enumerations Module.

Exports:
    EnumAllowEvent: Trigger event bit flags stored in a secret's allow_events mask
    EnumCredentialState: Token service state (UNAUTHENTICATED, AUTHENTICATED)
    EnumInfraTransportType: Transport type enumeration for error context
    EnumSecretErrorCode: Error classification codes
    EnumSecretScope: Secret scope (ORG, REPO, SHARED)
    EnumVaultAuthMethod: Runtime authentication methods (AWS)
    EnumVaultVersion: KV secrets engine wire format (V1, V2)
"""

from ci_secrets.enums.enum_allow_event import EnumAllowEvent
from ci_secrets.enums.enum_credential_state import EnumCredentialState
from ci_secrets.enums.enum_infra_transport_type import EnumInfraTransportType
from ci_secrets.enums.enum_secret_error_code import EnumSecretErrorCode
from ci_secrets.enums.enum_secret_scope import EnumSecretScope
from ci_secrets.enums.enum_vault_auth_method import EnumVaultAuthMethod
from ci_secrets.enums.enum_vault_version import (
    PREFIX_VAULT_V1,
    PREFIX_VAULT_V2,
    PREFIX_VAULT_V2_METADATA,
    EnumVaultVersion,
)

__all__: list[str] = [
    "EnumAllowEvent",
    "EnumCredentialState",
    "EnumInfraTransportType",
    "EnumSecretErrorCode",
    "EnumSecretScope",
    "EnumVaultAuthMethod",
    "EnumVaultVersion",
    "PREFIX_VAULT_V1",
    "PREFIX_VAULT_V2",
    "PREFIX_VAULT_V2_METADATA",
]
