# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault secret handler and its configuration model."""

from ci_secrets.handlers.handler_vault import HANDLER_ID_VAULT, HandlerVaultSecrets
from ci_secrets.handlers.model_vault_handler_config import ModelVaultHandlerConfig

__all__: list[str] = [
    "HANDLER_ID_VAULT",
    "HandlerVaultSecrets",
    "ModelVaultHandlerConfig",
]
